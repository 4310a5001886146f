"""Rule-driven HTML to Markdown conversion for WordPress post bodies."""

import logging
from typing import Any, Iterable, Optional

from bs4 import Comment, NavigableString, Tag
from markdownify import ATX
from markdownify import MarkdownConverter as MarkdownifyConverter

from .code_block_classifier import CodeBlockClassifier

logger = logging.getLogger('wordpress_markdown_exporter.converters.markdown_converter')

# Containers whose direct children are laid out as blocks
BLOCK_CONTAINERS = {
    '[document]', 'html', 'body', 'div', 'section', 'article', 'main', 'header',
    'footer', 'aside', 'nav', 'figure', 'blockquote', 'li', 'dd', 'details',
}

# Siblings that do not make a preserved tag part of a line of text
BLOCK_ELEMENTS = BLOCK_CONTAINERS | {
    'p', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'ul', 'ol', 'dl', 'pre', 'table', 'hr',
}


class MarkdownConverter(MarkdownifyConverter):
    """
    Converts post HTML to Markdown.

    This class extends markdownify.MarkdownConverter with:
    - A code block rule driven by CodeBlockClassifier, taking precedence over
      generic <pre>/<code> handling
    - An allow-list of tags emitted verbatim as raw HTML
    - Images always rendered as Markdown images, wherever they appear
    """

    def __init__(
        self,
        code_classifier: Optional[CodeBlockClassifier] = None,
        preserve_tags: Optional[Iterable[str]] = None,
        logger: Optional[logging.Logger] = None,
        **kwargs: Any
    ):
        """
        Initialize the converter.

        Args:
            code_classifier: Classifier for marker-class code blocks (None disables the rule)
            preserve_tags: Tag names to emit unchanged as raw markup
            logger: Logger instance
            **kwargs: Extra markdownify options
        """
        markdownify_options = {
            'heading_style': ATX,
            'bullets': '-',
            'autolinks': False,
            'table_infer_header': True,
            'code_language_callback': self._extract_code_language,
        }
        markdownify_options.update(kwargs)

        super().__init__(**markdownify_options)

        self.logger = logger or logging.getLogger('wordpress_markdown_exporter.converters.markdown_converter')
        self.code_classifier = code_classifier or CodeBlockClassifier()
        self.preserve_tags = frozenset(tag.lower() for tag in (preserve_tags or ()) if tag)

    def convert(self, html: str) -> str:
        """Convert an HTML fragment to Markdown."""
        if not html or not html.strip():
            return ''
        return super().convert(html).strip()

    def process_tag(self, node, parent_tags=None, **kwargs):
        """Apply the code block and preserved tag rules before the built-in ones."""
        decision = self.code_classifier.classify(node)
        if decision.is_code:
            self.logger.debug(f"Code block <{node.name}> tagged '{decision.language or 'none'}'")
            return f"\n\n```{decision.language}\n{decision.text}\n```\n\n"

        if node.name in self.preserve_tags:
            return self._preserve(node)

        return super().process_tag(node, parent_tags=parent_tags, **kwargs)

    def _preserve(self, node: Tag) -> str:
        """Emit the original markup of a preserved tag."""
        markup = str(node)
        parent = node.parent
        if parent is None or (parent.name in BLOCK_CONTAINERS and not self._has_inline_siblings(node)):
            return f"\n\n{markup}\n\n"
        return markup

    def _has_inline_siblings(self, node: Tag) -> bool:
        for sibling in node.parent.children:
            if sibling is node:
                continue
            if isinstance(sibling, Tag):
                if sibling.name not in BLOCK_ELEMENTS and sibling.name not in self.preserve_tags:
                    return True
            elif isinstance(sibling, NavigableString) and not isinstance(sibling, Comment) and sibling.strip():
                return True
        return False

    def convert_img(self, el, text, parent_tags=None, **kwargs):
        """Handle images, including those inside links, headings and table cells."""
        src = el.get('src') or ''
        alt = (el.get('alt') or '').replace('\n', ' ')
        title = el.get('title') or ''

        if not src:
            return alt

        if title:
            title = title.replace('"', r'\"')
            return f'![{alt}]({src} "{title}")'
        return f'![{alt}]({src})'

    def convert_td(self, el, text, parent_tags=None, **kwargs):
        """Escape pipes that would break the table row."""
        return super().convert_td(el, text.replace('|', r'\|'), parent_tags)

    def convert_th(self, el, text, parent_tags=None, **kwargs):
        """Escape pipes that would break the table row."""
        return super().convert_th(el, text.replace('|', r'\|'), parent_tags)

    def _extract_code_language(self, element) -> str:
        """Extract the language hint of a generic <pre> block."""
        candidates = [element]
        code_el = element.find('code') if isinstance(element, Tag) else None
        if code_el is not None:
            candidates.append(code_el)

        for candidate in candidates:
            for cls in candidate.get('class') or []:
                cls = str(cls)
                if cls.startswith('language-'):
                    return cls[len('language-'):]
                if cls.startswith('lang-'):
                    return cls[len('lang-'):]

            lang = candidate.get('data-language') or candidate.get('data-lang')
            if lang:
                return lang

        return ''


__all__ = ['MarkdownConverter']

"""Code block detection, text normalization and language tagging."""

import json
import logging
from typing import Iterable, Optional

from bs4 import Tag

from models import NOT_CODE, CodeBlockDecision
from .language_detector import detect_language

logger = logging.getLogger('wordpress_markdown_exporter.converters.code_block_classifier')

# Labels produced by detect_language mapped to Markdown fence tags
LANGUAGE_MAP = {
    'JavaScript': 'javascript',
    'C': 'c',
    'C++': 'cpp',
    'Python': 'python',
    'Java': 'java',
    'HTML': 'html',
    'CSS': 'css',
    'Ruby': 'ruby',
    'Go': 'go',
    'PHP': 'php',
    'Unknown': '',
}


class CodeBlockClassifier:
    """
    Decides whether a node is a code block based on configured marker classes.

    Syntax highlighter plugins (EnlighterJS, Crayon, ...) mark their raw code
    containers with a class; only nodes carrying one of the configured markers
    are treated as code. With no markers configured nothing is classified.
    """

    def __init__(self, marker_classes: Optional[Iterable[str]] = None):
        self.marker_classes = tuple(cls for cls in (marker_classes or ()) if cls)

    def is_code_node(self, node) -> bool:
        """Check whether the node's class attribute contains a marker class."""
        if not self.marker_classes or not isinstance(node, Tag):
            return False

        class_attr = node.get('class')
        if not class_attr:
            return False
        if not isinstance(class_attr, str):
            class_attr = ' '.join(class_attr)

        return any(marker in class_attr for marker in self.marker_classes)

    def classify(self, node) -> CodeBlockDecision:
        """
        Classify a node and, for code nodes, normalize its text and guess the language.

        Args:
            node: BeautifulSoup element

        Returns:
            CodeBlockDecision
        """
        if not self.is_code_node(node):
            return NOT_CODE

        text = self.normalize_text(node.get_text())
        return CodeBlockDecision(is_code=True, text=text, language=self.guess_language(text))

    @staticmethod
    def normalize_text(text: str) -> str:
        """Turn literal ``\\n`` into line breaks, unify line endings and trim."""
        return (
            text.replace('\\n', '\n')
            .replace('\r\n', '\n')
            .replace('\r', '\n')
            .strip()
        )

    @staticmethod
    def guess_language(code: str) -> str:
        """Return the fence tag for the code, or '' when it cannot be determined."""
        language = LANGUAGE_MAP.get(detect_language(code), '')
        if not language and is_json(code):
            language = 'json'
        logger.debug(f"Guessed code language: {language or 'none'}")
        return language


def is_json(code: str) -> bool:
    """Check whether the text parses as JSON."""
    try:
        json.loads(code)
    except ValueError:
        return False
    return True


__all__ = ['CodeBlockClassifier', 'LANGUAGE_MAP', 'is_json']

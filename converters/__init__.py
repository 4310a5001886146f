"""Converters package for WordPress HTML to Markdown conversion."""

import logging
from typing import Optional

from models import ExportSettings
from .code_block_classifier import CodeBlockClassifier
from .language_detector import detect_language
from .markdown_converter import MarkdownConverter

logger = logging.getLogger('wordpress_markdown_exporter.converters')


def build_converter(settings: ExportSettings, logger: Optional[logging.Logger] = None) -> MarkdownConverter:
    """
    Create a MarkdownConverter configured from export settings.

    Args:
        settings: ExportSettings with code_classes and preserve_tags
        logger: Optional logger instance

    Returns:
        MarkdownConverter instance

    Example:
        >>> from converters import build_converter
        >>> from models import ExportSettings
        >>> converter = build_converter(ExportSettings(site_url='https://example.com'))
        >>> converter.convert('<h1>Hello</h1>')
        '# Hello'
    """
    return MarkdownConverter(
        code_classifier=CodeBlockClassifier(settings.code_classes),
        preserve_tags=settings.preserve_tags,
        logger=logger,
    )


__all__ = [
    'build_converter',
    'CodeBlockClassifier',
    'MarkdownConverter',
    'detect_language',
]

"""Writes exported Markdown documents to disk."""

import logging
from pathlib import Path
from typing import Optional, Union

from models import PostRecord
from .byte_store import atomic_write
from .filenames import sanitize_filename


class DocumentWriter:
    """Places one Markdown file per post in the output directory."""

    def __init__(self, output_directory: Union[str, Path], logger: Optional[logging.Logger] = None):
        self.output_directory = Path(output_directory)
        self.logger = logger or logging.getLogger('wordpress_markdown_exporter.exporters.document_writer')

    def document_path(self, post: PostRecord) -> Path:
        """Return ``<output>/<sanitized slug>.md`` for a post."""
        return self.output_directory / f"{sanitize_filename(post.slug, fallback='post')}.md"

    def write_document(self, path: Union[str, Path], text: str) -> Path:
        """
        Write a document atomically as UTF-8.

        Args:
            path: Destination file path
            text: Full document (frontmatter and body)

        Returns:
            Path that was written

        Raises:
            OSError: If the file cannot be written
        """
        path = Path(path)
        atomic_write(path, text, encoding='utf-8')
        self.logger.debug(f"Wrote {path}")
        return path


__all__ = ['DocumentWriter']

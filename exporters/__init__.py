"""Exporters for writing posts and their images to the local archive."""

from .asset_resolver import AssetResolver
from .byte_store import ByteStore, LocalByteStore, atomic_write
from .document_writer import DocumentWriter
from .filenames import sanitize_filename
from .frontmatter import FrontmatterAssembler, render_frontmatter

__all__ = [
    'AssetResolver',
    'ByteStore',
    'DocumentWriter',
    'FrontmatterAssembler',
    'LocalByteStore',
    'atomic_write',
    'render_frontmatter',
    'sanitize_filename',
]

"""YAML frontmatter for exported posts."""

from typing import Any, Dict, Mapping, Optional

import yaml

from models import PostRecord


class FrontmatterAssembler:
    """Builds the ordered metadata block of an exported post."""

    def __init__(self, site_url: str, asset_resolver=None):
        """
        Initialize the assembler.

        Args:
            site_url: Base URL of the WordPress site, used for original_url
            asset_resolver: AssetResolver used for the featured image
                (None leaves featured images out)
        """
        self.site_url = (site_url or '').rstrip('/')
        self.asset_resolver = asset_resolver

    def assemble(self, post: PostRecord, asset_mapping: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """
        Build the frontmatter document for a post.

        Keys are inserted in a fixed order; ``featured_image`` is only
        present when the image was resolved. A featured image already
        downloaded from the body is taken from ``asset_mapping``.

        Args:
            post: Post being exported
            asset_mapping: Source URL to local path mapping of the post body

        Returns:
            New insertion-ordered dictionary
        """
        document: Dict[str, Any] = {
            'title': post.title,
            'date': post.date,
            'modified': post.modified,
            'slug': post.slug,
            'status': post.status,
            'categories': post.categories,
            'tags': post.tags,
            'author': post.author_name if post.author_name else post.author,
            'excerpt': post.excerpt,
            'original_url': f"{self.site_url}/{post.slug}",
        }

        featured_image = self._featured_image(post, asset_mapping or {})
        if featured_image:
            document['featured_image'] = featured_image

        return document

    def _featured_image(self, post: PostRecord, asset_mapping: Mapping[str, str]) -> Optional[str]:
        if self.asset_resolver is None:
            return None
        return self.asset_resolver.resolve_featured_image(
            post.featured_media_url, asset_mapping, post.slug
        )


def render_frontmatter(document: Dict[str, Any]) -> str:
    """
    Serialize a frontmatter document as a YAML block.

    Args:
        document: Frontmatter dictionary

    Returns:
        ``---`` delimited YAML followed by a blank line
    """
    body = yaml.safe_dump(
        document,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=1000,
    )
    return f"---\n{body}---\n\n"


__all__ = ['FrontmatterAssembler', 'render_frontmatter']

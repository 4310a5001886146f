"""Data models for the WordPress to Markdown export pipeline."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

DEFAULT_OUTPUT_DIRECTORY = 'blog_export'
DEFAULT_IMAGES_DIRECTORY = 'blog_export/images'
DEFAULT_PRESERVE_TAGS = ('iframe', 'script')


def _rendered(value: Any) -> str:
    """Return the ``rendered`` member of a WordPress field, or the value itself."""
    if isinstance(value, dict):
        return value.get('rendered') or ''
    if value is None:
        return ''
    return str(value)


def _first(items: Any) -> Optional[Dict[str, Any]]:
    """Return the first element of an embedded list if it is a dict."""
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return None


@dataclass(frozen=True)
class PostRecord:
    """A single post as fetched from the WordPress REST API.

    The record is read-only once built; ``raw`` keeps the full API object so
    plugins can reach site-specific metadata (Yoast, ACF, ...).
    """

    id: Any
    slug: str
    title: str
    date: Optional[str]
    modified: Optional[str]
    status: Optional[str]
    content: str
    excerpt: str = ''
    author: Any = None
    author_name: Optional[str] = None
    taxonomies: Tuple[Tuple[str, ...], ...] = ()
    featured_media_url: Optional[str] = None
    link: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def categories(self) -> List[str]:
        """Term names of the first taxonomy group."""
        return self.terms(0)

    @property
    def tags(self) -> List[str]:
        """Term names of the second taxonomy group."""
        return self.terms(1)

    def terms(self, group: int) -> List[str]:
        """Term names for a taxonomy group, empty when the group is absent."""
        if group < len(self.taxonomies):
            return list(self.taxonomies[group])
        return []

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'PostRecord':
        """
        Build a PostRecord from a ``/wp-json/wp/v2/<type>?_embed=1`` item.

        Args:
            data: Decoded JSON object for a single post

        Returns:
            PostRecord instance

        Raises:
            ValueError: If the object has no slug
        """
        if not isinstance(data, dict):
            raise ValueError(f"Post record must be an object, got {type(data).__name__}")

        slug = data.get('slug')
        if not slug:
            raise ValueError(f"Post {data.get('id', '?')} has no slug")

        embedded = data.get('_embedded') or {}

        taxonomies = []
        for group in embedded.get('wp:term') or []:
            names = tuple(
                term['name'] for term in (group or [])
                if isinstance(term, dict) and term.get('name') is not None
            )
            taxonomies.append(names)

        author = _first(embedded.get('author'))
        media = _first(embedded.get('wp:featuredmedia'))

        return cls(
            id=data.get('id'),
            slug=slug,
            title=_rendered(data.get('title')),
            date=data.get('date'),
            modified=data.get('modified'),
            status=data.get('status'),
            content=_rendered(data.get('content')),
            excerpt=_rendered(data.get('excerpt')),
            author=data.get('author'),
            author_name=author.get('name') if author else None,
            taxonomies=tuple(taxonomies),
            featured_media_url=media.get('source_url') if media else None,
            link=data.get('link'),
            raw=MappingProxyType(dict(data)),
        )


@dataclass(frozen=True)
class AssetResolution:
    """Result of localizing the images referenced by one post body."""

    html: str
    asset_mapping: Mapping[str, str]


@dataclass(frozen=True)
class CodeBlockDecision:
    """Outcome of classifying a DOM node as a code block."""

    is_code: bool
    text: str = ''
    language: str = ''


NOT_CODE = CodeBlockDecision(is_code=False)


@dataclass(frozen=True)
class ExportSettings:
    """Configuration values consumed by the export pipeline.

    Built once at startup from the merged configuration dictionary and passed
    into each component.
    """

    site_url: str
    username: Optional[str] = None
    password: Optional[str] = None
    verify_ssl: bool = True
    custom_post_type: Optional[str] = None
    output_directory: str = DEFAULT_OUTPUT_DIRECTORY
    images_directory: str = DEFAULT_IMAGES_DIRECTORY
    limit: Optional[int] = None
    code_classes: Tuple[str, ...] = ()
    preserve_tags: Tuple[str, ...] = DEFAULT_PRESERVE_TAGS
    plugins: Tuple[str, ...] = ()
    plugin_directories: Tuple[str, ...] = ()
    request_timeout: float = 30
    max_retries: int = 3
    retry_backoff_factor: float = 2.0
    rate_limit: float = 0.0

    @property
    def post_type(self) -> str:
        """REST collection to export."""
        return self.custom_post_type or 'posts'

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'ExportSettings':
        """
        Create settings from a validated configuration dictionary.

        Args:
            config: Configuration dictionary (see config.yaml.example)

        Returns:
            ExportSettings instance
        """
        wordpress = config.get('wordpress') or {}
        export = config.get('export') or {}
        advanced = config.get('advanced') or {}

        preserve_tags = export.get('preserve_tags')
        if preserve_tags is None:
            preserve_tags = DEFAULT_PRESERVE_TAGS

        return cls(
            site_url=(wordpress.get('url') or '').rstrip('/'),
            username=wordpress.get('username'),
            password=wordpress.get('password'),
            verify_ssl=wordpress.get('verify_ssl', True),
            custom_post_type=wordpress.get('custom_post_type') or None,
            output_directory=export.get('output_directory') or DEFAULT_OUTPUT_DIRECTORY,
            images_directory=export.get('images_directory') or DEFAULT_IMAGES_DIRECTORY,
            limit=export.get('limit'),
            code_classes=tuple(export.get('code_classes') or ()),
            preserve_tags=tuple(preserve_tags),
            plugins=tuple(export.get('plugins') or ()),
            plugin_directories=tuple(export.get('plugin_directories') or ()),
            request_timeout=advanced.get('request_timeout', 30),
            max_retries=advanced.get('max_retries', 3),
            retry_backoff_factor=advanced.get('retry_backoff_factor', 2.0),
            rate_limit=advanced.get('rate_limit', 0.0),
        )


__all__ = [
    'AssetResolution',
    'CodeBlockDecision',
    'ExportSettings',
    'NOT_CODE',
    'PostRecord',
]

"""Plugin interface and plugin-related errors."""

from typing import Any, Dict, List, Mapping, Optional

from models import PostRecord


class PluginError(Exception):
    """Base exception for plugin-related errors."""

    def __init__(self, message: str, plugin_name: Optional[str] = None, hook: Optional[str] = None):
        self.plugin_name = plugin_name
        self.hook = hook
        super().__init__(message)

    @classmethod
    def for_hook(cls, plugin_name: str, hook: str, reason: str) -> 'PluginError':
        """Error for a hook that raised or returned an invalid value."""
        return cls(f"Plugin '{plugin_name}' failed in {hook}: {reason}", plugin_name, hook)


class PluginLoadError(PluginError):
    """Exception for plugin modules that cannot be imported."""
    pass


class PluginNotFoundError(PluginError):
    """Exception for configured plugin names missing from the registry."""

    def __init__(self, missing: List[str], available: List[str]):
        self.missing = list(missing)
        self.available = list(available)
        super().__init__(
            f"Plugins not found: {', '.join(self.missing)}. "
            f"Available plugins: {', '.join(self.available) or 'none'}"
        )


class Plugin:
    """
    Base class for export plugins.

    Subclasses set ``name`` and override any of the three hooks. Every hook
    must return a complete value; the defaults pass their input through.
    """

    name: str = ''

    def process_front_matter(self, document: Dict[str, Any], post: PostRecord) -> Dict[str, Any]:
        """
        Adjust the frontmatter document of a post.

        Args:
            document: Frontmatter built so far (a private copy)
            post: Post being exported

        Returns:
            Complete frontmatter document
        """
        return document

    def process_html(self, html: str, asset_mapping: Mapping[str, str]) -> str:
        """Adjust the asset-resolved HTML before conversion."""
        return html

    def process_markdown(self, markdown: str) -> str:
        """Adjust the converted Markdown body."""
        return markdown

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


__all__ = ['Plugin', 'PluginError', 'PluginLoadError', 'PluginNotFoundError']

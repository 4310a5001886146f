"""Ordered plugin pipeline folding each hook over the configured plugins."""

import copy
import logging
from functools import reduce
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from models import PostRecord
from .base import Plugin, PluginError


class PluginPipeline:
    """
    Applies plugin hooks left to right.

    Each hook receives the previous plugin's output, so for plugins [A, B]
    the Markdown result is ``B.process_markdown(A.process_markdown(base))``.
    Frontmatter hooks receive a private deep copy of the previous document.
    """

    def __init__(self, plugins: Iterable[Plugin] = (), logger: Optional[logging.Logger] = None):
        """
        Initialize the pipeline.

        Args:
            plugins: Plugins in invocation order
            logger: Logger instance

        Raises:
            ValueError: If two plugins share a name
        """
        self.plugins: List[Plugin] = list(plugins)
        self.logger = logger or logging.getLogger('wordpress_markdown_exporter.plugins.pipeline')

        seen = set()
        for plugin in self.plugins:
            if plugin.name in seen:
                raise ValueError(f"Duplicate plugin name in pipeline: {plugin.name}")
            seen.add(plugin.name)

    @property
    def names(self) -> List[str]:
        return [plugin.name for plugin in self.plugins]

    def process_front_matter(self, document: Dict[str, Any], post: PostRecord) -> Dict[str, Any]:
        """Fold a frontmatter document through every plugin."""
        return reduce(
            lambda doc, plugin: self._apply(
                plugin, 'process_front_matter', dict,
                lambda: plugin.process_front_matter(copy.deepcopy(doc), post)
            ),
            self.plugins,
            dict(document),
        )

    def process_html(self, html: str, asset_mapping: Mapping[str, str]) -> str:
        """Fold asset-resolved HTML through every plugin."""
        return reduce(
            lambda text, plugin: self._apply(
                plugin, 'process_html', str,
                lambda: plugin.process_html(text, asset_mapping)
            ),
            self.plugins,
            html,
        )

    def process_markdown(self, markdown: str) -> str:
        """Fold a Markdown body through every plugin."""
        return reduce(
            lambda text, plugin: self._apply(
                plugin, 'process_markdown', str,
                lambda: plugin.process_markdown(text)
            ),
            self.plugins,
            markdown,
        )

    def _apply(self, plugin: Plugin, hook: str, expected: type, call: Callable[[], Any]) -> Any:
        """Run one hook, wrapping failures and wrong return types in PluginError."""
        try:
            result = call()
        except PluginError:
            raise
        except Exception as e:
            raise PluginError.for_hook(plugin.name, hook, f"{type(e).__name__}: {e}") from e

        if not isinstance(result, expected):
            raise PluginError.for_hook(
                plugin.name, hook,
                f"expected {expected.__name__}, got {type(result).__name__}"
            )

        self.logger.debug(f"Applied {plugin.name}.{hook}")
        return result


__all__ = ['PluginPipeline']

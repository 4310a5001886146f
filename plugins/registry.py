"""Plugin discovery, shape checking and name resolution."""

import importlib
import importlib.util
import inspect
import logging
import pkgutil
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Iterable, List, Optional, Union

from .base import Plugin, PluginLoadError, PluginNotFoundError

HOOKS = ('process_front_matter', 'process_html', 'process_markdown')

BUILTIN_PACKAGE = 'plugins.builtin'


def is_plugin(candidate: Any) -> bool:
    """Check that an object has a non-empty name and the three plugin hooks."""
    name = getattr(candidate, 'name', None)
    if not isinstance(name, str) or not name:
        return False
    return all(callable(getattr(candidate, hook, None)) for hook in HOOKS)


class PluginRegistry:
    """
    Registry of available plugins keyed by name.

    Plugins come from the builtin package and from user directories; each
    module is imported once and every plugin class it defines is instantiated
    and shape checked before being registered.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('wordpress_markdown_exporter.plugins.registry')
        self._plugins: Dict[str, Any] = {}

    def register(self, plugin: Any) -> bool:
        """
        Register a plugin instance.

        Args:
            plugin: Object exposing ``name`` and the three hooks

        Returns:
            True if registered, False if rejected (logged as a warning)
        """
        if not is_plugin(plugin):
            self.logger.warning(f"Ignoring {plugin!r}: not a valid plugin (needs name and {', '.join(HOOKS)})")
            return False

        if plugin.name in self._plugins:
            self.logger.warning(f"Ignoring duplicate plugin '{plugin.name}' from {type(plugin).__module__}")
            return False

        self._plugins[plugin.name] = plugin
        self.logger.debug(f"Registered plugin: {plugin.name}")
        return True

    def discover_builtin(self, package: str = BUILTIN_PACKAGE) -> int:
        """
        Register the plugins shipped in the builtin package.

        Returns:
            Number of plugins registered
        """
        pkg = importlib.import_module(package)
        count = 0
        for module_info in pkgutil.iter_modules(pkg.__path__):
            if module_info.name.startswith('_'):
                continue
            module = importlib.import_module(f"{package}.{module_info.name}")
            count += self.register_module(module)
        return count

    def load_directory(self, directory: Union[str, Path]) -> int:
        """
        Register the plugins defined in the ``*.py`` files of a directory.

        A missing directory is skipped.

        Returns:
            Number of plugins registered

        Raises:
            PluginLoadError: If a plugin file cannot be imported
        """
        directory = Path(directory)
        if not directory.is_dir():
            self.logger.warning(f"Plugin directory not found, skipping: {directory}")
            return 0

        count = 0
        for path in sorted(directory.glob('*.py')):
            if path.name.startswith('_'):
                continue
            count += self.register_module(self._import_file(path))
        return count

    def register_module(self, module: ModuleType) -> int:
        """Instantiate and register every plugin class defined in a module."""
        count = 0
        for _, cls in inspect.getmembers(module, inspect.isclass):
            if cls is Plugin or cls.__module__ != module.__name__:
                continue
            if not is_plugin(cls):
                continue
            try:
                plugin = cls()
            except Exception as e:
                raise PluginLoadError(f"Cannot instantiate plugin {cls.__name__} from {module.__name__}: {e}") from e
            if self.register(plugin):
                count += 1
        return count

    def resolve(self, names: Iterable[str]) -> List[Any]:
        """
        Look up plugins by name, preserving the requested order.

        Raises:
            PluginNotFoundError: If any name is not registered
        """
        names = list(names)
        missing = [name for name in names if name not in self._plugins]
        if missing:
            raise PluginNotFoundError(missing, self.available())
        return [self._plugins[name] for name in names]

    def available(self) -> List[str]:
        """Sorted names of all registered plugins."""
        return sorted(self._plugins)

    def __contains__(self, name: str) -> bool:
        return name in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)

    def _import_file(self, path: Path) -> ModuleType:
        """Import a plugin file under a private module name."""
        module_name = f"wordpress_markdown_exporter_plugins.{path.stem}"
        try:
            spec = importlib.util.spec_from_file_location(module_name, path)
            if spec is None or spec.loader is None:
                raise ImportError(f"no loader for {path}")
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)
        except Exception as e:
            raise PluginLoadError(f"Cannot load plugins from {path}: {type(e).__name__}: {e}") from e

        self.logger.debug(f"Loaded plugin module {path}")
        return module


__all__ = ['PluginRegistry', 'is_plugin']

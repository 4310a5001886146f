"""Plugin support for adjusting exported posts."""

from .base import Plugin, PluginError, PluginLoadError, PluginNotFoundError
from .pipeline import PluginPipeline
from .registry import PluginRegistry, is_plugin

__all__ = [
    'Plugin',
    'PluginError',
    'PluginLoadError',
    'PluginNotFoundError',
    'PluginPipeline',
    'PluginRegistry',
    'is_plugin',
]

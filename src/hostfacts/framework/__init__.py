"""
hostfacts framework - plugin definition, discovery, and dependency resolution.

This module provides:
- Plugin base class and the collect_data decorator
- ProvidesMap: attribute path -> providing plugins
- PluginRunner: on-demand, stack-based dependency resolution
- PluginLoader: plugin discovery from packages and directories
- Structured logging with session context
"""

from hostfacts.framework.loader import PluginLoader
from hostfacts.framework.plugin import Plugin, collect_data
from hostfacts.framework.provides_map import ProvidesMap
from hostfacts.framework.runner import PluginRunner

__all__ = [
    # Plugins
    "Plugin",
    "collect_data",
    "PluginLoader",
    # Resolution
    "ProvidesMap",
    "PluginRunner",
]

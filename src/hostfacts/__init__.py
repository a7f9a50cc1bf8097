"""
hostfacts - host fact collection through dependency-resolving plugins.

Usage:
    from hostfacts import FactSystem

    system = FactSystem()
    system.all_plugins()
    print(system.json_pretty_print())
"""

from hostfacts.core.errors import AttributeNotFoundError, DependencyCycleError, FactsError
from hostfacts.core.fact_tree import FactTree
from hostfacts.framework.plugin import Plugin, collect_data
from hostfacts.framework.provides_map import ProvidesMap
from hostfacts.framework.runner import PluginRunner
from hostfacts.system import FactSystem

__version__ = "0.1.0"

__all__ = [
    "FactSystem",
    "FactTree",
    "Plugin",
    "collect_data",
    "ProvidesMap",
    "PluginRunner",
    "FactsError",
    "AttributeNotFoundError",
    "DependencyCycleError",
    "__version__",
]

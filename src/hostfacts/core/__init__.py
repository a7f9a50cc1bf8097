"""
hostfacts core - errors, fact storage, settings, and the plugin protocol.

Usage:
    from hostfacts.core import FactTree, HostFactsSettings, PluginProtocol
    from hostfacts.core.errors import AttributeNotFoundError, DependencyCycleError
"""

from hostfacts.core.errors import (
    AttributeNotFoundError,
    DependencyCycleError,
    FactsError,
    InvalidPluginError,
)
from hostfacts.core.fact_tree import FactTree
from hostfacts.core.protocols import PluginProtocol
from hostfacts.core.settings import HostFactsSettings, get_settings

__all__ = [
    "FactsError",
    "AttributeNotFoundError",
    "DependencyCycleError",
    "InvalidPluginError",
    "FactTree",
    "PluginProtocol",
    "HostFactsSettings",
    "get_settings",
]

"""
Canonical protocol definitions for hostfacts.

The resolution engine only needs a small capability contract from a plugin:
its name, its run state, the attribute paths it provides and depends on, and
two execution entry points. Anything matching the shape is a plugin as far
as ``ProvidesMap`` and ``PluginRunner`` are concerned, whether it derives
from :class:`hostfacts.framework.plugin.Plugin` or is a test double.

Architecture:
    ::

        protocols.py
        └── PluginProtocol   capability contract consumed by the core

    Consumers:
        framework/provides_map.py, framework/runner.py

Guardrails:
    ❌ DON'T: Add collection helpers (set_attribute, ...) to the protocol
    ✅ DO: Keep it to what resolution and execution read

Tags:
    protocol, plugin, contracts, hostfacts

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class PluginProtocol(Protocol):
    """
    Contract for a data-collection plugin.

    ``run()`` raises on failure and marks ``has_run`` on success.
    ``safe_run()`` has the same contract except that failures are contained
    by the plugin itself.
    """

    @property
    def name(self) -> str: ...

    @property
    def version(self) -> str: ...

    @property
    def has_run(self) -> bool: ...

    @property
    def provides_attrs(self) -> Sequence[str]: ...

    @property
    def depends_attrs(self) -> Sequence[str]: ...

    def run(self) -> None: ...

    def safe_run(self) -> None: ...


__all__ = ["PluginProtocol"]

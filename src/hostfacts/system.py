"""Collection session: load plugins, resolve, run, report.

Manifesto:
    A session is an explicitly constructed object, never a module global.
    It owns one fact tree, one provider directory built completely before
    any plugin runs, and one runner driving that directory. Running
    "everything" is just asking the runner for each plugin in turn; the
    runner's own bookkeeping keeps each plugin to a single execution.

Examples:
    >>> system = FactSystem()
    >>> system.all_plugins()
    >>> system.data.get("languages/python/implementation")
    'CPython'

Tags:
    hostfacts, system, orchestration, session

Doc-Types:
    api-reference
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Iterable
from typing import Any

from hostfacts.core.errors import (
    AttributeNotFoundError,
    DependencyCycleError,
    PluginNotFoundError,
)
from hostfacts.core.fact_tree import FactTree
from hostfacts.core.settings import HostFactsSettings, get_settings
from hostfacts.framework.loader import PluginLoader
from hostfacts.framework.logging import bind_context, get_logger, log_step
from hostfacts.framework.plugin import Plugin
from hostfacts.framework.provides_map import ProvidesMap
from hostfacts.framework.runner import PluginRunner

log = get_logger(__name__)


class FactSystem:
    """
    One collection session.

    Attributes:
        settings: Session configuration
        data: Fact tree every plugin writes into
        provides_map: Attribute -> providers, filled by load_plugins()
        runner: PluginRunner bound to ``provides_map``
    """

    def __init__(self, settings: HostFactsSettings | None = None, loader: PluginLoader | None = None) -> None:
        self.settings = settings or get_settings()
        self.session_id = uuid.uuid4().hex[:12]
        self.data = FactTree()
        self.provides_map = ProvidesMap()
        self.runner = PluginRunner(self.provides_map, safe_run=self.settings.safe_run)
        self._loader = loader or PluginLoader()
        self._plugins: dict[str, Plugin] = {}
        self._loaded = False

    @property
    def plugins(self) -> list[Plugin]:
        """Loaded plugin instances, in load order."""
        return list(self._plugins.values())

    def load_plugins(self) -> list[Plugin]:
        """Discover, instantiate and register every plugin (once per session)."""
        if self._loaded:
            return self.plugins

        bind_context(session_id=self.session_id)
        with log_step("system.load_plugins", level="debug") as step:
            classes = self._loader.load(
                self.settings.plugin_path,
                include_builtin=self.settings.include_builtin_plugins,
            )
            disabled = set(self.settings.disabled_plugins)
            for name, cls in classes.items():
                plugin = cls(self.data, disabled=name in disabled)
                self._plugins[name] = plugin
                self.provides_map.register(plugin, plugin.provides_attrs)
            step.annotate(plugins=len(self._plugins))

        self._loaded = True
        return self.plugins

    def plugin(self, name: str) -> Plugin:
        """Return the loaded plugin called ``name``."""
        try:
            return self._plugins[name]
        except KeyError:
            raise PluginNotFoundError(name) from None

    def run_plugins(self, attribute_filter: str | Iterable[str] | None = None, force: bool = False) -> None:
        """
        Run every plugin, or only the providers of ``attribute_filter``.

        Filtered attributes fall back to their nearest providing ancestor.
        """
        if attribute_filter is None:
            targets = self.provides_map.all_plugins()
        else:
            targets = self.provides_map.find_providers_for(attribute_filter, inherit=True)

        for plugin in targets:
            self.runner.run_plugin(plugin, force=force)

    def all_plugins(self, attribute_filter: str | Iterable[str] | None = None) -> None:
        """Load plugins and run them; resolution errors are logged and re-raised."""
        self.load_plugins()
        try:
            self.run_plugins(attribute_filter)
        except (AttributeNotFoundError, DependencyCycleError) as e:
            log.error("system.run_plugins.error", **e.to_dict())
            raise

    def refresh_plugins(self, attribute_filter: str | Iterable[str] | None = None) -> None:
        """Run plugins again (and their dependencies) even if they already ran."""
        self.load_plugins()
        self.run_plugins(attribute_filter, force=True)

    def require_plugin(self, name: str, force: bool = False) -> Plugin:
        """Make sure the plugin called ``name`` (and what it depends on) has run."""
        self.load_plugins()
        plugin = self.plugin(name)
        self.runner.run_plugin(plugin, force=force)
        return plugin

    # ── Output ───────────────────────────────────────────────────

    def json_pretty_print(self, item: Any = None) -> str:
        """Pretty JSON of ``item``, or of the whole fact tree."""
        if item is None:
            return self.data.to_json(indent=2)
        return json.dumps(item, indent=2)

    def attributes_print(self, attribute: str) -> str:
        """Pretty JSON of the facts collected at ``attribute``."""
        return json.dumps(self.data[attribute], indent=2)

    def __repr__(self) -> str:
        return f"FactSystem(session_id={self.session_id!r}, plugins={len(self._plugins)})"


__all__ = ["FactSystem"]

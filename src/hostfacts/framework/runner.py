"""On-demand plugin runner.

Manifesto:
    Nothing computes a global execution order up front. Asking for one
    plugin runs exactly the dependencies it still needs, depth-first, and
    then the plugin itself; plugins unrelated to the request are never
    touched. An explicit work stack replaces recursion, so a dependency
    cycle shows up as a diagnosable condition with the offending chain
    instead of a stack overflow.

Resolution of one ``run_plugin`` call::

    stack = [plugin]
    while stack:
        current = stack.pop()
        satisfied?            -> skip
        still on the stack?   -> DependencyCycleError(chain)
        unmet providers?      -> push current, push first provider
        otherwise             -> execute current

Tags:
    hostfacts, framework, runner, dependency-resolution, cycle-detection

Doc-Types:
    api-reference
"""

from collections.abc import Iterable

from hostfacts.core.errors import AttributeNotFoundError, DependencyCycleError, InvalidPluginError
from hostfacts.core.protocols import PluginProtocol
from hostfacts.framework.logging import get_logger, log_step
from hostfacts.framework.provides_map import ProvidesMap, attribute_ancestry, unique_plugins

log = get_logger(__name__)


class PluginRunner:
    """
    Synchronous dependency-resolving plugin runner.

    Args:
        provides_map: Fully populated provider directory
        safe_run: Execute plugins through ``safe_run()`` instead of ``run()``
    """

    def __init__(self, provides_map: ProvidesMap, safe_run: bool = False) -> None:
        self.provides_map = provides_map
        self.safe_run = safe_run

    def run_plugin(self, plugin: PluginProtocol, force: bool = False) -> None:
        """
        Run ``plugin`` and every dependency it still needs.

        With ``force``, the plugin and all of its transitive dependencies are
        executed again even if they already ran, each once per call.

        Raises:
            InvalidPluginError: ``plugin`` does not satisfy PluginProtocol
            AttributeNotFoundError: a dependency has no provider
            DependencyCycleError: the dependency chain loops back on itself
        """
        if not isinstance(plugin, PluginProtocol):
            raise InvalidPluginError(plugin)

        executed: set[int] = set()

        def satisfied(candidate: PluginProtocol) -> bool:
            return id(candidate) in executed or (not force and candidate.has_run)

        visited = [plugin]
        while visited:
            next_plugin = visited.pop()

            if satisfied(next_plugin):
                continue

            if any(pending is next_plugin for pending in visited):
                cycle = self.get_cycle(visited, next_plugin)
                log.debug("runner.cycle_detected", plugin=next_plugin.name, cycle=cycle)
                raise DependencyCycleError(cycle)

            dependency_providers = [
                provider
                for provider in self.fetch_plugins(next_plugin.depends_attrs)
                if provider is not next_plugin and not satisfied(provider)
            ]

            if dependency_providers:
                visited.append(next_plugin)
                visited.append(dependency_providers[0])
            else:
                self._execute(next_plugin)
                executed.add(id(next_plugin))

    def _execute(self, plugin: PluginProtocol) -> None:
        # failures propagate to the caller, which decides how to report them
        with log_step("plugin.run", level="debug", error_level="debug", plugin=plugin.name, safe=self.safe_run):
            if self.safe_run:
                plugin.safe_run()
            else:
                plugin.run()

    def fetch_plugins(self, attributes: Iterable[str]) -> list[PluginProtocol]:
        """
        Return the plugins providing the given attributes.

        Each attribute falls back to its nearest ancestor path that has
        providers; only when no prefix has any does the whole lookup fail.
        """
        plugins: list[PluginProtocol] = []
        for attribute in attributes:
            for partial_attribute in attribute_ancestry(attribute):
                found_providers = self._safe_find_providers_for(partial_attribute)
                if found_providers:
                    plugins.extend(found_providers)
                    break
            else:
                raise AttributeNotFoundError(attribute)
        return unique_plugins(plugins)

    def _safe_find_providers_for(self, attribute: str) -> list[PluginProtocol]:
        """Exact lookup that reports a missing attribute as an empty list."""
        try:
            return self.provides_map.find_providers_for([attribute])
        except AttributeNotFoundError:
            return []

    @staticmethod
    def get_cycle(plugins: list[PluginProtocol], cycle_start: PluginProtocol) -> list[str]:
        """Names of ``plugins`` from the first occurrence of ``cycle_start`` onward."""
        for index, plugin in enumerate(plugins):
            if plugin is cycle_start:
                return [p.name for p in plugins[index:]]
        return []


__all__ = ["PluginRunner"]

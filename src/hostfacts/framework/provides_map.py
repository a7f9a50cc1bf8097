"""Provider directory: which plugins provide which attribute paths.

Manifesto:
    A plugin that provides ``network`` also satisfies a request for
    ``network/default_interface``, without having to enumerate every
    sub-path it happens to fill in. Lookups can therefore fall back from a
    path to its nearest registered ancestor, never to siblings.

The map is populated once per session, before any plugin runs, and is only
read afterwards. It is never mutated while a resolution is in progress.

Tags:
    hostfacts, framework, provides-map, lookup, attribute-paths

Doc-Types:
    api-reference
"""

import re
from collections.abc import Iterable, Iterator

from hostfacts.core.errors import AttributeNotFoundError
from hostfacts.core.protocols import PluginProtocol
from hostfacts.framework.logging import get_logger

log = get_logger(__name__)

# Matches the lowest subattribute: '/sub2' in 'attr/sub1/sub2', nothing in 'attr'
_SUBATTRIBUTE = re.compile(r"/[^/]+$")


def attribute_ancestry(attribute: str) -> Iterator[str]:
    """Yield ``attribute``, then each strict prefix, most specific first.

    >>> list(attribute_ancestry("top/middle/bottom"))
    ['top/middle/bottom', 'top/middle', 'top']
    """
    partial = attribute
    while True:
        yield partial
        match = _SUBATTRIBUTE.search(partial)
        if match is None:
            return
        partial = partial[: match.start()]


def unique_plugins(plugins: Iterable[PluginProtocol]) -> list[PluginProtocol]:
    """Deduplicate by identity, keeping first-seen order."""
    seen: set[int] = set()
    result = []
    for plugin in plugins:
        if id(plugin) not in seen:
            seen.add(id(plugin))
            result.append(plugin)
    return result


def _as_attribute_list(attributes: str | Iterable[str]) -> list[str]:
    if isinstance(attributes, str):
        return [attributes]
    return list(attributes)


class ProvidesMap:
    """Index from attribute path to the ordered plugins providing it."""

    def __init__(self) -> None:
        self.map: dict[str, list[PluginProtocol]] = {}

    def register(self, plugin: PluginProtocol, attributes: str | Iterable[str]) -> None:
        """Append ``plugin`` under each exact attribute path.

        No deduplication happens here; a plugin registered twice under the
        same path is listed twice and collapsed by the lookups.
        """
        attributes = _as_attribute_list(attributes)
        for attribute in attributes:
            self.map.setdefault(attribute, []).append(plugin)
        log.debug("provides_map.registered", plugin=plugin.name, attributes=attributes)

    def find_providers_for(self, attributes: str | Iterable[str], inherit: bool = False) -> list[PluginProtocol]:
        """Return the plugins providing each attribute, in request order.

        Args:
            attributes: Attribute paths (a single string is one path)
            inherit: Fall back to the nearest ancestor path that has providers

        Raises:
            AttributeNotFoundError: naming the requested path, when neither it
                nor (with ``inherit``) any ancestor has a provider
        """
        providers: list[PluginProtocol] = []
        for attribute in _as_attribute_list(attributes):
            providers.extend(self._providers_for(attribute, inherit))
        return unique_plugins(providers)

    def _providers_for(self, attribute: str, inherit: bool) -> list[PluginProtocol]:
        candidates = attribute_ancestry(attribute) if inherit else iter((attribute,))
        for candidate in candidates:
            found = self.map.get(candidate)
            if found:
                return list(found)
        raise AttributeNotFoundError(attribute)

    def all_plugins(self) -> list[PluginProtocol]:
        """Every registered plugin exactly once, in first-registration order."""
        return unique_plugins(plugin for plugins in self.map.values() for plugin in plugins)

    def __len__(self) -> int:
        return len(self.map)

    def __repr__(self) -> str:
        return f"ProvidesMap(attributes={len(self.map)}, plugins={len(self.all_plugins())})"


__all__ = ["ProvidesMap", "attribute_ancestry", "unique_plugins"]

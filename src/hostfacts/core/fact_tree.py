"""
Hierarchical fact storage.

Plugins write everything they collect into one shared ``FactTree``. Keys are
``/``-separated attribute paths (``network/interfaces/eth0``); intermediate
levels are created on demand. Values are restricted to what can be rendered
as JSON (strings, numbers, booleans, null, string-keyed mappings and
sequences) and are validated on write with pydantic.

Examples:
    >>> tree = FactTree()
    >>> tree["languages/python/version"] = "3.12.1"
    >>> tree.get("languages/python")
    {'version': '3.12.1'}
    >>> "languages/ruby" in tree
    False

Tags:
    fact-tree, storage, pydantic, hostfacts

Doc-Types:
    api-reference
"""

from __future__ import annotations

import copy
import json
from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import JsonValue, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from hostfacts.core.errors import FactNotFoundError, FactValueError

SEPARATOR = "/"

_json_value = TypeAdapter(JsonValue)

_MISSING = object()


def _plain(value: Any) -> Any:
    # JsonValue only accepts the exact list/dict types
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def split_path(path: str) -> list[str]:
    """Split an attribute path into its segments."""
    if not isinstance(path, str) or not path.strip(SEPARATOR):
        raise FactValueError(f"Invalid attribute path: {path!r}", path=str(path))
    return [segment for segment in path.split(SEPARATOR) if segment]


class FactTree:
    """Typed hierarchical mapping from attribute paths to JSON-like values."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._root: dict[str, Any] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def set(self, path: str, value: Any) -> Any:
        """Store ``value`` at ``path``, creating intermediate mappings.

        Returns the stored (validated) value.
        """
        segments = split_path(path)
        try:
            validated = _json_value.validate_python(_plain(value))
        except PydanticValidationError as e:
            raise FactValueError(
                f"Cannot store {type(value).__name__} value at '{path}'",
                path=path,
                cause=e,
            ) from e

        node = self._root
        for depth, segment in enumerate(segments[:-1]):
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                parent = SEPARATOR.join(segments[: depth + 1])
                raise FactValueError(
                    f"Cannot store '{path}': '{parent}' already holds a {type(child).__name__}",
                    path=path,
                )
            node = child

        node[segments[-1]] = validated
        return validated

    def _lookup(self, path: str) -> Any:
        node: Any = self._root
        for segment in split_path(path):
            if not isinstance(node, dict) or segment not in node:
                return _MISSING
            node = node[segment]
        return node

    def get(self, path: str, default: Any = None) -> Any:
        """Return the value at ``path`` or ``default`` when nothing is stored there."""
        value = self._lookup(path)
        return default if value is _MISSING else value

    def __getitem__(self, path: str) -> Any:
        value = self._lookup(path)
        if value is _MISSING:
            raise FactNotFoundError(path)
        return value

    def __setitem__(self, path: str, value: Any) -> None:
        self.set(path, value)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        try:
            return self._lookup(path) is not _MISSING
        except FactValueError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._root)

    def __len__(self) -> int:
        return len(self._root)

    def keys(self) -> list[str]:
        """Top-level attribute names."""
        return list(self._root)

    def to_dict(self) -> dict[str, Any]:
        """Deep copy of the whole tree."""
        return copy.deepcopy(self._root)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self._root, indent=indent)

    def __repr__(self) -> str:
        return f"FactTree(keys={self.keys()!r})"


__all__ = ["FactTree", "SEPARATOR", "split_path"]

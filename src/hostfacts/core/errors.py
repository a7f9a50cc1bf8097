"""
Structured error types for hostfacts.

Every failure the engine can report is a typed error with a category and a
structured context, so the orchestration layer can render diagnostics (or
decide to tolerate a failure) from the payload instead of parsing messages.

Manifesto:
    - **Typed Error Hierarchy:** Plugin definition, resolution and fact
      storage failures are different kinds of problems
    - **Structured Payloads:** Resolution errors carry the attribute path or
      the cycle chain as data, not only as text
    - **Error Chaining:** Loading failures keep the original exception

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                        FactsError                             │
        │              (category, context, cause)                       │
        ├──────────────────────────────────────────────────────────────┤
        │  PluginError              ResolutionError     FactValueError  │
        │  (PLUGIN)                 (RESOLUTION)        (VALIDATION)    │
        │     │                        │                                │
        │  InvalidPluginError       AttributeNotFoundError              │
        │  InvalidPluginNameError   DependencyCycleError                │
        │  IllegalPluginDefinition                                      │
        │  PluginLoadError          FactNotFoundError   ConfigError     │
        │  PluginNotFoundError      (VALIDATION)        (CONFIG)        │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = AttributeNotFoundError("network/default_interface")
    >>> error.attribute
    'network/default_interface'
    >>> str(error)
    "Cannot find plugin providing attribute 'network/default_interface'"

    >>> error = DependencyCycleError(["Network", "Kernel"])
    >>> error.to_dict()["cycle"]
    ['Network', 'Kernel']

Guardrails:
    ❌ DON'T: Raise ResolutionError subclasses for collection failures
    ✅ DO: Let a plugin's own exception propagate (normal mode)

    ❌ DON'T: Name a truncated prefix in AttributeNotFoundError
    ✅ DO: Always report the originally requested path

Tags:
    error-handling, exception-hierarchy, error-context, hostfacts

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Which part of a collection run an error belongs to."""

    PLUGIN = "PLUGIN"  # definition, loading, lookup by name
    RESOLUTION = "RESOLUTION"  # missing provider, dependency cycle
    VALIDATION = "VALIDATION"  # fact values and paths
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Where an error happened.

    ``plugin``, ``attribute`` and ``path`` (a plugin file or directory) are
    the locations hostfacts itself reports; anything else a caller attaches
    goes to ``metadata``.
    """

    plugin: str | None = None
    attribute: str | None = None
    path: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        located = {k: v for k, v in asdict(self).items() if k != "metadata" and v is not None}
        return {**located, **self.metadata}


class FactsError(Exception):
    """
    Root of every error hostfacts raises on purpose.

    Examples:
        >>> FactsError("Something went wrong").category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> PluginError("Bad plugin").with_context(plugin="Kernel").context.plugin
        'Kernel'
    """

    default_category = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category if category is not None else self.default_category
        self.context = context if context is not None else ErrorContext()
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **values: Any) -> FactsError:
        """
        Attach location details and return the error, for ``raise ... .with_context(...)``.

            raise PluginLoadError(path).with_context(plugin="Kernel")
        """
        for key, value in values.items():
            if key in ("plugin", "attribute", "path"):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Flat payload for structured log events."""
        payload: dict[str, Any] = {
            "error_type": type(self).__name__,
            "category": self.category.value,
            "message": self.message,
        }
        if context := self.context.to_dict():
            payload["context"] = context
        if self.cause is not None:
            payload["cause"] = str(self.cause)
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# PLUGIN ERRORS
# =============================================================================


class PluginError(FactsError):
    """Plugin definition, loading or lookup error."""

    default_category = ErrorCategory.PLUGIN


class InvalidPluginError(PluginError):
    """Something that is not a plugin was handed to the runner."""

    def __init__(self, plugin: Any):
        self.plugin = plugin
        super().__init__(f"Invalid plugin {plugin!r} (must satisfy PluginProtocol)")


class InvalidPluginNameError(PluginError):
    """Plugin name does not follow the naming rules."""

    def __init__(self, name: Any):
        self.plugin_name = name
        super().__init__(
            f"{name!r} is an invalid plugin name. "
            "Plugin names must start with an upper-case letter and contain only letters and digits",
            context=ErrorContext(plugin=str(name)),
        )


class IllegalPluginDefinitionError(PluginError):
    """Plugin class declares something contradictory or malformed."""

    pass


class PluginLoadError(PluginError):
    """A plugin module or directory could not be loaded."""

    def __init__(self, path: str, message: str | None = None, *, cause: Exception | None = None):
        self.path = path
        super().__init__(
            message or f"Cannot load plugins from {path}",
            context=ErrorContext(path=path),
            cause=cause,
        )


class PluginNotFoundError(PluginError):
    """No plugin with the requested name is loaded."""

    def __init__(self, name: str):
        self.plugin_name = name
        super().__init__(f"Plugin not found: {name}", context=ErrorContext(plugin=name))


# =============================================================================
# RESOLUTION ERRORS
# =============================================================================


class ResolutionError(FactsError):
    """Dependency resolution error."""

    default_category = ErrorCategory.RESOLUTION


class AttributeNotFoundError(ResolutionError):
    """No exact or ancestor provider exists for an attribute path."""

    def __init__(self, attribute: str):
        self.attribute = attribute
        super().__init__(
            f"Cannot find plugin providing attribute '{attribute}'",
            context=ErrorContext(attribute=attribute),
        )


class DependencyCycleError(ResolutionError):
    """A plugin was reached again while still unresolved on the work stack."""

    def __init__(self, cycle: list[str]):
        self.cycle = list(cycle)
        super().__init__(
            "Dependency cycle detected. Please refer to the following plugins: " + ", ".join(self.cycle)
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["cycle"] = list(self.cycle)
        return result


# =============================================================================
# FACT TREE ERRORS
# =============================================================================


class FactValueError(FactsError):
    """A value or path cannot be stored in the fact tree."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, message: str, *, path: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.path = path
        if path is not None:
            self.context.attribute = path


class FactNotFoundError(FactsError):
    """Nothing has been collected at an attribute path."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"No collected data for attribute '{path}'",
            context=ErrorContext(attribute=path),
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(FactsError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "FactsError",
    # Plugin
    "PluginError",
    "InvalidPluginError",
    "InvalidPluginNameError",
    "IllegalPluginDefinitionError",
    "PluginLoadError",
    "PluginNotFoundError",
    # Resolution
    "ResolutionError",
    "AttributeNotFoundError",
    "DependencyCycleError",
    # Fact tree
    "FactValueError",
    "FactNotFoundError",
    # Config
    "ConfigError",
]

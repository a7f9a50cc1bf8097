"""Base plugin class and collector registration.

A plugin declares, at class level, the attribute paths it provides and the
attribute paths it depends on, plus one or more collector methods keyed by
platform::

    class Python(Plugin):
        provides = ("languages/python",)
        depends = ("languages",)

        @collect_data()
        def collect(self):
            self.set_attribute("languages/python/version", platform.python_version())

        @collect_data("windows")
        def collect_windows(self):
            ...

The declarations are read once, when the class is created; invalid names,
malformed attribute paths and duplicate platform collectors fail there
rather than during a collection run.

Tags:
    hostfacts, framework, plugin, collector

Doc-Types:
    api-reference
"""

import platform
import re
from collections.abc import Callable, Sequence
from typing import Any, ClassVar, TypeVar

from hostfacts.core.errors import IllegalPluginDefinitionError, InvalidPluginNameError
from hostfacts.core.fact_tree import FactTree
from hostfacts.framework.logging import get_logger

log = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

DEFAULT_PLATFORM = "default"

_PLUGIN_NAME = re.compile(r"^[A-Z][A-Za-z0-9]*$")


def current_platform() -> str:
    """Platform key used to pick a collector (``linux``, ``darwin``, ``windows``, ...)."""
    return platform.system().lower() or DEFAULT_PLATFORM


def collect_data(*platforms: str) -> Callable[[F], F]:
    """Mark a method as the collector for the given platforms (``default`` if none)."""
    keys = platforms or (DEFAULT_PLATFORM,)

    def decorator(func: F) -> F:
        func._collect_platforms = getattr(func, "_collect_platforms", ()) + keys  # type: ignore[attr-defined]
        return func

    return decorator


def _attribute_list(cls_name: str, kind: str, value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = (value,)
    if not isinstance(value, Sequence):
        raise IllegalPluginDefinitionError(
            f"{cls_name}.{kind} must be a string or a sequence of strings, got {type(value).__name__}"
        )
    for attribute in value:
        if not isinstance(attribute, str) or not attribute:
            raise IllegalPluginDefinitionError(f"{cls_name}.{kind} contains an invalid attribute: {attribute!r}")
    return tuple(value)


class Plugin:
    """Base class for all data-collection plugins."""

    name: ClassVar[str] = ""
    version: ClassVar[str] = "v1"
    provides: ClassVar[Sequence[str]] = ()
    depends: ClassVar[Sequence[str]] = ()

    _collectors: ClassVar[dict[str, Callable[["Plugin"], Any]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        name = cls.__dict__.get("name") or cls.__name__
        if not isinstance(name, str) or not _PLUGIN_NAME.match(name):
            raise InvalidPluginNameError(name)
        cls.name = name

        cls.provides = _attribute_list(name, "provides", cls.provides)
        cls.depends = _attribute_list(name, "depends", cls.depends)

        own: dict[str, Callable[[Plugin], Any]] = {}
        for member in cls.__dict__.values():
            for key in getattr(member, "_collect_platforms", ()):
                if key in own:
                    raise IllegalPluginDefinitionError(
                        f"{name}: collect_data already defined on platform {key}"
                    ).with_context(plugin=name)
                own[key] = member
        # a method redefined without @collect_data no longer collects
        inherited = {
            key: collector
            for key, collector in cls._collectors.items()
            if collector.__name__ not in cls.__dict__
        }
        cls._collectors = {**inherited, **own}

    def __init__(self, data: FactTree, *, disabled: bool = False) -> None:
        self.data = data
        self.disabled = disabled
        self._has_run = False

    @property
    def has_run(self) -> bool:
        return self._has_run

    @property
    def provides_attrs(self) -> list[str]:
        return list(self.provides)

    @property
    def depends_attrs(self) -> list[str]:
        return list(self.depends)

    @classmethod
    def collectors(cls) -> dict[str, Callable[["Plugin"], Any]]:
        """Collector per platform key, inherited ones included."""
        return dict(cls._collectors)

    def run(self) -> None:
        """Run the collector for this platform and mark the plugin as run.

        Exceptions from the collector propagate and leave ``has_run`` false.
        """
        if self.disabled:
            log.debug("plugin.skipped_disabled", plugin=self.name)
        else:
            platform_key = current_platform()
            collector = self._collectors.get(platform_key) or self._collectors.get(DEFAULT_PLATFORM)
            if collector is None:
                log.debug("plugin.no_collector", plugin=self.name, platform=platform_key)
            else:
                collector(self)
        self._has_run = True

    def safe_run(self) -> None:
        """Like run(), but a failing collector is logged and the plugin still counts as run."""
        try:
            self.run()
        except Exception as e:
            log.error(
                "plugin.failed",
                plugin=self.name,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            self._has_run = True

    # ── Fact access ──────────────────────────────────────────────

    def set_attribute(self, path: str, value: Any) -> Any:
        return self.data.set(path, value)

    def get_attribute(self, path: str, default: Any = None) -> Any:
        return self.data.get(path, default)

    def has_attribute(self, path: str) -> bool:
        return path in self.data

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, has_run={self._has_run})"


__all__ = ["Plugin", "collect_data", "current_platform", "DEFAULT_PLATFORM"]

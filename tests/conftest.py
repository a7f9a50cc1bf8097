"""
Shared pytest fixtures and configuration for hostfacts tests.

This module provides:
- Context, settings and environment cleanup for test isolation
- FakePlugin, a PluginProtocol test double that records execution order
- Plugin directory helpers for loader and session tests

Usage:
    Fixtures are auto-discovered by pytest. Use them as function arguments:

    def test_something(make_plugin, provides_map):
        zoo = make_plugin("Zoo", provides=["zoo"], depends=["park"])
        ...
"""

import os
import sys
import textwrap
from pathlib import Path
from typing import Any, Callable, Generator

import pytest

# Ensure hostfacts package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hostfacts.core.settings import clear_settings_cache
from hostfacts.framework.logging import clear_context, configure_logging
from hostfacts.framework.provides_map import ProvidesMap


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_logging() -> None:
    """Route structlog through stdlib logging at WARNING for the whole run."""
    configure_logging(level="WARNING", format="console", force=True)


@pytest.fixture(autouse=True)
def clean_state(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Reset log context and cached settings, and hide HOSTFACTS_* variables.

    No test can affect another through the environment or the settings cache.
    """
    for key in list(os.environ):
        if key.startswith("HOSTFACTS_"):
            monkeypatch.delenv(key)
    clear_context()
    clear_settings_cache()
    yield
    clear_context()
    clear_settings_cache()


# =============================================================================
# Plugin Test Doubles
# =============================================================================


class FakePlugin:
    """
    Minimal PluginProtocol implementation.

    Appends its name to a shared execution log on every run so tests can
    assert on ordering. ``fail=True`` makes run() raise.
    """

    version = "v1"

    def __init__(
        self,
        name: str,
        provides: list[str] | None = None,
        depends: list[str] | None = None,
        *,
        execution_log: list[str],
        fail: bool = False,
    ) -> None:
        self.name = name
        self.provides_attrs = list(provides or [])
        self.depends_attrs = list(depends or [])
        self.has_run = False
        self.fail = fail
        self.runs = 0
        self.safe_runs = 0
        self._execution_log = execution_log

    def run(self) -> None:
        self.runs += 1
        self._execution_log.append(self.name)
        if self.fail:
            raise RuntimeError(f"{self.name} exploded")
        self.has_run = True

    def safe_run(self) -> None:
        self.safe_runs += 1
        try:
            self.run()
        except RuntimeError:
            self.has_run = True

    def __repr__(self) -> str:
        return f"FakePlugin({self.name!r})"


@pytest.fixture
def execution_log() -> list[str]:
    """Names of fake plugins in the order they ran."""
    return []


@pytest.fixture
def make_plugin(execution_log: list[str]) -> Callable[..., FakePlugin]:
    """Factory for FakePlugin instances sharing one execution log."""

    def factory(name: str, provides: list[str] | None = None, depends: list[str] | None = None, **kwargs: Any):
        return FakePlugin(name, provides, depends, execution_log=execution_log, **kwargs)

    return factory


@pytest.fixture
def provides_map() -> ProvidesMap:
    return ProvidesMap()


@pytest.fixture
def register() -> Callable[..., None]:
    """Register fake plugins under their own provides_attrs."""

    def _register(pmap: ProvidesMap, *plugins: FakePlugin) -> None:
        for plugin in plugins:
            pmap.register(plugin, plugin.provides_attrs)

    return _register


# =============================================================================
# Plugin Directory Fixtures
# =============================================================================


@pytest.fixture
def write_plugin(tmp_path: Path) -> Callable[[str, str], Path]:
    """
    Write a plugin module below ``tmp_path/plugins`` and return its path.

        write_plugin("zoo.py", '''
            class Zoo(Plugin):
                provides = ("zoo",)
        ''')

    ``from hostfacts.framework.plugin import Plugin, collect_data`` is
    prepended automatically.
    """
    root = tmp_path / "plugins"

    def _write(relative: str, source: str) -> Path:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        header = "from hostfacts.framework.plugin import Plugin, collect_data\n\n"
        path.write_text(header + textwrap.dedent(source))
        return path

    return _write


@pytest.fixture
def plugin_dir(tmp_path: Path) -> Path:
    """Directory used by ``write_plugin``."""
    root = tmp_path / "plugins"
    root.mkdir(exist_ok=True)
    return root


@pytest.fixture
def animal_plugins(write_plugin, plugin_dir: Path) -> Path:
    """
    A small plugin tree:

        Park  provides park
        Zoo   provides zoo, zoo/animals; depends on park
        Keeper provides keeper; depends on zoo/animals/lion (ancestor fallback)
    """
    write_plugin(
        "park.py",
        """
        class Park(Plugin):
            provides = ("park",)

            @collect_data()
            def collect(self):
                self.set_attribute("park", {"name": "Central"})
        """,
    )
    write_plugin(
        "zoo/zoo.py",
        """
        class Zoo(Plugin):
            provides = ("zoo", "zoo/animals")
            depends = ("park",)

            @collect_data()
            def collect(self):
                park = self.get_attribute("park/name")
                self.set_attribute("zoo", {"park": park, "animals": {"lion": 2}})
        """,
    )
    write_plugin(
        "keeper.py",
        """
        class Keeper(Plugin):
            provides = ("keeper",)
            depends = ("zoo/animals/lion",)

            @collect_data()
            def collect(self):
                self.set_attribute("keeper/lions", self.get_attribute("zoo/animals/lion"))
        """,
    )
    return plugin_dir

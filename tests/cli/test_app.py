"""Tests for hostfacts.cli: command smoke tests via CliRunner.

Plugin directories are written to tmp_path and builtin plugins are switched
off, so the output is fully determined by the test.
"""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from hostfacts import __version__
from hostfacts.cli.app import app
from hostfacts.framework.logging import configure_logging

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """Commands bind logging to CliRunner's stderr; rebind to the real one afterwards."""
    yield
    configure_logging(level="WARNING", format="console", force=True)


def invoke(*args: str):
    return runner.invoke(app, list(args))


# ─── Version ─────────────────────────────────────────────────────────────


class TestVersion:
    def test_version_flag(self):
        result = invoke("--version")
        assert result.exit_code == 0
        assert f"hostfacts {__version__}" in result.stdout


# ─── collect ─────────────────────────────────────────────────────────────


class TestCollect:
    """Tests for the 'collect' command."""

    def test_collect_everything(self, animal_plugins):
        result = invoke("collect", "--no-builtin", "-d", str(animal_plugins))

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {
            "park": {"name": "Central"},
            "zoo": {"park": "Central", "animals": {"lion": 2}},
            "keeper": {"lions": 2},
        }

    def test_collect_one_attribute(self, animal_plugins):
        result = invoke("collect", "zoo/animals", "--no-builtin", "-d", str(animal_plugins))

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"lion": 2}

    def test_collect_several_attributes(self, animal_plugins):
        result = invoke("collect", "park", "zoo/park", "--no-builtin", "-d", str(animal_plugins))

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"park": {"name": "Central"}, "zoo/park": "Central"}

    def test_collect_builtin_python(self):
        result = invoke("collect", "languages/python/implementation")

        assert result.exit_code == 0, result.output
        assert isinstance(json.loads(result.stdout), str)

    def test_unknown_attribute_fails(self, animal_plugins):
        result = invoke("collect", "aquarium", "--no-builtin", "-d", str(animal_plugins))

        assert result.exit_code == 1
        assert "Cannot find plugin providing attribute 'aquarium'" in result.output

    def test_cycle_fails(self, write_plugin, plugin_dir):
        write_plugin(
            "cycle.py",
            """
            class Chicken(Plugin):
                provides = ("chicken",)
                depends = ("egg",)

            class Egg(Plugin):
                provides = ("egg",)
                depends = ("chicken",)
            """,
        )

        result = invoke("collect", "chicken", "--no-builtin", "-d", str(plugin_dir))

        assert result.exit_code == 1
        assert "Dependency cycle detected" in result.output

    def test_missing_directory_fails(self, tmp_path):
        result = invoke("collect", "--no-builtin", "-d", str(tmp_path / "nope"))

        assert result.exit_code == 1
        assert "Plugin directory not found" in result.output

    @pytest.mark.parametrize(
        "option, value",
        [("--log-level", "LOUD"), ("--log-format", "xml")],
    )
    def test_invalid_configuration(self, option, value, animal_plugins):
        result = invoke("collect", "--no-builtin", "-d", str(animal_plugins), option, value)

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_unsafe_propagates_plugin_error(self, write_plugin, plugin_dir):
        write_plugin(
            "flaky.py",
            """
            class Flaky(Plugin):
                provides = ("flaky",)

                @collect_data()
                def collect(self):
                    raise OSError("device busy")
            """,
        )

        result = invoke("collect", "--no-builtin", "--unsafe", "-d", str(plugin_dir))

        assert result.exit_code != 0
        assert isinstance(result.exception, OSError)

    def test_env_plugin_path(self, monkeypatch, animal_plugins):
        monkeypatch.setenv("HOSTFACTS_PLUGIN_PATH", json.dumps([str(animal_plugins)]))
        monkeypatch.setenv("HOSTFACTS_INCLUDE_BUILTIN_PLUGINS", "false")

        result = invoke("collect", "keeper")

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"lions": 2}


# ─── providers ───────────────────────────────────────────────────────────


class TestProviders:
    """Tests for the 'providers' command."""

    def test_list_plugins_json(self, animal_plugins):
        result = invoke("providers", "--json", "--no-builtin", "-d", str(animal_plugins))

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {
            "Keeper": {"provides": ["keeper"], "depends": ["zoo/animals/lion"]},
            "Park": {"provides": ["park"], "depends": []},
            "Zoo": {"provides": ["zoo", "zoo/animals"], "depends": ["park"]},
        }

    def test_list_plugins_table(self, animal_plugins):
        result = invoke("providers", "--no-builtin", "-d", str(animal_plugins))

        assert result.exit_code == 0, result.output
        for name in ("Keeper", "Park", "Zoo"):
            assert name in result.stdout

    def test_attribute_inherit(self, animal_plugins):
        result = invoke("providers", "zoo/animals/lion", "--json", "--no-builtin", "-d", str(animal_plugins))

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"zoo/animals/lion": ["Zoo"]}

    def test_attribute_exact_fails(self, animal_plugins):
        result = invoke(
            "providers", "zoo/animals/lion", "--exact", "--json", "--no-builtin", "-d", str(animal_plugins)
        )

        assert result.exit_code == 1
        assert "zoo/animals/lion" in result.output

    def test_builtin_providers(self):
        result = invoke("providers", "languages/python", "--json")

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"languages/python": ["Python"]}

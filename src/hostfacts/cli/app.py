"""
Root Typer application for the hostfacts CLI.

    hostfacts collect                     # every fact, as JSON
    hostfacts collect languages/python    # just one subtree
    hostfacts providers --json            # who provides what
"""

from __future__ import annotations

from pathlib import Path

import typer
from typer import Typer

from hostfacts.cli.utils import build_settings, fail, output_json, output_table
from hostfacts.core.errors import FactsError
from hostfacts.framework.logging import configure_logging
from hostfacts.system import FactSystem

app = Typer(
    name="hostfacts",
    help="Collect facts about this host through dependency-resolving plugins.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from hostfacts import __version__

        typer.echo(f"hostfacts {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """hostfacts CLI: collect and inspect host facts."""


# ── Commands ─────────────────────────────────────────────────────────────


@app.command()
def collect(
    attributes: list[str] | None = typer.Argument(None, help="Attribute paths to collect (default: everything)"),
    plugin_dir: list[Path] | None = typer.Option(None, "--directory", "-d", help="Additional plugin directory"),
    no_builtin: bool = typer.Option(False, "--no-builtin", help="Do not load the builtin plugins"),
    unsafe: bool = typer.Option(False, "--unsafe", help="Abort on the first failing plugin"),
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
    log_format: str | None = typer.Option(None, "--log-format", help="console or json"),
) -> None:
    """Run plugins and print the collected facts as JSON."""
    try:
        settings = build_settings(
            plugin_dirs=plugin_dir,
            no_builtin=no_builtin,
            unsafe=unsafe,
            log_level=log_level,
            log_format=log_format,
        )
        configure_logging(level=settings.log_level, format=settings.log_format, force=True)

        system = FactSystem(settings)
        system.all_plugins(attributes or None)

        if not attributes:
            payload = system.data.to_dict()
        elif len(attributes) == 1:
            payload = system.data[attributes[0]]
        else:
            payload = {attribute: system.data[attribute] for attribute in attributes}
    except FactsError as e:
        fail(e)

    output_json(payload)


@app.command()
def providers(
    attributes: list[str] | None = typer.Argument(None, help="Attribute paths to look up"),
    inherit: bool = typer.Option(True, "--inherit/--exact", help="Fall back to the nearest providing ancestor"),
    plugin_dir: list[Path] | None = typer.Option(None, "--directory", "-d", help="Additional plugin directory"),
    no_builtin: bool = typer.Option(False, "--no-builtin", help="Do not load the builtin plugins"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show which plugins provide which attributes."""
    try:
        settings = build_settings(plugin_dirs=plugin_dir, no_builtin=no_builtin)
        configure_logging(level=settings.log_level, format=settings.log_format, force=True)

        system = FactSystem(settings)
        system.load_plugins()

        if attributes:
            found = {
                attribute: [p.name for p in system.provides_map.find_providers_for([attribute], inherit=inherit)]
                for attribute in attributes
            }
        else:
            plugins = {
                plugin.name: {"provides": list(plugin.provides_attrs), "depends": list(plugin.depends_attrs)}
                for plugin in system.provides_map.all_plugins()
            }
    except FactsError as e:
        fail(e)

    if attributes:
        if json_out:
            output_json(found)
        else:
            output_table(
                "Providers",
                ["Attribute", "Plugins"],
                [[attribute, ", ".join(names)] for attribute, names in found.items()],
            )
    elif json_out:
        output_json(plugins)
    else:
        output_table(
            "Plugins",
            ["Plugin", "Provides", "Depends"],
            [[name, ", ".join(info["provides"]), ", ".join(info["depends"])] for name, info in plugins.items()],
        )

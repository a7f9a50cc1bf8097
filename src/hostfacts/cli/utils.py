"""
CLI utility helpers: settings assembly and output formatting.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hostfacts.core.errors import ConfigError, FactsError
from hostfacts.core.settings import HostFactsSettings

console = Console()
err_console = Console(stderr=True)


# ── Settings helper ──────────────────────────────────────────────────────


def build_settings(
    *,
    plugin_dirs: list[Path] | None = None,
    no_builtin: bool = False,
    unsafe: bool = False,
    log_level: str | None = None,
    log_format: str | None = None,
) -> HostFactsSettings:
    """Settings from the environment, with command-line flags taking precedence."""
    overrides: dict[str, Any] = {}
    if plugin_dirs:
        overrides["plugin_path"] = plugin_dirs
    if no_builtin:
        overrides["include_builtin_plugins"] = False
    if unsafe:
        overrides["safe_run"] = False
    if log_level:
        overrides["log_level"] = log_level
    if log_format:
        overrides["log_format"] = log_format

    try:
        return HostFactsSettings(**overrides)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}", cause=e) from e


# ── Output helpers ───────────────────────────────────────────────────────


def output_json(payload: Any) -> None:
    """Print ``payload`` as pretty JSON on stdout."""
    console.print_json(json.dumps(payload, default=str))


def output_table(title: str, columns: list[str], rows: list[list[str]]) -> None:
    table = Table(title=title)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*row)
    console.print(table)


def fail(error: FactsError) -> NoReturn:
    """Render a FactsError on stderr and exit with status 1."""
    err_console.print(
        f"[bold red]Error[/bold red] ({error.category.value}): {escape(error.message)}",
        soft_wrap=True,
    )
    raise typer.Exit(code=1)

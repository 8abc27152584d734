"""Rule listing command for the zemdomu CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from zemdomu.config import load_config
from zemdomu.exceptions import ConfigurationError
from zemdomu.rules import RULES

console = Console()


def rules(
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Config file used to show effective severities"),
    ] = None,
) -> None:
    """List the built-in rules with their effective severity."""
    try:
        options = load_config(config).linter
    except ConfigurationError as e:
        console.print(f"[red]Configuration Error:[/red] {e}")
        raise typer.Exit(2) from e

    table = Table(show_header=True, border_style="dim")
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Severity", no_wrap=True)
    table.add_column("Description")
    for rule_id, rule in RULES.items():
        table.add_row(rule_id, options.severity_for(rule_id), rule.description)
    console.print(table)

"""Quick-fix command for the zemdomu CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from zemdomu.config import load_config
from zemdomu.exceptions import ConfigurationError
from zemdomu.fixes import QuickFix, TextEdit, apply_edits, suggest_fixes
from zemdomu.linter import FileKind, lint

console = Console()


def fix(
    file: Annotated[
        Path,
        typer.Argument(
            help="File to fix", exists=True, file_okay=True, dir_okay=False, readable=True
        ),
    ],
    write: Annotated[
        bool,
        typer.Option("--write", "-w", help="Apply the first fix of each result in place"),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Config file (kind: Config YAML or TOML)"),
    ] = None,
) -> None:
    """Show (or apply) quick fixes for a single file.

    Examples
    --------
    zemdomu fix index.html
    zemdomu fix index.html --write
    """
    kind = FileKind.from_path(file)
    if kind is None:
        console.print(f"[red]Unsupported file type:[/red] {file}")
        raise typer.Exit(2)
    try:
        options = load_config(config).linter
    except ConfigurationError as e:
        console.print(f"[red]Configuration Error:[/red] {e}")
        raise typer.Exit(2) from e

    text = file.read_text(encoding="utf-8")
    fixes = [
        (result, found)
        for result in lint(text, kind, options)
        if (found := suggest_fixes(result, text))
    ]
    if not fixes:
        console.print(f"[green]No fixes available:[/green] {file}")
        return

    if write:
        chosen = _non_overlapping([found[0] for _, found in fixes])
        file.write_text(apply_edits(text, [e for f in chosen for e in f.edits]), encoding="utf-8")
        console.print(f"[green]Applied {len(chosen)} fix(es)[/green] to {file}")
        return

    table = Table(show_header=True, border_style="dim")
    table.add_column("Location", style="green", no_wrap=True)
    table.add_column("Rule", style="cyan")
    table.add_column("Fix")
    for result, found in fixes:
        for quick_fix in found:
            table.add_row(f"{result.line + 1}:{result.column + 1}", result.rule, quick_fix.title)
    console.print(table)


def _non_overlapping(fixes: list[QuickFix]) -> list[QuickFix]:
    """Keep fixes whose edits do not touch positions already edited."""
    taken: set[tuple[int, int]] = set()
    chosen: list[QuickFix] = []
    for quick_fix in fixes:
        starts = {_start(edit) for edit in quick_fix.edits}
        if starts & taken:
            continue
        taken |= starts
        chosen.append(quick_fix)
    return chosen


def _start(edit: TextEdit) -> tuple[int, int]:
    return (edit.line, edit.column)

"""Markup linting command for the zemdomu CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from zemdomu.config import LinterOptions, load_config
from zemdomu.exceptions import ConfigurationError
from zemdomu.linting.models import RULE_IDS, LintReport, LintResult
from zemdomu.logging import configure_logging
from zemdomu.project import ProjectLinter, discover_files

console = Console()

_SEVERITY_RANK = {"error": 0, "warning": 1}
_SEVERITY_STYLE = {"error": "red", "warning": "yellow"}


def lint(
    ctx: typer.Context,
    paths: Annotated[
        list[Path],
        typer.Argument(help="Files or directories to lint", exists=True, readable=True),
    ],
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (text, json)"),
    ] = "text",
    severity: Annotated[
        str,
        typer.Option("--severity", "-s", help="Minimum severity to report (error, warning)"),
    ] = "warning",
    disable: Annotated[
        str,
        typer.Option(
            "--disable",
            "-d",
            help="Comma-separated rule IDs to skip (e.g., singleH1,uniqueIds)",
        ),
    ] = "",
    no_cross_component: Annotated[
        bool,
        typer.Option("--no-cross-component", help="Skip cross-component analysis"),
    ] = False,
    depth: Annotated[
        int | None,
        typer.Option("--depth", min=1, help="Maximum component nesting to follow"),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Config file (kind: Config YAML or TOML)"),
    ] = None,
) -> None:
    """Lint HTML, JSX and TSX files for semantic and accessibility issues.

    Directories are searched for *.html, *.htm, *.jsx and *.tsx files.

    Examples
    --------
    zemdomu lint index.html
    zemdomu lint src/ --format json
    zemdomu lint src/ --disable singleH1,uniqueIds
    zemdomu lint src/ --no-cross-component
    """
    if severity not in _SEVERITY_RANK:
        console.print(f"[red]Invalid severity '{severity}'.[/red] Choose from: error, warning")
        raise typer.Exit(2)
    if output_format not in ("text", "json"):
        console.print(f"[red]Invalid format '{output_format}'.[/red] Choose from: text, json")
        raise typer.Exit(2)

    try:
        loaded = load_config(config)
    except ConfigurationError as e:
        console.print(f"[red]Configuration Error:[/red] {e}")
        raise typer.Exit(2) from e

    if not (ctx.obj or {}).get("log_override"):
        log_config = loaded.logging
        configure_logging(
            level=log_config.level,
            format=log_config.format,
            output_file=log_config.output_file,
            use_color=log_config.use_color,
        )

    options = _apply_flags(loaded.linter, disable, no_cross_component, depth)
    files = _collect_files(paths, options)
    if not files:
        console.print("[yellow]No lintable files found.[/yellow]")
        return

    report = LintReport()
    for path, results in ProjectLinter(options).lint_files(files).items():
        report.add(path, results)

    min_rank = _SEVERITY_RANK[severity]
    filtered = {
        path: [r for r in results if _SEVERITY_RANK.get(r.severity or "warning", 1) <= min_rank]
        for path, results in sorted(report.files.items())
    }

    if output_format == "json":
        _print_json(filtered)
    else:
        _print_text(filtered, report)

    if report.has_errors:
        raise typer.Exit(1)


def _apply_flags(
    options: LinterOptions, disable: str, no_cross_component: bool, depth: int | None
) -> LinterOptions:
    """Layer command-line flags over the loaded options."""
    changes: dict[str, object] = {}
    disabled_ids = {r.strip() for r in disable.split(",") if r.strip()} if disable else set()
    if disabled_ids:
        unknown = disabled_ids - set(RULE_IDS)
        if unknown:
            console.print(
                f"[yellow]Unknown rule ID(s): {', '.join(sorted(unknown))}[/yellow]  "
                f"Known: {', '.join(RULE_IDS)}"
            )
        rules = dict(options.rules)
        rules.update(dict.fromkeys(disabled_ids & set(RULE_IDS), "off"))
        changes["rules"] = rules
    if no_cross_component:
        changes["cross_component_analysis"] = False
    if depth is not None:
        changes["cross_component_depth"] = depth
    return options.with_overrides(**changes) if changes else options


def _collect_files(paths: list[Path], options: LinterOptions) -> list[Path]:
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(discover_files(path.resolve(), options.exclude))
        else:
            files.append(path.resolve())
    return list(dict.fromkeys(files))


def _display_path(path: str) -> str:
    try:
        return str(Path(path).relative_to(Path.cwd()))
    except ValueError:
        return path


def _print_text(filtered: dict[str, list[LintResult]], report: LintReport) -> None:
    """Print lint results as rich tables, one per file."""
    console.print()
    shown = {path: results for path, results in filtered.items() if results}
    if not shown:
        console.print(f"[green]No issues found[/green] in {len(filtered)} file(s)")
        console.print()
        return

    for path, results in shown.items():
        console.print(f"[bold]{_display_path(path)}[/bold]")
        table = Table(show_header=True, border_style="dim")
        table.add_column("Location", style="green", no_wrap=True)
        table.add_column("Severity", no_wrap=True)
        table.add_column("Rule", style="cyan")
        table.add_column("Message")
        for result in results:
            style = _SEVERITY_STYLE.get(result.severity or "warning", "white")
            table.add_row(
                f"{result.line + 1}:{result.column + 1}",
                f"[{style}]{result.severity}[/{style}]",
                result.rule,
                result.message,
            )
        console.print(table)
        console.print()

    console.print(
        f"[red]{len(report.errors)} error(s)[/red]  "
        f"[yellow]{len(report.warnings)} warning(s)[/yellow]"
    )


def _print_json(filtered: dict[str, list[LintResult]]) -> None:
    """Print lint results as JSON keyed by file path."""
    output = {path: [r.to_dict() for r in results] for path, results in filtered.items()}
    typer.echo(json.dumps(output, indent=2))

"""ZemDomu CLI - Main entrypoint."""

import typer
from rich.console import Console

from zemdomu import __version__
from zemdomu.cli.commands import fix_cmd, lint_cmd, rules_cmd
from zemdomu.logging import configure_logging

# Create the main Typer app
app = typer.Typer(
    name="zemdomu",
    help="ZemDomu - semantic and accessibility linter for HTML, JSX and TSX.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

console = Console()

app.command(name="lint", help="Lint files or directories")(lint_cmd.lint)
app.command(name="rules", help="List built-in rules")(rules_cmd.rules)
app.command(name="fix", help="Show or apply quick fixes for one file")(fix_cmd.fix)


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    *,
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only log errors"),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="Enable debug logging"),
    version: bool = typer.Option(False, "--version", "-v", help="Show version and exit"),
) -> None:
    """ZemDomu CLI.

    Global flags are parsed here and stored on `ctx.obj` for subcommands.
    """
    if ctx.obj is None:
        ctx.obj = {}

    if version:
        console.print(f"[bold blue]ZemDomu[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()

    if verbose:
        configure_logging(level="DEBUG", format="rich")
    elif quiet:
        configure_logging(level="ERROR", format="rich")
    ctx.obj["log_override"] = verbose or quiet


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()

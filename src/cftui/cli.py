"""CLI interface for cf-tui using Typer."""

import logging
import termios
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from cftui.display import format_verdict
from cftui.exceptions import CFError
from cftui.judge import DEFAULT_TIMEOUT, Accepted, Judge, Running
from cftui.log import setup_logger
from cftui.scraper import problem_url, scrape_test_cases
from cftui.storage import Storage, Workspace
from cftui.tui.app import DEFAULT_TICK_RATE, App
from cftui.tui.context import Context
from cftui.tui.terminal import Terminal

app = typer.Typer(help="Browse Codeforces and test your solutions from the terminal")
console = Console()
logger = logging.getLogger(__name__)


def _handle_error(e: Exception) -> None:
    """Print an error and exit with status 1."""
    if isinstance(e, CFError):
        console.print(f"[red]{e.message}[/red]")
    else:
        console.print(f"[red]Error: {e}[/red]")
    raise typer.Exit(1)


def _storage(ctx: typer.Context) -> Storage:
    return ctx.obj if isinstance(ctx.obj, Storage) else Storage()


def run_tui(storage: Storage, tick_rate: float, timeout: float) -> None:
    context = Context.load(storage, timeout=timeout)
    try:
        with Terminal() as terminal:
            App(terminal, context, tick_rate=tick_rate).run()
    finally:
        context.client.close()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    tick_rate: float = typer.Option(
        DEFAULT_TICK_RATE, "--tick-rate", help="Seconds between UI refreshes"
    ),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", help="Seconds allowed per test case"),
    config_dir: Optional[Path] = typer.Option(
        None, "--config-dir", help="Directory holding config.json (default: ~/.cf-tui)"
    ),
) -> None:
    """Start the TUI when no command is given."""
    storage = Storage(config_dir)
    ctx.obj = storage
    setup_logger(storage.log_path)
    if ctx.invoked_subcommand is not None:
        return

    logger.info("Starting TUI")
    try:
        run_tui(storage, tick_rate, timeout)
    except (CFError, termios.error) as e:
        _handle_error(e)


@app.command()
def parse(
    ctx: typer.Context,
    contest_id: int = typer.Argument(..., help="Contest id (e.g. 1850)"),
    problem_index: str = typer.Argument(..., help="Problem index (e.g. A)"),
) -> None:
    """Download the sample tests of a problem into the workspace."""
    storage = _storage(ctx)
    try:
        workspace = Workspace(storage.get_settings().home_dir)
        problem_dir = workspace.problem_dir(contest_id, problem_index)
        test_cases = scrape_test_cases(problem_url(contest_id, problem_index))
        workspace.save_test_cases(problem_dir, test_cases)
    except CFError as e:
        _handle_error(e)

    console.print(f"[green]Parsed {len(test_cases)} test cases for Problem {problem_index}[/green]")
    console.print(f"  {problem_dir}/")


@app.command()
def test(
    ctx: typer.Context,
    contest_id: int = typer.Argument(..., help="Contest id (e.g. 1850)"),
    problem_index: str = typer.Argument(..., help="Problem index (e.g. A)"),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", help="Seconds allowed per test case"),
) -> None:
    """Run your solution against the parsed sample tests."""
    storage = _storage(ctx)
    try:
        settings = storage.get_settings()
        workspace = Workspace(settings.home_dir)
        problem_dir = workspace.problem_dir(contest_id, problem_index, create=False)
        test_cases = workspace.require_test_cases(problem_dir)
        source, scripts = workspace.find_source(problem_dir, problem_index, settings.commands)

        console.print(f"Testing [bold]{source.name}[/bold] on {len(test_cases)} test cases...")

        def report(id: int, verdict: object) -> None:
            if isinstance(verdict, Running):
                return
            for line in format_verdict(id, verdict):
                console.print(line)

        verdicts = Judge(scripts, source, timeout).run(test_cases, report)
    except CFError as e:
        _handle_error(e)

    passed = sum(isinstance(verdict, Accepted) for verdict in verdicts)
    color = "green" if passed == len(test_cases) else "red"
    console.print(f"\n[{color}]{passed}/{len(test_cases)} tests passed.[/{color}]")
    if passed != len(test_cases):
        raise typer.Exit(1)


@app.command()
def config(ctx: typer.Context) -> None:
    """Show where settings live and what is configured."""
    storage = _storage(ctx)
    try:
        settings = storage.get_settings()
    except CFError as e:
        _handle_error(e)

    console.print(f"Config file: [cyan]{storage.config_path}[/cyan]")
    console.print(f"Templates:   [cyan]{storage.templates_dir}[/cyan]")
    console.print(f"Log file:    [cyan]{storage.log_path}[/cyan]")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("username", settings.username or "[yellow]not configured[/yellow]")
    table.add_row("key", "configured" if settings.key else "[yellow]not configured[/yellow]")
    table.add_row("secret", "configured" if settings.secret else "[yellow]not configured[/yellow]")
    table.add_row("home_dir", str(settings.home_dir) if settings.home_dir else "[yellow]not configured[/yellow]")
    table.add_row("templates", ", ".join(t.alias for t in settings.templates) or "-")
    table.add_row("commands", ", ".join(f".{ext}" for ext in settings.commands) or "-")
    console.print(table)


if __name__ == "__main__":
    app()

"""
Typer Application Entry Points

Command line front end exposing every prompt, the rendering primitives and
the task runner. Prompt UI is drawn on stderr; answers go to stdout.
"""

import asyncio
import csv
import logging
from pathlib import Path
from typing import Any, List, Optional

import click
import typer
from rich.console import Console
from rich.live import Live

from .. import __version__
from ..components import ProgressBar, Spinner, Table
from ..config import ConfigError, Settings, load_settings
from ..prompts import (
    AutocompletePrompt,
    BasePrompt,
    ConfirmPrompt,
    MultiSelectPrompt,
    PasswordPrompt,
    SelectOption,
    SelectPrompt,
    TextPrompt,
    TogglePrompt,
)
from ..tasks import load_task_file, run_tasks
from ..terminal import TerminalSession

logger = logging.getLogger(__name__)

CANCELLED_EXIT_CODE = 130

app = typer.Typer(
    help="termprompt - interactive prompts, progress and task lists for the terminal",
    rich_markup_mode="rich"
)
console = Console(stderr=True)


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else Settings()


def _ask(prompt: BasePrompt) -> Any:
    """Run ``prompt`` and return its value; exit with 130 if it was cancelled."""
    result = asyncio.run(prompt.ask(TerminalSession(console=console)))
    if result.cancelled:
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(CANCELLED_EXIT_CODE)
    return result


def _min_length(length: int):
    def validate(value: str) -> Optional[str]:
        if len(value) < length:
            return f"Enter at least {length} characters"
        return None

    return validate


@app.command()
def text(
    ctx: typer.Context,
    message: str = typer.Argument(..., help="Question to ask"),
    default: str = typer.Option("", "--default", "-d", help="Initial value"),
    placeholder: str = typer.Option("", "--placeholder", "-p", help="Hint shown while empty"),
    required: bool = typer.Option(False, "--required", "-r", help="Refuse an empty answer"),
    min_length: int = typer.Option(0, "--min-length", help="Minimum answer length"),
):
    """
    Ask for a line of text.

    Example:
        termprompt text "Project name" --required --min-length 3
    """
    prompt = TextPrompt(
        message,
        default_value=default,
        placeholder=placeholder,
        required=required,
        validate=_min_length(min_length) if min_length else None,
        theme=_settings(ctx).theme or None,
    )
    click.echo(_ask(prompt).value)


@app.command()
def password(
    ctx: typer.Context,
    message: str = typer.Argument("Password", help="Question to ask"),
    confirm: bool = typer.Option(False, "--confirm", "-c", help="Ask twice and compare"),
    mask: str = typer.Option("•", "--mask", help="Glyph shown per character"),
):
    """Ask for a password without echoing it."""
    prompt = PasswordPrompt(message, mask=mask, confirm=confirm, theme=_settings(ctx).theme or None)
    click.echo(_ask(prompt).value)


@app.command()
def confirm(
    ctx: typer.Context,
    message: str = typer.Argument(..., help="Question to ask"),
    default: bool = typer.Option(False, "--default/--no-default", help="Preselected answer"),
):
    """Ask a yes/no question. Exits with 0 for yes and 1 for no."""
    prompt = ConfirmPrompt(message, initial_value=default, theme=_settings(ctx).theme or None)
    answer = _ask(prompt).value
    click.echo("yes" if answer else "no")
    if not answer:
        raise typer.Exit(1)


@app.command()
def toggle(
    ctx: typer.Context,
    message: str = typer.Argument(..., help="Question to ask"),
    active: str = typer.Option("Yes", "--active", help="Label for on"),
    inactive: str = typer.Option("No", "--inactive", help="Label for off"),
    default: bool = typer.Option(False, "--default/--no-default", help="Initial state"),
):
    """Flip a switch between two labels."""
    prompt = TogglePrompt(message, initial_value=default, active=active, inactive=inactive,
                          theme=_settings(ctx).theme or None)
    click.echo(active if _ask(prompt).value else inactive)


def _parse_options(choices: List[str]) -> list[SelectOption]:
    """``value`` or ``value=label`` per choice."""
    options = []
    for choice in choices:
        value, sep, label = choice.partition("=")
        options.append(SelectOption(value=value, label=label if sep else value))
    return options


@app.command()
def select(
    ctx: typer.Context,
    message: str = typer.Argument(..., help="Question to ask"),
    choices: List[str] = typer.Argument(..., help="Choices as value or value=label"),
    default: Optional[str] = typer.Option(None, "--default", "-d", help="Value highlighted first"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1, help="Visible rows"),
):
    """Pick one of several choices."""
    settings = _settings(ctx)
    prompt = SelectPrompt(message, _parse_options(choices), initial_value=default,
                          limit=limit or settings.select_limit, theme=settings.theme or None)
    click.echo(_ask(prompt).value)


@app.command()
def multiselect(
    ctx: typer.Context,
    message: str = typer.Argument(..., help="Question to ask"),
    choices: List[str] = typer.Argument(..., help="Choices as value or value=label"),
    required: bool = typer.Option(False, "--required", "-r", help="Require at least one choice"),
    min_selected: Optional[int] = typer.Option(None, "--min", min=0, help="Fewest choices allowed"),
    max_selected: Optional[int] = typer.Option(None, "--max", min=1, help="Most choices allowed"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1, help="Visible rows"),
):
    """Pick several choices. Prints one value per line."""
    settings = _settings(ctx)
    try:
        prompt = MultiSelectPrompt(message, _parse_options(choices), required=required,
                                   min_selected=min_selected, max_selected=max_selected,
                                   limit=limit or settings.select_limit, theme=settings.theme or None)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    for value in _ask(prompt).value:
        click.echo(value)


@app.command()
def autocomplete(
    ctx: typer.Context,
    message: str = typer.Argument(..., help="Question to ask"),
    choices: Optional[List[str]] = typer.Argument(None, help="Choices as value or value=label"),
    from_file: Optional[Path] = typer.Option(None, "--from-file", "-f", exists=True, dir_okay=False,
                                             help="Read choices from a file, one per line"),
    min_query_length: int = typer.Option(0, "--min-length", min=0, help="Characters typed before searching"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1, help="Most matches shown"),
):
    """Search choices as you type; free text is accepted when nothing matches."""
    settings = _settings(ctx)
    entries = list(choices or [])
    if from_file is not None:
        entries.extend(line.strip() for line in from_file.read_text(encoding="utf-8").splitlines() if line.strip())
    options = _parse_options(entries)

    def source(query: str) -> list[SelectOption]:
        needle = query.lower()
        return [option for option in options if needle in option.label.lower()]

    prompt = AutocompletePrompt(message, source, limit=limit or settings.autocomplete_limit,
                                min_query_length=min_query_length,
                                debounce=settings.autocomplete_debounce, theme=settings.theme or None)
    click.echo(_ask(prompt).value)


@app.command()
def progress(
    ctx: typer.Context,
    percent: float = typer.Argument(..., help="Completion from 0 to 100"),
    width: int = typer.Option(50, "--width", "-w", min=1, help="Bar width in characters"),
    total: Optional[float] = typer.Option(None, "--total", help="Also show value/total"),
    label: str = typer.Option("", "--label", help="Text before the bar"),
    percentage: bool = typer.Option(True, "--percentage/--no-percentage", help="Show the percentage"),
):
    """Draw a progress bar."""
    bar = ProgressBar(percent, width=width, show_percentage=percentage, show_value=total is not None,
                      total=total or 100, prefix=label, theme=_settings(ctx).theme or None)
    Console().print(bar)


@app.command()
def spinner(
    ctx: typer.Context,
    label: str = typer.Argument("Working...", help="Text after the spinner"),
    seconds: float = typer.Option(3.0, "--seconds", "-s", min=0, help="How long to spin"),
    kind: Optional[str] = typer.Option(None, "--type", "-t", help="Frame set name, e.g. dots, line, arc"),
):
    """Show a spinner for a while."""
    settings = _settings(ctx)

    async def spin() -> None:
        indicator = Spinner(type=kind or settings.spinner, label=label, speed=settings.spinner_speed,
                            theme=settings.theme or None)
        with Live(indicator, console=console, auto_refresh=False, transient=True) as live:
            unsubscribe = indicator.subscribe(lambda _: live.refresh())
            async with indicator:
                await asyncio.sleep(seconds)
            unsubscribe()

    asyncio.run(spin())
    console.print(f"[green]✓[/green] {label}")


@app.command()
def table(
    ctx: typer.Context,
    csv_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV file to show"),
    header: bool = typer.Option(True, "--header/--no-header", help="Treat the first row as a header"),
    border: bool = typer.Option(True, "--border/--no-border", help="Draw box borders"),
    max_width: Optional[int] = typer.Option(None, "--max-width", min=10, help="Table width"),
    widths: Optional[str] = typer.Option(None, "--widths", help="Column fractions, e.g. 0.3,0.7"),
):
    """Render a CSV file as a table."""
    with open(csv_file, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    column_widths = None
    if widths:
        try:
            column_widths = [float(part) for part in widths.split(",")]
        except ValueError as e:
            raise typer.BadParameter(f"Invalid column widths: {widths}") from e
    grid = Table(rows, header=header, border=border, max_width=max_width,
                 column_widths=column_widths, theme=_settings(ctx).theme or None)
    Console().print(grid)


@app.command()
def run(
    ctx: typer.Context,
    task_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML task file"),
    concurrent: bool = typer.Option(False, "--concurrent", "-c", help="Start all tasks at once"),
    keep_going: bool = typer.Option(False, "--keep-going", "-k", help="Continue after a failure"),
    timer: bool = typer.Option(True, "--timer/--no-timer", help="Show task durations"),
    summary: bool = typer.Option(True, "--summary/--no-summary", help="Show the summary"),
):
    """
    Run the shell commands of a task file with a live task list.

    Example task file:

        tasks:
          - title: Install
            command: pip install -e .
            retry: 2
          - title: Test
            command: pytest
    """
    settings = _settings(ctx)
    try:
        tasks = load_task_file(task_file)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    result = asyncio.run(run_tasks(
        tasks,
        console=console,
        show_timer=timer,
        show_summary=summary,
        spinner=settings.spinner,
        spinner_speed=settings.spinner_speed,
        theme=settings.theme or None,
        concurrent=concurrent,
        exit_on_error=not keep_going,
        retry_delay=settings.retry_delay,
    ))
    if not result.success:
        raise typer.Exit(1)


def _version(value: bool) -> None:
    if value:
        console.print(f"termprompt v{__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version, is_eager=True, help="Show version"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging"),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Settings file (default: $TERMPROMPT_CONFIG or ~/.config/termprompt/config.yaml)"),
):
    """termprompt - interactive prompts, progress and task lists for the terminal"""
    try:
        settings = load_settings(config)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    ctx.obj = settings


if __name__ == "__main__":
    app()

"""
CLI view formatters using Rich for pretty console output.

Handles the session document, history table and console prompts.
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..core.config import STYLE_HEADER
from ..core.document import render_rows
from ..core.models import HistoryRecord, SessionDocument, TrainingContext
from ..io.serializers import cell_to_text

console = Console()


class ConsolePrompt:
    """ChoicePrompt reading from the console."""

    def request_choice(self, title: str, options: list[str]) -> str | None:
        console.print()
        console.print(f"[bold]{title}[/bold]")
        for i, option in enumerate(options, 1):
            console.print(f"  {i}) {option}")
        raw = console.input("Choice (Enter to cancel): ").strip()
        return raw or None

    def notify(self, message: str) -> None:
        print_warning(message)


def print_document(document: SessionDocument) -> None:
    """
    Print a session document the way it is laid out in the workbook.

    Input cells of exercises with repeated parameters are highlighted.
    """
    table = Table(show_header=False, show_lines=False, box=None, pad_edge=False)
    table.add_column(min_width=24)
    table.add_column(min_width=16)

    for row in render_rows(document):
        cells = []
        for value, background in zip(row.cells, row.styles):
            foreground = "white" if background == STYLE_HEADER else "black"
            style = f"{foreground} on {background}" if background else ""
            if row.bold:
                style += " bold"
            cells.append(Text(cell_to_text(value), style=style.strip()))
        table.add_row(*cells)

    console.print()
    console.print(
        f"[dim]Block[/dim] [cyan]{document.context.block}[/cyan]  "
        f"[dim]Goal[/dim] [cyan]{document.context.goal}[/cyan]"
    )
    console.print(table)

    repeated = document.repeated_exercises
    if repeated:
        console.print()
        print_warning("Same series, reps and load in the last two sessions: " + ", ".join(repeated))


def print_rotation(context: TrainingContext, rotation: list[str], pointer: str | None) -> None:
    """Print the active context and its session rotation, marking the pointer."""
    console.print(
        f"[dim]Block[/dim] [cyan]{context.block}[/cyan]  "
        f"[dim]Goal[/dim] [cyan]{context.goal}[/cyan]"
    )
    for i, session in enumerate(rotation, 1):
        marker = " [green]← last chosen[/green]" if session == pointer else ""
        console.print(f"  {i}) Session {session}{marker}")


def format_history_table(records: list[HistoryRecord], start: int = 1) -> Table:
    """
    Format history records as a Rich table.

    Args:
        records: Records to display, in insertion order
        start: Number shown for the first record
    """
    table = Table(title="Training History", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Block")
    table.add_column("Goal")
    table.add_column("Session", style="magenta")
    table.add_column("Exercise", style="bold")
    table.add_column("Planned", justify="right")
    table.add_column("Done", justify="right")
    table.add_column("Load", justify="right")
    table.add_column("Volume", justify="right")
    table.add_column("Notes", style="dim")

    for i, r in enumerate(records, start):
        planned = (
            f"{cell_to_text(r.planned_series)}x{cell_to_text(r.planned_reps)}"
            if r.planned_series is not None or r.planned_reps is not None
            else "-"
        )
        volume = r.volume
        table.add_row(
            str(i),
            r.date,
            r.block,
            r.goal,
            r.session,
            r.exercise_name,
            planned,
            f"{cell_to_text(r.actual_series)}x{cell_to_text(r.actual_reps)}",
            cell_to_text(r.actual_load),
            f"{volume:.0f}" if volume is not None else "-",
            r.notes,
        )
    return table


def print_history(records: list[HistoryRecord], start: int = 1) -> None:
    """Print history records to console."""
    if not records:
        console.print("[yellow]No sessions recorded yet.[/yellow]")
        return
    console.print(format_history_table(records, start=start))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")

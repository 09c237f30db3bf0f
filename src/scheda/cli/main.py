"""
CLI entry point using Typer.

Provides commands for the training program:
- init: Create the workbook tables
- rotation: Show the active block/goal and its sessions
- refresh: Generate the next session document
- generate: Generate a specific session document
- commit: Save the performed session to the history
- show-history: Display the history log
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from . import views
from .app import app
from .commands.program import init, rotation
from .commands.sessions import commit, generate, refresh, show_history


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through Rich on the shared console."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=views.console, show_path=False, show_time=False)],
        force=True,
    )


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Periodized training tracker. Run without a command for interactive mode.
    """
    configure_logging(verbose)

    if ctx.invoked_subcommand is not None:
        return  # A sub-command was given; let it handle things

    # ── Interactive main menu ───────────────────────────────────────────────
    views.console.print()
    views.console.print("[bold cyan]scheda[/bold cyan]: training session tracker")
    views.console.print()

    menu = {
        "1": ("refresh", "Update today's session"),
        "2": ("commit", "Save training"),
        "3": ("generate", "Generate a specific session"),
        "4": ("rotation", "Show session rotation"),
        "5": ("show-history", "Show full history"),
        "i": ("init", "Create workbook"),
        "0": ("quit", "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose [1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    cmd_map = {k: v[0] for k, v in menu.items()}
    chosen = cmd_map.get(choice)

    if chosen is None:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    if chosen == "refresh":
        ctx.invoke(refresh)
    elif chosen == "commit":
        ctx.invoke(commit, interactive=True)
    elif chosen == "generate":
        ctx.invoke(generate)
    elif chosen == "rotation":
        ctx.invoke(rotation)
    elif chosen == "show-history":
        ctx.invoke(show_history)
    elif chosen == "init":
        ctx.invoke(init)


if __name__ == "__main__":
    app()

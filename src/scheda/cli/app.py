"""Shared Typer app object, shared option types, and workflow factory."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.workflow import TrainingWorkflow
from ..io.config_loader import load_settings
from ..io.kv_cache import JsonFileCache
from ..io.workbook import CsvWorkbook
from . import views

# Shared --workbook-dir option type used across all commands
WorkbookOption = Annotated[
    Optional[Path],
    typer.Option("--workbook-dir", "-p", help="Workbook directory (default: ~/.scheda/workbook)"),
]

StrictOption = Annotated[
    Optional[bool],
    typer.Option(
        "--strict/--no-strict",
        help="Fail when more than one block/goal is marked active",
    ),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="scheda",
    help="Periodized training tracker: session rotation, session documents and history log.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_store(workbook_dir: Path | None) -> CsvWorkbook:
    """Get the workbook from path or the configured location."""
    if workbook_dir is None:
        workbook_dir = load_settings().workbook_dir
    return CsvWorkbook(workbook_dir)


def get_workflow(workbook_dir: Path | None, strict: bool | None = None) -> TrainingWorkflow:
    """
    Wire a TrainingWorkflow for the CLI.

    With an explicit workbook directory the pointer cache lives next to
    the tables; otherwise the configured cache file is used.
    """
    settings = load_settings()
    if workbook_dir is None:
        store = CsvWorkbook(settings.workbook_dir)
        cache = JsonFileCache(settings.cache_path)
    else:
        store = CsvWorkbook(workbook_dir)
        cache = JsonFileCache(Path(workbook_dir) / "cache.json")

    if not store.exists():
        views.print_error(f"Workbook not found: {store.directory}")
        views.print_info("Run 'init' first to create the tables.")
        raise typer.Exit(1)

    return TrainingWorkflow(
        store,
        cache,
        views.ConsolePrompt(),
        strict=settings.strict_context if strict is None else strict,
        ttl_seconds=settings.cache_ttl_seconds,
    )

"""Session commands: refresh, generate, commit, show-history, and helpers."""

import json
from typing import Annotated, Any, Optional

import typer

from ...core.config import CURRENT_SESSION_TABLE, INPUT_FIELDS, PLANNED_PREFIX
from ...core.errors import SchedaError
from ...core.pointer import parse_choice
from ...io.serializers import (
    cell_to_text,
    coerce_cell,
    history_record_to_dict,
    session_document_to_dict,
)
from .. import views
from ..app import JsonOption, StrictOption, WorkbookOption, app, get_workflow


def _interactive_fill(rows: list[list[Any]]) -> list[list[Any]]:
    """
    Prompt for every input cell of the current-session document.

    The value already in the cell (last session's, or one typed earlier)
    is the default; Enter keeps it, "-" clears it.
    """
    labels = {label for _, label in INPUT_FIELDS}
    filled = [list(row) + [""] * (2 - len(row)) for row in rows]

    views.console.print()
    views.console.print("[bold]Enter what you performed.[/bold]")
    views.console.print("  Enter keeps the value in brackets, [cyan]-[/cyan] clears it.\n")

    for i, row in enumerate(filled):
        label = cell_to_text(coerce_cell(row[0]))
        if not label:
            continue
        next_label = cell_to_text(coerce_cell(filled[i + 1][0])) if i + 1 < len(filled) else ""
        if next_label.startswith(PLANNED_PREFIX):
            views.console.print(f"[bold]{label}[/bold]  [dim]{next_label}[/dim]")
            continue
        if label not in labels:
            continue

        current = cell_to_text(coerce_cell(row[1]))
        hint = f" [{current}]" if current else ""
        raw = views.console.input(f"  {label}{hint} ", markup=False).strip()
        if raw == "-":
            row[1] = ""
        elif raw:
            row[1] = raw
    return filled


@app.command("refresh")
def refresh(
    workbook_dir: WorkbookOption = None,
    strict: StrictOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Generate the document of the next session in the rotation.

    With no remembered session you are asked which one to generate.
    """
    workflow = get_workflow(workbook_dir, strict)
    try:
        document = workflow.refresh_current_session()
    except SchedaError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(session_document_to_dict(document), indent=2))
        return

    views.print_document(document)
    views.console.print()
    views.print_success(f"Session {document.session} is ready.")


@app.command("generate")
def generate(
    session: Annotated[
        Optional[str],
        typer.Argument(help="Session to generate (default: choose from the rotation)"),
    ] = None,
    workbook_dir: WorkbookOption = None,
    strict: StrictOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Generate the document of a specific session.

    The session becomes the current one, so 'commit' logs it.
    """
    workflow = get_workflow(workbook_dir, strict)
    try:
        if session is None:
            rotation = workflow.list_rotation()
            response = views.ConsolePrompt().request_choice(
                "Select the session to generate",
                [f"Session {s}" for s in rotation],
            )
            index = parse_choice(response, len(rotation))
            if index is None:
                views.print_error("Invalid index. No document generated.")
                raise typer.Exit(1)
            session = rotation[index]
        document = workflow.generate_session_for(session)
    except SchedaError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(session_document_to_dict(document), indent=2))
        return

    views.print_document(document)
    views.console.print()
    views.print_success(f'The document for session "{document.session}" was generated.')


@app.command("commit")
def commit(
    interactive: Annotated[
        bool,
        typer.Option("--interactive", "-i", help="Enter the performed values at the console"),
    ] = False,
    refresh_next: Annotated[
        bool,
        typer.Option("--refresh/--no-refresh", help="Generate the next session after saving"),
    ] = True,
    workbook_dir: WorkbookOption = None,
    strict: StrictOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Save the current session document to the history.

    Exercises left without series, reps and load are skipped.
    """
    workflow = get_workflow(workbook_dir, strict)
    try:
        rows = workflow.store.read_all(CURRENT_SESSION_TABLE)
        if interactive:
            rows = _interactive_fill(rows)
            workflow.store.replace_rows(CURRENT_SESSION_TABLE, rows)
        records = workflow.commit_session_results(rows)
    except SchedaError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not json_out:
        views.print_success(
            f"Training saved: {len(records)} exercise(s), session {records[0].session}."
        )

    # History is already written; refresh errors are reported after it
    document = None
    refresh_error = None
    if refresh_next:
        try:
            document = workflow.refresh_current_session()
        except SchedaError as e:
            refresh_error = str(e)

    if json_out:
        print(json.dumps({
            "logged": [history_record_to_dict(r) for r in records],
            "next_session": document.session if document else None,
            "error": refresh_error,
        }, indent=2))
    elif document is not None:
        views.print_document(document)
        views.console.print()
        views.print_info(f"Next session: {document.session}")

    if refresh_error is not None:
        if not json_out:
            views.print_error(f"Next session not generated: {refresh_error}")
        raise typer.Exit(1)


@app.command("show-history")
def show_history(
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Limit number of records to show"),
    ] = None,
    workbook_dir: WorkbookOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Display the training history as a table.
    """
    workflow = get_workflow(workbook_dir)
    try:
        records = workflow.history()
    except SchedaError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    start = 1
    if limit is not None and limit < len(records):
        start = len(records) - limit + 1
        records = records[-limit:] if limit > 0 else []

    if json_out:
        print(json.dumps([history_record_to_dict(r) for r in records], indent=2))
        return

    views.print_history(records, start=start)

"""Program commands: init and rotation."""

import json

import typer

from ...core.errors import SchedaError
from ..app import JsonOption, StrictOption, WorkbookOption, app, get_store, get_workflow
from .. import views


@app.command("init")
def init(workbook_dir: WorkbookOption = None) -> None:
    """
    Create the workbook tables (existing tables are left untouched).
    """
    store = get_store(workbook_dir)
    created = store.init()

    if created:
        views.print_success(f"Created {', '.join(created)} in {store.directory}")
    else:
        views.print_info(f"Workbook already initialized: {store.directory}")
    views.print_info(
        "Fill in SCHEDA.csv with your program and mark the current block with ATTIVA = TRUE."
    )


@app.command("rotation")
def rotation(
    workbook_dir: WorkbookOption = None,
    strict: StrictOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the active block/goal and its session rotation.
    """
    workflow = get_workflow(workbook_dir, strict)
    try:
        entries = workflow.cycle.schedule()
        context = workflow.cycle.active_context(entries)
        sessions = workflow.cycle.rotation(entries)
    except SchedaError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    pointer = workflow.pointer.cached()

    if json_out:
        print(json.dumps({
            "block": context.block,
            "goal": context.goal,
            "rotation": sessions,
            "current": pointer,
        }, indent=2))
        return

    views.print_rotation(context, sessions, pointer)

"""
Session document generation.

Joins the active schedule rows of a session with the latest history rows
for the same exercise/session, flags stagnant progressions, and renders
the result as two-column rows for the current-session table.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..io.serializers import cell_to_text
from .columns import ColumnResolver
from .config import (
    INPUT_FIELDS,
    SESSION_HEADER_PREFIX,
    STYLE_HEADER,
    STYLE_INPUT,
    STYLE_INPUT_REPEATED,
    STYLE_LABEL,
    STYLE_PLANNED,
    STYLE_SEPARATOR,
    STYLE_TITLE,
)
from .cycle import CycleResolver, find_active_context
from .errors import NoExercisesForSession
from .history import HistoryLog
from .models import (
    CellValue,
    DocumentField,
    DocumentRow,
    ExerciseBlock,
    HistoryRecord,
    ScheduleEntry,
    SessionDocument,
)

if TYPE_CHECKING:
    from ..io.workbook import TabularStore


def planned_text(entry: ScheduleEntry) -> str:
    """Planned parameters line, e.g. 'Series: 4 | Reps: 8 | Rest: 90'."""
    return (
        f"Series: {cell_to_text(entry.planned_series)}"
        f" | Reps: {cell_to_text(entry.planned_reps)}"
        f" | Rest: {cell_to_text(entry.rest_seconds)}"
    )


def _prefill(record: HistoryRecord | None, key: str) -> CellValue:
    # Blank values are not carried over; zero is
    if record is None:
        return None
    value = getattr(record, key)
    if value is None or value == "":
        return None
    return value


class SessionDocumentBuilder:
    """Builds SessionDocuments; performs no writes."""

    def __init__(self, store: TabularStore, columns: ColumnResolver, cycle: CycleResolver):
        self.store = store
        self.columns = columns
        self.cycle = cycle

    def build(self, session_name: str) -> SessionDocument:
        """
        Build the document for *session_name*.

        Exercises are the active schedule rows of the session in the active
        block (the goal is not filtered), in schedule order.

        Raises:
            NoExercisesForSession: If no such row exists
        """
        entries = self.cycle.schedule()
        context = find_active_context(entries, strict=self.cycle.strict)
        selected = [
            e
            for e in entries
            if e.active and e.session == session_name and e.block == context.block
        ]
        if not selected:
            raise NoExercisesForSession(session_name)

        history = HistoryLog.load(self.store, self.columns)
        blocks = []
        for entry in selected:
            last = history.latest(entry.exercise_name, session_name)
            repeated = entry.progression_enabled and history.is_repeated(
                entry.exercise_name, session_name
            )
            fields = tuple(
                DocumentField(key=key, label=label, value=_prefill(last, key))
                for key, label in INPUT_FIELDS
            )
            blocks.append(
                ExerciseBlock(
                    entry=entry,
                    last_record=last,
                    repeated=repeated,
                    planned_text=planned_text(entry),
                    fields=fields,
                )
            )

        return SessionDocument(session=session_name, context=context, blocks=tuple(blocks))


def render_rows(document: SessionDocument) -> list[DocumentRow]:
    """
    Lay the document out as two-column rows.

    Layout: session header, then per exercise a title row, the planned
    row and one row per input field, with a separator between exercises.
    Input cells of a repeated exercise get the highlight style.
    """
    rows = [
        DocumentRow(
            cells=[f"{SESSION_HEADER_PREFIX} {document.session}", ""],
            styles=[STYLE_HEADER, STYLE_HEADER],
            bold=True,
        )
    ]
    for i, block in enumerate(document.blocks):
        rows.append(
            DocumentRow(cells=[block.exercise_name, ""], styles=[STYLE_TITLE, STYLE_TITLE], bold=True)
        )
        rows.append(
            DocumentRow(cells=[block.planned_text, ""], styles=[STYLE_PLANNED, STYLE_PLANNED])
        )
        input_style = STYLE_INPUT_REPEATED if block.repeated else STYLE_INPUT
        for f in block.fields:
            rows.append(
                DocumentRow(
                    cells=[f.label, "" if f.value is None else f.value],
                    styles=[STYLE_LABEL, input_style],
                )
            )
        if i < len(document.blocks) - 1:
            rows.append(DocumentRow(styles=[STYLE_SEPARATOR, STYLE_SEPARATOR]))
    return rows

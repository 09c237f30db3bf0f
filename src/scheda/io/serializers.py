"""
Cell coercion and row serialization for workbook tables.

Handles conversion between raw table rows and the dataclasses, plus
reading results back out of a rendered session document.
"""

import re
from typing import Any, Mapping, Sequence

from ..core.columns import ColumnInfo
from ..core.config import (
    COL_ACTIVE,
    COL_ACTUAL_REPS,
    COL_ACTUAL_SERIES,
    COL_BLOCK,
    COL_DATE,
    COL_EXERCISE,
    COL_GOAL,
    COL_LOAD,
    COL_NOTES,
    COL_PERCENT_1RM,
    COL_PROGRESSION,
    COL_REPS,
    COL_REST,
    COL_SERIES,
    COL_SESSION,
    COL_TYPE,
    INPUT_FIELDS,
    PLANNED_PREFIX,
)
from ..core.models import (
    CellValue,
    ExerciseResult,
    HistoryRecord,
    ScheduleEntry,
    SessionDocument,
)

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+[.,]\d*|[.,]\d+)$")

Columns = Mapping[str, ColumnInfo]


def coerce_cell(value: Any) -> CellValue:
    """
    Normalize a raw cell to a typed value.

    Strings coming from CSV are converted:
      - blank            → None
      - TRUE / FALSE     → bool (case-insensitive)
      - "12", "-3"       → int
      - "52.5", "52,5"   → float
    Anything else stays a stripped string.

    Args:
        value: Raw cell value

    Returns:
        Coerced cell value
    """
    if value is None or isinstance(value, (bool, int, float)):
        return value
    text = str(value).strip()
    if not text:
        return None
    upper = text.upper()
    if upper == "TRUE":
        return True
    if upper == "FALSE":
        return False
    if _INT_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        return float(text.replace(",", "."))
    return text


def cell_to_text(value: CellValue) -> str:
    """
    Render a cell as text, the inverse of coerce_cell.

    Integral floats drop their decimal part so that a session stored as
    1.0 reads back as "1".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_true(value: CellValue) -> bool:
    """Strict truthiness of a checkbox cell: only True (or text TRUE) counts."""
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().upper() == "TRUE"


def get_cell(row: Sequence[Any], columns: Columns, label: str) -> CellValue:
    """
    Read the cell under *label*, or None when the column or cell is absent.
    """
    info = columns.get(label)
    if info is None or info.index > len(row):
        return None
    return coerce_cell(row[info.index - 1])


def row_to_schedule_entry(row: Sequence[Any], columns: Columns) -> ScheduleEntry:
    """
    Convert a schedule row to a ScheduleEntry.

    Optional columns that are absent from the header read as blank/False.
    """
    return ScheduleEntry(
        block=cell_to_text(get_cell(row, columns, COL_BLOCK)),
        goal=cell_to_text(get_cell(row, columns, COL_GOAL)),
        session=cell_to_text(get_cell(row, columns, COL_SESSION)),
        exercise_name=cell_to_text(get_cell(row, columns, COL_EXERCISE)),
        planned_series=get_cell(row, columns, COL_SERIES),
        planned_reps=get_cell(row, columns, COL_REPS),
        rest_seconds=get_cell(row, columns, COL_REST),
        exercise_type=get_cell(row, columns, COL_TYPE),
        percent_of_one_rep_max=get_cell(row, columns, COL_PERCENT_1RM),
        progression_enabled=is_true(get_cell(row, columns, COL_PROGRESSION)),
        active=is_true(get_cell(row, columns, COL_ACTIVE)),
    )


def row_to_history_record(row: Sequence[Any], columns: Columns) -> HistoryRecord:
    """Convert a history row to a HistoryRecord; absent columns read as blank."""
    return HistoryRecord(
        date=cell_to_text(get_cell(row, columns, COL_DATE)),
        block=cell_to_text(get_cell(row, columns, COL_BLOCK)),
        goal=cell_to_text(get_cell(row, columns, COL_GOAL)),
        session=cell_to_text(get_cell(row, columns, COL_SESSION)),
        exercise_name=cell_to_text(get_cell(row, columns, COL_EXERCISE)),
        planned_series=get_cell(row, columns, COL_SERIES),
        planned_reps=get_cell(row, columns, COL_REPS),
        actual_series=get_cell(row, columns, COL_ACTUAL_SERIES),
        actual_reps=get_cell(row, columns, COL_ACTUAL_REPS),
        actual_load=get_cell(row, columns, COL_LOAD),
        notes=cell_to_text(get_cell(row, columns, COL_NOTES)),
    )


def history_record_to_row(record: HistoryRecord) -> list[CellValue]:
    """
    Convert a HistoryRecord to a row in history append order.

    Blank planned values are written as empty strings.
    """
    return [
        record.date,
        record.block,
        record.goal,
        record.session,
        record.exercise_name,
        "" if record.planned_series is None else record.planned_series,
        "" if record.planned_reps is None else record.planned_reps,
        record.actual_series,
        record.actual_reps,
        record.actual_load,
        record.notes or "",
    ]


def history_record_to_dict(record: HistoryRecord) -> dict[str, Any]:
    """Convert HistoryRecord to a JSON-compatible dict."""
    return {
        "date": record.date,
        "block": record.block,
        "goal": record.goal,
        "session": record.session,
        "exercise": record.exercise_name,
        "planned_series": record.planned_series,
        "planned_reps": record.planned_reps,
        "actual_series": record.actual_series,
        "actual_reps": record.actual_reps,
        "actual_load": record.actual_load,
        "notes": record.notes,
        "volume": record.volume,
    }


def session_document_to_dict(document: SessionDocument) -> dict[str, Any]:
    """Convert SessionDocument to a JSON-compatible dict."""
    return {
        "session": document.session,
        "block": document.context.block,
        "goal": document.context.goal,
        "exercises": [
            {
                "exercise": block.exercise_name,
                "planned": block.planned_text,
                "repeated": block.repeated,
                "fields": {f.key: f.value for f in block.fields},
            }
            for block in document.blocks
        ],
    }


def extract_results(rows: Sequence[Sequence[Any]]) -> list[ExerciseResult]:
    """
    Read the performed values back out of a rendered session document.

    An exercise starts at a title row immediately followed by the planned
    row ("Series: ..."); input rows are recognized by their label, so
    blank separator rows and hidden styling do not matter.

    Args:
        rows: Two-column rows of the current-session table

    Returns:
        One ExerciseResult per exercise, in document order
    """
    label_to_key = {label: key for key, label in INPUT_FIELDS}
    results: list[ExerciseResult] = []
    current: dict[str, Any] | None = None

    def flush() -> None:
        if current is not None:
            results.append(
                ExerciseResult(
                    exercise_name=current["exercise_name"],
                    actual_series=current.get("actual_series"),
                    actual_reps=current.get("actual_reps"),
                    actual_load=current.get("actual_load"),
                    notes=cell_to_text(current.get("notes")),
                )
            )

    for i, row in enumerate(rows):
        label = cell_to_text(coerce_cell(row[0])) if row else ""
        if not label:
            continue
        value = coerce_cell(row[1]) if len(row) > 1 else None

        if label in label_to_key:
            if current is not None:
                current[label_to_key[label]] = value
            continue

        next_label = cell_to_text(coerce_cell(rows[i + 1][0])) if i + 1 < len(rows) and rows[i + 1] else ""
        if next_label.startswith(PLANNED_PREFIX) and not label.startswith(PLANNED_PREFIX):
            flush()
            current = {"exercise_name": label}

    flush()
    return results

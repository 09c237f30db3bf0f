"""
History log: lookups over logged outcomes and batch appends.

"Latest" always means last in table (insertion) order, never the most
recent date: dates are not guaranteed to be monotonic with insertion.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any, Callable, Sequence

from ..io.serializers import (
    cell_to_text,
    get_cell,
    history_record_to_row,
    row_to_history_record,
)
from .columns import ColumnInfo, ColumnResolver
from .config import (
    COL_ACTUAL_REPS,
    COL_ACTUAL_SERIES,
    COL_EXERCISE,
    COL_LOAD,
    COL_SESSION,
    HISTORY_TABLE,
    REPEATED_CHECK_COLUMNS,
)
from .cycle import CycleResolver, find_active_context
from .errors import EmptyBatch
from .models import ExerciseResult, HistoryRecord, ScheduleEntry, TrainingContext
from .pointer import SessionPointer

if TYPE_CHECKING:
    from ..io.workbook import TabularStore

logger = logging.getLogger(__name__)


class HistoryLog:
    """A read snapshot of the history table."""

    def __init__(self, rows: list[list[Any]], columns: dict[str, ColumnInfo]):
        self.rows = rows
        self.columns = columns

    @classmethod
    def load(cls, store: TabularStore, columns: ColumnResolver) -> HistoryLog:
        """Read the history table once."""
        rows = store.read_rows(HISTORY_TABLE)
        return cls(rows, columns.resolve(HISTORY_TABLE))

    def _matches(self, row: Sequence[Any], exercise_name: str, session: str) -> bool:
        return (
            cell_to_text(get_cell(row, self.columns, COL_EXERCISE)) == exercise_name
            and cell_to_text(get_cell(row, self.columns, COL_SESSION)) == session
        )

    def records(self) -> list[HistoryRecord]:
        """All records in insertion order."""
        return [row_to_history_record(row, self.columns) for row in self.rows]

    def latest(self, exercise_name: str, session: str) -> HistoryRecord | None:
        """
        Last logged record for (exercise, session), scanning from the end.

        Without the exercise or session column nothing can match; a
        warning is logged and None returned, so the document is built
        without prefilled values.
        """
        missing = [label for label in (COL_EXERCISE, COL_SESSION) if label not in self.columns]
        if missing:
            logger.warning(
                "Columns missing from %s, skipping last-session values: %s",
                HISTORY_TABLE,
                ", ".join(missing),
            )
            return None
        for row in reversed(self.rows):
            if self._matches(row, exercise_name, session):
                return row_to_history_record(row, self.columns)
        return None

    def is_repeated(self, exercise_name: str, session: str) -> bool:
        """
        True when the last two attempts logged the same series, reps and load.

        Fewer than two attempts gives False. Missing columns also give
        False, with a warning, instead of failing the caller.
        """
        missing = [label for label in REPEATED_CHECK_COLUMNS if label not in self.columns]
        if missing:
            logger.warning(
                "Columns missing from %s, skipping repeated check: %s",
                HISTORY_TABLE,
                ", ".join(missing),
            )
            return False

        attempts = [row for row in self.rows if self._matches(row, exercise_name, session)][-2:]
        if len(attempts) < 2:
            return False

        previous, last = attempts
        return all(
            get_cell(previous, self.columns, label) == get_cell(last, self.columns, label)
            for label in (COL_ACTUAL_SERIES, COL_ACTUAL_REPS, COL_LOAD)
        )


def planned_for(
    entries: list[ScheduleEntry], exercise_name: str, context: TrainingContext
) -> ScheduleEntry | None:
    """First active schedule row of *context* for *exercise_name*."""
    for entry in entries:
        if entry.active and entry.context == context and entry.exercise_name == exercise_name:
            return entry
    return None


class HistoryWriter:
    """Appends completed-session results to the history table."""

    def __init__(
        self,
        store: TabularStore,
        cycle: CycleResolver,
        pointer: SessionPointer,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.cycle = cycle
        self.pointer = pointer
        self.today = today

    def append_session(self, results: Sequence[ExerciseResult]) -> list[HistoryRecord]:
        """
        Log one session's results as a single contiguous block.

        Context and session are resolved before anything is written, and
        all rows go to the store in one append call. The session pointer
        is then set to the logged session.

        Args:
            results: Performed exercises, in document order

        Returns:
            The records written

        Raises:
            EmptyBatch: If results is empty
            MissingTable: If the history table is absent
            NoActiveContext: If no schedule row is active
        """
        if not results:
            raise EmptyBatch("No data to save")

        # Fail on a missing history table before the user is prompted
        self.store.read_header(HISTORY_TABLE)

        entries = self.cycle.schedule()
        context = find_active_context(entries, strict=self.cycle.strict)
        session = self.pointer.active_session()
        stamp = self.today().isoformat()

        records: list[HistoryRecord] = []
        for result in results:
            planned = planned_for(entries, result.exercise_name, context)
            records.append(
                HistoryRecord(
                    date=stamp,
                    block=context.block,
                    goal=context.goal,
                    session=session,
                    exercise_name=result.exercise_name,
                    planned_series=planned.planned_series if planned else None,
                    planned_reps=planned.planned_reps if planned else None,
                    actual_series=result.actual_series,
                    actual_reps=result.actual_reps,
                    actual_load=result.actual_load,
                    notes=result.notes or "",
                )
            )

        self.store.append_rows(HISTORY_TABLE, [history_record_to_row(r) for r in records])
        self.pointer.remember(session)
        logger.info("Logged %d exercise(s) for session %s on %s", len(records), session, stamp)
        return records

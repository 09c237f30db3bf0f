"""
Active training context and session rotation.

The active (block, goal) is taken from the first schedule row marked
active; the rotation is the sorted set of distinct sessions of that
block/goal.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterable

from ..io.serializers import row_to_schedule_entry
from .columns import ColumnResolver
from .config import SCHEDULE_REQUIRED, SCHEDULE_TABLE
from .errors import AmbiguousActiveContext, EmptyRotation, NoActiveContext
from .models import ScheduleEntry, TrainingContext

if TYPE_CHECKING:
    from ..io.workbook import TabularStore


def natural_key(session: str) -> list:
    """Sort key comparing digit runs numerically: 1 < 2 < 10, A < B."""
    return [
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in re.split(r"(\d+)", session)
        if part
    ]


def find_active_context(entries: Iterable[ScheduleEntry], strict: bool = False) -> TrainingContext:
    """
    Return the (block, goal) of the first active schedule row.

    Args:
        entries: Schedule rows in table order
        strict: Also fail when active rows disagree on (block, goal)

    Raises:
        NoActiveContext: If no row is active
        AmbiguousActiveContext: In strict mode, if several pairs are active
    """
    pairs: list[tuple[str, str]] = []
    for entry in entries:
        if not entry.active:
            continue
        pair = (entry.block, entry.goal)
        if not strict:
            return entry.context
        if pair not in pairs:
            pairs.append(pair)

    if not pairs:
        raise NoActiveContext("No active training found in the schedule")
    if len(pairs) > 1:
        raise AmbiguousActiveContext(pairs)
    return TrainingContext(block=pairs[0][0], goal=pairs[0][1])


def session_rotation(entries: Iterable[ScheduleEntry], context: TrainingContext) -> list[str]:
    """
    Distinct sessions of the active block/goal in natural order.

    Raises:
        EmptyRotation: If no active row of the context names a session
    """
    sessions = {
        entry.session
        for entry in entries
        if entry.active and entry.context == context and entry.session
    }
    if not sessions:
        raise EmptyRotation("No active session found in the schedule")
    return sorted(sessions, key=natural_key)


def next_session(rotation: list[str], current: str | None) -> str:
    """
    The session after *current*, wrapping from last to first.

    An unknown *current* restarts the rotation at its first element.
    """
    if not rotation:
        raise EmptyRotation("No active session found in the schedule")
    if current not in rotation:
        return rotation[0]
    return rotation[(rotation.index(current) + 1) % len(rotation)]


class CycleResolver:
    """
    Reads the schedule and resolves context and rotation.

    Each public call reads the schedule once; callers that need several
    answers from one snapshot should call schedule() and use the
    module-level functions.
    """

    def __init__(self, store: TabularStore, columns: ColumnResolver, strict: bool = False):
        self.store = store
        self.columns = columns
        self.strict = strict

    def schedule(self) -> list[ScheduleEntry]:
        """
        Load all schedule rows in table order.

        Raises:
            MissingSchedule: If the schedule table is absent
            MissingColumn: If a required schedule column is absent
        """
        rows = self.store.read_rows(SCHEDULE_TABLE)
        columns = self.columns.require(SCHEDULE_TABLE, SCHEDULE_REQUIRED)
        return [row_to_schedule_entry(row, columns) for row in rows]

    def active_context(self, entries: list[ScheduleEntry] | None = None) -> TrainingContext:
        if entries is None:
            entries = self.schedule()
        return find_active_context(entries, strict=self.strict)

    def rotation(self, entries: list[ScheduleEntry] | None = None) -> list[str]:
        if entries is None:
            entries = self.schedule()
        return session_rotation(entries, self.active_context(entries))

    def advance(self, current: str | None) -> str:
        return next_session(self.rotation(), current)

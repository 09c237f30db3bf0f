"""
Data models for scheda.

Dataclasses for schedule rows, history records, the active training
context and the generated session document.
"""

from dataclasses import dataclass, field
from typing import Union

# A single table cell. CSV-backed tables are coerced to these on read.
CellValue = Union[None, bool, int, float, str]


@dataclass(frozen=True)
class TrainingContext:
    """The active (block, goal) pair of the program."""

    block: str
    goal: str


@dataclass(frozen=True)
class ScheduleEntry:
    """
    One planned exercise slot of the schedule.

    Within one active (block, goal) the planned data for a given
    (exercise_name, session) pair is unique.
    """

    block: str
    goal: str
    session: str
    exercise_name: str
    planned_series: CellValue
    planned_reps: CellValue
    rest_seconds: CellValue = None
    exercise_type: CellValue = None
    percent_of_one_rep_max: CellValue = None
    progression_enabled: bool = False
    active: bool = False

    @property
    def context(self) -> TrainingContext:
        return TrainingContext(block=self.block, goal=self.goal)


@dataclass(frozen=True)
class HistoryRecord:
    """
    One logged outcome for one exercise in one completed session.

    Planned series/reps are copied from the schedule at write time.
    """

    date: str  # ISO format: YYYY-MM-DD
    block: str
    goal: str
    session: str
    exercise_name: str
    planned_series: CellValue
    planned_reps: CellValue
    actual_series: CellValue
    actual_reps: CellValue
    actual_load: CellValue
    notes: str = ""

    @property
    def volume(self) -> float | None:
        """Series x reps x load, or None when any of them is not numeric."""
        values = (self.actual_series, self.actual_reps, self.actual_load)
        if not all(_is_number(v) for v in values):
            return None
        return float(self.actual_series * self.actual_reps * self.actual_load)  # type: ignore[operator]


@dataclass(frozen=True)
class ExerciseResult:
    """What was actually performed for one exercise, as entered by the user."""

    exercise_name: str
    actual_series: CellValue
    actual_reps: CellValue
    actual_load: CellValue
    notes: str = ""

    def is_blank(self) -> bool:
        """True when no series, reps or load were entered."""
        return all(
            v is None or v == ""
            for v in (self.actual_series, self.actual_reps, self.actual_load)
        )


@dataclass(frozen=True)
class DocumentField:
    """A labelled input cell of the session document."""

    key: str  # actual_series | actual_reps | actual_load | notes
    label: str
    value: CellValue = None


@dataclass(frozen=True)
class ExerciseBlock:
    """One exercise of a session document."""

    entry: ScheduleEntry
    last_record: HistoryRecord | None
    repeated: bool
    planned_text: str
    fields: tuple[DocumentField, ...] = ()

    @property
    def exercise_name(self) -> str:
        return self.entry.exercise_name


@dataclass(frozen=True)
class SessionDocument:
    """
    The document shown for the session to perform.

    Blocks follow the schedule's native row order.
    """

    session: str
    context: TrainingContext
    blocks: tuple[ExerciseBlock, ...] = ()

    @property
    def repeated_exercises(self) -> list[str]:
        return [b.exercise_name for b in self.blocks if b.repeated]


@dataclass
class DocumentRow:
    """
    A rendered two-cell row of the session document.

    Cells are (label, value); styles hold one background color per cell.
    """

    cells: list[CellValue] = field(default_factory=lambda: ["", ""])
    styles: list[str] = field(default_factory=lambda: ["", ""])
    bold: bool = False


def _is_number(value: CellValue) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

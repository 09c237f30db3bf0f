"""
Domain errors raised by the session engine.

All of them are caller-visible and non-retriable; the CLI turns any
SchedaError into a single user-facing message.
"""


class SchedaError(Exception):
    """Base class for all domain errors."""


class ValidationError(SchedaError):
    """Raised when data validation fails."""


class MissingTable(SchedaError):
    """An expected table is absent from the workbook."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Table {table} not found")


class MissingSchedule(MissingTable):
    """The schedule table is absent from the workbook."""


class MissingColumn(SchedaError):
    """A required header label is absent from a table."""

    def __init__(self, table: str, label: str):
        self.table = table
        self.label = label
        super().__init__(f"Column '{label}' not found in table {table}")


class NoActiveContext(SchedaError):
    """No schedule row is marked active."""


class AmbiguousActiveContext(NoActiveContext):
    """Active rows name more than one (block, goal) pair (strict mode only)."""

    def __init__(self, pairs: list[tuple[str, str]]):
        self.pairs = pairs
        listed = ", ".join(f"{block}/{goal}" for block, goal in pairs)
        super().__init__(f"More than one active block/goal in schedule: {listed}")


class EmptyRotation(SchedaError):
    """The active block/goal has no sessions."""


class NoExercisesForSession(SchedaError):
    """No active schedule row belongs to the requested session."""

    def __init__(self, session: str):
        self.session = session
        super().__init__(f"No exercises found for session '{session}'")


class EmptyBatch(SchedaError):
    """Nothing to commit."""

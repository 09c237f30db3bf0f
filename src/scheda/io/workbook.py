"""
Workbook storage for the schedule, history and current-session tables.

A workbook is a directory holding one CSV file per table. Every table's
first row is its header; the current-session table is a free-form
two-column document and has no header semantics.
"""

import csv
from pathlib import Path
from typing import Any, Protocol, Sequence

from ..core.config import (
    CURRENT_SESSION_TABLE,
    HISTORY_COLUMNS,
    HISTORY_TABLE,
    SCHEDULE_COLUMNS,
    SCHEDULE_TABLE,
)
from ..core.errors import MissingSchedule, MissingTable
from .serializers import cell_to_text

Row = list[Any]


class TabularStore(Protocol):
    """Read/append access to labeled tables."""

    def read_header(self, name: str) -> Row: ...

    def read_rows(self, name: str) -> list[Row]: ...

    def read_all(self, name: str) -> list[Row]: ...

    def append_rows(self, name: str, rows: Sequence[Sequence[Any]]) -> None: ...

    def replace_rows(self, name: str, rows: Sequence[Sequence[Any]]) -> None: ...


def missing_table(name: str) -> MissingTable:
    """Build the error for an absent table."""
    if name == SCHEDULE_TABLE:
        return MissingSchedule(name)
    return MissingTable(name)


def _is_blank_row(row: Sequence[Any]) -> bool:
    return all(cell is None or str(cell).strip() == "" for cell in row)


class CsvWorkbook:
    """
    Manages the workbook tables stored as CSV files.

    Cells are read back as strings; typing is left to the serializers.
    """

    def __init__(self, directory: str | Path):
        """
        Initialize the workbook.

        Args:
            directory: Directory holding <TABLE>.csv files
        """
        self.directory = Path(directory)

    def table_path(self, name: str) -> Path:
        return self.directory / f"{name}.csv"

    def exists(self) -> bool:
        """Check if the schedule and history tables exist."""
        return self.table_path(SCHEDULE_TABLE).exists() and self.table_path(HISTORY_TABLE).exists()

    def init(self) -> list[str]:
        """
        Create missing tables with their headers.

        Creates the directory if needed and never touches existing files.

        Returns:
            Names of the tables that were created
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        created: list[str] = []
        for name, header in (
            (SCHEDULE_TABLE, SCHEDULE_COLUMNS),
            (HISTORY_TABLE, HISTORY_COLUMNS),
            (CURRENT_SESSION_TABLE, ()),
        ):
            path = self.table_path(name)
            if path.exists():
                continue
            with open(path, "w", newline="", encoding="utf-8") as f:
                if header:
                    csv.writer(f, lineterminator="\n").writerow(header)
            created.append(name)
        return created

    def read_all(self, name: str) -> list[Row]:
        """
        Read every non-blank row of a table, header included.

        Raises:
            MissingTable: If the table file doesn't exist
        """
        path = self.table_path(name)
        if not path.exists():
            raise missing_table(name)
        with open(path, "r", newline="", encoding="utf-8") as f:
            return [row for row in csv.reader(f) if row and not _is_blank_row(row)]

    def read_header(self, name: str) -> Row:
        rows = self.read_all(name)
        return rows[0] if rows else []

    def read_rows(self, name: str) -> list[Row]:
        return self.read_all(name)[1:]

    def append_rows(self, name: str, rows: Sequence[Sequence[Any]]) -> None:
        """
        Append rows at the end of a table in one write.

        Args:
            name: Table name
            rows: Rows to append, in order

        Raises:
            MissingTable: If the table file doesn't exist
        """
        path = self.table_path(name)
        if not path.exists():
            raise missing_table(name)
        needs_newline = False
        if path.stat().st_size > 0:
            with open(path, "rb") as f:
                f.seek(-1, 2)
                needs_newline = f.read(1) not in (b"\n", b"\r")
        with open(path, "a", newline="", encoding="utf-8") as f:
            if needs_newline:
                f.write("\n")
            writer = csv.writer(f, lineterminator="\n")
            for row in rows:
                writer.writerow([cell_to_text(cell) for cell in row])

    def replace_rows(self, name: str, rows: Sequence[Sequence[Any]]) -> None:
        """Overwrite a table with *rows* (used for the current-session document)."""
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(self.table_path(name), "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, lineterminator="\n")
            for row in rows:
                writer.writerow([cell_to_text(cell) for cell in row])


class MemoryWorkbook:
    """
    Workbook kept in memory as lists of rows.

    Cells keep their Python types. Useful for embedding and tests.
    """

    def __init__(self, tables: dict[str, list[Row]] | None = None):
        self.tables: dict[str, list[Row]] = {
            name: [list(row) for row in rows] for name, rows in (tables or {}).items()
        }

    def _table(self, name: str) -> list[Row]:
        if name not in self.tables:
            raise missing_table(name)
        return self.tables[name]

    def read_all(self, name: str) -> list[Row]:
        return [list(row) for row in self._table(name)]

    def read_header(self, name: str) -> Row:
        table = self._table(name)
        return list(table[0]) if table else []

    def read_rows(self, name: str) -> list[Row]:
        return [list(row) for row in self._table(name)[1:]]

    def append_rows(self, name: str, rows: Sequence[Sequence[Any]]) -> None:
        self._table(name).extend(list(row) for row in rows)

    def replace_rows(self, name: str, rows: Sequence[Sequence[Any]]) -> None:
        self.tables[name] = [list(row) for row in rows]

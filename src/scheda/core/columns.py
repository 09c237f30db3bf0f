"""
Header-to-column resolution for workbook tables.

Downstream code addresses cells by header label ("ESERCIZIO"), never by
position. Headers are read once per table and memoized until invalidated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import MissingColumn

if TYPE_CHECKING:
    from ..io.workbook import TabularStore


@dataclass(frozen=True)
class ColumnInfo:
    """Position of one header label."""

    name: str  # camelCase alias for display
    index: int  # 1-based ordinal


def to_camel_case(label: str) -> str:
    """
    Normalize a header label to camelCase.

    >>> to_camel_case("SERIE_EFFETTIVE")
    'serieEffettive'
    >>> to_camel_case("% 1RM")
    '1rm'
    """
    return re.sub(r"[^a-zA-Z0-9]+(.)", lambda m: m.group(1).upper(), label.lower())


def map_header(header: list) -> dict[str, ColumnInfo]:
    """Build the label mapping for one header row; empty cells are skipped."""
    columns: dict[str, ColumnInfo] = {}
    for i, label in enumerate(header):
        if label is None:
            continue
        text = str(label).strip()
        if not text:
            continue
        columns[text] = ColumnInfo(name=to_camel_case(text), index=i + 1)
    return columns


class ColumnResolver:
    """
    Memoized header lookup for the tables of one store.

    The mapping for a table is computed on first use and kept until
    invalidate() is called, so any edit to a header row must be followed
    by an explicit invalidation.
    """

    def __init__(self, store: TabularStore):
        self.store = store
        self._cache: dict[str, dict[str, ColumnInfo]] = {}

    def resolve(self, table: str) -> dict[str, ColumnInfo]:
        """Return the label → ColumnInfo mapping for *table*."""
        if table not in self._cache:
            self._cache[table] = map_header(self.store.read_header(table))
        return self._cache[table]

    def column(self, table: str, label: str) -> ColumnInfo:
        """
        Look up one label.

        Raises:
            MissingColumn: If the header has no such label
        """
        info = self.resolve(table).get(label)
        if info is None:
            raise MissingColumn(table, label)
        return info

    def require(self, table: str, labels: tuple[str, ...] | list[str]) -> dict[str, ColumnInfo]:
        """Resolve *table* and fail on the first absent label."""
        columns = self.resolve(table)
        for label in labels:
            if label not in columns:
                raise MissingColumn(table, label)
        return columns

    def missing(self, table: str, labels: tuple[str, ...] | list[str]) -> list[str]:
        """Return the labels absent from *table*'s header, in the given order."""
        columns = self.resolve(table)
        return [label for label in labels if label not in columns]

    def invalidate(self, table: str | None = None) -> None:
        """Forget one table's mapping, or all of them when *table* is None."""
        if table is None:
            self._cache.clear()
        else:
            self._cache.pop(table, None)

"""
The operations exposed to the CLI, wired for one workbook.

Each operation validates and resolves everything it needs before it
writes, so a failure leaves neither the history nor the pointer half
updated.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any, Callable, Sequence

from ..io.kv_cache import KeyValueCache
from ..io.serializers import extract_results
from .columns import ColumnResolver
from .config import CACHE_TTL_SECONDS, CURRENT_SESSION_TABLE
from .cycle import CycleResolver
from .document import SessionDocumentBuilder, render_rows
from .errors import EmptyBatch
from .history import HistoryLog, HistoryWriter
from .models import ExerciseResult, HistoryRecord, SessionDocument
from .pointer import ChoicePrompt, SessionPointer
from .validation import validate_results

if TYPE_CHECKING:
    from ..io.workbook import TabularStore

logger = logging.getLogger(__name__)


class TrainingWorkflow:
    """Entry point for refreshing, generating and committing sessions."""

    def __init__(
        self,
        store: TabularStore,
        cache: KeyValueCache,
        prompt: ChoicePrompt,
        *,
        strict: bool = False,
        ttl_seconds: int = CACHE_TTL_SECONDS,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.columns = ColumnResolver(store)
        self.cycle = CycleResolver(store, self.columns, strict=strict)
        self.pointer = SessionPointer(cache, self.cycle, prompt, ttl_seconds=ttl_seconds)
        self.builder = SessionDocumentBuilder(store, self.columns, self.cycle)
        self.writer = HistoryWriter(store, self.cycle, self.pointer, today=today)

    def list_rotation(self) -> list[str]:
        """Sessions of the active block/goal, in rotation order."""
        return self.cycle.rotation()

    def refresh_current_session(self) -> SessionDocument:
        """
        Advance to the next session and write its document.

        The pointer moves only once the document is written.
        """
        session = self.pointer.propose()
        document = self.builder.build(session)
        self._write_document(document)
        self.pointer.remember(session)
        return document

    def generate_session_for(self, session_name: str) -> SessionDocument:
        """
        Write the document of a specific session.

        The pointer is pinned to that session so a following commit logs it.
        """
        document = self.builder.build(session_name)
        self._write_document(document)
        self.pointer.remember(session_name)
        return document

    def pending_results(self, raw_rows: Sequence[Sequence[Any]] | None = None) -> list[ExerciseResult]:
        """Results found in *raw_rows*, or in the current-session table."""
        if raw_rows is None:
            raw_rows = self.store.read_all(CURRENT_SESSION_TABLE)
        return extract_results(raw_rows)

    def commit_session_results(
        self, raw_rows: Sequence[Sequence[Any]] | None = None
    ) -> list[HistoryRecord]:
        """
        Log the performed session.

        Exercises with no series, reps or load entered are skipped as not
        performed; the rest must pass validation before anything is written.

        Raises:
            EmptyBatch: If nothing was entered
            ValidationError: If any entered value is out of range
        """
        results = [r for r in self.pending_results(raw_rows) if not r.is_blank()]
        if not results:
            raise EmptyBatch("No data to save")
        validate_results(results)
        return self.writer.append_session(results)

    def history(self) -> list[HistoryRecord]:
        """All logged records in insertion order."""
        return HistoryLog.load(self.store, self.columns).records()

    def _write_document(self, document: SessionDocument) -> None:
        rows = render_rows(document)
        self.store.replace_rows(CURRENT_SESSION_TABLE, [row.cells for row in rows])
        logger.debug("Wrote %d rows for session %s", len(rows), document.session)

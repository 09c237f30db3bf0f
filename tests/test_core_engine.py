"""
Unit tests for the session engine.

Covers context/rotation resolution, the session pointer, document
generation (latest-row join and repeated-parameters flag) and the
history writer, all against an in-memory workbook.
"""

import logging
from datetime import date

import pytest

from scheda.core.columns import ColumnResolver
from scheda.core.config import (
    COL_LOAD,
    CURRENT_SESSION_KEY,
    CURRENT_SESSION_TABLE,
    HISTORY_COLUMNS,
    HISTORY_TABLE,
    SCHEDULE_COLUMNS,
    SCHEDULE_TABLE,
    STYLE_INPUT,
    STYLE_INPUT_REPEATED,
)
from scheda.core.cycle import CycleResolver, natural_key, next_session
from scheda.core.document import SessionDocumentBuilder, render_rows
from scheda.core.errors import (
    AmbiguousActiveContext,
    EmptyBatch,
    EmptyRotation,
    MissingColumn,
    MissingSchedule,
    MissingTable,
    NoActiveContext,
    NoExercisesForSession,
    ValidationError,
)
from scheda.core.history import HistoryWriter
from scheda.core.models import ExerciseResult, TrainingContext
from scheda.core.pointer import SessionPointer, parse_choice
from scheda.core.validation import result_errors, validate_results
from scheda.core.workflow import TrainingWorkflow
from scheda.io.kv_cache import MemoryCache
from scheda.io.workbook import MemoryWorkbook

TODAY = date(2026, 10, 19)

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _sched(
    session: str,
    exercise: str,
    *,
    block: str = "B1",
    goal: str = "Hypertrophy",
    series=3,
    reps=10,
    rest=90,
    progression: bool = False,
    active: bool = True,
) -> list:
    return [block, goal, session, exercise, series, reps, rest, "base", None, progression, active]


def _hist(
    exercise: str,
    session: str,
    series,
    reps,
    load,
    *,
    notes: str = "",
    day: str = "2026-01-01",
    block: str = "B1",
    goal: str = "Hypertrophy",
) -> list:
    return [day, block, goal, session, exercise, 3, 10, series, reps, load, notes]


def _store(schedule: list[list], history: list[list] | None = None) -> MemoryWorkbook:
    return MemoryWorkbook({
        SCHEDULE_TABLE: [list(SCHEDULE_COLUMNS), *schedule],
        HISTORY_TABLE: [list(HISTORY_COLUMNS), *(history or [])],
    })


class ScriptedPrompt:
    """ChoicePrompt returning canned answers and recording notices."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.asked: list[list[str]] = []
        self.notices: list[str] = []

    def request_choice(self, title, options):
        self.asked.append(list(options))
        return self.responses.pop(0) if self.responses else None

    def notify(self, message):
        self.notices.append(message)


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


ABC_SCHEDULE = [
    _sched("C", "Deadlift"),
    _sched("A", "Squat", progression=True),
    _sched("B", "Bench"),
    _sched("A", "Row"),
]


def _pointer(store, prompt, cache=None, strict=False):
    columns = ColumnResolver(store)
    cycle = CycleResolver(store, columns, strict=strict)
    cache = cache if cache is not None else MemoryCache()
    return SessionPointer(cache, cycle, prompt), cache


def _builder(store):
    columns = ColumnResolver(store)
    return SessionDocumentBuilder(store, columns, CycleResolver(store, columns))


# ===========================================================================
# Cycle resolution
# ===========================================================================

class TestActiveContext:

    def test_first_active_row_wins(self):
        store = _store([
            _sched("A", "Squat", block="B0", goal="Strength", active=False),
            _sched("A", "Squat", block="B1", goal="Hypertrophy"),
            _sched("A", "Squat", block="B2", goal="Strength"),
        ])
        cycle = CycleResolver(store, ColumnResolver(store))
        assert cycle.active_context() == TrainingContext("B1", "Hypertrophy")

    def test_strict_mode_rejects_conflicting_active_rows(self):
        store = _store([
            _sched("A", "Squat", block="B1", goal="Hypertrophy"),
            _sched("A", "Squat", block="B2", goal="Strength"),
        ])
        cycle = CycleResolver(store, ColumnResolver(store), strict=True)
        with pytest.raises(AmbiguousActiveContext) as exc:
            cycle.active_context()
        assert exc.value.pairs == [("B1", "Hypertrophy"), ("B2", "Strength")]

    def test_strict_mode_accepts_single_pair(self):
        store = _store(ABC_SCHEDULE)
        cycle = CycleResolver(store, ColumnResolver(store), strict=True)
        assert cycle.active_context() == TrainingContext("B1", "Hypertrophy")

    def test_no_active_row(self):
        store = _store([_sched("A", "Squat", active=False)])
        with pytest.raises(NoActiveContext):
            CycleResolver(store, ColumnResolver(store)).active_context()

    def test_text_checkbox_values_count_as_active(self):
        row = _sched("A", "Squat")
        row[-1] = "TRUE"
        store = _store([row])
        assert CycleResolver(store, ColumnResolver(store)).active_context().block == "B1"

    def test_missing_required_column(self):
        header = [c for c in SCHEDULE_COLUMNS if c != "ATTIVA"]
        store = MemoryWorkbook({SCHEDULE_TABLE: [header], HISTORY_TABLE: [list(HISTORY_COLUMNS)]})
        with pytest.raises(MissingColumn) as exc:
            CycleResolver(store, ColumnResolver(store)).active_context()
        assert exc.value.table == SCHEDULE_TABLE
        assert exc.value.label == "ATTIVA"

    def test_missing_schedule_table(self):
        store = MemoryWorkbook({HISTORY_TABLE: [list(HISTORY_COLUMNS)]})
        with pytest.raises(MissingSchedule):
            CycleResolver(store, ColumnResolver(store)).active_context()


class TestRotation:

    def test_rotation_is_sorted_and_distinct(self):
        store = _store(ABC_SCHEDULE)
        assert CycleResolver(store, ColumnResolver(store)).rotation() == ["A", "B", "C"]

    def test_rotation_ignores_other_context_inactive_and_blank(self):
        store = _store([
            *ABC_SCHEDULE,
            _sched("D", "Curl", block="B2"),
            _sched("E", "Curl", active=False),
            _sched("", "Plank"),
        ])
        assert CycleResolver(store, ColumnResolver(store)).rotation() == ["A", "B", "C"]

    def test_numeric_sessions_sort_naturally(self):
        store = _store([_sched("10", "Squat"), _sched("2", "Bench"), _sched("1", "Row")])
        assert CycleResolver(store, ColumnResolver(store)).rotation() == ["1", "2", "10"]

    def test_numeric_cells_become_text_sessions(self):
        store = _store([_sched(2, "Squat"), _sched(1.0, "Bench")])
        assert CycleResolver(store, ColumnResolver(store)).rotation() == ["1", "2"]

    def test_empty_rotation(self):
        store = _store([_sched("", "Squat")])
        with pytest.raises(EmptyRotation):
            CycleResolver(store, ColumnResolver(store)).rotation()

    def test_natural_key_orders_mixed_labels(self):
        assert sorted(["A10", "A2", "B1", "A1"], key=natural_key) == ["A1", "A2", "A10", "B1"]


class TestAdvance:

    @pytest.mark.parametrize("rotation", [["A"], ["A", "B"], ["A", "B", "C"], ["1", "2", "3", "4", "5"]])
    def test_cyclic_closure(self, rotation):
        """Advancing n times from any element returns to it."""
        for start in rotation:
            current = start
            for _ in range(len(rotation)):
                current = next_session(rotation, current)
            assert current == start

    def test_wraps_from_last_to_first(self):
        assert next_session(["A", "B", "C"], "C") == "A"
        assert next_session(["A", "B", "C"], "A") == "B"

    def test_unknown_position_restarts(self):
        assert next_session(["A", "B", "C"], "Z") == "A"
        assert next_session(["A", "B", "C"], None) == "A"

    def test_resolver_advance_reads_rotation(self):
        store = _store(ABC_SCHEDULE)
        assert CycleResolver(store, ColumnResolver(store)).advance("B") == "C"


# ===========================================================================
# Session pointer
# ===========================================================================

class TestSessionPointer:

    def test_prompt_selection_when_cache_is_empty(self):
        prompt = ScriptedPrompt("2")
        pointer, cache = _pointer(_store(ABC_SCHEDULE), prompt)

        assert pointer.get_current_session() == "B"
        assert cache.get(CURRENT_SESSION_KEY) == "B"
        assert prompt.asked == [["Session A", "Session B", "Session C"]]
        assert prompt.notices == []

    @pytest.mark.parametrize("response", ["7", "0", "x", "", None])
    def test_invalid_selection_defaults_to_first(self, response):
        prompt = ScriptedPrompt(response)
        pointer, cache = _pointer(_store(ABC_SCHEDULE), prompt)

        assert pointer.get_current_session() == "A"
        assert cache.get(CURRENT_SESSION_KEY) == "A"
        assert len(prompt.notices) == 1
        assert "A" in prompt.notices[0]

    def test_cached_value_advances_and_is_stored(self):
        prompt = ScriptedPrompt()
        cache = MemoryCache()
        cache.put(CURRENT_SESSION_KEY, "B", 60)
        pointer, _ = _pointer(_store(ABC_SCHEDULE), prompt, cache)

        assert pointer.get_current_session() == "C"
        assert cache.get(CURRENT_SESSION_KEY) == "C"
        assert pointer.get_current_session() == "A"
        assert prompt.asked == []

    def test_expired_cache_prompts_again(self):
        clock = FakeClock()
        cache = MemoryCache(clock=clock)
        cache.put(CURRENT_SESSION_KEY, "A", 21600)
        clock.now += 21600
        prompt = ScriptedPrompt("3")
        pointer, _ = _pointer(_store(ABC_SCHEDULE), prompt, cache)

        assert pointer.get_current_session() == "C"
        assert len(prompt.asked) == 1

    def test_cached_value_outside_rotation_restarts(self):
        cache = MemoryCache()
        cache.put(CURRENT_SESSION_KEY, "Z", 60)
        pointer, _ = _pointer(_store(ABC_SCHEDULE), ScriptedPrompt(), cache)
        assert pointer.get_current_session() == "A"

    def test_propose_does_not_store(self):
        cache = MemoryCache()
        cache.put(CURRENT_SESSION_KEY, "A", 60)
        pointer, _ = _pointer(_store(ABC_SCHEDULE), ScriptedPrompt(), cache)

        assert pointer.propose() == "B"
        assert pointer.propose() == "B"
        assert cache.get(CURRENT_SESSION_KEY) == "A"

    def test_active_session_proposal_is_not_stored(self):
        prompt = ScriptedPrompt("2")
        pointer, cache = _pointer(_store(ABC_SCHEDULE), prompt)

        assert pointer.active_session() == "B"
        assert cache.get(CURRENT_SESSION_KEY) is None

    def test_active_session_does_not_advance(self):
        cache = MemoryCache()
        cache.put(CURRENT_SESSION_KEY, "B", 60)
        pointer, _ = _pointer(_store(ABC_SCHEDULE), ScriptedPrompt(), cache)

        assert pointer.active_session() == "B"
        assert pointer.active_session() == "B"
        assert cache.get(CURRENT_SESSION_KEY) == "B"

    def test_parse_choice(self):
        assert parse_choice(" 3 ", 3) == 2
        assert parse_choice("4", 3) is None
        assert parse_choice("two", 3) is None
        assert parse_choice(None, 3) is None


# ===========================================================================
# Session document
# ===========================================================================

class TestSessionDocument:

    def test_blocks_follow_schedule_order(self):
        doc = _builder(_store(ABC_SCHEDULE)).build("A")
        assert [b.exercise_name for b in doc.blocks] == ["Squat", "Row"]
        assert doc.session == "A"
        assert doc.context == TrainingContext("B1", "Hypertrophy")

    def test_planned_text(self):
        doc = _builder(_store([_sched("A", "Squat", series=4, reps=8, rest=120)])).build("A")
        assert doc.blocks[0].planned_text == "Series: 4 | Reps: 8 | Rest: 120"

    def test_goal_is_not_filtered(self):
        store = _store([
            _sched("A", "Squat"),
            _sched("A", "Deadlift", goal="Strength"),
            _sched("A", "Curl", block="B2"),
        ])
        doc = _builder(store).build("A")
        assert [b.exercise_name for b in doc.blocks] == ["Squat", "Deadlift"]

    def test_latest_history_row_prefills_fields(self):
        store = _store(ABC_SCHEDULE, [
            _hist("Squat", "A", 3, 10, 50, notes="easy"),
            _hist("Squat", "B", 5, 5, 90),
            _hist("Squat", "A", 3, 10, 55, notes="ok"),
            _hist("Row", "B", 4, 12, 40),
        ])
        doc = _builder(store).build("A")
        squat, row = doc.blocks

        assert {f.key: f.value for f in squat.fields} == {
            "actual_series": 3,
            "actual_reps": 10,
            "actual_load": 55,
            "notes": "ok",
        }
        assert squat.last_record.actual_load == 55
        assert row.last_record is None
        assert all(f.value is None for f in row.fields)

    def test_latest_is_insertion_order_not_date(self):
        store = _store(ABC_SCHEDULE, [
            _hist("Squat", "A", 3, 10, 60, day="2026-03-01"),
            _hist("Squat", "A", 3, 10, 50, day="2026-01-01"),
        ])
        squat = _builder(store).build("A").blocks[0]
        assert squat.last_record.actual_load == 50

    def test_zero_is_prefilled_blank_is_not(self):
        store = _store(ABC_SCHEDULE, [_hist("Squat", "A", 3, 10, 0, notes="")])
        fields = {f.key: f.value for f in _builder(store).build("A").blocks[0].fields}
        assert fields["actual_load"] == 0
        assert fields["notes"] is None

    @pytest.mark.parametrize("attempts,expected", [
        ([(3, 10, 50), (3, 10, 50)], True),
        ([(3, 10, 50), (3, 10, 52)], False),
        ([(3, 10, 50)], False),
        ([(4, 8, 60), (3, 10, 50), (3, 10, 50)], True),
        ([(3, 10, 50), (3, 10, 50), (3, 11, 50)], False),
        ([("3", "10", "50"), (3, 10, 50.0)], True),
    ])
    def test_repeated_flag(self, attempts, expected):
        store = _store(ABC_SCHEDULE, [_hist("Squat", "A", *a) for a in attempts])
        assert _builder(store).build("A").blocks[0].repeated is expected

    def test_repeated_requires_progression_enabled(self):
        store = _store(ABC_SCHEDULE, [_hist("Row", "A", 3, 10, 50), _hist("Row", "A", 3, 10, 50)])
        row = _builder(store).build("A").blocks[1]
        assert row.entry.progression_enabled is False
        assert row.repeated is False

    def test_repeated_only_counts_same_session(self):
        store = _store(ABC_SCHEDULE, [_hist("Squat", "A", 3, 10, 50), _hist("Squat", "B", 3, 10, 50)])
        assert _builder(store).build("A").blocks[0].repeated is False

    def test_missing_history_column_degrades_with_warning(self, caplog):
        header = [c for c in HISTORY_COLUMNS if c != COL_LOAD]
        rows = [["2026-01-01", "B1", "Hypertrophy", "A", "Squat", 3, 10, 3, 10, ""]] * 2
        store = MemoryWorkbook({
            SCHEDULE_TABLE: [list(SCHEDULE_COLUMNS), *ABC_SCHEDULE],
            HISTORY_TABLE: [header, *rows],
        })
        with caplog.at_level(logging.WARNING, logger="scheda.core.history"):
            squat = _builder(store).build("A").blocks[0]

        assert squat.repeated is False
        assert squat.last_record.actual_reps == 10
        assert squat.last_record.actual_load is None
        assert COL_LOAD in caplog.text

    def test_history_without_exercise_column_builds_without_prefill(self, caplog):
        header = [c for c in HISTORY_COLUMNS if c != "ESERCIZIO"]
        rows = [["2026-01-01", "B1", "Hypertrophy", "A", 3, 10, 3, 10, 50, ""]]
        store = MemoryWorkbook({
            SCHEDULE_TABLE: [list(SCHEDULE_COLUMNS), *ABC_SCHEDULE],
            HISTORY_TABLE: [header, *rows],
        })
        with caplog.at_level(logging.WARNING, logger="scheda.core.history"):
            doc = _builder(store).build("A")

        assert [b.last_record for b in doc.blocks] == [None, None]
        assert all(f.value is None for b in doc.blocks for f in b.fields)
        assert "ESERCIZIO" in caplog.text

    def test_no_exercises_for_session(self):
        with pytest.raises(NoExercisesForSession) as exc:
            _builder(_store(ABC_SCHEDULE)).build("Z")
        assert exc.value.session == "Z"

    def test_build_is_idempotent(self):
        store = _store(ABC_SCHEDULE, [_hist("Squat", "A", 3, 10, 50), _hist("Squat", "A", 3, 10, 50)])
        builder = _builder(store)
        assert builder.build("A") == builder.build("A")
        assert store.read_rows(HISTORY_TABLE) == [
            _hist("Squat", "A", 3, 10, 50),
            _hist("Squat", "A", 3, 10, 50),
        ]

    def test_render_rows_layout_and_highlight(self):
        store = _store(ABC_SCHEDULE, [_hist("Squat", "A", 3, 10, 50), _hist("Squat", "A", 3, 10, 50)])
        rows = render_rows(_builder(store).build("A"))

        # header + 2 × (title + planned + 4 inputs) + 1 separator
        assert len(rows) == 1 + 2 * 6 + 1
        assert rows[0].cells == ["Session A", ""]
        assert rows[1].cells == ["Squat", ""]
        assert rows[3].cells == ["Actual series:", 3]
        assert rows[3].styles[1] == STYLE_INPUT_REPEATED
        assert rows[7].cells == ["", ""]
        assert rows[8].cells == ["Row", ""]
        assert rows[11].styles[1] == STYLE_INPUT


# ===========================================================================
# History writer
# ===========================================================================

class CountingWorkbook(MemoryWorkbook):
    def __init__(self, tables):
        super().__init__(tables)
        self.append_calls = 0

    def append_rows(self, name, rows):
        self.append_calls += 1
        super().append_rows(name, rows)


def _writer(store, cache, prompt=None):
    columns = ColumnResolver(store)
    cycle = CycleResolver(store, columns)
    pointer = SessionPointer(cache, cycle, prompt or ScriptedPrompt())
    return HistoryWriter(store, cycle, pointer, today=lambda: TODAY)


class TestHistoryWriter:

    def test_appends_one_row_with_derived_fields(self):
        store = _store([
            _sched("A", "Squat", series=3, reps=10),
            _sched("B", "Bench"),
        ])
        cache = MemoryCache()
        cache.put(CURRENT_SESSION_KEY, "A", 60)

        records = _writer(store, cache).append_session([
            ExerciseResult("Squat", actual_series=3, actual_reps=8, actual_load=80, notes=""),
        ])

        assert store.read_rows(HISTORY_TABLE) == [
            ["2026-10-19", "B1", "Hypertrophy", "A", "Squat", 3, 10, 3, 8, 80, ""],
        ]
        assert records[0].session == "A"
        assert cache.get(CURRENT_SESSION_KEY) == "A"

    def test_next_refresh_advances_past_logged_session(self):
        store = _store(ABC_SCHEDULE)
        cache = MemoryCache()
        cache.put(CURRENT_SESSION_KEY, "B", 60)
        writer = _writer(store, cache)

        writer.append_session([ExerciseResult("Bench", 4, 8, 70)])
        assert writer.pointer.get_current_session() == "C"

    def test_batch_is_one_contiguous_append_in_input_order(self):
        store = CountingWorkbook({
            SCHEDULE_TABLE: [list(SCHEDULE_COLUMNS), *ABC_SCHEDULE],
            HISTORY_TABLE: [list(HISTORY_COLUMNS), _hist("Squat", "A", 3, 10, 50)],
        })
        cache = MemoryCache()
        cache.put(CURRENT_SESSION_KEY, "A", 60)

        _writer(store, cache).append_session([
            ExerciseResult("Squat", 3, 10, 52),
            ExerciseResult("Row", 3, 12, 40, notes="slow"),
        ])

        rows = store.read_rows(HISTORY_TABLE)
        assert store.append_calls == 1
        assert [r[4] for r in rows] == ["Squat", "Squat", "Row"]
        assert rows[-1][-1] == "slow"

    def test_unmatched_exercise_is_logged_without_plan(self):
        store = _store(ABC_SCHEDULE)
        cache = MemoryCache()
        cache.put(CURRENT_SESSION_KEY, "A", 60)

        _writer(store, cache).append_session([ExerciseResult("Farmer walk", 3, 1, 32)])

        assert store.read_rows(HISTORY_TABLE)[0][5:7] == ["", ""]

    def test_planned_values_come_from_active_context(self):
        store = _store([
            _sched("A", "Squat", block="B0", goal="Strength", series=5, reps=5, active=False),
            _sched("A", "Squat", series=4, reps=12),
        ])
        cache = MemoryCache()
        cache.put(CURRENT_SESSION_KEY, "A", 60)

        _writer(store, cache).append_session([ExerciseResult("Squat", 4, 12, 60)])

        assert store.read_rows(HISTORY_TABLE)[0][5:7] == [4, 12]

    def test_prompts_once_when_no_session_is_cached(self):
        store = _store(ABC_SCHEDULE)
        prompt = ScriptedPrompt("3")
        records = _writer(store, MemoryCache(), prompt).append_session([
            ExerciseResult("Deadlift", 3, 5, 120),
            ExerciseResult("Squat", 3, 5, 100),
        ])
        assert [r.session for r in records] == ["C", "C"]
        assert len(prompt.asked) == 1

    def test_empty_batch(self):
        with pytest.raises(EmptyBatch):
            _writer(_store(ABC_SCHEDULE), MemoryCache()).append_session([])

    def test_no_active_context_writes_nothing(self):
        store = _store([_sched("A", "Squat", active=False)])
        cache = MemoryCache()
        with pytest.raises(NoActiveContext):
            _writer(store, cache).append_session([ExerciseResult("Squat", 3, 8, 80)])
        assert store.read_rows(HISTORY_TABLE) == []
        assert cache.get(CURRENT_SESSION_KEY) is None

    def test_missing_history_table_fails_before_prompting(self):
        store = MemoryWorkbook({SCHEDULE_TABLE: [list(SCHEDULE_COLUMNS), *ABC_SCHEDULE]})
        prompt = ScriptedPrompt("1")
        with pytest.raises(MissingTable):
            _writer(store, MemoryCache(), prompt).append_session([ExerciseResult("Squat", 3, 8, 80)])
        assert prompt.asked == []


# ===========================================================================
# Validation
# ===========================================================================

class TestValidation:

    def test_valid_result(self):
        assert result_errors(ExerciseResult("Squat", 3, 8, 80)) == []
        assert result_errors(ExerciseResult("Pull-up", 4, 6, 0)) == []
        assert result_errors(ExerciseResult("Squat", 3, 8, 82.5)) == []

    @pytest.mark.parametrize("series,reps,load,fragment", [
        (0, 8, 80, "series"),
        (21, 8, 80, "series"),
        (3, 0, 80, "reps"),
        (3, 8.5, 80, "reps"),
        (3, 8, -5, "load"),
        (3, 8, 501, "load"),
        (3, 8, "heavy", "load"),
        (None, 8, 80, "series"),
        (True, 8, 80, "series"),
    ])
    def test_out_of_range(self, series, reps, load, fragment):
        errors = result_errors(ExerciseResult("Squat", series, reps, load))
        assert len(errors) == 1
        assert fragment in errors[0]

    def test_validate_results_lists_every_exercise(self):
        with pytest.raises(ValidationError) as exc:
            validate_results([
                ExerciseResult("Squat", 0, 8, 80),
                ExerciseResult("Row", 3, 8, 40),
                ExerciseResult("Bench", 3, 200, 60),
            ])
        message = str(exc.value)
        assert "Squat" in message
        assert "Bench" in message
        assert "Row" not in message


# ===========================================================================
# Workflow
# ===========================================================================

def _fill(store: MemoryWorkbook, values: dict[str, tuple]) -> None:
    """Type values into the current-session document like a user would."""
    rows = store.read_all(CURRENT_SESSION_TABLE)
    labels = ["Actual series:", "Actual reps:", "Load (kg):", "Notes:"]
    current = None
    for row in rows:
        label = row[0]
        if label in values:
            current = label
        elif label in labels:
            if current is not None:
                row[1] = values[current][labels.index(label)]
        elif label and not str(label).startswith("Series:"):
            current = None
    store.replace_rows(CURRENT_SESSION_TABLE, rows)


class TestWorkflow:

    def _workflow(self, store, *responses, cache=None):
        return TrainingWorkflow(
            store,
            cache if cache is not None else MemoryCache(),
            ScriptedPrompt(*responses),
            today=lambda: TODAY,
        )

    def test_full_cycle(self):
        store = _store(ABC_SCHEDULE)
        workflow = self._workflow(store, "1")

        assert workflow.list_rotation() == ["A", "B", "C"]

        doc = workflow.refresh_current_session()
        assert doc.session == "A"
        assert store.read_all(CURRENT_SESSION_TABLE)[0] == ["Session A", ""]

        _fill(store, {"Squat": (3, 10, 50, ""), "Row": (3, 12, 40, "grip")})
        records = workflow.commit_session_results()
        assert [(r.session, r.exercise_name) for r in records] == [("A", "Squat"), ("A", "Row")]

        assert workflow.refresh_current_session().session == "B"
        assert [r.exercise_name for r in workflow.history()] == ["Squat", "Row"]

    def test_blank_exercises_are_skipped(self):
        store = _store(ABC_SCHEDULE)
        workflow = self._workflow(store, "1")
        workflow.refresh_current_session()
        _fill(store, {"Squat": (3, 10, 50, "")})

        records = workflow.commit_session_results()
        assert [r.exercise_name for r in records] == ["Squat"]

    def test_nothing_entered_is_empty_batch(self):
        store = _store(ABC_SCHEDULE)
        workflow = self._workflow(store, "1")
        workflow.refresh_current_session()
        with pytest.raises(EmptyBatch):
            workflow.commit_session_results()

    def test_invalid_values_write_nothing(self):
        store = _store(ABC_SCHEDULE)
        cache = MemoryCache()
        workflow = self._workflow(store, "2", cache=cache)
        workflow.refresh_current_session()
        _fill(store, {"Bench": (3, 500, 50, "")})

        with pytest.raises(ValidationError):
            workflow.commit_session_results()
        assert store.read_rows(HISTORY_TABLE) == []
        assert cache.get(CURRENT_SESSION_KEY) == "B"

    def test_failed_refresh_leaves_pointer(self):
        store = MemoryWorkbook({SCHEDULE_TABLE: [list(SCHEDULE_COLUMNS), *ABC_SCHEDULE]})
        cache = MemoryCache()
        cache.put(CURRENT_SESSION_KEY, "A", 60)
        workflow = self._workflow(store, cache=cache)

        with pytest.raises(MissingTable):
            workflow.refresh_current_session()
        assert cache.get(CURRENT_SESSION_KEY) == "A"
        assert CURRENT_SESSION_TABLE not in store.tables

        store.tables[HISTORY_TABLE] = [list(HISTORY_COLUMNS)]
        assert workflow.refresh_current_session().session == "B"
        assert cache.get(CURRENT_SESSION_KEY) == "B"

    def test_blank_exercise_values_stay_blank(self):
        store = _store(ABC_SCHEDULE)
        workflow = self._workflow(store, "1")
        workflow.refresh_current_session()
        _fill(store, {"Squat": (3, 10, 50, "")})

        (squat, row) = workflow.pending_results()
        assert squat.actual_load == 50
        assert row.is_blank()

    def test_generate_pins_pointer(self):
        store = _store(ABC_SCHEDULE)
        cache = MemoryCache()
        cache.put(CURRENT_SESSION_KEY, "A", 60)
        workflow = self._workflow(store, cache=cache)

        doc = workflow.generate_session_for("C")
        assert doc.session == "C"
        assert cache.get(CURRENT_SESSION_KEY) == "C"

        _fill(store, {"Deadlift": (3, 5, 120, "")})
        assert workflow.commit_session_results()[0].session == "C"

    def test_generate_unknown_session_leaves_pointer(self):
        store = _store(ABC_SCHEDULE)
        cache = MemoryCache()
        cache.put(CURRENT_SESSION_KEY, "A", 60)
        with pytest.raises(NoExercisesForSession):
            self._workflow(store, cache=cache).generate_session_for("Z")
        assert cache.get(CURRENT_SESSION_KEY) == "A"

    def test_commit_from_raw_rows(self):
        store = _store(ABC_SCHEDULE)
        cache = MemoryCache()
        cache.put(CURRENT_SESSION_KEY, "B", 60)
        raw = [
            ["Session B", ""],
            ["Bench", ""],
            ["Series: 3 | Reps: 10 | Rest: 90", ""],
            ["Actual series:", "3"],
            ["Actual reps:", "9"],
            ["Load (kg):", "62,5"],
            ["Notes:", ""],
        ]
        records = self._workflow(store, cache=cache).commit_session_results(raw)
        assert records[0].actual_load == 62.5
        assert store.read_rows(HISTORY_TABLE)[0][4:] == ["Bench", 3, 10, 3, 9, 62.5, ""]

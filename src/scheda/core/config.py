"""
Configuration constants for the training-session engine.

Table names and header labels follow the workbook vocabulary (Italian
column names), everything else is centralized here for easy tuning.
"""

from typing import Final

# =============================================================================
# TABLES
# =============================================================================

SCHEDULE_TABLE: Final[str] = "SCHEDA"
HISTORY_TABLE: Final[str] = "STORICO"
CURRENT_SESSION_TABLE: Final[str] = "ALLENAMENTOODIERNO"

# =============================================================================
# SCHEDULE COLUMNS
# =============================================================================

COL_BLOCK: Final[str] = "BLOCCO"
COL_GOAL: Final[str] = "OBIETTIVO"
COL_SESSION: Final[str] = "SEDUTA"
COL_EXERCISE: Final[str] = "ESERCIZIO"
COL_SERIES: Final[str] = "SERIE"
COL_REPS: Final[str] = "REPS"
COL_REST: Final[str] = "RECUPERO"
COL_TYPE: Final[str] = "TIPO"
COL_PERCENT_1RM: Final[str] = "% 1RM"
COL_PROGRESSION: Final[str] = "PROGRESSIONI"
COL_ACTIVE: Final[str] = "ATTIVA"

SCHEDULE_COLUMNS: Final[tuple[str, ...]] = (
    COL_BLOCK,
    COL_GOAL,
    COL_SESSION,
    COL_EXERCISE,
    COL_SERIES,
    COL_REPS,
    COL_REST,
    COL_TYPE,
    COL_PERCENT_1RM,
    COL_PROGRESSION,
    COL_ACTIVE,
)

# Missing any of these aborts schedule loading with MissingColumn
SCHEDULE_REQUIRED: Final[tuple[str, ...]] = (
    COL_BLOCK,
    COL_GOAL,
    COL_SESSION,
    COL_EXERCISE,
    COL_SERIES,
    COL_REPS,
    COL_ACTIVE,
)

# =============================================================================
# HISTORY COLUMNS (append order)
# =============================================================================

COL_DATE: Final[str] = "DATA"
COL_ACTUAL_SERIES: Final[str] = "SERIE_EFFETTIVE"
COL_ACTUAL_REPS: Final[str] = "REPS_EFFETTIVE"
COL_LOAD: Final[str] = "CARICO"
COL_NOTES: Final[str] = "NOTE"

HISTORY_COLUMNS: Final[tuple[str, ...]] = (
    COL_DATE,
    COL_BLOCK,
    COL_GOAL,
    COL_SESSION,
    COL_EXERCISE,
    COL_SERIES,
    COL_REPS,
    COL_ACTUAL_SERIES,
    COL_ACTUAL_REPS,
    COL_LOAD,
    COL_NOTES,
)

# Columns the stagnation check needs; missing ones degrade the check to False
REPEATED_CHECK_COLUMNS: Final[tuple[str, ...]] = (
    COL_EXERCISE,
    COL_SESSION,
    COL_ACTUAL_SERIES,
    COL_ACTUAL_REPS,
    COL_LOAD,
)

# =============================================================================
# SESSION POINTER CACHE
# =============================================================================

CURRENT_SESSION_KEY: Final[str] = "currentWorkout"
CACHE_TTL_SECONDS: Final[int] = 21600  # 6 hours

# =============================================================================
# RESULT VALIDATION RANGES
# =============================================================================

MIN_SERIES: Final[int] = 1
MAX_SERIES: Final[int] = 20
MIN_REPS: Final[int] = 1
MAX_REPS: Final[int] = 100
MIN_LOAD_KG: Final[float] = 0.0  # 0 = bodyweight
MAX_LOAD_KG: Final[float] = 500.0

# =============================================================================
# SESSION DOCUMENT LAYOUT
# =============================================================================

# (result key, row label) in display order
INPUT_FIELDS: Final[tuple[tuple[str, str], ...]] = (
    ("actual_series", "Actual series:"),
    ("actual_reps", "Actual reps:"),
    ("actual_load", "Load (kg):"),
    ("notes", "Notes:"),
)

PLANNED_PREFIX: Final[str] = "Series:"
SESSION_HEADER_PREFIX: Final[str] = "Session"

STYLE_HEADER: Final[str] = "#000000"
STYLE_TITLE: Final[str] = "#e8eaf6"
STYLE_PLANNED: Final[str] = "#ffffff"
STYLE_LABEL: Final[str] = "#ffffff"
STYLE_INPUT: Final[str] = "#e3f2fd"
STYLE_INPUT_REPEATED: Final[str] = "#f5b342"
STYLE_SEPARATOR: Final[str] = "#f5f5f5"

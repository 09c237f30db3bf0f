"""Range checks for entered results."""

from .config import MAX_LOAD_KG, MAX_REPS, MAX_SERIES, MIN_LOAD_KG, MIN_REPS, MIN_SERIES
from .errors import ValidationError
from .models import CellValue, ExerciseResult


def _number(value: CellValue) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def result_errors(result: ExerciseResult) -> list[str]:
    """
    Check one result against the allowed ranges.

    Returns:
        Human-readable problems, empty when the result is valid
    """
    errors: list[str] = []

    series = _number(result.actual_series)
    if series is None or not series.is_integer() or not MIN_SERIES <= series <= MAX_SERIES:
        errors.append(f"invalid series {result.actual_series!r} (expected {MIN_SERIES}-{MAX_SERIES})")

    reps = _number(result.actual_reps)
    if reps is None or not reps.is_integer() or not MIN_REPS <= reps <= MAX_REPS:
        errors.append(f"invalid reps {result.actual_reps!r} (expected {MIN_REPS}-{MAX_REPS})")

    load = _number(result.actual_load)
    if load is None or not MIN_LOAD_KG <= load <= MAX_LOAD_KG:
        errors.append(
            f"invalid load {result.actual_load!r} (expected {MIN_LOAD_KG:g}-{MAX_LOAD_KG:g} kg)"
        )

    return errors


def validate_results(results: list[ExerciseResult]) -> list[ExerciseResult]:
    """
    Validate every result before anything is written.

    Raises:
        ValidationError: Listing all problems, one line per exercise
    """
    problems = []
    for result in results:
        errors = result_errors(result)
        if errors:
            problems.append(f"{result.exercise_name}: {'; '.join(errors)}")
    if problems:
        raise ValidationError("Invalid results:\n" + "\n".join(problems))
    return results

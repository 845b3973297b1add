from typing import Optional, Tuple
import numpy as np
import pandas as pd


# ------------------------
# Grading scale
# ------------------------
MIN_SCORE = 0
MAX_SCORE = 100
MAX_GRADE_POINT = 5

# (lowest score in band, grade point), highest band first
GRADE_POINT_BANDS = (
    (70, 5),
    (60, 4),
    (50, 3),
    (45, 2),
    (40, 1),
)

GRADE_LETTERS = {
    5: "A",
    4: "B",
    3: "C",
    2: "D",
    1: "E",
    0: "F",
}

# (lowest average in band, label), highest band first
CLASSIFICATION_BANDS = (
    (4.50, "First Class Honours"),
    (3.50, "Second Class Honours (Upper Division)"),
    (2.40, "Second Class Honours (Lower Division)"),
    (1.50, "Third Class Honours"),
    (1.00, "Pass"),
)
FAIL_LABEL = "Fail"


class ValidationError(ValueError):
    """Raised when course or semester input breaks an entry rule.

    The message is the violated rule ("missing fields" or "invalid range");
    ``field`` names the offending input.
    """

    def __init__(self, reason: str, field: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.field = field


# ------------------------
# Core logic
# ------------------------
def score_to_grade_point(score: float) -> int:
    # no upper bound: anything from 70 up is a 5
    for lowest, grade_point in GRADE_POINT_BANDS:
        if score >= lowest:
            return grade_point
    return 0


def grade_point_to_letter(grade_point: int) -> str:
    return GRADE_LETTERS.get(grade_point, "F")


def _units_and_points(courses) -> np.ndarray:
    """
    courses: iterable of objects with ``unit`` and ``grade_point``
    returns: Nx2 numpy array -> [grade_point, unit]
    """
    rows = [(c.grade_point, c.unit) for c in courses]
    if not rows:
        return np.zeros((0, 2), dtype=float)
    return np.array(rows, dtype=float)


def total_units(courses) -> float:
    gu = _units_and_points(courses)
    return float(gu[:, 1].sum())


def total_grade_points(courses) -> float:
    """Sum of unit x grade point (the TUGP)."""
    gu = _units_and_points(courses)
    return float(np.dot(gu[:, 0], gu[:, 1]))


def compute_current_average(courses) -> float:
    """
    Unit-weighted mean grade point of ``courses``.

    An empty list gives 0.0 rather than NaN. Callers that need to tell
    "no courses" apart from an all-F average should check the list length.
    """
    gu = _units_and_points(courses)
    if gu.size == 0:
        return 0.0

    units = float(gu[:, 1].sum())
    if units == 0:
        return 0.0
    return float(np.dot(gu[:, 0], gu[:, 1]) / units)


def compute_cumulative_average(courses, semesters) -> Optional[float]:
    """
    Combine the current courses with previous semester totals.

    Returns None when there are no previous semesters, or when the combined
    unit total is zero.
    """
    semesters = list(semesters)
    if not semesters:
        return None

    current_tugp = total_grade_points(courses)
    current_units = total_units(courses)

    previous = np.array(
        [(s.total_grade_points, s.total_units) for s in semesters], dtype=float
    )
    previous_tugp = float(previous[:, 0].sum())
    previous_units = float(previous[:, 1].sum())

    units = current_units + previous_units
    if units == 0:
        return None
    return (current_tugp + previous_tugp) / units


def format_average(value: Optional[float]) -> str:
    if value is None or np.isnan(value):
        return "N/A"
    if value == 5.00:
        return "5.00"
    # never show a rounded-up perfect score
    if 4.995 <= value < 5.00:
        return "4.99"
    return f"{value:.2f}"


def classify(average: float) -> str:
    for lowest, label in CLASSIFICATION_BANDS:
        if average >= lowest:
            return label
    return FAIL_LABEL


# ------------------------
# Input validation
# ------------------------
def _parse_number(value, field: str) -> float:
    if value is None:
        raise ValidationError("missing fields", field)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError("missing fields", field)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError("missing fields", field) from None
    if np.isnan(number):
        raise ValidationError("missing fields", field)
    if not np.isfinite(number):
        raise ValidationError("invalid range", field)
    return number


def validate_course_input(unit, score) -> Tuple[int, float]:
    """
    Check a course entry and return it as (unit, score).

    Both fields must be present before either is range checked. Fractional
    units are truncated towards zero.
    """
    unit_value = _parse_number(unit, "unit")
    score_value = _parse_number(score, "score")

    unit_value = int(unit_value)
    if unit_value <= 0:
        raise ValidationError("invalid range", "unit")
    if score_value < MIN_SCORE or score_value > MAX_SCORE:
        raise ValidationError("invalid range", "score")
    return unit_value, score_value


def validate_semester_input(total_grade_points, total_units) -> Tuple[float, float]:
    tgp = _parse_number(total_grade_points, "total_grade_points")
    units = _parse_number(total_units, "total_units")

    # no cross-check against MAX_GRADE_POINT * units
    if tgp < 0:
        raise ValidationError("invalid range", "total_grade_points")
    if units <= 0:
        raise ValidationError("invalid range", "total_units")
    return tgp, units


# ------------------------
# Reference tables (UI-side)
# ------------------------
def grading_scale_table() -> pd.DataFrame:
    rows = []
    upper = MAX_SCORE
    for lowest, grade_point in GRADE_POINT_BANDS:
        rows.append(
            {
                "Score": f"{lowest}-{upper}",
                "Grade": grade_point_to_letter(grade_point),
                "Points": grade_point,
            }
        )
        upper = lowest - 1
    rows.append({"Score": f"{MIN_SCORE}-{upper}", "Grade": "F", "Points": 0})
    return pd.DataFrame(rows)


def classification_table() -> pd.DataFrame:
    rows = []
    upper = float(MAX_GRADE_POINT)
    for lowest, label in CLASSIFICATION_BANDS:
        rows.append({"Average": f"{lowest:.2f} - {upper:.2f}", "Classification": label})
        upper = round(lowest - 0.01, 2)
    rows.append({"Average": f"0.00 - {upper:.2f}", "Classification": FAIL_LABEL})
    return pd.DataFrame(rows)

import logging
from typing import List, Optional, Tuple

import pandas as pd

from gpa_calculator.grade_engine import ValidationError

logger = logging.getLogger(__name__)

# ------------------------
# CSV helpers (UI-side)
# ------------------------

COLUMN_ALIASES = {
    "course": "name",
    "course name": "name",
    "title": "name",
    "units": "unit",
    "credit": "unit",
    "credits": "unit",
    "mark": "score",
    "tugp": "total_grade_points",
    "total tugp": "total_grade_points",
    "grade points": "total_grade_points",
    "total grade points": "total_grade_points",
    "total units": "total_units",
}


def _normalise_cols(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip().lower() for c in df.columns]
    # first alias wins; an existing canonical column is never overwritten
    taken = set(df.columns)
    renames = {}
    for c in df.columns:
        target = COLUMN_ALIASES.get(c)
        if target is not None and target not in taken:
            renames[c] = target
            taken.add(target)
    return df.rename(columns=renames)


def read_csv_upload(uploaded_file) -> pd.DataFrame:
    df = pd.read_csv(uploaded_file)
    return _normalise_cols(df)


def validate_courses_csv(df: pd.DataFrame) -> pd.DataFrame:
    required = {"unit", "score"}
    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns: {sorted(missing)}. Expected: Name, Unit, Score.")
    out = df[["unit", "score"]].copy()
    out.insert(0, "name", df["name"] if "name" in df.columns else None)
    return out.rename(columns={"name": "Name", "unit": "Unit", "score": "Score"})


def validate_semesters_csv(df: pd.DataFrame) -> pd.DataFrame:
    required = {"total_grade_points", "total_units"}
    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns: {sorted(missing)}. Expected: TUGP, Total Units.")
    out = df[["total_grade_points", "total_units"]].copy()
    return out.rename(columns={"total_grade_points": "TUGP", "total_units": "Units"})


def parse_courses(df: pd.DataFrame) -> List[Tuple[int, Optional[str], object, object]]:
    """
    Returns (row number, name, unit, score) with the unit and score cells left
    as read; the session parses and range checks them. Row numbers count CSV
    data rows from 1. Rows missing a unit or score are skipped; a missing name
    is left as None so the session can number the course.
    """
    rows = []
    for row_number, (_, row) in enumerate(df.iterrows(), start=1):
        name = row.get("Name")
        unit = row.get("Unit")
        score = row.get("Score")
        if pd.isna(unit) or pd.isna(score):
            continue
        rows.append((row_number, None if pd.isna(name) else str(name), unit, score))
    return rows


def parse_semesters(df: pd.DataFrame) -> List[Tuple[int, object, object]]:
    rows = []
    for row_number, (_, row) in enumerate(df.iterrows(), start=1):
        tgp = row.get("TUGP")
        units = row.get("Units")
        if pd.isna(tgp) or pd.isna(units):
            continue
        rows.append((row_number, tgp, units))
    return rows


def load_into_session(session, courses=(), semesters=()) -> List[str]:
    """
    Add parsed rows to ``session`` and return one message per rejected row.

    Rejected rows do not stop the load; every valid row is still added.
    """
    errors = []
    added_courses = added_semesters = 0
    for row_number, name, unit, score in courses:
        try:
            session.add_course(name, unit, score)
            added_courses += 1
        except ValidationError as e:
            errors.append(f"Course row {row_number}: {e.reason} ({e.field})")

    for row_number, tgp, units in semesters:
        try:
            session.add_semester(tgp, units)
            added_semesters += 1
        except ValidationError as e:
            errors.append(f"Semester row {row_number}: {e.reason} ({e.field})")

    if errors:
        logger.warning("Rejected %d CSV row(s): %s", len(errors), "; ".join(errors))
    logger.info("Loaded %d course(s) and %d semester(s) from CSV", added_courses, added_semesters)
    return errors


def courses_frame(courses) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Name": c.name,
                "Unit": c.unit,
                "Score": c.score,
                "Grade": c.letter,
                "GP": c.grade_point,
            }
            for c in courses
        ],
        columns=["Name", "Unit", "Score", "Grade", "GP"],
    )

"""
Tests for the CSV upload helpers.
"""

import io

import pandas as pd
import pytest

from gpa_calculator.io_csv import (
    courses_frame,
    load_into_session,
    parse_courses,
    parse_semesters,
    read_csv_upload,
    validate_courses_csv,
    validate_semesters_csv,
)
from gpa_calculator.session import CalculationSession


def upload(text: str) -> io.StringIO:
    return io.StringIO(text)


class TestReadAndValidate:

    def test_column_aliases(self):
        df = read_csv_upload(upload(" Course ,Units,MARK\nMath,3,72\n"))
        assert list(df.columns) == ["name", "unit", "score"]

    def test_first_alias_wins(self):
        df = read_csv_upload(upload("credit,credits,score\n3,4,50\n"))
        assert list(df.columns) == ["unit", "credits", "score"]

    def test_courses_csv(self):
        df = validate_courses_csv(read_csv_upload(upload("Name,Unit,Score\nMath,3,72\n")))
        assert list(df.columns) == ["Name", "Unit", "Score"]
        assert parse_courses(df) == [(1, "Math", 3, 72)]

    def test_courses_csv_without_names(self):
        df = validate_courses_csv(read_csv_upload(upload("unit,score\n3,72\n2,48\n")))
        assert parse_courses(df) == [(1, None, 3, 72), (2, None, 2, 48)]

    def test_courses_csv_missing_columns(self):
        with pytest.raises(ValueError, match="Missing columns"):
            validate_courses_csv(read_csv_upload(upload("Name,Unit\nMath,3\n")))

    def test_parse_courses_skips_incomplete_rows(self):
        df = validate_courses_csv(
            read_csv_upload(upload("Name,Unit,Score\nMath,3,72\nPhysics,,48\nChem,4,\n"))
        )
        assert parse_courses(df) == [(1, "Math", 3.0, 72.0)]

    def test_semesters_csv(self):
        df = validate_semesters_csv(read_csv_upload(upload("TUGP,Total Units\n30,10\n,6\n")))
        assert list(df.columns) == ["TUGP", "Units"]
        assert parse_semesters(df) == [(1, 30.0, 10.0)]

    def test_semesters_csv_missing_columns(self):
        with pytest.raises(ValueError, match="Missing columns"):
            validate_semesters_csv(read_csv_upload(upload("TUGP\n30\n")))


class TestLoadIntoSession:

    def test_valid_rows_added_and_errors_reported(self):
        session = CalculationSession()
        errors = load_into_session(
            session,
            courses=[(1, "Math", 3.0, 72.0), (2, "Bad", 0.0, 50.0), (3, None, 2.0, 48.0)],
            semesters=[(1, 30.0, 10.0), (2, -5.0, 10.0)],
        )
        assert errors == [
            "Course row 2: invalid range (unit)",
            "Semester row 2: invalid range (total_grade_points)",
        ]
        assert [c.name for c in session.courses] == ["Math", "Course 2"]
        assert len(session.semesters) == 1

    def test_unparseable_cell_rejects_only_its_row(self):
        session = CalculationSession()
        df = validate_courses_csv(
            read_csv_upload(upload("Name,Unit,Score\nMath,3,72\nBad,three,50\n"))
        )
        errors = load_into_session(session, courses=parse_courses(df))
        assert errors == ["Course row 2: missing fields (unit)"]
        assert [(c.name, c.unit, c.grade_point) for c in session.courses] == [("Math", 3, 5)]

    def test_unparseable_semester_cell_rejects_only_its_row(self):
        session = CalculationSession()
        df = validate_semesters_csv(read_csv_upload(upload("TUGP,Total Units\nlots,6\n30,10\n")))
        errors = load_into_session(session, semesters=parse_semesters(df))
        assert errors == ["Semester row 1: missing fields (total_grade_points)"]
        assert [(s.total_grade_points, s.total_units) for s in session.semesters] == [(30.0, 10.0)]

    def test_errors_name_the_source_row_after_skipped_rows(self):
        session = CalculationSession()
        df = validate_courses_csv(read_csv_upload(upload("Name,Unit,Score\nA,,1\nB,0,50\n")))
        errors = load_into_session(session, courses=parse_courses(df))
        assert errors == ["Course row 2: invalid range (unit)"]
        assert session.courses == ()

    def test_nothing_to_load(self):
        session = CalculationSession()
        assert load_into_session(session) == []
        assert session.courses == ()


class TestCoursesFrame:

    def test_tabulates_records(self):
        session = CalculationSession()
        session.add_course("Math", 3, 72)
        session.add_course("Chem", 4, 39)
        df = courses_frame(session.courses)
        assert list(df.columns) == ["Name", "Unit", "Score", "Grade", "GP"]
        assert list(df["Grade"]) == ["A", "F"]
        assert list(df["GP"]) == [5, 0]

    def test_empty(self):
        df = courses_frame(())
        assert isinstance(df, pd.DataFrame)
        assert df.empty
        assert list(df.columns) == ["Name", "Unit", "Score", "Grade", "GP"]

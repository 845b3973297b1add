import logging
import uuid
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from gpa_calculator.grade_engine import (
    classify,
    compute_cumulative_average,
    compute_current_average,
    grade_point_to_letter,
    score_to_grade_point,
    total_grade_points,
    total_units,
    validate_course_input,
    validate_semester_input,
)

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class CourseRecord:
    # grade_point is fixed when the course is added; nothing recomputes it
    name: str
    unit: int
    score: float
    grade_point: int
    id: str = field(default_factory=_new_id)

    @property
    def letter(self) -> str:
        return grade_point_to_letter(self.grade_point)

    @property
    def weighted_points(self) -> int:
        return self.unit * self.grade_point


@dataclass(frozen=True)
class SemesterRecord:
    total_grade_points: float
    total_units: float
    id: str = field(default_factory=_new_id)


@dataclass(frozen=True)
class ComputationResult:
    current_average: float
    cumulative_average: Optional[float]
    classification: str
    cumulative_classification: Optional[str]
    total_units: float
    total_grade_points: float
    course_count: int


class CalculationSession:
    """
    In-memory course and semester lists for one calculator session.

    The lists change only through add/remove/clear; every compute_* call is a
    read-only projection over them. Not thread-safe.
    """

    def __init__(self):
        self._courses: List[CourseRecord] = []
        self._semesters: List[SemesterRecord] = []

    @property
    def courses(self) -> Tuple[CourseRecord, ...]:
        return tuple(self._courses)

    @property
    def semesters(self) -> Tuple[SemesterRecord, ...]:
        return tuple(self._semesters)

    # ------------------------
    # Courses
    # ------------------------
    def add_course(self, name: Optional[str], unit, score) -> CourseRecord:
        unit, score = validate_course_input(unit, score)

        if name is None or not str(name).strip():
            name = f"Course {len(self._courses) + 1}"

        course = CourseRecord(
            name=str(name).strip(),
            unit=unit,
            score=score,
            grade_point=score_to_grade_point(score),
        )
        self._courses.append(course)
        logger.debug(
            "Added course %s (unit=%d, score=%s, gp=%d)",
            course.name, course.unit, course.score, course.grade_point,
        )
        return course

    def remove_course(self, course_id: str) -> None:
        before = len(self._courses)
        self._courses = [c for c in self._courses if c.id != course_id]
        if len(self._courses) != before:
            logger.debug("Removed course %s", course_id)

    # ------------------------
    # Previous semesters
    # ------------------------
    def add_semester(self, total_grade_points, total_units) -> SemesterRecord:
        tgp, units = validate_semester_input(total_grade_points, total_units)
        semester = SemesterRecord(total_grade_points=tgp, total_units=units)
        self._semesters.append(semester)
        logger.debug("Added semester (tgp=%s, units=%s)", tgp, units)
        return semester

    def remove_semester(self, semester_id: str) -> None:
        before = len(self._semesters)
        self._semesters = [s for s in self._semesters if s.id != semester_id]
        if len(self._semesters) != before:
            logger.debug("Removed semester %s", semester_id)

    def clear_all(self) -> None:
        logger.debug(
            "Clearing %d course(s) and %d semester(s)",
            len(self._courses), len(self._semesters),
        )
        self._courses = []
        self._semesters = []

    # ------------------------
    # Projections
    # ------------------------
    def compute_current_average(self) -> float:
        return compute_current_average(self._courses)

    def compute_cumulative_average(self) -> Optional[float]:
        return compute_cumulative_average(self._courses, self._semesters)

    def summary(self) -> ComputationResult:
        current = self.compute_current_average()
        cumulative = self.compute_cumulative_average()
        return ComputationResult(
            current_average=current,
            cumulative_average=cumulative,
            classification=classify(current),
            cumulative_classification=(
                classify(cumulative) if cumulative is not None else None
            ),
            total_units=total_units(self._courses),
            total_grade_points=total_grade_points(self._courses),
            course_count=len(self._courses),
        )

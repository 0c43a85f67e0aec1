"""Shared fixtures for the comprehensive review tests."""

import pytest

from comp_review.config import DATA_DIR
from comp_review.data import DataLoader
from comp_review.engines import CourseNameNormalizer
from comp_review.models import (
    EnrollmentHistory,
    EnrollmentRecord,
    ReportedInfo,
    RequirementSlot,
    StudentApplication,
    StudentProfile,
)

CURRENT = 2262


@pytest.fixture
def current_term():
    return CURRENT


@pytest.fixture
def normalizer():
    return CourseNameNormalizer()


@pytest.fixture(scope="session")
def loader():
    """Loader over the shipped rule files, shared across the session."""
    return DataLoader(data_dir=DATA_DIR)


@pytest.fixture
def make_slot():
    def _make(slot_id, course="", grade="", term=None, units=0, raw_course=None):
        return RequirementSlot(
            slot_id=slot_id,
            raw_course=course if raw_course is None else raw_course,
            course=course,
            grade=grade,
            term=term,
            units=units,
        )
    return _make


@pytest.fixture
def make_history():
    """Build an EnrollmentHistory from (course, term, grade, units) tuples."""
    def _make(*enrollments, admit_term=None):
        grouped = {}
        for course, term, grade, units in enrollments:
            grouped.setdefault(course, []).append((term, grade, units))
        records = {}
        for course, attempts in grouped.items():
            attempts.sort(key=lambda a: a[0], reverse=True)
            records[course] = [
                EnrollmentRecord(course=course, term=t, grade=g, units=u, rank=i)
                for i, (t, g, u) in enumerate(attempts[:3], 1)
            ]
        if admit_term is None:
            graded = [t for _, t, g, _ in enrollments if g]
            admit_term = min(graded) if graded else None
        return EnrollmentHistory(records=records, admit_term=admit_term)
    return _make


@pytest.fixture
def make_application():
    def _make(slots, sid="3030000001", admit_type="First Year", majors=("Data Science",),
              emphasis="", **reported):
        return StudentApplication(
            sid=sid,
            admit_type=admit_type,
            reported=ReportedInfo(**reported),
            considered_majors=list(majors),
            domain_emphasis=emphasis,
            slots=list(slots),
        )
    return _make


@pytest.fixture
def profile():
    return StudentProfile(
        gpa=3.5,
        expected_grad_term=2288,
        terms_in_attendance=2,
        majors=("Letters & Sci Undeclared UG",),
        colleges=("Clg of Letters & Science",),
    )


class FakeSISClient:
    """Serves canned lookups by student id; unknown ids fail like a bad response."""

    def __init__(self, students=None):
        self.students = dict(students or {})
        self.calls = []
        self.closed = False

    def fetch_enrollments(self, sid):
        self.calls.append(("Enrollment", sid))
        entry = self.students.get(sid)
        return entry[0] if entry else None

    def fetch_profile(self, sid):
        self.calls.append(("Student", sid))
        entry = self.students.get(sid)
        return entry[1] if entry else None

    def close(self):
        self.closed = True


@pytest.fixture
def fake_client():
    return FakeSISClient()

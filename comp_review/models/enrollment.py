"""
Authoritative record data models.

Contains the EnrollmentRecord, EnrollmentHistory and StudentProfile
dataclasses built from the student information system responses.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class EnrollmentRecord:
    """
    One historical enrollment of a course.

    rank orders repeated attempts of the same course by term, newest
    first: rank 1 is the most recent attempt.
    """
    course: str
    term: int
    grade: str
    units: float
    rank: int


@dataclass
class EnrollmentHistory:
    """
    Every course a student enrolled in, up to three attempts each.

    Attributes:
        records: course id -> attempts sorted by term descending
        admit_term: earliest term with a grade on record (None if nothing is graded)
    """
    records: dict = field(default_factory=dict)
    admit_term: Optional[int] = None

    def attempts(self, course: str) -> list:
        """Ranked attempts for a course (empty list if never enrolled)."""
        return self.records.get(course, [])

    def attempt(self, course: str, rank: int) -> Optional[EnrollmentRecord]:
        for record in self.attempts(course):
            if record.rank == rank:
                return record
        return None

    def __contains__(self, course: str) -> bool:
        return course in self.records

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class StudentProfile:
    """
    Identity facts from the active undergraduate career record.

    All fields are None/empty when the student has no undergraduate career.
    majors[i] and colleges[i] come from the same academic plan.
    """
    gpa: Optional[float] = None
    expected_grad_term: Optional[int] = None
    terms_in_attendance: Optional[int] = None
    majors: tuple = ()
    colleges: tuple = ()

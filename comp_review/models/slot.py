"""
Requirement slot data model.

Contains the RequirementSlot dataclass that represents one degree
requirement position a student reported a course against.
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..config import (
    OTHER_COURSE,
    TEST_SCORE_COURSES,
    TEST_SCORE_TERM,
    TRANSFER_MARKER,
    is_term_id,
)


@dataclass
class RequirementSlot:
    """
    One requirement position on an application (e.g., "LD #1 Calc 1").

    This is the core data unit that flows through the engine. It starts as
    what the student typed and is corrected in place by the reconciler when
    the enrollment record disagrees (term or grade overwritten, units filled in).

    Attributes:
        slot_id: Requirement name without the course/grade/sem suffix
        raw_course: Course text exactly as reported
        course: Normalized course id (e.g., "COMPSCI 61A")
        grade: Reported grade, "PL" for planned/in-progress
        term: Term id (int) or the raw text when it is not a term
              ("Transfer", "Test Score", "Other", ...)
        units: Units found in the enrollment record (0 until matched)
    """
    slot_id: str
    raw_course: str = ""
    course: str = ""
    grade: str = ""
    term: Optional[Union[int, str]] = None
    units: float = 0

    @property
    def term_text(self) -> str:
        return "" if self.term is None else str(self.term)

    @property
    def is_transfer(self) -> bool:
        """Transfer credit is mentioned in either the course or the term."""
        return (TRANSFER_MARKER in self.raw_course.lower()
                or TRANSFER_MARKER in self.course.lower()
                or TRANSFER_MARKER in self.term_text.lower())

    @property
    def is_test_score(self) -> bool:
        return (self.term_text.strip() == TEST_SCORE_TERM
                or self.course.strip().upper() in TEST_SCORE_COURSES)

    @property
    def is_blank(self) -> bool:
        return not self.course or self.course.strip().upper() == OTHER_COURSE

    @property
    def has_numeric_term(self) -> bool:
        return is_term_id(self.term)

    @property
    def term_id(self) -> Optional[int]:
        """The term as an int, or None when it is not a term id."""
        return int(self.term) if self.has_numeric_term else None

    def label(self) -> str:
        """"<slot id> - <course>" as shown in audit lists."""
        return f"{self.slot_id} - {self.course}"

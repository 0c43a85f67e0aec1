"""
Application data model.

Contains the StudentApplication dataclass: everything one student reported
on the comprehensive review application.
"""

from dataclasses import dataclass, field
from typing import Optional


FIRST_YEAR = "First Year"
TRANSFER = "Transfer"


@dataclass
class ReportedInfo:
    """Identifying fields exactly as the student reported them."""
    admit_term: object = None       # term id when parseable, raw text otherwise
    expected_grad_term: object = None
    gpa: object = None
    college: str = ""               # comma separated when several
    major: str = ""                 # comma separated when several


@dataclass
class StudentApplication:
    """
    One applicant's row, split into identifying info and requirement slots.

    Attributes:
        sid: Student id used for the authoritative lookups
        admit_type: "First Year" or "Transfer" (the "FY vs TR" column)
        reported: ReportedInfo with admit term, EGT, GPA, college, major
        considered_majors: majors the student ranked, first choice first
        domain_emphasis: first choice domain emphasis (Data Science only)
        slots: RequirementSlot list in column order
        extra: other identifying columns passed through to the report
    """
    sid: str
    admit_type: str = FIRST_YEAR
    reported: ReportedInfo = field(default_factory=ReportedInfo)
    considered_majors: list = field(default_factory=list)
    domain_emphasis: str = ""
    slots: list = field(default_factory=list)
    extra: dict = field(default_factory=dict)

    @property
    def is_transfer(self) -> bool:
        return self.admit_type.strip().lower() == TRANSFER.lower()

    def slot(self, slot_id: str) -> Optional[object]:
        """Look up a slot by id (None if the application has no such column)."""
        for s in self.slots:
            if s.slot_id == slot_id:
                return s
        return None

    def considers(self, major: str) -> bool:
        return any(major.lower() in m.lower() for m in self.considered_majors if m)

"""
Verification and eligibility result data models.

Contains dataclasses for representing what the engine found for one
student: which facts could not be verified, the requirement aggregates,
and the eligibility verdict for each major under consideration.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..config import LOOKUP_FAILED_MARKER, IDENTITY_FIELDS


@dataclass
class VerificationResult:
    """
    Per-student discrepancies against the authoritative record.

    unable_to_verify keeps the order the report shows: identifying
    fields first (in IDENTITY_FIELDS order), then slot ids in column order.
    """
    unverifiable_slots: list = field(default_factory=list)
    disagreements: set = field(default_factory=set)
    lookup_failed: bool = False

    def flag_slot(self, slot_id: str):
        if slot_id not in self.unverifiable_slots:
            self.unverifiable_slots.append(slot_id)

    @property
    def unable_to_verify(self) -> list:
        if self.lookup_failed:
            return [LOOKUP_FAILED_MARKER]
        fields = [f for f in IDENTITY_FIELDS if f in self.disagreements]
        return fields + list(self.unverifiable_slots)

    @property
    def is_clean(self) -> bool:
        return not self.lookup_failed and not self.disagreements and not self.unverifiable_slots


class VerdictStatus(Enum):
    """
    Possible eligibility outcomes.

    ELIGIBLE: Meets the admission requirements for the student's tier
    INELIGIBLE: Does not meet them (reason attached)
    CONDITIONAL: One requirement short, closable by in-progress or summer work
    """
    ELIGIBLE = "eligible"
    INELIGIBLE = "ineligible"
    CONDITIONAL = "conditional"


class ReasonKind(Enum):
    """Why a verdict is not a plain ELIGIBLE."""
    TIER_PROGRESS = "tier_progress"      # not enough progress for this tier
    TOO_MANY_TERMS = "too_many_terms"    # beyond every tier
    BASIC_GATE = "basic_gate"            # gate requirement not met
    OVERRIDE = "override"                # a major-specific special case
    GPA = "gpa"                          # major GPA below the minimum
    NOT_ELIGIBLE_ADMIT_TYPE = "admit_type"
    NEEDS_REVIEW = "needs_review"        # cannot be decided automatically


@dataclass(frozen=True)
class EligibilityVerdict:
    """Eligibility outcome for one (student, major)."""
    status: VerdictStatus
    reason: str = ""
    reason_kind: Optional[ReasonKind] = None

    @classmethod
    def eligible(cls) -> "EligibilityVerdict":
        return cls(VerdictStatus.ELIGIBLE)

    @classmethod
    def ineligible(cls, reason: str, kind: ReasonKind) -> "EligibilityVerdict":
        return cls(VerdictStatus.INELIGIBLE, reason, kind)

    @classmethod
    def conditional(cls, reason: str, kind: ReasonKind) -> "EligibilityVerdict":
        return cls(VerdictStatus.CONDITIONAL, reason, kind)

    @property
    def is_eligible(self) -> bool:
        return self.status == VerdictStatus.ELIGIBLE

    def render(self) -> str:
        """Report cell text: TRUE, FALSE: <reason> or CONDITIONAL: <reason>."""
        if self.status == VerdictStatus.ELIGIBLE:
            return "TRUE"
        if self.status == VerdictStatus.CONDITIONAL:
            return f"CONDITIONAL: {self.reason}"
        return f"FALSE: {self.reason}"


@dataclass(frozen=True)
class RequirementCounts:
    """Completed and currently enrolled requirements in a group."""
    completed: int = 0
    enrolled: int = 0

    @property
    def total(self) -> int:
        return self.completed + self.enrolled


@dataclass
class ProblemGrades:
    """Requirements taken Pass/No Pass or graded below C-, for audit display."""
    pass_no_pass: list = field(default_factory=list)
    below_c_minus: list = field(default_factory=list)

    @property
    def any(self) -> bool:
        return bool(self.pass_no_pass or self.below_c_minus)


@dataclass
class MajorReport:
    """
    Everything computed for one major the student is considering.

    gpa is None when no requirement contributes (reported as "NA").
    """
    major: str
    key: str                              # short key used in report columns ("ds")
    gpa: Optional[float]
    problem_grades: ProblemGrades
    verdict: EligibilityVerdict
    course_notes: list = field(default_factory=list)   # upper division "may not satisfy" notes


@dataclass
class StudentReport:
    """Full output for one student."""
    application: object                   # StudentApplication
    verification: VerificationResult
    current_term: int
    profile: object = None                # StudentProfile, None when the lookup failed
    plan_flags: list = field(default_factory=list)
    majors: list = field(default_factory=list)   # List of MajorReport

    @property
    def sid(self) -> str:
        return self.application.sid

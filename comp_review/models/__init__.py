"""
Data models for the comprehensive review engine.

This package contains all dataclasses and enums used throughout the system.
These serve as "contracts" between different parts of the system.
"""

from .slot import RequirementSlot
from .enrollment import EnrollmentRecord, EnrollmentHistory, StudentProfile
from .application import StudentApplication, ReportedInfo, FIRST_YEAR, TRANSFER
from .results import (
    VerificationResult,
    VerdictStatus,
    ReasonKind,
    EligibilityVerdict,
    RequirementCounts,
    ProblemGrades,
    MajorReport,
    StudentReport,
)
from .rules import (
    RequirementCheck,
    TierRule,
    AdmitTypeRules,
    GpaRule,
    SlotCourseRule,
    CourseGroupRule,
    CourseListRules,
    MajorRuleSet,
)

__all__ = [
    # Application models
    "RequirementSlot",
    "StudentApplication",
    "ReportedInfo",
    "FIRST_YEAR",
    "TRANSFER",
    # Authoritative record models
    "EnrollmentRecord",
    "EnrollmentHistory",
    "StudentProfile",
    # Results
    "VerificationResult",
    "VerdictStatus",
    "ReasonKind",
    "EligibilityVerdict",
    "RequirementCounts",
    "ProblemGrades",
    "MajorReport",
    "StudentReport",
    # Rule configuration
    "RequirementCheck",
    "TierRule",
    "AdmitTypeRules",
    "GpaRule",
    "SlotCourseRule",
    "CourseGroupRule",
    "CourseListRules",
    "MajorRuleSet",
]

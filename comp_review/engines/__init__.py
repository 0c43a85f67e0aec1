"""
Verification and eligibility engines.

This package contains the engines that perform the core business logic
of the review: course name normalization, reconciliation against the
enrollment record, identity verification, requirement aggregates and the
per-major eligibility and course list checks.
"""

from .normalizer import CourseNameNormalizer, should_normalize, strip_section_variant
from .reconciler import EnrollmentReconciler, highest_grade
from .identity import IdentifyingInfoVerifier
from .aggregates import GPACalculator, ProblemGradeDetector, RequirementCounter, matches_prefix, select_slots
from .eligibility import MajorEligibilityEvaluator
from .plan_flags import PlanFlagger
from .course_lists import UpperDivisionCourseChecker

__all__ = [
    "CourseNameNormalizer",
    "should_normalize",
    "strip_section_variant",
    "EnrollmentReconciler",
    "highest_grade",
    "IdentifyingInfoVerifier",
    "RequirementCounter",
    "GPACalculator",
    "ProblemGradeDetector",
    "matches_prefix",
    "select_slots",
    "MajorEligibilityEvaluator",
    "PlanFlagger",
    "UpperDivisionCourseChecker",
]

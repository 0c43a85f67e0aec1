"""
Major rule configuration models.

These dataclasses are the validated, immutable form of data/majors.json
and data/course_lists.json. They serve as the "contract" between the rule
files and the engines: the engines never read JSON themselves.
"""

from dataclasses import dataclass, field
from typing import Optional


# Check types understood by MajorEligibilityEvaluator
CHECK_COMPLETED = "completed"            # every listed requirement completed
CHECK_GRADE = "grade"                    # grade policy over all_of / any_of requirements
CHECK_COUNT = "count"                    # completed + enrolled count over a group
CHECK_NEEDS_REVIEW_TERM = "needs_review_term"
CHECK_REQUIRED_MAJOR = "required_major_for_course"

CHECK_TYPES = frozenset({
    CHECK_COMPLETED, CHECK_GRADE, CHECK_COUNT,
    CHECK_NEEDS_REVIEW_TERM, CHECK_REQUIRED_MAJOR,
})

# Grade policies for CHECK_GRADE
POLICY_COMPLETED = "completed"           # letter grade on record
POLICY_IN_PROGRESS_OK = "in_progress_ok" # letter grade or currently in progress
POLICY_PLACEHOLDER_OK = "placeholder_ok" # letter grade or a "PL" placeholder

GRADE_POLICIES = frozenset({POLICY_COMPLETED, POLICY_IN_PROGRESS_OK, POLICY_PLACEHOLDER_OK})


@dataclass(frozen=True)
class RequirementCheck:
    """
    A single rule in a major's decision table.

    Requirements are referenced by slot-id prefix ("LD #5" selects
    "LD #5 DSc8/St20"). Which fields matter depends on check_type:

    completed:   prefixes, reason
    grade:       prefixes (all_of) or any_of, policy, not_future, reason
    count:       prefixes (the group), min_count, exact, min_completed,
                 shortfall_reason (one short -> CONDITIONAL), reason
    needs_review_term:        prefixes, value, reason
    required_major_for_course: prefixes, course, major, reason
    """
    check_type: str
    reason: str
    prefixes: tuple = ()
    any_of: tuple = ()
    policy: str = POLICY_COMPLETED
    not_future: bool = False
    min_count: int = 0
    exact: bool = False
    min_completed: int = 0
    shortfall_reason: str = ""
    value: str = ""
    course: str = ""
    major: str = ""


@dataclass(frozen=True)
class TierRule:
    """
    A class-standing tier.

    A student falls in the first tier whose max_terms is at least their
    terms in attendance; max_terms None means no upper bound.
    """
    name: str
    max_terms: Optional[int]
    checks: tuple = ()

    def covers(self, terms_in_attendance: int) -> bool:
        return self.max_terms is None or terms_in_attendance <= self.max_terms


@dataclass(frozen=True)
class AdmitTypeRules:
    """Tiers for one admit type; ineligible_reason rejects the admit type outright."""
    tiers: tuple = ()
    ineligible_reason: str = ""


@dataclass(frozen=True)
class GpaRule:
    """Minimum major GPA, conditional while listed requirements are in progress."""
    minimum: float
    in_progress_prefixes: tuple = ()
    reason: str = "GPA below minimum"
    in_progress_reason: str = "GPA below minimum with courses in progress"


@dataclass(frozen=True)
class SlotCourseRule:
    """
    Which courses can fill one upper division slot.

    accepted:            explicit course list
    course_list:         name of a shared list (domain emphasis, cluster, electives)
    departments:         any course from these departments ...
    rejected_numbers:    ... except these course numbers
    questionable_numbers / questionable_note: numbers flagged with an extra note
    term_limits:         course -> {"only_term" | "max_term": term id}
    notes:               course -> custom message instead of the default
    label:               extra text after the slot id in messages
    """
    slot_prefix: str
    accepted: frozenset = frozenset()
    course_list: str = ""
    departments: frozenset = frozenset()
    rejected_numbers: frozenset = frozenset()
    questionable_numbers: frozenset = frozenset()
    questionable_note: str = ""
    term_limits: dict = field(default_factory=dict, hash=False, compare=False)
    notes: dict = field(default_factory=dict, hash=False, compare=False)
    label: str = ""


@dataclass(frozen=True)
class CourseGroupRule:
    """
    A constraint across several slots.

    distinct:          the same course may not fill two of the slots
    at_most_one:       at most one of `courses` across the slots
    department_limit:  courses drawn from at most max_departments departments,
                       with `merge` folding paired departments together
    requires_one_of:   at least one slot must hold one of `courses`
    """
    group_type: str
    slot_prefixes: tuple
    message: str
    courses: frozenset = frozenset()
    max_departments: int = 0
    merge: dict = field(default_factory=dict, hash=False, compare=False)


@dataclass(frozen=True)
class CourseListRules:
    """Upper division course rules for one major."""
    slots: tuple = ()                       # SlotCourseRule
    groups: tuple = ()                      # CourseGroupRule


@dataclass(frozen=True)
class MajorRuleSet:
    """
    Complete rule set for one major.

    Attributes:
        name: Major name as it appears in the ranking columns
        key: Short key for report columns ("ds", "cs", "st")
        requirements: slot prefixes that make up the major (GPA, problem grades)
        gates: basic gate checks evaluated before any tier logic
        first_year / transfer: tiers per admit type
        gpa_rule: optional minimum major GPA
        course_rules: optional upper division course rules
    """
    name: str
    key: str
    requirements: tuple
    gates: tuple = ()
    first_year: AdmitTypeRules = AdmitTypeRules()
    transfer: AdmitTypeRules = AdmitTypeRules()
    gpa_rule: Optional[GpaRule] = None
    course_rules: Optional[CourseListRules] = None

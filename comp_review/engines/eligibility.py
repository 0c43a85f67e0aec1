"""
Major Eligibility Evaluator.

This module applies a major's decision table to a student's reconciled
requirement slots and produces an eligibility verdict.
"""

import logging
from typing import Optional

from ..config import (
    NOT_ACCEPTED_COMPLETED,
    NOT_ACCEPTED_IN_PROGRESS,
    PLACEHOLDER_GRADE,
)
from ..errors import ConfigurationError
from ..models import (
    EligibilityVerdict,
    MajorRuleSet,
    ReasonKind,
    RequirementCheck,
    StudentApplication,
    StudentProfile,
)
from ..models.rules import (
    CHECK_COMPLETED,
    CHECK_COUNT,
    CHECK_GRADE,
    CHECK_NEEDS_REVIEW_TERM,
    CHECK_REQUIRED_MAJOR,
    POLICY_COMPLETED,
    POLICY_IN_PROGRESS_OK,
    POLICY_PLACEHOLDER_OK,
)
from .aggregates import RequirementCounter, is_completed, is_enrolled, select_slots

LOGGER = logging.getLogger(__name__)


class MajorEligibilityEvaluator:
    """
    Evaluates admission eligibility for one major.

    ═══════════════════════════════════════════════════════════════════════════
    DECISION ORDER
    ═══════════════════════════════════════════════════════════════════════════

    1. ADMIT TYPE: a major may reject an admit type outright (e.g. transfers
       are not eligible for comprehensive review into Computer Science).
    2. BASIC GATES: checks that must pass before any tier logic. A failed
       gate is a BASIC_GATE reason; special-case overrides in the same list
       (a course that needs a specific declared major, a term answer that
       needs a human) carry their own reason kinds.
    3. TIER: the first tier whose max_terms covers the student's terms in
       attendance. No such tier means TOO_MANY_TERMS, categorically.
    4. TIER CHECKS: typically a minimum completed + enrolled count over a
       requirement group. One short with a shortfall_reason configured gives
       CONDITIONAL (a summer course can still close the gap).
    5. MAJOR GPA: optional minimum; CONDITIONAL while listed requirements
       are still in progress.

    The tables are data (MajorRuleSet, loaded from majors.json), so each
    major can have its own gates, tier boundaries and overrides.
    ═══════════════════════════════════════════════════════════════════════════
    """

    def __init__(self, counter: Optional[RequirementCounter] = None):
        self.counter = counter or RequirementCounter()

    def evaluate(self, rules: MajorRuleSet, application: StudentApplication,
                 profile: StudentProfile, slots: list, current_term: int,
                 major_gpa: Optional[float] = None) -> EligibilityVerdict:
        admit_rules = rules.transfer if application.is_transfer else rules.first_year
        if admit_rules.ineligible_reason:
            return EligibilityVerdict.ineligible(admit_rules.ineligible_reason,
                                                 ReasonKind.NOT_ELIGIBLE_ADMIT_TYPE)

        for check in rules.gates:
            verdict = self._apply(check, application, slots, current_term, ReasonKind.BASIC_GATE)
            if verdict is not None:
                return verdict

        if admit_rules.tiers:
            verdict = self._evaluate_tiers(admit_rules.tiers, application, profile, slots, current_term)
            if verdict is not None:
                return verdict

        if rules.gpa_rule is not None:
            return self._evaluate_gpa(rules, slots, current_term, major_gpa)
        return EligibilityVerdict.eligible()

    def _evaluate_tiers(self, tiers, application, profile, slots, current_term):
        terms = profile.terms_in_attendance if profile is not None else None
        if terms is None:
            if all(t.max_terms is None for t in tiers):
                terms = 0
            else:
                return EligibilityVerdict.conditional(
                    "Terms in attendance unavailable", ReasonKind.NEEDS_REVIEW)

        tier = next((t for t in tiers if t.covers(terms)), None)
        if tier is None:
            return EligibilityVerdict.ineligible(
                f"Too many terms in attendance ({terms} terms)", ReasonKind.TOO_MANY_TERMS)

        LOGGER.debug("%s evaluated as %s (%s terms)", application.sid, tier.name, terms)
        for check in tier.checks:
            verdict = self._apply(check, application, slots, current_term, ReasonKind.TIER_PROGRESS)
            if verdict is not None:
                return verdict
        return None

    def _evaluate_gpa(self, rules, slots, current_term, major_gpa):
        gpa_rule = rules.gpa_rule
        if major_gpa is not None and major_gpa >= gpa_rule.minimum:
            return EligibilityVerdict.eligible()
        in_progress = any(
            is_enrolled(s, current_term) or (s.grade or "").strip().upper() == PLACEHOLDER_GRADE
            for s in self._resolve(slots, gpa_rule.in_progress_prefixes, rules.name)
        )
        if in_progress:
            return EligibilityVerdict.conditional(gpa_rule.in_progress_reason, ReasonKind.GPA)
        return EligibilityVerdict.ineligible(gpa_rule.reason, ReasonKind.GPA)

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def _apply(self, check: RequirementCheck, application, slots, current_term,
               kind: ReasonKind) -> Optional[EligibilityVerdict]:
        """Run one check; None means it passed."""
        if check.check_type == CHECK_COMPLETED:
            selected = self._resolve(slots, check.prefixes, application.sid)
            if all(is_completed(s) for s in selected):
                return None
            return EligibilityVerdict.ineligible(check.reason, kind)

        if check.check_type == CHECK_GRADE:
            if self._grade_check_passes(check, slots, current_term, application.sid):
                return None
            return EligibilityVerdict.ineligible(check.reason, kind)

        if check.check_type == CHECK_COUNT:
            return self._count_check(check, slots, current_term, kind)

        if check.check_type == CHECK_NEEDS_REVIEW_TERM:
            selected = self._resolve(slots, check.prefixes, application.sid)
            if any(s.term_text.strip().lower() == check.value.lower() for s in selected):
                return EligibilityVerdict.conditional(check.reason, ReasonKind.NEEDS_REVIEW)
            return None

        if check.check_type == CHECK_REQUIRED_MAJOR:
            selected = self._resolve(slots, check.prefixes, application.sid)
            takes_course = any(s.course == check.course for s in selected)
            if takes_course and check.major.lower() not in (application.reported.major or "").lower():
                return EligibilityVerdict.ineligible(check.reason, ReasonKind.OVERRIDE)
            return None

        raise ConfigurationError(f"Unknown check type: {check.check_type!r}")

    def _count_check(self, check, slots, current_term, kind):
        counts = self.counter.counts(slots, check.prefixes, current_term)
        total = counts.total
        if counts.completed < check.min_completed:
            return EligibilityVerdict.ineligible(check.reason, kind)
        if check.exact:
            passed = total == check.min_count
        else:
            passed = total >= check.min_count
        if passed:
            return None
        if check.shortfall_reason and total == check.min_count - 1:
            return EligibilityVerdict.conditional(check.shortfall_reason, kind)
        return EligibilityVerdict.ineligible(check.reason, kind)

    def _grade_check_passes(self, check, slots, current_term, sid) -> bool:
        if check.prefixes:
            required = self._resolve(slots, check.prefixes, sid)
            if not all(self._grade_accepted(s, check, current_term) for s in required):
                return False
        if check.any_of:
            options = self._resolve(slots, check.any_of, sid)
            if not any(self._grade_accepted(s, check, current_term) for s in options):
                return False
        return True

    @staticmethod
    def _grade_accepted(slot, check, current_term) -> bool:
        grade = (slot.grade or "").strip().upper()
        if check.not_future and slot.term_id is not None and slot.term_id > current_term:
            return False
        if check.policy == POLICY_COMPLETED:
            return bool(grade) and grade not in NOT_ACCEPTED_COMPLETED
        if check.policy == POLICY_PLACEHOLDER_OK:
            if grade == PLACEHOLDER_GRADE:
                return True
            return bool(grade) and grade not in NOT_ACCEPTED_COMPLETED
        if check.policy == POLICY_IN_PROGRESS_OK:
            return bool(grade) and grade not in NOT_ACCEPTED_IN_PROGRESS
        raise ConfigurationError(f"Unknown grade policy: {check.policy!r}")

    @staticmethod
    def _resolve(slots, prefixes, context) -> list:
        """Slots for each prefix; a prefix with no slot means the input lacks a required column."""
        selected = []
        for prefix in prefixes:
            found = select_slots(slots, [prefix])
            if not found:
                raise ConfigurationError(
                    f"Requirement {prefix!r} is referenced by the rules but missing from the input ({context})")
            selected.extend(found)
        return selected

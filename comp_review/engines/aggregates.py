"""
Requirement aggregates.

Counts, major GPA and problem grades over a group of requirement slots,
computed after reconciliation so they reflect the corrected grades and terms.
"""

import re
from typing import Optional

from ..config import (
    BELOW_C_MINUS_GRADES,
    LETTER_GRADE_POINTS,
    NOT_COMPLETED_GRADES,
    PASS_NO_PASS_GRADES,
)
from ..models import ProblemGrades, RequirementCounts


def matches_prefix(slot_id: str, prefix: str) -> bool:
    """
    True if a slot belongs to a requirement prefix.

    "LD #1" selects "LD #1 Calc 1" but not "LD #10 DE"; "DS UD" selects
    "DS UD#3".
    """
    if slot_id == prefix or slot_id.startswith(prefix + " "):
        return True
    if prefix and not prefix[-1].isdigit() and slot_id.startswith(prefix):
        rest = slot_id[len(prefix):]
        return bool(re.match(r"^#?\d", rest))
    return False


def select_slots(slots: list, prefixes) -> list:
    """Slots matching any of the prefixes, in their original order."""
    return [s for s in slots if any(matches_prefix(s.slot_id, p) for p in prefixes)]


def is_completed(slot) -> bool:
    """A letter grade (or other non-placeholder, non-P/NP mark) is on the slot."""
    grade = (slot.grade or "").strip().upper()
    return bool(grade) and grade not in NOT_COMPLETED_GRADES


def is_enrolled(slot, current_term: int) -> bool:
    return slot.term_id == current_term


class RequirementCounter:
    """
    Counts completed and currently enrolled requirements in a group.

    A slot counts in at most one bucket: completed wins, so a slot graded
    at the current term is not double counted as enrolled.
    """

    def count_completed(self, slots: list, prefixes) -> int:
        return sum(1 for s in select_slots(slots, prefixes) if is_completed(s))

    def count_enrolled(self, slots: list, prefixes, current_term: int) -> int:
        return sum(1 for s in select_slots(slots, prefixes)
                   if not is_completed(s) and is_enrolled(s, current_term))

    def counts(self, slots: list, prefixes, current_term: int) -> RequirementCounts:
        return RequirementCounts(
            completed=self.count_completed(slots, prefixes),
            enrolled=self.count_enrolled(slots, prefixes, current_term),
        )


class GPACalculator:
    """
    Unit-weighted GPA over a requirement group.

    A slot contributes only if it has:
    - a letter grade in the point table (P/NP, PL, NA, I... are skipped)
    - units > 0 (units only exist once the enrollment record confirmed it)
    - a numeric term (transfer courses and test scores are excluded)

    If the reported grade did not match the record, the reconciler has
    already replaced it with the highest grade on record, so that grade is
    what counts here.
    """

    def __init__(self, grade_points=LETTER_GRADE_POINTS, precision: int = 3):
        self.grade_points = grade_points
        self.precision = precision

    def calculate(self, slots: list, prefixes) -> Optional[float]:
        """Returns the GPA in [0.0, 4.0], or None when nothing contributes."""
        total_units = 0.0
        earned_points = 0.0
        for slot in select_slots(slots, prefixes):
            grade = (slot.grade or "").strip().upper()
            if grade not in self.grade_points:
                continue
            try:
                units = float(slot.units or 0)
            except (TypeError, ValueError):
                continue
            if units <= 0:
                continue
            if not slot.has_numeric_term:
                continue
            total_units += units
            earned_points += units * self.grade_points[grade]

        if total_units == 0:
            return None
        return round(earned_points / total_units, self.precision)


class ProblemGradeDetector:
    """Finds requirements taken Pass/No Pass or graded below C-."""

    def detect(self, slots: list, prefixes) -> ProblemGrades:
        problems = ProblemGrades()
        for slot in select_slots(slots, prefixes):
            grade = (slot.grade or "").strip().upper()
            if grade in PASS_NO_PASS_GRADES:
                problems.pass_no_pass.append(slot.label())
            elif grade in BELOW_C_MINUS_GRADES:
                problems.below_c_minus.append(slot.label())
        return problems

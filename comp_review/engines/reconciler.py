"""
Enrollment Reconciler.

This module checks each reported requirement slot against the student's
enrollment history and corrects or flags it.
"""

import logging
from typing import Optional

from ..config import (
    FIRST_YEAR_SECTION_PREFIX,
    INCOMPLETE_GRADE,
    MAX_ATTEMPTS,
    NOT_AVAILABLE,
    PLACEHOLDER_GRADE,
    grade_rank,
    no_record_marker,
)
from ..models import EnrollmentHistory, RequirementSlot

LOGGER = logging.getLogger(__name__)


def highest_grade(grades: list) -> Optional[str]:
    """
    Highest grade by grade points; non-letter marks rank below every letter.

    Ties keep the first occurrence ("A+" before "A" stays "A+").
    """
    if not grades:
        return None
    best = grades[0]
    for grade in grades[1:]:
        if grade_rank(grade) > grade_rank(best):
            best = grade
    return best


class EnrollmentReconciler:
    """
    Matches reported (course, grade, term) slots against enrollment history.

    CANDIDATE ORDER:
    ---------------
    For attempts 1..3 (most recent first), the plain course name and then the
    first-year program variant ("X" + course, e.g. "XMATH 1A"). The first
    candidate that matches wins.

    MATCHING PRECEDENCE (per candidate):
    -----------------------------------
    1. Incomplete on record      -> matched, grade becomes "I"
    2. Enrolled in current term  -> matched; a stale placeholder or wrong
                                    term is rewritten to (current term, "PL")
    3. Same grade as reported    -> matched, term corrected if it differs

    WHEN NOTHING MATCHES:
    --------------------
    - reported for the current term: term becomes a "no record" marker
    - grades were seen for the course: grade becomes the highest one seen
    - nothing on record at all: grade becomes "NA"

    OUT OF SCOPE (left untouched, neither matched nor flagged):
    transfer credit, test scores, blank/"Other" courses, future terms.
    """

    def __init__(self, max_attempts: int = MAX_ATTEMPTS,
                 section_prefix: str = FIRST_YEAR_SECTION_PREFIX):
        self.max_attempts = max_attempts
        self.section_prefix = section_prefix

    def is_in_scope(self, slot: RequirementSlot, current_term: int) -> bool:
        """False for slots that the enrollment record cannot confirm."""
        if slot.is_blank or slot.is_transfer or slot.is_test_score:
            return False
        term_id = slot.term_id
        if term_id is not None and term_id > current_term:
            return False
        return True

    def candidates(self, course: str, history: EnrollmentHistory) -> list:
        """Every (attempt, naming variant) record to try, in precedence order."""
        variants = [course, f"{self.section_prefix}{course}"]
        found = []
        for rank in range(1, self.max_attempts + 1):
            for name in variants:
                record = history.attempt(name, rank)
                if record is not None:
                    found.append(record)
        return found

    def reconcile(self, slot: RequirementSlot, history: EnrollmentHistory,
                  current_term: int) -> Optional[bool]:
        """
        Reconcile one slot in place.

        Returns:
            True if confirmed, False if unverifiable, None if out of scope
        """
        if not self.is_in_scope(slot, current_term):
            return None

        reported_grade = slot.grade.strip().upper() if slot.grade else ""
        reported_term = slot.term_id
        observed = []
        units = 0
        matched = False

        for record in self.candidates(slot.course, history):
            grade = str(record.grade).strip().upper() if record.grade is not None else ""

            if grade == INCOMPLETE_GRADE:
                matched = True
                slot.grade = INCOMPLETE_GRADE
                LOGGER.debug("Incomplete on record for %s (%s)", slot.course, slot.slot_id)
                break

            if record.term == current_term:
                matched = True
                units = record.units or 0
                if reported_term != current_term or reported_grade != PLACEHOLDER_GRADE:
                    slot.term = current_term
                    slot.grade = PLACEHOLDER_GRADE
                break

            if grade:
                observed.append(grade)
                if grade == reported_grade:
                    matched = True
                    units = record.units or 0
                    if reported_term != record.term:
                        slot.term = record.term
                    break

        slot.units = units
        if matched:
            return True

        if reported_grade == PLACEHOLDER_GRADE:
            LOGGER.debug("No current enrollment of %s for %s", slot.course, slot.slot_id)
        else:
            LOGGER.debug("No record of %s with grade %s for %s; saw %s",
                         slot.course, reported_grade, slot.slot_id, ", ".join(observed) or "nothing")

        if reported_term == current_term:
            slot.term = no_record_marker(current_term)
        elif observed:
            slot.grade = highest_grade(observed)
        else:
            slot.grade = NOT_AVAILABLE
        return False

    def reconcile_all(self, slots: list, history: EnrollmentHistory, current_term: int) -> list:
        """Reconcile every slot; returns the ids that could not be confirmed."""
        unverifiable = []
        for slot in slots:
            if self.reconcile(slot, history, current_term) is False:
                unverifiable.append(slot.slot_id)
        return unverifiable

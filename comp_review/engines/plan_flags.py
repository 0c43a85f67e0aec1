"""
Plan flags.

Flags problems with the terms a student plans to take requirements in,
relative to their expected graduation term.
"""

from ..config import PLACEHOLDER_GRADE, is_summer_term, is_term_id


class PlanFlagger:
    """
    Flags a student's course plan.

    - Summer semesters planned: a placeholder ("PL") requirement in a summer
    - Terms planned after application EGT / after EGT from SIS
    - A placeholder requirement in a term that has already passed
    """

    def flags(self, slots: list, reported_egt, record_egt, current_term: int) -> list:
        planned = [(s, s.term_id) for s in slots if s.has_numeric_term]
        result = []

        if any(is_summer_term(term) and self._is_placeholder(s) for s, term in planned):
            result.append("Summer semesters planned")
        if is_term_id(reported_egt) and any(term > int(reported_egt) for _, term in planned):
            result.append("Terms planned after application EGT")
        if is_term_id(record_egt) and any(term > int(record_egt) for _, term in planned):
            result.append("Terms planned after EGT from SIS")

        for slot, term in planned:
            if self._is_placeholder(slot) and term < current_term:
                result.append(f"{slot.slot_id} is planned for {term} which is not a current or future semester")
        return result

    @staticmethod
    def _is_placeholder(slot) -> bool:
        return (slot.grade or "").strip().upper() == PLACEHOLDER_GRADE

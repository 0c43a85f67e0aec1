"""
Upper Division Course Checker.

This module checks whether the upper division courses a student lists
would be approved for their major, and returns notes for a reviewer.
Nothing here changes eligibility; the notes are advisory.
"""

from ..models import CourseListRules, SlotCourseRule, StudentApplication
from .aggregates import select_slots, matches_prefix

GROUP_DISTINCT = "distinct"
GROUP_AT_MOST_ONE = "at_most_one"
GROUP_DEPARTMENT_LIMIT = "department_limit"
GROUP_REQUIRES_ONE_OF = "requires_one_of"

GROUP_TYPES = frozenset({GROUP_DISTINCT, GROUP_AT_MOST_ONE, GROUP_DEPARTMENT_LIMIT, GROUP_REQUIRES_ONE_OF})

DOMAIN_EMPHASIS_LIST = "domain_emphasis"


def _course_number(course: str):
    """Numeric course number ("COMPSCI 199" -> 199), None for "169A" and the like."""
    _, _, number = course.partition(" ")
    return int(number) if number.isdigit() else None


class UpperDivisionCourseChecker:
    """
    Checks listed upper division courses against a major's course rules.

    SLOT RULES:
    ----------
    Each slot accepts courses from an explicit list, from a shared named
    list (technical electives, statistics cluster, the student's first
    choice domain emphasis), or from whole departments minus rejected course
    numbers (independent study, research, etc.). Questionable numbers are
    accepted with a note that the course may not be technical.

    GROUP RULES:
    -----------
    Constraints across slots: the same course listed twice, at most one of a
    set of overlapping courses, cluster courses from too many departments,
    and a required lab elective.

    Usage:
        checker = UpperDivisionCourseChecker(loader.course_lists)
        notes = checker.check(rules.course_rules, application)
    """

    def __init__(self, named_lists: dict):
        self.named_lists = named_lists

    def check(self, rules: CourseListRules, application: StudentApplication) -> list:
        if rules is None:
            return []
        notes = []
        for slot in application.slots:
            if slot.is_blank:
                continue
            rule = next((r for r in rules.slots if matches_prefix(slot.slot_id, r.slot_prefix)), None)
            if rule is not None:
                notes.extend(self._check_slot(rule, slot, application.domain_emphasis))
        for group in rules.groups:
            notes.extend(self._check_group(group, application.slots))
        return notes

    def _check_slot(self, rule: SlotCourseRule, slot, emphasis: str) -> list:
        course = slot.course
        department = course.partition(" ")[0]
        number = _course_number(course)
        label = rule.label.format(emphasis=emphasis or "none") if rule.label else ""
        default = f"{course} may not satisfy {slot.slot_id}{label}"

        if course in rule.term_limits:
            limit = rule.term_limits[course]
            term = slot.term_id
            if "only_term" in limit and term != limit["only_term"]:
                return [f"{course} taken in {slot.term_text} may not satisfy {slot.slot_id}"]
            if "max_term" in limit and term is not None and term > limit["max_term"]:
                return [default]
            return []

        if course in rule.notes:
            return [rule.notes[course]]

        courses, departments = self._pool(rule, emphasis)
        if course in courses:
            return []
        if number is not None and number in rule.rejected_numbers:
            return [default]
        if department in departments:
            if number is not None and number in rule.questionable_numbers:
                return [f"{default}; {rule.questionable_note}" if rule.questionable_note else default]
            return []
        return [default]

    def _pool(self, rule: SlotCourseRule, emphasis: str):
        """Accepted courses and departments for a slot rule."""
        courses = set(rule.accepted)
        departments = set(rule.departments)
        if rule.course_list == DOMAIN_EMPHASIS_LIST:
            courses |= set(self.named_lists.get(DOMAIN_EMPHASIS_LIST, {}).get(emphasis, ()))
        elif rule.course_list:
            named = self.named_lists.get(rule.course_list, {})
            if isinstance(named, dict):
                courses |= set(named.get("courses", ()))
                departments |= set(named.get("departments", ()))
            else:
                courses |= set(named)
        return courses, departments

    def _check_group(self, group, slots: list) -> list:
        chosen = [s.course for s in select_slots(slots, group.slot_prefixes) if not s.is_blank]

        if group.group_type == GROUP_DISTINCT:
            unique = list(dict.fromkeys(chosen))
            if len(unique) < len(chosen):
                duplicate = next(c for i, c in enumerate(chosen) if c in chosen[:i])
                return [group.message.format(course=duplicate, courses=", ".join(unique))]
            return []

        if group.group_type == GROUP_AT_MOST_ONE:
            found = [c for c in chosen if c in group.courses]
            if len(found) > 1:
                return [group.message.format(courses=", ".join(found))]
            return []

        if group.group_type == GROUP_DEPARTMENT_LIMIT:
            departments = list(dict.fromkeys(c.partition(" ")[0] for c in chosen))
            merged = [d for d in departments if group.merge.get(d) not in departments]
            if len(merged) > group.max_departments:
                return [group.message.format(departments=", ".join(merged))]
            return []

        if group.group_type == GROUP_REQUIRES_ONE_OF:
            if not any(c in group.courses for c in chosen):
                return [group.message]
            return []

        return []

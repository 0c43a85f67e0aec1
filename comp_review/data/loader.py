"""
Rule data loading and caching.

This module loads the per-major rule files and turns them into the frozen
rule dataclasses the engines work with.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from ..config import COURSE_LISTS_FILE, DATA_DIR, MAJOR_RULES_FILE
from ..engines.course_lists import DOMAIN_EMPHASIS_LIST, GROUP_TYPES
from ..engines.normalizer import CourseNameNormalizer
from ..errors import ConfigurationError
from ..models import (
    AdmitTypeRules,
    CourseGroupRule,
    CourseListRules,
    GpaRule,
    MajorRuleSet,
    RequirementCheck,
    SlotCourseRule,
    TierRule,
)
from ..models.rules import CHECK_TYPES, GRADE_POLICIES

LOGGER = logging.getLogger(__name__)


class DataLoader:
    """
    Loads and caches the rule files.

    WHY CACHING: a batch evaluates hundreds of students against the same
    three majors. The files are parsed and validated once per loader.

    WHY LAZY LOADING: properties only read files when first accessed, so a
    loader that is only asked for course lists never touches majors.json.

    DATA SOURCES:
    - majors.json: per major requirement prefixes, basic gates, tiers per
      admit type and the optional major GPA rule
    - course_lists.json: upper division slot rules and group constraints
      per major key, plus shared named lists (domain emphasis courses,
      statistics cluster, technical electives)

    Every course id in course_lists.json is passed through the course name
    normalizer, so the lists can be written the way departments publish them
    ("Stat C100", "IND ENG 173").

    Usage:
        loader = DataLoader()
        rules = loader.rules_for("Data Science")
        loader.course_lists["stat_cluster"]
    """

    def __init__(self, data_dir=None, majors_file=None, course_lists_file=None,
                 normalizer: Optional[CourseNameNormalizer] = None):
        data_dir = Path(data_dir) if data_dir else DATA_DIR
        self.majors_path = Path(majors_file) if majors_file else data_dir / MAJOR_RULES_FILE
        self.course_lists_path = Path(course_lists_file) if course_lists_file else data_dir / COURSE_LISTS_FILE
        self.normalizer = normalizer or CourseNameNormalizer()

        # Private cache variables - None means "not loaded yet"
        self._major_rules = None
        self._course_lists_raw = None
        self._course_lists = None

    # -------------------------------------------------------------------------
    # Public accessors
    # -------------------------------------------------------------------------

    @property
    def major_rules(self) -> dict:
        """Major name -> MajorRuleSet, in file order."""
        if self._major_rules is None:
            raw = self._read_json(self.majors_path)
            majors = raw.get("majors") if isinstance(raw, dict) else None
            if not isinstance(majors, list) or not majors:
                raise ConfigurationError(f"{self.majors_path} has no 'majors' list")
            rules = {}
            for entry in majors:
                rule_set = self._build_major(entry)
                rules[rule_set.name] = rule_set
            LOGGER.info("Loaded rules for %d majors from %s", len(rules), self.majors_path)
            self._major_rules = rules
        return self._major_rules

    @property
    def course_lists(self) -> dict:
        """
        Shared named course lists.

        A list is either a plain list of course ids, a mapping with
        "courses" and "departments", or (for the domain emphasis list) a
        mapping from emphasis name to course ids.
        """
        if self._course_lists is None:
            raw_lists = self._course_lists_file().get("lists", {})
            lists = {}
            for name, value in raw_lists.items():
                if name == DOMAIN_EMPHASIS_LIST:
                    lists[name] = {emphasis: frozenset(self._courses(courses))
                                   for emphasis, courses in value.items()}
                elif isinstance(value, dict):
                    lists[name] = {
                        "courses": frozenset(self._courses(value.get("courses", ()))),
                        "departments": frozenset(d.strip().upper() for d in value.get("departments", ())),
                    }
                else:
                    lists[name] = frozenset(self._courses(value))
            self._course_lists = lists
        return self._course_lists

    def rules_for(self, major: str) -> Optional[MajorRuleSet]:
        """Rule set for a major name (case-insensitive), None if unknown."""
        for name, rule_set in self.major_rules.items():
            if name.lower() == str(major).strip().lower():
                return rule_set
        return None

    def list_majors(self) -> list:
        return list(self.major_rules)

    # -------------------------------------------------------------------------
    # File access
    # -------------------------------------------------------------------------

    @staticmethod
    def _read_json(path: Path):
        if not path.exists():
            raise ConfigurationError(f"Rule file not found: {path}")
        try:
            with open(path, "r") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Rule file {path} is not valid JSON: {e}") from e

    def _course_lists_file(self) -> dict:
        if self._course_lists_raw is None:
            raw = self._read_json(self.course_lists_path)
            if not isinstance(raw, dict):
                raise ConfigurationError(f"{self.course_lists_path} must hold a JSON object")
            self._course_lists_raw = raw
        return self._course_lists_raw

    def _courses(self, courses) -> list:
        return [self.normalizer.normalize(c) for c in courses]

    # -------------------------------------------------------------------------
    # Rule building
    # -------------------------------------------------------------------------

    def _build_major(self, entry: dict) -> MajorRuleSet:
        name = _required(entry, "name", "major")
        key = _required(entry, "key", name)
        requirements = tuple(_required(entry, "requirements", name))

        gpa_rule = None
        if entry.get("gpa_rule"):
            gpa = entry["gpa_rule"]
            gpa_rule = GpaRule(
                minimum=float(_required(gpa, "minimum", f"{name} gpa_rule")),
                in_progress_prefixes=tuple(gpa.get("in_progress_prefixes", ())),
                reason=gpa.get("reason", GpaRule.reason),
                in_progress_reason=gpa.get("in_progress_reason", GpaRule.in_progress_reason),
            )

        return MajorRuleSet(
            name=name,
            key=key,
            requirements=requirements,
            gates=tuple(self._build_check(c, f"{name} gates") for c in entry.get("gates", ())),
            first_year=self._build_admit_type(entry.get("first_year", {}), f"{name} first_year"),
            transfer=self._build_admit_type(entry.get("transfer", {}), f"{name} transfer"),
            gpa_rule=gpa_rule,
            course_rules=self._build_course_rules(key),
        )

    def _build_admit_type(self, entry: dict, context: str) -> AdmitTypeRules:
        tiers = []
        previous = 0
        for tier in entry.get("tiers", ()):
            tier_name = _required(tier, "name", context)
            max_terms = tier.get("max_terms")
            if previous is None:
                raise ConfigurationError(f"{context}: tier {tier_name!r} follows a tier without max_terms")
            if max_terms is not None and max_terms < previous:
                raise ConfigurationError(f"{context}: tiers must be ordered by max_terms")
            previous = max_terms
            checks = tuple(self._build_check(c, f"{context} {tier_name}") for c in tier.get("checks", ()))
            tiers.append(TierRule(name=tier_name, max_terms=max_terms, checks=checks))
        return AdmitTypeRules(tiers=tuple(tiers), ineligible_reason=entry.get("ineligible_reason", ""))

    @staticmethod
    def _build_check(entry: dict, context: str) -> RequirementCheck:
        check_type = _required(entry, "type", context)
        if check_type not in CHECK_TYPES:
            raise ConfigurationError(f"{context}: unknown check type {check_type!r}")
        policy = entry.get("policy", "completed")
        if policy not in GRADE_POLICIES:
            raise ConfigurationError(f"{context}: unknown grade policy {policy!r}")
        if not entry.get("prefixes") and not entry.get("any_of"):
            raise ConfigurationError(f"{context}: {check_type} check lists no requirements")
        return RequirementCheck(
            check_type=check_type,
            reason=_required(entry, "reason", context),
            prefixes=tuple(entry.get("prefixes", ())),
            any_of=tuple(entry.get("any_of", ())),
            policy=policy,
            not_future=bool(entry.get("not_future", False)),
            min_count=int(entry.get("min_count", 0)),
            exact=bool(entry.get("exact", False)),
            min_completed=int(entry.get("min_completed", 0)),
            shortfall_reason=entry.get("shortfall_reason", ""),
            value=entry.get("value", ""),
            course=entry.get("course", ""),
            major=entry.get("major", ""),
        )

    def _build_course_rules(self, key: str) -> Optional[CourseListRules]:
        majors = self._course_lists_file().get("majors", {})
        entry = majors.get(key)
        if entry is None:
            return None

        slots = []
        for slot in entry.get("slots", ()):
            prefix = _required(slot, "slot", f"{key} course rules")
            slots.append(SlotCourseRule(
                slot_prefix=prefix,
                accepted=frozenset(self._courses(slot.get("accepted", ()))),
                course_list=slot.get("course_list", ""),
                departments=frozenset(d.strip().upper() for d in slot.get("departments", ())),
                rejected_numbers=frozenset(slot.get("rejected_numbers", ())),
                questionable_numbers=frozenset(slot.get("questionable_numbers", ())),
                questionable_note=slot.get("questionable_note", ""),
                term_limits={self.normalizer.normalize(c): limit
                             for c, limit in slot.get("term_limits", {}).items()},
                notes={self.normalizer.normalize(c): note for c, note in slot.get("notes", {}).items()},
                label=slot.get("label", ""),
            ))

        groups = []
        for group in entry.get("groups", ()):
            group_type = _required(group, "type", f"{key} course groups")
            if group_type not in GROUP_TYPES:
                raise ConfigurationError(f"{key} course groups: unknown group type {group_type!r}")
            groups.append(CourseGroupRule(
                group_type=group_type,
                slot_prefixes=tuple(_required(group, "slots", f"{key} {group_type}")),
                message=_required(group, "message", f"{key} {group_type}"),
                courses=frozenset(self._courses(group.get("courses", ()))),
                max_departments=int(group.get("max_departments", 0)),
                merge=dict(group.get("merge", {})),
            ))
        return CourseListRules(slots=tuple(slots), groups=tuple(groups))


def _required(entry: dict, key: str, context: str):
    if not isinstance(entry, dict) or key not in entry:
        raise ConfigurationError(f"{context}: missing required key {key!r}")
    return entry[key]

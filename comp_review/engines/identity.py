"""
Identifying Info Verifier.

This module checks the identifying facts on an application (admit term,
expected graduation term, GPA, college, major) against the student record.
"""

import logging
import re
from typing import Optional

from ..config import (
    FIELD_ADMIT_TERM,
    FIELD_COLLEGE,
    FIELD_EGT,
    FIELD_GPA,
    FIELD_MAJOR,
    GPA_TOLERANCE,
    SUMMER_ADMIT_OFFSET,
    UNDECLARED,
    is_summer_term,
    is_term_id,
)
from ..models import ReportedInfo, StudentProfile

LOGGER = logging.getLogger(__name__)

# Applied before stripping punctuation so "&" survives as a word
SYNONYMS = (
    ("clg", "college"),
    ("&", "and"),
)


def normalize_name(text, synonyms=SYNONYMS) -> str:
    """Lowercase, expand synonyms, drop everything but letters and digits."""
    if not text:
        return ""
    clean = str(text).lower()
    for short, full in synonyms:
        clean = clean.replace(short, full)
    return re.sub(r"[^a-z0-9]", "", clean)


def split_reported(text) -> list:
    """Comma separated answer -> non-empty trimmed items."""
    if not text:
        return []
    return [item.strip() for item in str(text).split(",") if item.strip()]


def _to_float(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class IdentifyingInfoVerifier:
    """
    Reconciles reported identity fields with the authoritative profile.

    FIELD RULES:
    -----------
    1st Sem:  equal to the admit term on record. SUMMER ADMITS: a summer
              admit term also accepts the following fall (+3), since summer
              starts are counted with the fall cohort.
    EGT:      exact equality.
    CGPA:     within 0.05 of the record (both sides round independently).
    College / Major:
              every reported item must contain, or be contained in, some
              item on record after normalize_name(). UNDECLARED: a major
              answer listing "Undeclared" together with another major is not
              checked at all; students declaring mid-application answer this
              way and the record cannot settle it.

    Returns the set of field names that disagree (no partial credit).
    """

    def __init__(self, gpa_tolerance: float = GPA_TOLERANCE,
                 summer_offset: int = SUMMER_ADMIT_OFFSET, synonyms=SYNONYMS):
        self.gpa_tolerance = gpa_tolerance
        self.summer_offset = summer_offset
        self.synonyms = synonyms

    def verify(self, profile: StudentProfile, reported: ReportedInfo, admit_term) -> set:
        disagreements = set()
        if not self.admit_term_matches(reported.admit_term, admit_term):
            LOGGER.debug("Reported admit term %s does not match record %s", reported.admit_term, admit_term)
            disagreements.add(FIELD_ADMIT_TERM)
        if not self._same_term(reported.expected_grad_term, profile.expected_grad_term):
            LOGGER.debug("Reported EGT %s does not match record %s",
                         reported.expected_grad_term, profile.expected_grad_term)
            disagreements.add(FIELD_EGT)
        if not self.gpa_matches(reported.gpa, profile.gpa):
            LOGGER.debug("Reported GPA %s does not match record %s", reported.gpa, profile.gpa)
            disagreements.add(FIELD_GPA)
        if not self.names_match(reported.college, profile.colleges):
            LOGGER.debug("Reported college %s not in record %s", reported.college, profile.colleges)
            disagreements.add(FIELD_COLLEGE)
        if not self.major_matches(reported.major, profile.majors):
            LOGGER.debug("Reported major %s not in record %s", reported.major, profile.majors)
            disagreements.add(FIELD_MAJOR)
        return disagreements

    def admit_term_matches(self, reported, admit_term) -> bool:
        if self._same_term(reported, admit_term):
            return True
        if is_summer_term(admit_term):
            return self._same_term(reported, int(admit_term) + self.summer_offset)
        return False

    def gpa_matches(self, reported, actual) -> bool:
        reported_gpa = _to_float(reported)
        actual_gpa = _to_float(actual)
        if reported_gpa is None or actual_gpa is None:
            return False
        # Rounded so that a difference of exactly the tolerance is accepted
        return round(abs(reported_gpa - actual_gpa), 9) <= self.gpa_tolerance

    def names_match(self, reported, actual) -> bool:
        actual_clean = [normalize_name(a, self.synonyms) for a in actual or () if a]
        for item in split_reported(reported):
            clean = normalize_name(item, self.synonyms)
            if not any(a in clean or clean in a for a in actual_clean):
                return False
        return True

    def major_matches(self, reported, actual) -> bool:
        items = split_reported(reported)
        has_undeclared = any(UNDECLARED in item.lower() for item in items)
        if has_undeclared and len(items) > 1:
            return True
        return self.names_match(reported, actual)

    @staticmethod
    def _same_term(reported, actual) -> bool:
        if reported is None or actual is None:
            return reported is None and actual is None
        if is_term_id(reported) and is_term_id(actual):
            return int(reported) == int(actual)
        return str(reported).strip() == str(actual).strip()

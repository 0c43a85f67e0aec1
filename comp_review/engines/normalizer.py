"""
Course Name Normalizer.

This module turns free-text course names typed by students ("cs61a",
"Data/Stat C8", "IND ENG 173 (online)") into the department + number ids
the enrollment record uses ("COMPSCI 61A", "DATA 8", "INDENG 173").
"""

import re

from ..config import (
    CROSS_LISTING_PATTERNS,
    DEPARTMENT_ALIASES,
    SECTION_VARIANT_LETTERS,
    TEST_SCORE_TERM,
    TRANSFER_MARKER,
)

MAX_PASSES = 5


class CourseNameNormalizer:
    """
    Canonicalizes free-text course identifiers to "<DEPT> <NUM>".

    NORMALIZATION STEPS (in order):
    -------------------------------
    1. Uppercase and trim, strip parentheses
    2. Collapse cross-listed prefixes ("DATA/STAT C8" -> "DATA C8")
    3. Replace department shorthand ("CS" -> "COMPSCI"). Only the FIRST
       matching alias applies, so "CS" never turns into "COMPSCI" and then
       into something else.
    4. Collapse whitespace inside the department ("IND ENG" -> "INDENG"),
       stopping at the number or at a section variant letter (C/N/W) in
       front of the number
    5. Split department from number, dropping the section variant letter and
       anything after the first non-alphanumeric character of the number

    The result is stable: normalizing an already normalized id returns it
    unchanged. Input that has no department/number split comes back
    partially cleaned; this never raises.

    Usage:
        normalizer = CourseNameNormalizer()
        normalizer.normalize("cs 61a")          # "COMPSCI 61A"
        normalizer.normalize("Stats C100.")     # "STAT 100"
    """

    def __init__(self, aliases=DEPARTMENT_ALIASES, cross_listings=CROSS_LISTING_PATTERNS,
                 variant_letters: str = SECTION_VARIANT_LETTERS):
        self._aliases = tuple((re.compile(p, re.IGNORECASE), r) for p, r in aliases)
        self._cross_listings = tuple((re.compile(p), r) for p, r in cross_listings)
        variants = re.escape(variant_letters)
        self._department_run = re.compile(rf"^([A-Z\s&]+?)(?=\s*[{variants}]?\s*\d)")
        self._split = re.compile(rf"^([A-Z&]+)\s*[{variants}]?\s*(\d\S*)")

    def normalize(self, raw) -> str:
        if raw is None:
            return ""
        clean = str(raw)
        # A pass can expose a new alias ("E E 16A" -> "EE 16A"), so repeat
        # until the id is stable.
        for _ in range(MAX_PASSES):
            cleaned = self._clean_once(clean)
            if cleaned == clean:
                break
            clean = cleaned
        return clean

    def _clean_once(self, clean: str) -> str:
        clean = clean.upper().strip()
        clean = clean.replace("(", "").replace(")", "")

        for pattern, replacement in self._cross_listings:
            clean = pattern.sub(replacement, clean)

        for pattern, replacement in self._aliases:
            if pattern.search(clean):
                clean = pattern.sub(replacement, clean, count=1)
                break

        clean = self._department_run.sub(lambda m: re.sub(r"\s+", "", m.group(0)), clean, count=1)

        parts = self._split.match(clean)
        if not parts:
            return clean.strip()
        department = parts.group(1)
        number = re.split(r"[^A-Z0-9]", parts.group(2))[0]
        return f"{department} {number}"

    __call__ = normalize


def should_normalize(course, term="") -> bool:
    """
    False for values that must reach the report exactly as typed.

    Transfer credit (mentioned in the course or the term) and test scores
    are never looked up in the enrollment record, so their names stay as is.
    """
    if not course:
        return False
    course_text = str(course).lower()
    term_text = str(term or "").strip()
    if TRANSFER_MARKER in course_text or TRANSFER_MARKER in term_text.lower():
        return False
    return term_text != TEST_SCORE_TERM


_VARIANT_NUMBER = re.compile(rf"[{SECTION_VARIANT_LETTERS}](?=\d)", re.IGNORECASE)


def strip_section_variant(display_name: str) -> str:
    """
    Treat C, N and W course numbers the same as the plain number.

    Applied to the enrollment record's course names: "COMPSCI C100" and
    "MATH N54" are recorded as "COMPSCI 100" and "MATH 54". Only the first
    variant letter is removed.
    """
    return _VARIANT_NUMBER.sub("", display_name, count=1)

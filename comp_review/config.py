"""
Configuration constants for the comprehensive review engine.

This module contains all configuration values and constants used throughout
the verification and eligibility logic. Centralizing these makes it easy to
adjust behavior as campus policies change.

Anything that differs per major (tiers, gates, accepted course lists) lives
in the JSON rule files under DATA_DIR instead, see data/loader.py.
"""

import os
import re
from pathlib import Path
from types import MappingProxyType

# =============================================================================
# FILE PATHS
# =============================================================================

# Base data directory (relative to this file's location)
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("COMP_REVIEW_DATA_DIR", str(BASE_DIR / "data")))
MAJOR_RULES_FILE = "majors.json"
COURSE_LISTS_FILE = "course_lists.json"


# =============================================================================
# TERM ID UTILITIES
# =============================================================================
# Term ids are 4-digit integers "CYYS":
#   C  = century digit (2 for 20xx)
#   YY = last two digits of the year
#   S  = season digit, 2 = Spring, 5 = Summer, 8 = Fall
#
#   2262 = Spring 2026
#   2258 = Fall 2025
#   2255 = Summer 2025

TERM_SEASON_DIGITS = MappingProxyType({"spring": 2, "summer": 5, "fall": 8})
SHORT_SEASON_NAMES = MappingProxyType({"sp": "spring", "su": "summer", "fa": "fall"})
SUMMER_DIGIT = TERM_SEASON_DIGITS["summer"]

_SHORT_TERM = re.compile(r"^(sp|su|fa)(\d{2})$")
_LONG_TERM = re.compile(r"^(spring|summer|fall)\s+(\d{4})$")
_TERM_ID = re.compile(r"^\d{4}$")


def short_term_to_id(term):
    """Convert a short term name (e.g., "Sp26") to a term id (e.g., 2262).

    Input that does not look like a short term name is returned unchanged.
    """
    match = _SHORT_TERM.match(str(term).lower().strip())
    if not match:
        return term
    season = SHORT_SEASON_NAMES[match.group(1)]
    return int(f"2{match.group(2)}{TERM_SEASON_DIGITS[season]}")


def long_term_to_id(term):
    """Convert a long term name (e.g., "Spring 2026") to a term id (e.g., 2262)."""
    match = _LONG_TERM.match(str(term).lower().strip())
    if not match:
        return term
    year = match.group(2)
    return int(f"{year[0]}{year[2:]}{TERM_SEASON_DIGITS[match.group(1)]}")


def term_to_id(term):
    """
    Convert any reported term to a term id.

    Accepts existing term ids (int or 4-digit string), short names ("Fa25")
    and long names ("Fall 2025"). Anything else ("Transfer", "Test Score",
    "Other", blanks) comes back unchanged so callers can tell it apart.
    """
    if isinstance(term, bool) or term is None:
        return term
    if isinstance(term, int):
        return term
    if isinstance(term, float) and term.is_integer():
        return int(term)
    text = str(term).strip()
    if _TERM_ID.match(text):
        return int(text)
    converted = short_term_to_id(text)
    if converted is not text:
        return converted
    converted = long_term_to_id(text)
    if converted is not text:
        return converted
    return term


def term_id_to_label(term_id):
    """Convert a term id (e.g., 2262) to its name (e.g., "Spring 2026").

    Returns None when the id does not end in a known season digit.
    """
    text = str(term_id).strip()
    if not _TERM_ID.match(text):
        return None
    seasons = {digit: name.capitalize() for name, digit in TERM_SEASON_DIGITS.items()}
    season = seasons.get(int(text[-1]))
    if season is None:
        return None
    return f"{season} {text[0]}0{text[1:3]}"


def is_term_id(value) -> bool:
    """True for an int term id or a string of exactly four digits."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return 1000 <= value <= 9999
    return bool(_TERM_ID.match(str(value).strip()))


def is_summer_term(term_id) -> bool:
    return is_term_id(term_id) and int(term_id) % 10 == SUMMER_DIGIT


# Current (in-progress) term. Placeholder "PL" grades at this term are
# in-progress enrollments.
CURRENT_TERM = int(os.getenv("COMP_REVIEW_CURRENT_TERM", "2262"))


# =============================================================================
# GRADE DEFINITIONS
# =============================================================================

# Placeholder grade students report for a planned or in-progress course
PLACEHOLDER_GRADE = "PL"
INCOMPLETE_GRADE = "I"
NOT_AVAILABLE = "NA"
ENROLLED_NO_GRADE = "ENROLLED BUT NO GRADE"

# Grade points on the standard 4.0 scale
LETTER_GRADE_POINTS = MappingProxyType({
    "A+": 4.0, "A": 4.0, "A-": 3.7,
    "B+": 3.3, "B": 3.0, "B-": 2.7,
    "C+": 2.3, "C": 2.0, "C-": 1.7,
    "D+": 1.3, "D": 1.0, "D-": 0.7,
    "F": 0.0,
})

# Non-letter markers rank below every letter grade and never enter a GPA
NON_LETTER_RANK = -1.0
NON_LETTER_MARKS = frozenset({"W", "NP", INCOMPLETE_GRADE, "P", ENROLLED_NO_GRADE})

# Grades that do not count a requirement as "completed"
NOT_COMPLETED_GRADES = frozenset({
    PLACEHOLDER_GRADE, "P", "NP", NOT_AVAILABLE, ENROLLED_NO_GRADE, INCOMPLETE_GRADE,
})

# Grades that never satisfy a gate requirement, even as in-progress work
NOT_ACCEPTED_IN_PROGRESS = frozenset({"P", "NP", "D+", "D-", "D", "F", NOT_AVAILABLE})

# Grades that do not satisfy a gate requirement as completed work
NOT_ACCEPTED_COMPLETED = NOT_ACCEPTED_IN_PROGRESS | NOT_COMPLETED_GRADES

PASS_NO_PASS_GRADES = frozenset({"P", "NP"})
BELOW_C_MINUS_GRADES = frozenset({"D+", "D", "D-", "F"})


def grade_rank(grade) -> float:
    """Ranking value used to pick the highest of several observed grades."""
    if grade is None:
        return NON_LETTER_RANK
    return LETTER_GRADE_POINTS.get(str(grade).strip().upper(), NON_LETTER_RANK)


# =============================================================================
# COURSE NAME NORMALIZATION
# =============================================================================

# Cross-listed department prefixes that collapse to a single department.
# (pattern, replacement), all applied in order.
CROSS_LISTING_PATTERNS = (
    (r"^(DATA|CS|COMPSCI)\s?/\s?(STAT|DATA)\s?", "DATA "),
)

# Common department shorthand -> official department code.
# (pattern, replacement), evaluated in order, FIRST MATCH WINS.
DEPARTMENT_ALIASES = (
    (r"^CS(?=\b|\d)", "COMPSCI"),
    (r"^EE(?=\b|\d)", "EECS"),
    (r"^SOCIOLOGY(?=\b|\d)", "SOCIOL"),
    (r"^STATISTICS(?=\b|\d)", "STAT"),
    (r"^STATS(?=\b|\d)", "STAT"),
    (r"^ECO(?=\b|\d)", "ECON"),
    (r"^BIO(?=\b|\d)", "BIOLOGY"),
    (r"^MATHEMATICS(?=\b|\d)", "MATH"),
    (r"^MCB(?=\b|\d)", "MCELLBI"),
    (r"^CIV(?=\b|\d)", "CIVENG"),
    (r"^PHIL(?=\b|\d)", "PHILOS"),
)

# Section variant letters in front of a course number:
# C = cross-listed, N = not equivalent, W = online
SECTION_VARIANT_LETTERS = "CNW"

# Prefix used by the first-year fall program sections (e.g. "XMATH 1A")
FIRST_YEAR_SECTION_PREFIX = "X"

# Reported "courses" that are really exam scores
TEST_SCORE_COURSES = frozenset({"CALC BC", "CALC AB", "A-LEVEL FURTHER MATH", "HL MATH"})
TEST_SCORE_TERM = "Test Score"
TRANSFER_MARKER = "transfer"
OTHER_COURSE = "OTHER"


# =============================================================================
# VERIFICATION POLICY
# =============================================================================

# Attempts kept per course from the enrollment history (most recent first)
MAX_ATTEMPTS = 3

# Reported and authoritative GPA may differ by this much (independent rounding)
GPA_TOLERANCE = 0.05

# Summer admits are folded into the following fall (2255 -> 2258)
SUMMER_ADMIT_OFFSET = 3

UNDECLARED = "undeclared"

# Flattened "unable to verify" entry when the lookups failed
LOOKUP_FAILED_MARKER = "Not able to verify anything"

# Identifying fields checked against the student record
FIELD_ADMIT_TERM = "1st Sem"
FIELD_EGT = "EGT"
FIELD_GPA = "CGPA"
FIELD_COLLEGE = "Current College"
FIELD_MAJOR = "Current Major"
IDENTITY_FIELDS = (FIELD_ADMIT_TERM, FIELD_EGT, FIELD_GPA, FIELD_COLLEGE, FIELD_MAJOR)


def no_record_marker(term_id) -> str:
    """Term value written on a slot that claims current enrollment SIS does not show."""
    return f"No API enrollment found for {term_id}"


# =============================================================================
# AUTHORITATIVE RECORD SERVICE
# =============================================================================

SIS_ENROLLMENT_URL = os.getenv(
    "SIS_ENROLLMENT_URL",
    "https://gateway.api.berkeley.edu/sis/v3/enrollments/students/{sid}",
)
SIS_ENROLLMENT_PARAMS = MappingProxyType({"primary-only": "true", "enrolled-only": "true"})

SIS_STUDENT_URL = os.getenv(
    "SIS_STUDENT_URL",
    "https://gateway.api.berkeley.edu/sis/v2/students/{sid}",
)
SIS_STUDENT_PARAMS = MappingProxyType({
    "id-type": "student-id",
    "inc-acad": "true",
    "inc-cntc": "false",
    "inc-regs": "false",
    "inc-attr": "false",
    "inc-dmgr": "false",
    "inc-work": "false",
    "inc-dob": "false",
    "inc-gndr": "false",
    "affiliation-status": "ALL",
    "inc-completed-programs": "true",
    "inc-inactive-programs": "true",
})

UNDERGRAD_CAREER_CODE = "UGRD"
MAJOR_PLAN_CODE = "MAJ"

REQUEST_TIMEOUT_SECONDS = 30

# Lookups do not retry by default; a failure degrades that student only.
SIS_MAX_RETRIES = int(os.getenv("SIS_MAX_RETRIES", "0"))

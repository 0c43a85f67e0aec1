"""
Application parsing.

This module turns rows of the application export (one row per student)
into StudentApplication objects with normalized requirement slots.
"""

import csv
import logging
import re
from typing import Optional

from ..config import term_to_id
from ..engines.normalizer import CourseNameNormalizer, should_normalize
from ..errors import ConfigurationError
from ..models import FIRST_YEAR, ReportedInfo, RequirementSlot, StudentApplication

LOGGER = logging.getLogger(__name__)

SID_COLUMN = "SID"
ADMIT_TYPE_COLUMN = "FY vs TR"

# Identifying columns kept from the export; everything else that is not a
# requirement slot column is ignored.
IDENTIFYING_COLUMNS = (
    "SID", "FY vs TR", "1st Sem", "EGT",
    "Current College", "Current Major", "CGPA",
    "CS Ranking", "DS Ranking", "Stats Ranking",
    "1st DE", "2nd DE",
)

# Ranking column -> major name. A rank of 1 is the first choice.
RANKING_COLUMNS = {
    "CS Ranking": "Computer Science",
    "DS Ranking": "Data Science",
    "Stats Ranking": "Statistics",
}
CHOICE_COLUMNS = ("First Choice Major", "Second Choice Major", "Third Choice Major")

# "LD 1: Calc 1 course" and "LD 1 - Calc 1 course" -> "LD #1 Calc 1 course"
_LOWER_DIV_HEADER = re.compile(r"^LD (\d+)[: \-]+(.+)\s(course|grade|sem)$", re.IGNORECASE)
# "LD #1 Calc 1 course", "DS UD#3 grade"
_SLOT_HEADER = re.compile(r"^(LD #\d+(?: .+)?|[A-Z]+ UD\s?#\d+)\s(course|grade|sem)$", re.IGNORECASE)


def rename_header(header: str) -> str:
    """Rewrite lower division slot headers to "LD #N <Requirement> <suffix>"."""
    header = (header or "").strip()
    match = _LOWER_DIV_HEADER.match(header)
    if match:
        return f"LD #{match.group(1)} {match.group(2).strip()} {match.group(3).lower()}"
    return header


def split_slot_header(header: str):
    """("LD #1 Calc 1", "course") for a slot column, None for anything else."""
    match = _SLOT_HEADER.match(header)
    if not match:
        return None
    return match.group(1).strip(), match.group(2).lower()


def _rank(value) -> Optional[int]:
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError):
        return None


def _clean(value) -> str:
    return "" if value is None else str(value).strip()


class ApplicationParser:
    """
    Parses application rows into StudentApplication objects.

    KEY RESPONSIBILITY: split each row into identifying info and requirement
    slots, with course names normalized so they can be matched against the
    enrollment record.

    HEADER RENAMING:
    Lower division columns arrive as "LD 1: Calc 1 course" or
    "LD 1 - Calc 1 course" depending on the form version; both become
    "LD #1 Calc 1 course". Upper division columns ("DS UD#3 course") are
    already in slot form.

    TERMS:
    Slot terms and the admit/graduation terms are converted to term ids
    ("Sp26" -> 2262). Anything else ("Transfer", "Test Score", "Other")
    is kept as text.

    COURSE NAMES:
    Normalized unless the course or term mentions transfer credit or the
    term is "Test Score"; those keep the student's text.

    RANKINGS:
    The three ranking columns pivot into an ordered list of considered
    majors (first choice first).
    """

    def __init__(self, normalizer: Optional[CourseNameNormalizer] = None):
        self.normalizer = normalizer or CourseNameNormalizer()

    def read_rows(self, path) -> list:
        """Read the application export (CSV with a header row)."""
        with open(path, "r", newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None or SID_COLUMN not in [h.strip() for h in reader.fieldnames]:
                raise ConfigurationError(f"{path} has no {SID_COLUMN!r} column")
            return list(reader)

    def parse_file(self, path) -> list:
        return self.parse_rows(self.read_rows(path))

    def parse_rows(self, rows: list) -> list:
        """
        Parse every row; rows without a student id are skipped.

        Raises:
            ConfigurationError: if the rows have no SID column at all
        """
        applications = []
        for index, row in enumerate(rows):
            renamed = {rename_header(k): v for k, v in row.items() if k is not None}
            if SID_COLUMN not in renamed:
                raise ConfigurationError(f"Input row {index + 1} has no {SID_COLUMN!r} column")
            if not _clean(renamed[SID_COLUMN]):
                LOGGER.warning("Skipping input row %d: empty %s", index + 1, SID_COLUMN)
                continue
            applications.append(self.parse_row(renamed))
        LOGGER.info("Parsed %d applications", len(applications))
        return applications

    def parse_row(self, row: dict) -> StudentApplication:
        """Parse one row whose headers have already been renamed."""
        identifying = {h: _clean(row.get(h)) for h in IDENTIFYING_COLUMNS if h in row}
        considered = self._considered_majors(identifying)

        extra = {
            ADMIT_TYPE_COLUMN: identifying.get(ADMIT_TYPE_COLUMN, ""),
            "1st DE": identifying.get("1st DE", ""),
            "2nd DE": identifying.get("2nd DE", ""),
        }
        for column, major in zip(CHOICE_COLUMNS, considered + ["", "", ""]):
            extra[column] = major

        reported = ReportedInfo(
            admit_term=self._term(identifying.get("1st Sem")),
            expected_grad_term=self._term(identifying.get("EGT")),
            gpa=identifying.get("CGPA") or None,
            college=identifying.get("Current College", ""),
            major=identifying.get("Current Major", ""),
        )

        return StudentApplication(
            sid=identifying[SID_COLUMN],
            admit_type=identifying.get(ADMIT_TYPE_COLUMN) or FIRST_YEAR,
            reported=reported,
            considered_majors=considered,
            domain_emphasis=identifying.get("1st DE", ""),
            slots=self._slots(row),
            extra=extra,
        )

    def _slots(self, row: dict) -> list:
        columns = {}
        order = []
        for header, value in row.items():
            parts = split_slot_header(header)
            if parts is None:
                continue
            slot_id, suffix = parts
            if slot_id not in columns:
                columns[slot_id] = {}
                order.append(slot_id)
            columns[slot_id][suffix] = _clean(value)

        slots = []
        for slot_id in order:
            values = columns[slot_id]
            raw_course = values.get("course", "")
            raw_term = values.get("sem", "")
            course = raw_course
            if should_normalize(raw_course, raw_term):
                course = self.normalizer.normalize(raw_course)
            slots.append(RequirementSlot(
                slot_id=slot_id,
                raw_course=raw_course,
                course=course,
                grade=values.get("grade", "").upper(),
                term=self._term(raw_term),
            ))
        return slots

    @staticmethod
    def _term(value):
        if value is None or _clean(value) == "":
            return None
        return term_to_id(_clean(value))

    @staticmethod
    def _considered_majors(identifying: dict) -> list:
        ranked = []
        for column, major in RANKING_COLUMNS.items():
            rank = _rank(identifying.get(column))
            if rank is not None and 1 <= rank <= len(CHOICE_COLUMNS):
                ranked.append((rank, major))
        return [major for _, major in sorted(ranked)]

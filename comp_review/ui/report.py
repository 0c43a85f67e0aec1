"""
CSV report writer.

Flattens StudentReports into one row per student for the reviewers'
spreadsheet.
"""

import csv
import logging

from ..config import NOT_AVAILABLE

LOGGER = logging.getLogger(__name__)

LEAD_COLUMNS = ["SID", "Unable to Verify", "EGT Flags"]
IDENTIFYING_COLUMNS = [
    "FY vs TR", "1st Sem", "EGT", "SIS EGT", "Terms in attendance",
    "Current College", "Current Major", "CGPA",
    "First Choice Major", "Second Choice Major", "Third Choice Major",
    "1st DE", "2nd DE",
]
SLOT_FIELDS = ("course", "grade", "sem", "units")


def _text(value) -> str:
    return "" if value is None else str(value)


def _format_gpa(gpa) -> str:
    return NOT_AVAILABLE if gpa is None else f"{gpa:.3f}"


def _format_units(units) -> str:
    units = float(units or 0)
    return str(int(units)) if units.is_integer() else str(units)


class ReportWriter:
    """
    Writes StudentReports as CSV.

    COLUMNS:
    SID, Unable to Verify, EGT Flags, the identifying fields, then
    course/grade/sem/units for every requirement slot, then per major key
    (ds, cs, st):

        major_gpa_<key>                                 3 decimals or NA
        problem_grades_<key> PNP                        slot - course, ...
        problem_grades_<key> Below C-
        meets_<key>_admit_requirements                  TRUE / FALSE: ... / CONDITIONAL: ...
        <key>_ud_courses_unable_to_verify_if_approved   one note per line

    Slot and major columns appear in the order first seen across the batch,
    so students who did not rank a major simply leave its cells empty.
    """

    def columns(self, reports: list) -> list:
        slot_columns = []
        major_columns = []
        for report in reports:
            for slot in report.application.slots:
                for field in SLOT_FIELDS:
                    column = f"{slot.slot_id} {field}"
                    if column not in slot_columns:
                        slot_columns.append(column)
            for major in report.majors:
                for column in self._major_columns(major.key):
                    if column not in major_columns:
                        major_columns.append(column)
        return LEAD_COLUMNS + IDENTIFYING_COLUMNS + slot_columns + major_columns

    def row(self, report) -> dict:
        application = report.application
        reported = application.reported
        profile = report.profile

        row = {
            "SID": application.sid,
            "Unable to Verify": ", ".join(report.verification.unable_to_verify),
            "EGT Flags": ", ".join(report.plan_flags),
            "1st Sem": _text(reported.admit_term),
            "EGT": _text(reported.expected_grad_term),
            "SIS EGT": _text(profile.expected_grad_term) if profile else "",
            "Terms in attendance": _text(profile.terms_in_attendance) if profile else "",
            "Current College": _text(reported.college),
            "Current Major": _text(reported.major),
            "CGPA": _text(reported.gpa),
        }
        for column, value in application.extra.items():
            row.setdefault(column, _text(value))

        for slot in application.slots:
            row[f"{slot.slot_id} course"] = slot.course
            row[f"{slot.slot_id} grade"] = slot.grade
            row[f"{slot.slot_id} sem"] = slot.term_text
            row[f"{slot.slot_id} units"] = _format_units(slot.units)

        for major in report.majors:
            gpa_col, pnp_col, below_col, verdict_col, notes_col = self._major_columns(major.key)
            row[gpa_col] = _format_gpa(major.gpa)
            row[pnp_col] = ", ".join(major.problem_grades.pass_no_pass)
            row[below_col] = ", ".join(major.problem_grades.below_c_minus)
            row[verdict_col] = major.verdict.render()
            row[notes_col] = "\n".join(major.course_notes)
        return row

    def write(self, reports: list, path) -> None:
        columns = self.columns(reports)
        with open(path, "w", newline="", encoding="utf-8") as fh:
            writer = csv.DictWriter(fh, fieldnames=columns, extrasaction="ignore")
            writer.writeheader()
            writer.writerows(self.row(r) for r in reports)
        LOGGER.info("Wrote %d rows to %s", len(reports), path)

    @staticmethod
    def _major_columns(key: str) -> tuple:
        return (
            f"major_gpa_{key}",
            f"problem_grades_{key} PNP",
            f"problem_grades_{key} Below C-",
            f"meets_{key}_admit_requirements",
            f"{key}_ud_courses_unable_to_verify_if_approved",
        )

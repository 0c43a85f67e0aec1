"""
Terminal Display Implementation.

This module handles all console/terminal output formatting.
It's the ONLY place where printing happens in the comp_review package.

To create a different UI (web, PDF, etc.), create a new class with
the same method signatures but different output handling.
"""

from ..models import MajorReport, StudentReport, VerdictStatus


class TerminalDisplay:
    """
    Pretty terminal output for review results.

    ═══════════════════════════════════════════════════════════════════════════
    HOW TO REPLACE THIS UI
    ═══════════════════════════════════════════════════════════════════════════

    1. FOR A SPREADSHEET:
       Use ReportWriter (ui/report.py), which writes the same results as CSV.

    2. FOR API RESPONSE:
       Create an APIFormatter class that converts the dataclasses to JSON.

    ═══════════════════════════════════════════════════════════════════════════
    """

    # ANSI color codes for terminal styling
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"

    BG_GREEN = "\033[42m"
    BG_YELLOW = "\033[43m"
    BG_RED = "\033[41m"

    @classmethod
    def print_header(cls, title: str):
        """Print a major section header with decorative borders."""
        width = 70
        print()
        print(f"{cls.BOLD}{cls.CYAN}{'═' * width}{cls.RESET}")
        print(f"{cls.BOLD}{cls.CYAN}  {title}{cls.RESET}")
        print(f"{cls.BOLD}{cls.CYAN}{'═' * width}{cls.RESET}")

    @classmethod
    def print_subheader(cls, title: str):
        """Print a subsection header."""
        print()
        print(f"{cls.BOLD}{cls.WHITE}  ── {title} ──{cls.RESET}")

    @classmethod
    def verdict_badge(cls, status: VerdictStatus) -> str:
        """Return a colored verdict badge."""
        if status == VerdictStatus.ELIGIBLE:
            return f"{cls.BG_GREEN}{cls.WHITE} ✓ ELIGIBLE {cls.RESET}"
        elif status == VerdictStatus.CONDITIONAL:
            return f"{cls.BG_YELLOW}{cls.WHITE} ⏳ CONDITIONAL {cls.RESET}"
        else:
            return f"{cls.BG_RED}{cls.WHITE} ✗ INELIGIBLE {cls.RESET}"

    @classmethod
    def print_student(cls, report: StudentReport):
        """Print everything found for one student."""
        cls.print_subheader(f"SID {report.sid}")

        if report.verification.lookup_failed:
            print(f"    {cls.RED}Not able to verify anything (SIS lookup failed){cls.RESET}")
            return

        unable = report.verification.unable_to_verify
        if unable:
            print(f"    {cls.YELLOW}Unable to verify:{cls.RESET} {', '.join(unable)}")
        for flag in report.plan_flags:
            print(f"    {cls.YELLOW}⚠ {flag}{cls.RESET}")
        for major in report.majors:
            cls._print_major(major)

    @classmethod
    def _print_major(cls, major: MajorReport):
        gpa = "NA" if major.gpa is None else f"{major.gpa:.3f}"
        print(f"    {cls.BOLD}{major.major:<20}{cls.RESET} {cls.verdict_badge(major.verdict.status)}"
              f" {cls.DIM}major GPA {gpa}{cls.RESET}")
        if major.verdict.reason:
            print(f"      {cls.DIM}↳ {major.verdict.reason}{cls.RESET}")
        if major.problem_grades.pass_no_pass:
            print(f"      {cls.DIM}P/NP: {', '.join(major.problem_grades.pass_no_pass)}{cls.RESET}")
        if major.problem_grades.below_c_minus:
            print(f"      {cls.RED}Below C-: {', '.join(major.problem_grades.below_c_minus)}{cls.RESET}")
        for note in major.course_notes:
            print(f"      {cls.DIM}• {note}{cls.RESET}")

    @classmethod
    def print_summary(cls, reports: list):
        """Print batch totals: lookups, verification and verdicts per major."""
        cls.print_header("COMPREHENSIVE REVIEW SUMMARY")

        failed = sum(1 for r in reports if r.verification.lookup_failed)
        clean = sum(1 for r in reports if r.verification.is_clean)
        print(f"\n  {cls.BOLD}Students:{cls.RESET} {len(reports)}")
        print(f"  {cls.BOLD}Fully verified:{cls.RESET} {cls.GREEN}{clean}{cls.RESET}")
        if failed:
            print(f"  {cls.BOLD}SIS lookup failed:{cls.RESET} {cls.RED}{failed}{cls.RESET}")

        totals = {}
        for report in reports:
            for major in report.majors:
                counts = totals.setdefault(major.major, {s: 0 for s in VerdictStatus})
                counts[major.verdict.status] += 1

        if totals:
            print(f"\n  {cls.BOLD}{'MAJOR':<20} {'ELIGIBLE':>9} {'CONDITIONAL':>12} {'INELIGIBLE':>11}{cls.RESET}")
            print(f"  {cls.DIM}{'-' * 55}{cls.RESET}")
            for name, counts in totals.items():
                print(f"  {name:<20} {cls.GREEN}{counts[VerdictStatus.ELIGIBLE]:>9}{cls.RESET}"
                      f" {cls.YELLOW}{counts[VerdictStatus.CONDITIONAL]:>12}{cls.RESET}"
                      f" {cls.RED}{counts[VerdictStatus.INELIGIBLE]:>11}{cls.RESET}")
        print()

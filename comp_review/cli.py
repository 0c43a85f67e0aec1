"""
Command-Line Interface for the Comprehensive Review Engine.

Reads the application export, reviews every student against SIS and the
major rules, and writes the reviewers' CSV report.

    comp-review applications.csv --output review.csv --workers 4 --summary
    python3 -m comp_review applications.csv

SIS credentials come from the environment (or a .env file):
SIS_ENROLLMENT_APP_ID, SIS_ENROLLMENT_APP_KEY, SIS_STUDENT_APP_ID,
SIS_STUDENT_APP_KEY.
"""

import argparse
import logging
import sys

from dotenv import load_dotenv

from .config import CURRENT_TERM, is_term_id, term_to_id
from .data import ApplicationParser, DataLoader
from .errors import ConfigurationError
from .reviewer import ComprehensiveReviewer
from .ui import ReportWriter, TerminalDisplay

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIGURATION_ERROR = 2


def _term_arg(value: str) -> int:
    term = term_to_id(value)
    if not is_term_id(term):
        raise argparse.ArgumentTypeError(f"not a term: {value!r} (use 2262, Sp26 or 'Spring 2026')")
    return int(term)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(
        prog="comp-review",
        description="Verify comprehensive review applications against SIS and flag major eligibility",
    )
    parser.add_argument("input", help="Application export (CSV with a header row)")
    parser.add_argument("--output", "-o", default="comp_review_report.csv",
                        help="Where to write the report CSV (default: %(default)s)")
    parser.add_argument("--current-term", type=_term_arg, default=CURRENT_TERM,
                        help="Term in progress, e.g. 2262 or Sp26 (default: %(default)s)")
    parser.add_argument("--majors-file", default=None,
                        help="Major rules JSON to use instead of data/majors.json")
    parser.add_argument("--workers", type=int, default=1,
                        help="Students reviewed in parallel (default: %(default)s)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every unmatched slot")
    parser.add_argument("--summary", action="store_true", help="Print per-student results and totals")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Initialize config and run the review; returns the exit status."""
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        loader = DataLoader(majors_file=args.majors_file)
        LOGGER.info("Reviewing against: %s", ", ".join(loader.list_majors()))
        applications = ApplicationParser().parse_file(args.input)
        reviewer = ComprehensiveReviewer(loader=loader, current_term=args.current_term)
        reports = reviewer.review_batch(applications, max_workers=args.workers)
    except ConfigurationError as e:
        LOGGER.error("Configuration error: %s", e)
        print(f"comp-review: configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR

    ReportWriter().write(reports, args.output)

    if args.summary:
        for report in reports:
            TerminalDisplay.print_student(report)
        TerminalDisplay.print_summary(reports)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

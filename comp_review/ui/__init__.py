"""
User Interface module.

This package contains the presentation of review results: a CSV report
for the reviewers' spreadsheet and a terminal summary.

To add a new UI (e.g., web, PDF), create a new module in this package
with the same method signatures as TerminalDisplay.
"""

from .report import ReportWriter
from .terminal import TerminalDisplay

__all__ = ["ReportWriter", "TerminalDisplay"]

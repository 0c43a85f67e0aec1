"""
Data loading and parsing module.

This package handles all file and network I/O: rule files, the
application export and the student information system lookups.
"""

from .loader import DataLoader
from .parser import ApplicationParser
from .sis_client import SISClient, parse_enrollment_response, parse_student_response

__all__ = [
    "DataLoader",
    "ApplicationParser",
    "SISClient",
    "parse_enrollment_response",
    "parse_student_response",
]

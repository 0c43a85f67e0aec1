"""
Comprehensive Review Engine
===========================

Requirement verification and eligibility flags for comprehensive review
applications to the Data Science, Computer Science and Statistics majors.

ARCHITECTURE OVERVIEW
---------------------

┌─────────────────────────────────────────────────────────────────────────┐
│                         ALGORITHM LAYER                                  │
│        (Pure logic - returns data structures, NO UI/printing)           │
│                                                                         │
│  ┌─────────────┐  ┌──────────────────┐  ┌────────────────────────────┐  │
│  │ DataLoader  │  │ApplicationParser │  │ SISClient                  │  │
│  │ (rules)     │  │ (CSV rows)       │  │ (enrollments, profile)     │  │
│  └─────────────┘  └──────────────────┘  └────────────────────────────┘  │
│                                                                         │
│  ┌───────────────────────┐  ┌──────────────────────────────────────┐   │
│  │ CourseNameNormalizer  │  │ EnrollmentReconciler                 │   │
│  │ IdentifyingInfo-      │  │ RequirementCounter / GPACalculator / │   │
│  │   Verifier            │  │   ProblemGradeDetector               │   │
│  └───────────────────────┘  └──────────────────────────────────────┘   │
│                                                                         │
│  ┌───────────────────────────┐  ┌─────────────────────────────────┐    │
│  │ MajorEligibilityEvaluator │  │ UpperDivisionCourseChecker      │    │
│  │ (tiered decision tables)  │  │ PlanFlagger                     │    │
│  └───────────────────────────┘  └─────────────────────────────────┘    │
└─────────────────────────────────────────────────────────────────────────┘
                                   │
                                   │ Returns dataclasses
                                   ▼
┌─────────────────────────────────────────────────────────────────────────┐
│                      PRESENTATION LAYER                                  │
│           (UI only - can be swapped without touching algorithm)         │
│                                                                         │
│  ┌────────────────────────────┐  ┌──────────────────────────────────┐  │
│  │ ReportWriter (CSV)         │  │ TerminalDisplay (console)        │  │
│  └────────────────────────────┘  └──────────────────────────────────┘  │
└─────────────────────────────────────────────────────────────────────────┘
                                   │
                                   ▼
┌─────────────────────────────────────────────────────────────────────────┐
│                     ComprehensiveReviewer                                │
│          (Orchestrator - connects algorithm to presentation)            │
└─────────────────────────────────────────────────────────────────────────┘

PACKAGE STRUCTURE
-----------------

comp_review/
├── __init__.py          # This file - main exports
├── config.py            # Constants, grade tables, term id codec
├── errors.py            # ConfigurationError
├── reviewer.py          # ComprehensiveReviewer orchestrator
├── cli.py               # Command-line interface
│
├── models/              # Data classes and enums
│   ├── slot.py          # RequirementSlot
│   ├── enrollment.py    # EnrollmentRecord, EnrollmentHistory, StudentProfile
│   ├── application.py   # StudentApplication, ReportedInfo
│   ├── results.py       # VerificationResult, EligibilityVerdict, reports
│   └── rules.py         # MajorRuleSet, TierRule, RequirementCheck, ...
│
├── data/                # File and network I/O
│   ├── loader.py        # DataLoader (majors.json, course_lists.json)
│   ├── parser.py        # ApplicationParser
│   └── sis_client.py    # SISClient
│
├── engines/             # Verification and eligibility logic
│   ├── normalizer.py    # CourseNameNormalizer
│   ├── reconciler.py    # EnrollmentReconciler
│   ├── identity.py      # IdentifyingInfoVerifier
│   ├── aggregates.py    # RequirementCounter, GPACalculator, ProblemGradeDetector
│   ├── eligibility.py   # MajorEligibilityEvaluator
│   ├── plan_flags.py    # PlanFlagger
│   └── course_lists.py  # UpperDivisionCourseChecker
│
└── ui/
    ├── report.py        # ReportWriter
    └── terminal.py      # TerminalDisplay

USAGE
-----

    from comp_review import ApplicationParser, ComprehensiveReviewer, ReportWriter

    applications = ApplicationParser().parse_file("applications.csv")
    reviewer = ComprehensiveReviewer(current_term=2262)
    reports = reviewer.review_batch(applications, max_workers=4)
    ReportWriter().write(reports, "review.csv")

Running from command line:

    comp-review applications.csv --output review.csv --summary

"""

# Version
__version__ = "1.0.0"

# Main exports
from .reviewer import ComprehensiveReviewer
from .cli import main

# Model exports (for programmatic use)
from .models import (
    RequirementSlot,
    StudentApplication,
    ReportedInfo,
    EnrollmentRecord,
    EnrollmentHistory,
    StudentProfile,
    VerificationResult,
    VerdictStatus,
    ReasonKind,
    EligibilityVerdict,
    RequirementCounts,
    ProblemGrades,
    MajorReport,
    StudentReport,
    MajorRuleSet,
)

# Engine exports (for advanced use)
from .engines import (
    CourseNameNormalizer,
    EnrollmentReconciler,
    IdentifyingInfoVerifier,
    RequirementCounter,
    GPACalculator,
    ProblemGradeDetector,
    MajorEligibilityEvaluator,
    PlanFlagger,
    UpperDivisionCourseChecker,
)

# Data exports
from .data import DataLoader, ApplicationParser, SISClient

# UI exports
from .ui import ReportWriter, TerminalDisplay

# Configuration exports
from .config import (
    CURRENT_TERM,
    DATA_DIR,
    term_to_id,
    term_id_to_label,
)
from .errors import ConfigurationError

__all__ = [
    # Version
    "__version__",
    # Main entry points
    "ComprehensiveReviewer",
    "main",
    # Models
    "RequirementSlot",
    "StudentApplication",
    "ReportedInfo",
    "EnrollmentRecord",
    "EnrollmentHistory",
    "StudentProfile",
    "VerificationResult",
    "VerdictStatus",
    "ReasonKind",
    "EligibilityVerdict",
    "RequirementCounts",
    "ProblemGrades",
    "MajorReport",
    "StudentReport",
    "MajorRuleSet",
    # Engines
    "CourseNameNormalizer",
    "EnrollmentReconciler",
    "IdentifyingInfoVerifier",
    "RequirementCounter",
    "GPACalculator",
    "ProblemGradeDetector",
    "MajorEligibilityEvaluator",
    "PlanFlagger",
    "UpperDivisionCourseChecker",
    # Data
    "DataLoader",
    "ApplicationParser",
    "SISClient",
    # UI
    "ReportWriter",
    "TerminalDisplay",
    # Config
    "CURRENT_TERM",
    "DATA_DIR",
    "term_to_id",
    "term_id_to_label",
    "ConfigurationError",
]

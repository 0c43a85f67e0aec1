"""
Comprehensive Reviewer - Main Orchestrator.

This module contains the ComprehensiveReviewer class that runs every
engine over a batch of applications and collects the results.

NOTE: Don't run this file directly. Run from the project directory:
    python3 -m comp_review applications.csv
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from .config import CURRENT_TERM
from .data import DataLoader, SISClient
from .engines import (
    EnrollmentReconciler,
    GPACalculator,
    IdentifyingInfoVerifier,
    MajorEligibilityEvaluator,
    PlanFlagger,
    ProblemGradeDetector,
    RequirementCounter,
    UpperDivisionCourseChecker,
)
from .models import MajorReport, StudentApplication, StudentReport, VerificationResult

LOGGER = logging.getLogger(__name__)


class ComprehensiveReviewer:
    """
    Main interface for the comprehensive review engine.

    ═══════════════════════════════════════════════════════════════════════════
    ROLE: ORCHESTRATOR
    ═══════════════════════════════════════════════════════════════════════════

    For each application:

    1. Fetch the enrollment history and student profile from SIS. If either
       lookup fails the student is reported as "Not able to verify anything"
       and nothing else runs for them.
    2. Verify identifying info and reconcile every requirement slot against
       the enrollment history (slots are corrected in place).
    3. Flag the course plan against the expected graduation terms.
    4. For each major the student ranked: major GPA, problem grades,
       eligibility verdict and upper division course notes.

    The result is a list of StudentReport dataclasses; writing them out is
    left to comp_review.ui (ReportWriter for CSV, TerminalDisplay for a
    console summary).

    CONCURRENCY:
    review_batch(max_workers=N) fans students out over a thread pool.
    Reports come back in input order. Each worker thread builds its own
    SISClient from client_factory unless a single client was injected.
    ═══════════════════════════════════════════════════════════════════════════

    USAGE:
        reviewer = ComprehensiveReviewer(current_term=2262)
        applications = ApplicationParser().parse_file("applications.csv")
        reports = reviewer.review_batch(applications, max_workers=4)
    """

    def __init__(self, loader: Optional[DataLoader] = None, client: Optional[SISClient] = None,
                 current_term: int = CURRENT_TERM, client_factory=SISClient):
        # Initialize all components with shared DataLoader
        self.loader = loader or DataLoader()
        self.current_term = current_term
        self._client = client
        self._client_factory = client_factory
        self._local = threading.local()
        self._built_clients = []
        self._built_lock = threading.Lock()

        self.reconciler = EnrollmentReconciler()
        self.identity = IdentifyingInfoVerifier()
        self.counter = RequirementCounter()
        self.gpa_calculator = GPACalculator()
        self.problem_grades = ProblemGradeDetector()
        self.evaluator = MajorEligibilityEvaluator(self.counter)
        self.flagger = PlanFlagger()
        self.course_checker = UpperDivisionCourseChecker(self.loader.course_lists)

    @property
    def client(self) -> SISClient:
        """The injected client, or one client per thread built from client_factory."""
        if self._client is not None:
            return self._client
        client = getattr(self._local, "client", None)
        if client is None:
            client = self._client_factory()
            self._local.client = client
            with self._built_lock:
                self._built_clients.append(client)
        return client

    def review_batch(self, applications: list, max_workers: int = 1) -> list:
        """
        Review every application; returns StudentReports in input order.

        Only lookup failures are isolated per student. Any other exception
        (a rule referencing a column the input lacks, for example) stops the
        batch.
        """
        try:
            if max_workers <= 1 or len(applications) <= 1:
                reports = [self.review_student(app) for app in applications]
            else:
                with ThreadPoolExecutor(max_workers=max_workers) as pool:
                    reports = list(pool.map(self.review_student, applications))
        finally:
            self.close_clients()

        failed = sum(1 for r in reports if r.verification.lookup_failed)
        LOGGER.info("Reviewed %d students (%d could not be looked up)", len(reports), failed)
        return reports

    def close_clients(self):
        """Close the clients built from client_factory. An injected client is left open."""
        with self._built_lock:
            clients, self._built_clients = self._built_clients, []
        self._local = threading.local()
        for client in clients:
            client.close()

    def review_student(self, application: StudentApplication) -> StudentReport:
        """Run the full review for one student."""
        sid = application.sid
        client = self.client

        # STEP 1: Authoritative lookups
        history = client.fetch_enrollments(sid)
        profile = client.fetch_profile(sid)
        if history is None or profile is None:
            LOGGER.warning("%s: SIS lookup failed, skipping verification and eligibility", sid)
            return StudentReport(
                application=application,
                verification=VerificationResult(lookup_failed=True),
                current_term=self.current_term,
                profile=profile,
            )

        # STEP 2: Verification (identity and slots are independent)
        verification = VerificationResult()
        verification.disagreements = self.identity.verify(profile, application.reported, history.admit_term)
        for slot_id in self.reconciler.reconcile_all(application.slots, history, self.current_term):
            verification.flag_slot(slot_id)
        if not verification.is_clean:
            LOGGER.debug("%s: unable to verify %s", sid, ", ".join(verification.unable_to_verify))

        # STEP 3: Course plan flags
        plan_flags = self.flagger.flags(application.slots, application.reported.expected_grad_term,
                                        profile.expected_grad_term, self.current_term)

        # STEP 4: Per major results (aggregates only after every slot is reconciled)
        majors = [self._review_major(rules, application, profile)
                  for rules in self.loader.major_rules.values()
                  if application.considers(rules.name)]

        return StudentReport(
            application=application,
            verification=verification,
            current_term=self.current_term,
            profile=profile,
            plan_flags=plan_flags,
            majors=majors,
        )

    def _review_major(self, rules, application, profile) -> MajorReport:
        slots = application.slots
        gpa = self.gpa_calculator.calculate(slots, rules.requirements)
        verdict = self.evaluator.evaluate(rules, application, profile, slots, self.current_term, gpa)
        LOGGER.debug("%s: %s -> %s", application.sid, rules.name, verdict.render())
        return MajorReport(
            major=rules.name,
            key=rules.key,
            gpa=gpa,
            problem_grades=self.problem_grades.detect(slots, rules.requirements),
            verdict=verdict,
            course_notes=self.course_checker.check(rules.course_rules, application),
        )

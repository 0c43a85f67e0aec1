"""
Student information system (SIS) client.

This module fetches the authoritative enrollment history and student
profile for one student id and converts the responses into
EnrollmentHistory and StudentProfile objects.
"""

import logging
import os
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import (
    ENROLLED_NO_GRADE,
    MAJOR_PLAN_CODE,
    MAX_ATTEMPTS,
    REQUEST_TIMEOUT_SECONDS,
    SIS_ENROLLMENT_PARAMS,
    SIS_ENROLLMENT_URL,
    SIS_MAX_RETRIES,
    SIS_STUDENT_PARAMS,
    SIS_STUDENT_URL,
    UNDERGRAD_CAREER_CODE,
)
from ..engines.normalizer import strip_section_variant
from ..models import EnrollmentHistory, EnrollmentRecord, StudentProfile

LOGGER = logging.getLogger(__name__)


def create_session(max_retries: int = SIS_MAX_RETRIES) -> requests.Session:
    """Session with JSON headers and (optional) retries on transient errors."""
    session = requests.Session()
    retries = Retry(
        total=max_retries,
        backoff_factor=1,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retries)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update({"accept": "application/json"})
    return session


def _get(data, *path):
    """Walk nested dicts/lists, None as soon as a step is missing."""
    for step in path:
        if isinstance(data, dict):
            data = data.get(step)
        elif isinstance(data, list) and isinstance(step, int) and -len(data) <= step < len(data):
            data = data[step]
        else:
            return None
        if data is None:
            return None
    return data


def _int_or_none(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_enrollment_response(payload: dict, max_attempts: int = MAX_ATTEMPTS) -> EnrollmentHistory:
    """
    Build an EnrollmentHistory from an enrollments response.

    Enrollments are grouped by course display name with section variant
    letters removed ("COMPSCI C100" is recorded as "COMPSCI 100"). Each
    course keeps its most recent attempts, ranked 1 (newest) to
    max_attempts. A missing grade means the student is enrolled with no
    grade posted yet; missing units are 0. The admit term is the earliest
    term with a grade.
    """
    enrollments = _get(payload, "apiResponse", "response", "enrollmentsByStudent", "studentEnrollments") or []

    grouped = {}
    admit_term = None
    for enrollment in enrollments:
        term = _int_or_none(_get(enrollment, "classSection", "class", "session", "term", "id"))
        grade = _get(enrollment, "grades", 0, "mark")
        display_name = _get(enrollment, "classSection", "class", "course", "displayName")
        units = _get(enrollment, "enrolledUnits", "taken")

        if term and grade and (admit_term is None or term < admit_term):
            admit_term = term
        if not display_name:
            continue

        course = strip_section_variant(str(display_name).strip())
        grouped.setdefault(course, []).append((term or 0, grade or ENROLLED_NO_GRADE, units or 0))

    records = {}
    for course, attempts in grouped.items():
        # Stable sort keeps response order among attempts in the same term
        attempts.sort(key=lambda a: a[0], reverse=True)
        records[course] = [
            EnrollmentRecord(course=course, term=term, grade=str(grade), units=float(units), rank=rank)
            for rank, (term, grade, units) in enumerate(attempts[:max_attempts], 1)
        ]
    return EnrollmentHistory(records=records, admit_term=admit_term)


def parse_student_response(payload: dict) -> StudentProfile:
    """
    Build a StudentProfile from a student response.

    Only the undergraduate academic status is used. Each major plan adds a
    major and its college; the expected graduation term comes from the
    last major plan (double majors share one).
    """
    student = _get(payload, "apiResponse", "response") or {}
    statuses = student.get("academicStatuses")
    if not isinstance(statuses, list):
        return StudentProfile()

    career = next((s for s in statuses
                   if _get(s, "studentCareer", "academicCareer", "code") == UNDERGRAD_CAREER_CODE), None)
    if career is None:
        return StudentProfile()

    gpa = _get(career, "cumulativeGPA", "average")
    expected_grad_term = None
    majors = []
    colleges = []
    for plan in career.get("studentPlans") or []:
        if _get(plan, "academicPlan", "type", "code") != MAJOR_PLAN_CODE:
            continue
        expected_grad_term = _int_or_none(_get(plan, "expectedGraduationTerm", "id"))
        majors.append(_get(plan, "academicPlan", "plan", "formalDescription") or "")
        colleges.append(_get(plan, "academicProgram", "academicGroup", "formalDescription") or "")

    return StudentProfile(
        gpa=float(gpa) if gpa is not None else None,
        expected_grad_term=expected_grad_term,
        terms_in_attendance=_int_or_none(career.get("termsInAttendance")),
        majors=tuple(majors),
        colleges=tuple(colleges),
    )


class SISClient:
    """
    Looks up students in the student information system.

    CREDENTIALS:
    The enrollment and student APIs each have their own app id/key pair,
    read from SIS_ENROLLMENT_APP_ID / SIS_ENROLLMENT_APP_KEY and
    SIS_STUDENT_APP_ID / SIS_STUDENT_APP_KEY unless passed in.

    FAILURES:
    A missing student id, a non-200 response, a transport error, a body
    that is not JSON or a body of an unexpected shape all return None and
    log a warning. The caller treats None as "could not verify this
    student" and moves on to the next one.

    The client holds one requests.Session; requests sessions are not
    guaranteed thread-safe, so give each worker thread its own client.
    close() (or a with block) releases the session's connections.

    Usage:
        client = SISClient()
        history = client.fetch_enrollments("3035551234")
        profile = client.fetch_profile("3035551234")
    """

    def __init__(self, enrollment_credentials=None, student_credentials=None,
                 session: Optional[requests.Session] = None,
                 timeout: float = REQUEST_TIMEOUT_SECONDS):
        self.enrollment_credentials = enrollment_credentials or (
            os.getenv("SIS_ENROLLMENT_APP_ID", ""), os.getenv("SIS_ENROLLMENT_APP_KEY", ""))
        self.student_credentials = student_credentials or (
            os.getenv("SIS_STUDENT_APP_ID", ""), os.getenv("SIS_STUDENT_APP_KEY", ""))
        self.session = session or create_session()
        self.timeout = timeout

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def fetch_enrollments(self, sid: str) -> Optional[EnrollmentHistory]:
        payload = self._fetch("Enrollment", SIS_ENROLLMENT_URL, SIS_ENROLLMENT_PARAMS,
                              self.enrollment_credentials, sid)
        if payload is None:
            return None
        try:
            history = parse_enrollment_response(payload)
        except (TypeError, ValueError, AttributeError) as e:
            LOGGER.warning("Enrollment API returned an unexpected response for %s: %s", sid, e)
            return None
        LOGGER.debug("%s: %d courses on record, admit term %s", sid, len(history), history.admit_term)
        return history

    def fetch_profile(self, sid: str) -> Optional[StudentProfile]:
        payload = self._fetch("Student", SIS_STUDENT_URL, SIS_STUDENT_PARAMS,
                              self.student_credentials, sid)
        if payload is None:
            return None
        try:
            profile = parse_student_response(payload)
        except (TypeError, ValueError, AttributeError) as e:
            LOGGER.warning("Student API returned an unexpected response for %s: %s", sid, e)
            return None
        if profile.gpa is None and not profile.majors:
            LOGGER.info("%s: no undergraduate career on record", sid)
        return profile

    def _fetch(self, api: str, url_template: str, params, credentials, sid) -> Optional[dict]:
        if not sid or not str(sid).strip():
            LOGGER.warning("%s API: empty student id, nothing to look up", api)
            return None
        app_id, app_key = credentials
        url = url_template.format(sid=str(sid).strip())
        try:
            resp = self.session.get(url, params=dict(params), timeout=self.timeout,
                                    headers={"app_id": app_id, "app_key": app_key})
        except requests.RequestException as e:
            LOGGER.warning("%s API exception for %s: %s", api, sid, e)
            return None

        if resp.status_code != 200:
            LOGGER.warning("%s API error for %s: HTTP %s", api, sid, resp.status_code)
            return None
        try:
            return resp.json()
        except ValueError as e:
            LOGGER.warning("%s API returned invalid JSON for %s: %s", api, sid, e)
            return None

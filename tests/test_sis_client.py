"""Tests for the student information system client."""

from unittest.mock import MagicMock

import pytest
import requests

from comp_review.config import ENROLLED_NO_GRADE
from comp_review.data import SISClient, parse_enrollment_response, parse_student_response
from comp_review.data.sis_client import create_session


def enrollment(course, term, grade=None, units=4):
    entry = {
        "classSection": {"class": {
            "session": {"term": {"id": str(term)}},
            "course": {"displayName": course},
        }},
        "grades": [{"mark": grade}] if grade else [],
    }
    if units is not None:
        entry["enrolledUnits"] = {"taken": units}
    return entry


def enrollments_payload(*entries):
    return {"apiResponse": {"response": {"enrollmentsByStudent": {"studentEnrollments": list(entries)}}}}


def plan(major, college, egt, code="MAJ"):
    return {
        "academicPlan": {"type": {"code": code}, "plan": {"formalDescription": major}},
        "academicProgram": {"academicGroup": {"formalDescription": college}},
        "expectedGraduationTerm": {"id": str(egt)},
    }


def student_payload(*statuses):
    return {"apiResponse": {"response": {"academicStatuses": list(statuses)}}}


UGRD = {
    "studentCareer": {"academicCareer": {"code": "UGRD"}},
    "cumulativeGPA": {"average": 3.512},
    "termsInAttendance": 3,
    "studentPlans": [
        plan("Data Science BA", "Clg of Computing, Data Sci, & Soc", 2288),
        plan("Statistics Minor", "Clg of Letters & Science", 2288, code="MIN"),
        plan("Statistics BA", "Clg of Letters & Science", 2292),
    ],
}


class TestParseEnrollments:
    def test_groups_and_ranks_attempts(self):
        history = parse_enrollment_response(enrollments_payload(
            enrollment("MATH 1A", 2248, "D"),
            enrollment("MATH 1A", 2258, "B"),
            enrollment("MATH 1A", 2252, "F"),
            enrollment("MATH 1A", 2245, "W"),
        ))
        attempts = history.attempts("MATH 1A")

        assert [(a.term, a.grade, a.rank) for a in attempts] == [(2258, "B", 1), (2252, "F", 2), (2248, "D", 3)]
        assert history.attempt("MATH 1A", 2).grade == "F"
        assert history.attempt("MATH 1A", 4) is None

    def test_section_variant_removed(self):
        history = parse_enrollment_response(enrollments_payload(enrollment("COMPSCI C100", 2258, "A")))
        assert "COMPSCI 100" in history
        assert "COMPSCI C100" not in history

    def test_missing_grade_and_units(self):
        history = parse_enrollment_response(enrollments_payload(enrollment("DATA 8", 2262, units=None)))
        record = history.attempt("DATA 8", 1)
        assert record.grade == ENROLLED_NO_GRADE
        assert record.units == 0

    def test_admit_term_is_first_graded_term(self):
        history = parse_enrollment_response(enrollments_payload(
            enrollment("DATA 8", 2262),
            enrollment("MATH 1B", 2252, "A"),
            enrollment("MATH 1A", 2248, "A"),
        ))
        assert history.admit_term == 2248

    def test_empty_response(self):
        history = parse_enrollment_response({})
        assert len(history) == 0
        assert history.admit_term is None


class TestParseStudent:
    def test_undergraduate_career(self):
        graduate = {"studentCareer": {"academicCareer": {"code": "GRAD"}}, "termsInAttendance": 9}
        profile = parse_student_response(student_payload(graduate, UGRD))

        assert profile.gpa == pytest.approx(3.512)
        assert profile.terms_in_attendance == 3
        assert profile.majors == ("Data Science BA", "Statistics BA")
        assert profile.colleges == ("Clg of Computing, Data Sci, & Soc", "Clg of Letters & Science")
        assert profile.expected_grad_term == 2292

    def test_no_undergraduate_career(self):
        graduate = {"studentCareer": {"academicCareer": {"code": "GRAD"}}}
        profile = parse_student_response(student_payload(graduate))
        assert profile.gpa is None
        assert profile.majors == ()

    def test_no_statuses(self):
        assert parse_student_response({"apiResponse": {"response": {}}}).terms_in_attendance is None


def response(status_code=200, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    return SISClient(enrollment_credentials=("enr-id", "enr-key"),
                     student_credentials=("stu-id", "stu-key"), session=session)


class TestSISClient:
    def test_fetch_enrollments(self, client, session):
        session.get.return_value = response(payload=enrollments_payload(enrollment("MATH 1A", 2258, "A")))

        history = client.fetch_enrollments("3035550001")

        assert "MATH 1A" in history
        url = session.get.call_args.args[0]
        kwargs = session.get.call_args.kwargs
        assert url.endswith("/3035550001")
        assert kwargs["headers"] == {"app_id": "enr-id", "app_key": "enr-key"}
        assert kwargs["params"]["primary-only"] == "true"

    def test_fetch_profile_uses_student_credentials(self, client, session):
        session.get.return_value = response(payload=student_payload(UGRD))

        profile = client.fetch_profile("3035550001")

        assert profile.terms_in_attendance == 3
        assert session.get.call_args.kwargs["headers"] == {"app_id": "stu-id", "app_key": "stu-key"}

    def test_error_status_is_a_failed_lookup(self, client, session):
        session.get.return_value = response(status_code=500)
        assert client.fetch_enrollments("3035550001") is None
        assert client.fetch_profile("3035550001") is None

    def test_transport_error_is_a_failed_lookup(self, client, session):
        session.get.side_effect = requests.ConnectionError("connection refused")
        assert client.fetch_enrollments("3035550001") is None

    def test_invalid_json_is_a_failed_lookup(self, client, session):
        resp = response()
        resp.json.side_effect = ValueError("Expecting value")
        session.get.return_value = resp
        assert client.fetch_profile("3035550001") is None

    def test_non_numeric_gpa_is_a_failed_lookup(self, client, session):
        career = dict(UGRD, cumulativeGPA={"average": "N/A"})
        session.get.return_value = response(payload=student_payload(career))
        assert client.fetch_profile("3035550001") is None

    def test_non_numeric_units_is_a_failed_lookup(self, client, session):
        session.get.return_value = response(payload=enrollments_payload(
            enrollment("MATH 1A", 2258, "A", units="n/a")))
        assert client.fetch_enrollments("3035550001") is None

    def test_unexpected_response_shape_is_a_failed_lookup(self, client, session):
        session.get.return_value = response(payload={"apiResponse": {"response": ["unexpected"]}})
        assert client.fetch_profile("3035550001") is None

    def test_close_closes_session(self, client, session):
        with client:
            pass
        session.close.assert_called_once_with()

    def test_empty_sid_is_not_looked_up(self, client, session):
        assert client.fetch_enrollments("  ") is None
        session.get.assert_not_called()

    def test_credentials_from_environment(self, monkeypatch, session):
        monkeypatch.setenv("SIS_STUDENT_APP_ID", "env-id")
        monkeypatch.setenv("SIS_STUDENT_APP_KEY", "env-key")
        assert SISClient(session=session).student_credentials == ("env-id", "env-key")


def test_create_session_mounts_retrying_adapter():
    session = create_session(max_retries=2)
    adapter = session.get_adapter("https://gateway.example.edu")
    assert adapter.max_retries.total == 2
    assert 503 in adapter.max_retries.status_forcelist
    assert session.headers["accept"] == "application/json"

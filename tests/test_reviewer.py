"""End-to-end tests for the reviewer with a fake student information system."""

from unittest.mock import MagicMock

import pytest

from comp_review import ComprehensiveReviewer
from comp_review.config import ENROLLED_NO_GRADE, LOOKUP_FAILED_MARKER
from comp_review.data import ApplicationParser, SISClient
from comp_review.models import StudentProfile, VerdictStatus

from conftest import FakeSISClient

CURRENT = 2262

PROFILE = StudentProfile(
    gpa=3.6,
    expected_grad_term=2288,
    terms_in_attendance=3,
    majors=("Letters & Sci Undeclared UG",),
    colleges=("Clg of Letters & Science",),
)


@pytest.fixture
def cs_application(make_slot, make_application):
    def _make(sid="3035550001", **slot_overrides):
        slots = {
            "LD #1 Calc 1": ("MATH 1A", "A", 2248),
            "LD #2 Calc 2": ("MATH 1B", "A-", 2252),
            "LD #4 Physics": ("PHYSICS 7A", "B+", 2258),
            "LD #6 Intro CS": ("COMPSCI 61A", "B+", 2258),
            "LD #7 Data Structures": ("COMPSCI 61B", "PL", CURRENT),
            "LD #8 Machine Structures": ("", "", None),
            "LD #9 Discrete Math": ("COMPSCI 70", "PL", CURRENT),
            "CS UD#2": ("COMPSCI 170", "PL", 2268),
        }
        slots.update(slot_overrides)
        return make_application(
            [make_slot(slot_id, *values) for slot_id, values in slots.items()],
            sid=sid,
            majors=("Computer Science",),
            admit_term=2248,
            expected_grad_term=2288,
            gpa="3.6",
            college="Letters & Science",
            major="Undeclared",
        )
    return _make


@pytest.fixture
def cs_history(make_history):
    return make_history(
        ("MATH 1A", 2248, "A", 4.0),
        ("MATH 1B", 2252, "A-", 4.0),
        ("PHYSICS 7A", 2258, "B+", 4.0),
        ("COMPSCI 61A", 2258, "B+", 4.0),
        ("COMPSCI 61B", CURRENT, ENROLLED_NO_GRADE, 4.0),
        ("COMPSCI 70", CURRENT, ENROLLED_NO_GRADE, 4.0),
    )


@pytest.fixture
def reviewer(loader):
    def _make(client):
        return ComprehensiveReviewer(loader=loader, client=client, current_term=CURRENT)
    return _make


def test_fully_verified_student(reviewer, cs_application, cs_history):
    client = FakeSISClient({"3035550001": (cs_history, PROFILE)})
    app = cs_application()

    report = reviewer(client).review_student(app)

    assert report.verification.is_clean
    assert report.verification.unable_to_verify == []
    assert report.plan_flags == []
    intro = app.slot("LD #6 Intro CS")
    assert (intro.course, intro.grade, intro.term, intro.units) == ("COMPSCI 61A", "B+", 2258, 4.0)

    [major] = report.majors
    assert major.key == "cs"
    assert major.gpa == pytest.approx(3.575)
    assert major.verdict.status == VerdictStatus.ELIGIBLE
    assert major.verdict.render() == "TRUE"
    assert major.course_notes == []


def test_wrong_grade_is_corrected_and_flagged(reviewer, cs_application, cs_history):
    client = FakeSISClient({"3035550001": (cs_history, PROFILE)})
    app = cs_application(**{"LD #6 Intro CS": ("COMPSCI 61A", "A", 2258)})

    report = reviewer(client).review_student(app)

    assert report.verification.unable_to_verify == ["LD #6 Intro CS"]
    assert app.slot("LD #6 Intro CS").grade == "B+"


def test_identity_disagreements_come_first(reviewer, cs_application, cs_history):
    profile = StudentProfile(gpa=3.2, expected_grad_term=2288, terms_in_attendance=3,
                             majors=PROFILE.majors, colleges=PROFILE.colleges)
    client = FakeSISClient({"3035550001": (cs_history, profile)})
    app = cs_application(**{"LD #1 Calc 1": ("MATH 1A", "B", 2248)})

    report = reviewer(client).review_student(app)

    assert report.verification.unable_to_verify == ["CGPA", "LD #1 Calc 1"]


def test_failed_lookup_skips_everything_else(reviewer, cs_application):
    client = FakeSISClient()
    app = cs_application(**{"LD #1 Calc 1": ("MATH 1A", "A", 2258)})

    report = reviewer(client).review_student(app)

    assert report.verification.lookup_failed
    assert report.verification.unable_to_verify == [LOOKUP_FAILED_MARKER]
    assert report.majors == []
    assert report.plan_flags == []
    assert app.slot("LD #1 Calc 1").grade == "A"


def test_batch_isolates_failed_lookups(reviewer, cs_application, cs_history, make_history):
    client = FakeSISClient({
        "1": (cs_history, PROFILE),
        "3": (cs_history, PROFILE),
        # enrollments found but the student lookup failed
        "2": (make_history(), None),
    })
    apps = [cs_application(sid) for sid in ("1", "2", "3")]

    reports = reviewer(client).review_batch(apps)

    assert [r.sid for r in reports] == ["1", "2", "3"]
    assert [r.verification.lookup_failed for r in reports] == [False, True, False]
    assert reports[0].majors[0].verdict.is_eligible
    assert reports[2].majors[0].verdict.is_eligible


def test_parallel_batch_keeps_input_order(reviewer, cs_application, cs_history):
    sids = [str(n) for n in range(12)]
    client = FakeSISClient({sid: (cs_history, PROFILE) for sid in sids if int(sid) % 3})
    apps = [cs_application(sid) for sid in sids]

    reports = reviewer(client).review_batch(apps, max_workers=4)

    assert [r.sid for r in reports] == sids
    assert [r.verification.lookup_failed for r in reports] == [int(s) % 3 == 0 for s in sids]


def test_client_factory_builds_one_client_per_thread(loader, cs_application, cs_history):
    built = []

    def factory():
        client = FakeSISClient({"1": (cs_history, PROFILE), "2": (cs_history, PROFILE)})
        built.append(client)
        return client

    reviewer = ComprehensiveReviewer(loader=loader, current_term=CURRENT, client_factory=factory)
    reviewer.review_batch([cs_application("1"), cs_application("2")])

    assert len(built) == 1
    assert built[0].calls == [("Enrollment", "1"), ("Student", "1"), ("Enrollment", "2"), ("Student", "2")]
    assert built[0].closed


def test_only_considered_majors_are_reviewed(reviewer, cs_application, cs_history):
    client = FakeSISClient({"3035550001": (cs_history, PROFILE)})
    app = cs_application()
    app.considered_majors = []

    report = reviewer(client).review_student(app)

    assert report.majors == []
    assert report.verification.is_clean


def test_reported_shorthand_matches_record(loader, make_history):
    """Shorthand on the form ("CS 61A") matches the course on record ("COMPSCI 61A")."""
    row = {
        "SID": "3035550009", "FY vs TR": "First Year", "1st Sem": "Fa25", "EGT": "Sp29",
        "CGPA": "3.3", "LD 6: Intro CS course": "CS 61A", "LD 6: Intro CS grade": "B+",
        "LD 6: Intro CS sem": "2258",
    }
    [app] = ApplicationParser().parse_rows([row])
    history = make_history(("COMPSCI 61A", 2258, "B+", 4.0))
    profile = StudentProfile(gpa=3.3, expected_grad_term=2292, terms_in_attendance=1)
    reviewer = ComprehensiveReviewer(loader=loader, client=FakeSISClient({"3035550009": (history, profile)}),
                                     current_term=CURRENT)

    report = reviewer.review_student(app)

    slot = app.slot("LD #6 Intro CS")
    assert (slot.course, slot.grade, slot.term) == ("COMPSCI 61A", "B+", 2258)
    assert report.verification.is_clean


def test_malformed_sis_response_fails_only_that_student(loader, cs_application):
    empty_enrollments = {"apiResponse": {"response": {"enrollmentsByStudent": {"studentEnrollments": []}}}}

    def get(url, **kwargs):
        resp = MagicMock(status_code=200)
        if "/enrollments/" in url:
            resp.json.return_value = empty_enrollments
        elif url.endswith("/2"):
            resp.json.return_value = {"apiResponse": {"response": ["unexpected"]}}
        else:
            resp.json.return_value = {"apiResponse": {"response": {"academicStatuses": []}}}
        return resp

    session = MagicMock()
    session.get.side_effect = get
    client = SISClient(enrollment_credentials=("id", "key"), student_credentials=("id", "key"),
                       session=session)
    reviewer = ComprehensiveReviewer(loader=loader, client=client, current_term=CURRENT)

    reports = reviewer.review_batch([cs_application(sid) for sid in ("1", "2", "3")])

    assert [r.sid for r in reports] == ["1", "2", "3"]
    assert [r.verification.lookup_failed for r in reports] == [False, True, False]


def test_batch_closes_clients_it_built(loader, cs_application, cs_history):
    built = []

    def factory():
        built.append(FakeSISClient({"1": (cs_history, PROFILE)}))
        return built[-1]

    reviewer = ComprehensiveReviewer(loader=loader, current_term=CURRENT, client_factory=factory)
    reviewer.review_batch([cs_application("1")])
    reviewer.review_batch([cs_application("1")])

    assert len(built) == 2
    assert all(client.closed for client in built)


def test_injected_client_is_left_open(reviewer, cs_application, cs_history):
    client = FakeSISClient({"1": (cs_history, PROFILE)})
    reviewer(client).review_batch([cs_application("1")])
    assert not client.closed

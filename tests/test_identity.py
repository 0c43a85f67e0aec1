"""Tests for identifying info verification."""

import pytest

from comp_review.engines import IdentifyingInfoVerifier
from comp_review.engines.identity import normalize_name, split_reported
from comp_review.models import ReportedInfo, StudentProfile


@pytest.fixture
def verifier():
    return IdentifyingInfoVerifier()


def matching_info(**overrides):
    values = dict(
        admit_term=2258,
        expected_grad_term=2288,
        gpa="3.5",
        college="College of Letters and Science",
        major="Letters & Sci Undeclared",
    )
    values.update(overrides)
    return ReportedInfo(**values)


def test_all_fields_match(verifier, profile):
    assert verifier.verify(profile, matching_info(), 2258) == set()


def test_every_field_can_disagree(verifier, profile):
    reported = matching_info(admit_term=2252, expected_grad_term=2292, gpa="3.9",
                             college="College of Engineering", major="Physics")
    assert verifier.verify(profile, reported, 2258) == {
        "1st Sem", "EGT", "CGPA", "Current College", "Current Major"}


class TestGpa:
    def test_within_tolerance(self, verifier):
        assert verifier.gpa_matches("3.55", 3.5)
        assert verifier.gpa_matches("3.45", 3.5)

    def test_outside_tolerance(self, verifier):
        assert not verifier.gpa_matches("3.56", 3.5)
        assert not verifier.gpa_matches("3.44", 3.5)

    def test_missing_or_unparseable(self, verifier):
        assert not verifier.gpa_matches(None, 3.5)
        assert not verifier.gpa_matches("3.5", None)
        assert not verifier.gpa_matches("N/A", 3.5)


class TestAdmitTerm:
    def test_exact(self, verifier):
        assert verifier.admit_term_matches(2258, 2258)
        assert verifier.admit_term_matches("2258", 2258)

    def test_summer_admit_accepts_following_fall(self, verifier):
        assert verifier.admit_term_matches(2258, 2255)
        assert verifier.admit_term_matches(2255, 2255)

    def test_fall_admit_does_not_accept_other_terms(self, verifier):
        assert not verifier.admit_term_matches(2262, 2258)

    def test_no_admit_term_on_record(self, verifier):
        assert not verifier.admit_term_matches(2258, None)


class TestNames:
    def test_empty_report_is_not_a_disagreement(self, verifier, profile):
        assert verifier.verify(profile, matching_info(college="", major=""), 2258) == set()

    def test_synonyms_and_partial_names(self, verifier):
        record = ("Clg of Letters & Science",)
        assert verifier.names_match("College of Letters and Science", record)
        assert verifier.names_match("Letters & Science", record)
        assert not verifier.names_match("College of Chemistry", record)

    def test_every_reported_item_must_match(self, verifier):
        record = ("Data Science BA", "Statistics BA")
        assert verifier.names_match("Data Science, Statistics", record)
        assert not verifier.names_match("Data Science, Economics", record)

    def test_undeclared_with_another_major_is_skipped(self, verifier):
        assert verifier.major_matches("Undeclared, Data Science", ("Physics BA",))

    def test_undeclared_alone_is_checked(self, verifier):
        assert verifier.major_matches("Undeclared", ("Letters & Sci Undeclared UG",))
        assert not verifier.major_matches("Undeclared", ("Physics BA",))


def test_normalize_name():
    assert normalize_name("Clg of Letters & Science") == "collegeoflettersandscience"
    assert normalize_name(None) == ""


def test_split_reported():
    assert split_reported(" Data Science , ,Statistics") == ["Data Science", "Statistics"]
    assert split_reported("") == []

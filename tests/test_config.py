"""Tests for term id conversion and grade ranking."""

import pytest

from comp_review.config import (
    grade_rank,
    is_summer_term,
    is_term_id,
    long_term_to_id,
    short_term_to_id,
    term_id_to_label,
    term_to_id,
)


@pytest.mark.parametrize("text", ["Sp26", "sp26", "Spring 2026", "spring 2026", "2262", 2262])
def test_term_to_id_accepts_every_spelling(text):
    assert term_to_id(text) == 2262


def test_term_to_id_other_seasons():
    assert term_to_id("Fa25") == 2258
    assert term_to_id("Summer 2025") == 2255


@pytest.mark.parametrize("text", ["Transfer", "Test Score", "Other", "Sp", "Spring26", "", None])
def test_term_to_id_leaves_non_terms_unchanged(text):
    assert term_to_id(text) == text


def test_short_and_long_names_return_input_when_not_matching():
    assert short_term_to_id("Winter 26") == "Winter 26"
    assert long_term_to_id("Sp26") == "Sp26"


def test_term_id_to_label():
    assert term_id_to_label(2262) == "Spring 2026"
    assert term_id_to_label("2258") == "Fall 2025"
    assert term_id_to_label(2255) == "Summer 2025"
    assert term_id_to_label(2263) is None
    assert term_id_to_label("Transfer") is None


def test_is_term_id():
    assert is_term_id(2262)
    assert is_term_id("2262")
    assert not is_term_id("Test Score")
    assert not is_term_id(True)
    assert not is_term_id(None)


def test_is_summer_term():
    assert is_summer_term(2255)
    assert not is_summer_term(2258)
    assert not is_summer_term("Transfer")


class TestGradeRank:
    def test_letters_ordered_by_points(self):
        assert grade_rank("A") > grade_rank("A-") > grade_rank("B+") > grade_rank("F")

    def test_non_letters_rank_below_f(self):
        for mark in ("P", "NP", "W", "I", "PL", None, ""):
            assert grade_rank(mark) < grade_rank("F")

    def test_case_and_whitespace_insensitive(self):
        assert grade_rank(" b+ ") == grade_rank("B+")

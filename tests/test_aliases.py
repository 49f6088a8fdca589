"""Tests for field-alias resolution."""

import pytest

from quizadmin.data.aliases import (
    OPTION_FIELDS,
    QUESTION_FIELDS,
    as_flag,
    is_empty,
    resolve,
    resolve_all,
    resolve_flag,
    resolve_type,
    type_tag,
)


class TestResolve:
    """First non-empty alias wins."""

    def test_priority_order(self):
        raw = {"quizText": "from quiz", "question_text": "from snake"}
        assert resolve(raw, QUESTION_FIELDS["question_text"]) == "from quiz"

    def test_skips_empty_values(self):
        raw = {"questionText": "", "quizText": None, "question_text": "real"}
        assert resolve(raw, QUESTION_FIELDS["question_text"]) == "real"

    def test_false_and_zero_are_values(self):
        assert resolve({"isFree": False, "is_free": True}, QUESTION_FIELDS["is_free"]) is False
        assert resolve({"marks": 0, "points": 5}, QUESTION_FIELDS["marks"]) == 0

    def test_default_when_absent(self):
        assert resolve({}, QUESTION_FIELDS["marks"], default=1) == 1

    def test_resolve_all_omits_missing(self):
        out = resolve_all({"type": "MATCHING"}, QUESTION_FIELDS)
        assert out == {"question_type": "MATCHING"}

    @pytest.mark.parametrize("value", [None, "", [], {}])
    def test_is_empty(self, value):
        assert is_empty(value)

    @pytest.mark.parametrize("value", [0, False, " ", [0]])
    def test_not_empty(self, value):
        assert not is_empty(value)


class TestTypeTags:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("MULTIPLE_CHOICE", "multiple_choice"),
            ("FILL_IN_THE_BLANK", "fill_in_blank"),
            ("FILL_IN_BLANK", "fill_in_blank"),
            ("short_essay", "short_essay"),
            ("Ordering", "ordering"),
            ("essay", None),
            ("", None),
            (None, None),
        ],
    )
    def test_type_tag(self, raw, expected):
        assert type_tag(raw) == expected

    def test_unrecognised_type_defaults_to_multiple_choice(self):
        assert resolve_type({"type": "DRAG_AND_DROP"}) == "multiple_choice"

    def test_later_alias_used_when_first_unrecognised(self):
        assert resolve_type({"type": "weird", "question_type": "matching"}) == "matching"


class TestCorrectnessFlags:
    @pytest.mark.parametrize("value", [True, 1, 2, "true", "TRUE", " True ", "1"])
    def test_true_flags(self, value):
        assert as_flag(value) is True

    @pytest.mark.parametrize("value", [False, 0, "false", "False", "0"])
    def test_false_flags(self, value):
        assert as_flag(value) is False

    @pytest.mark.parametrize("value", [None, "", "yes", [], {}])
    def test_not_a_flag(self, value):
        assert as_flag(value) is None

    def test_false_alias_does_not_shadow_true(self):
        raw = {"isCorrectAnswer": False, "is_correct": True}
        assert resolve_flag(raw, OPTION_FIELDS["is_correct"]) is True

    def test_any_alias_counts(self):
        assert resolve_flag({"correct": "1"}, OPTION_FIELDS["is_correct"]) is True
        assert resolve_flag({"is_correct": 0, "correct": "false"}, OPTION_FIELDS["is_correct"]) is False
        assert resolve_flag({}, OPTION_FIELDS["is_correct"]) is False

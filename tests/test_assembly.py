"""Tests for reassembling save documents from the flat question list."""

from datetime import datetime, timezone

import pytest

from quizadmin.data.assembly import (
    assemble_sections,
    build_past_paper_document,
    build_quiz_document,
    compute_totals,
    estimated_minutes,
    to_app_question,
)
from quizadmin.data.normalizer import flatten_template, normalize_template
from quizadmin.data.validator import validate_template

PAPER = {"id": "pp1", "name": "Paper 1", "paper_number": 1, "paper_level": "KCSE", "paper_type": "exam"}
NOW = datetime(2025, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


class TestAssembleSections:
    def test_round_trip_preserves_grouping_and_order(self, past_paper_template):
        canonical = normalize_template(past_paper_template)
        sections, questions = flatten_template(canonical)
        rebuilt = assemble_sections(questions, sections)
        assert rebuilt == canonical["sections"]

    def test_empty_section_kept(self):
        sections = [{"section_id": "a", "section_name": "A"}, {"section_id": "b", "section_name": "B"}]
        questions = [{"id": "q1", "section_id": "a"}]
        rebuilt = assemble_sections(questions, sections)
        assert rebuilt[0]["questions"] == [{"id": "q1"}]
        assert rebuilt[1]["questions"] == []

    def test_orphan_question_rejected(self):
        with pytest.raises(ValueError, match="q9"):
            assemble_sections([{"id": "q9", "section_id": "gone"}], [{"section_id": "a"}])

    def test_section_tag_removed(self):
        rebuilt = assemble_sections([{"id": "q1", "section_id": "a"}], [{"section_id": "a"}])
        assert "section_id" not in rebuilt[0]["questions"][0]


class TestTotals:
    def test_seconds_rounded_to_minutes(self):
        questions = [{"marks": 2, "time_allocation": 60}, {"marks": 3, "time_allocation": 30}]
        assert compute_totals(questions) == {
            "total_questions": 2,
            "total_marks": 5,
            "estimated_duration": 2,  # 90s rounds half-up
        }

    def test_default_time_per_question(self):
        assert estimated_minutes([{}, {}, {}], "seconds") == 3
        assert estimated_minutes([{}, {}], "minutes") == 4

    def test_minutes_kept(self):
        assert estimated_minutes([{"time_allocation": 1.5}, {"time_allocation": 1}], "minutes") == 2.5

    def test_unknown_unit(self):
        with pytest.raises(ValueError):
            estimated_minutes([], "hours")


class TestPastPaperDocument:
    def test_document_shape(self, past_paper_template):
        sections, questions = flatten_template(normalize_template(past_paper_template))
        doc = build_past_paper_document(PAPER, sections, questions)
        assert doc["title"] == "Paper 1"
        assert doc["description"] == "Questions for Paper 1"
        assert doc["paper_info"]["paper_level"] == "KCSE"
        assert doc["paper_info"]["total_questions"] == 8
        assert doc["paper_info"]["total_marks"] == 45
        assert doc["instructions"] == ["Answer ALL questions.", "Read each question carefully."]
        assert [s["section_id"] for s in doc["sections"]] == [s["section_id"] for s in sections]

    def test_saved_document_validates(self, past_paper_template):
        sections, questions = flatten_template(normalize_template(past_paper_template))
        doc = build_past_paper_document(PAPER, sections, questions)
        assert validate_template(doc)["paper_info"]["total_marks"] == 45

    def test_title_falls_back_to_paper_number(self):
        doc = build_past_paper_document({"paper_number": 2}, [], [])
        assert doc["title"] == "Paper 2"
        assert doc["sections"] == []
        assert doc["paper_info"]["total_questions"] == 0


class TestQuizDocument:
    def _questions(self, app_quiz_document):
        _, questions = flatten_template(normalize_template(app_quiz_document))
        return questions

    def test_metadata(self, app_quiz_document):
        quiz = {"id": "quiz1", "name": "Algebra", "topic_id": "t9"}
        doc = build_quiz_document(quiz, self._questions(app_quiz_document), now=NOW)
        assert doc["examSetId"] == "examset_2025_t9"
        assert doc["examSetName"] == "2025 Quiz Data - Algebra"
        assert doc["createdDate"] == "2025-03-04"
        assert doc["totalQuestions"] == 1
        assert doc["metadata"]["totalMarks"] == 1
        assert doc["metadata"]["estimatedDuration"] == 2
        assert doc["metadata"]["freeQuestions"] == 1
        assert doc["metadata"]["paidQuestions"] == 0

    def test_app_question_fields(self, app_quiz_document):
        (q,) = build_quiz_document({}, self._questions(app_quiz_document), now=NOW)["questions"]
        assert q["type"] == "MULTIPLE_CHOICE"
        assert q["questionText"] == "2+2?"
        assert q["questionId"] == "q_1"
        assert [o["isCorrectAnswer"] for o in q["options"]] == [False, True]
        assert q["options"][1]["explanation"] == "Correct answer"

    def test_quiz_document_normalizes_back(self, app_quiz_document):
        questions = self._questions(app_quiz_document)
        doc = build_quiz_document({"name": "Algebra"}, questions, now=NOW)
        again = normalize_template(doc)
        (q,) = again["sections"][0]["questions"]
        assert q["question_text"] == "2+2?"
        assert q["question_type"] == "multiple_choice"
        assert [o["is_correct"] for o in q["options"]] == [False, True]

    def test_true_false_and_blank(self):
        tf = to_app_question({
            "question_type": "true_false",
            "question_text": "Sky is green",
            "options": [{"option_letter": "True", "is_correct": False},
                        {"option_letter": "False", "is_correct": True}],
        }, 0)
        assert tf["type"] == "TRUE_FALSE"
        assert tf["isCorrectAnswer"] is False
        assert "options" not in tf

        fib = to_app_question({
            "question_type": "fill_in_blank",
            "question_text": "The ___ is hot",
            "correct_answer": "sun",
        }, 1)
        assert fib["type"] == "FILL_IN_THE_BLANK"
        assert fib["blankIndex"] == 4
        assert fib["correctAnswer"] == "sun"
        assert fib["number"] == 2

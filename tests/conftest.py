from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quizadmin.data.templates import sample_past_paper_template  # noqa: E402


# ====================
# Question Document Fixtures
# ====================

@pytest.fixture
def past_paper_template() -> Dict[str, Any]:
    """Nested past-paper template with one section per question type."""
    return sample_past_paper_template()


@pytest.fixture
def app_quiz_document() -> Dict[str, Any]:
    """Quiz export in the app's camelCase format."""
    return {
        "quizName": "Q",
        "questions": [
            {
                "number": 1,
                "quizText": "2+2?",
                "type": "MULTIPLE_CHOICE",
                "options": [
                    {"name": "A", "optionText": "3", "isCorrectAnswer": False},
                    {"name": "B", "optionText": "4", "isCorrectAnswer": True},
                ],
                "isFree": True,
                "timeAllocation": 2,
            }
        ],
    }


@pytest.fixture
def legacy_question_list() -> List[Dict[str, Any]]:
    """Older flat list: bare array, snake_case keys, lower-case types."""
    return [
        {
            "question_text": "The sky is blue.",
            "question_type": "true_false",
            "correct_answer": "True",
            "marks": 2,
        },
        {
            "question": "Name the capital of Kenya.",
            "question_type": "short_answer",
            "answer": "Nairobi",
        },
    ]


@pytest.fixture
def minimal_template() -> Dict[str, Any]:
    """Smallest template that passes strict validation."""
    return {
        "title": "T",
        "sections": [
            {
                "section_id": "s1",
                "section_name": "One",
                "questions": [
                    {
                        "id": "a",
                        "question_text": "Pick A",
                        "question_type": "multiple_choice",
                        "options": [
                            {"option_letter": "A", "option_text": "yes", "is_correct": True},
                            {"option_letter": "B", "option_text": "no", "is_correct": False},
                        ],
                        "marks": 2,
                    }
                ],
            }
        ],
    }


@pytest.fixture
def write_json_file(tmp_path):
    """Write ``data`` as JSON under tmp_path and return the path."""
    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write

"""Rebuild nested save documents from the editor's flat question list.

This is the save-path inverse of :func:`quizadmin.data.normalizer.flatten_template`:
questions tagged with ``section_id`` go back under their section, the tag is
dropped, and roll-up totals are recomputed.
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .aliases import APP_TYPE_ENUMS
from .normalizer import numeric_value, sum_marks

DEFAULT_INSTRUCTIONS = ["Answer ALL questions.", "Read each question carefully."]

# Per-question time assumed when time_allocation is absent.
DEFAULT_TIME = {"seconds": 60, "minutes": 2}

DIFFICULTY_BUCKETS = ("BEGINNER", "INTERMEDIATE", "ADVANCED")


def assemble_sections(
    questions: Sequence[Mapping[str, Any]],
    sections: Sequence[Mapping[str, Any]],
) -> List[Dict[str, Any]]:
    """Group tagged questions under their section metadata records.

    Sections with no questions keep an empty ``questions`` list. Question
    order within a section follows the order of ``questions``.

    Raises:
        ValueError: If a question's ``section_id`` matches no section
    """
    known = {meta["section_id"] for meta in sections}
    orphans = [str(q.get("id")) for q in questions if q.get("section_id") not in known]
    if orphans:
        raise ValueError(f"Questions reference unknown sections: {', '.join(orphans)}")
    out = []
    for meta in sections:
        sid = meta["section_id"]
        section = {k: v for k, v in meta.items() if k != "questions"}
        section["questions"] = [
            {k: v for k, v in q.items() if k != "section_id"}
            for q in questions
            if q.get("section_id") == sid
        ]
        out.append(section)
    return out


def estimated_minutes(questions: Sequence[Mapping[str, Any]], time_unit: str = "seconds") -> Any:
    if time_unit not in DEFAULT_TIME:
        raise ValueError(f"time_unit must be 'seconds' or 'minutes', got {time_unit!r}")
    default = DEFAULT_TIME[time_unit]
    total = sum(numeric_value(q.get("time_allocation"), default) for q in questions)
    if time_unit == "seconds":
        # half-up, matching the editors' Math.round
        return int(math.floor(total / 60 + 0.5))
    return int(total) if float(total).is_integer() else total


def compute_totals(
    questions: Sequence[Mapping[str, Any]], time_unit: str = "seconds"
) -> Dict[str, Any]:
    return {
        "total_questions": len(questions),
        "total_marks": sum_marks(questions),
        "estimated_duration": estimated_minutes(questions, time_unit),
    }


def build_past_paper_document(
    paper: Mapping[str, Any],
    sections: Sequence[Mapping[str, Any]],
    questions: Sequence[Mapping[str, Any]],
    time_unit: str = "seconds",
) -> Dict[str, Any]:
    """Full past-paper document as posted to the questions endpoint.

    Args:
        paper: Past paper record from the content API (``name``,
            ``paper_number``, ``paper_level``, ``paper_type``, ``subject_id``)
        sections: Section metadata records
        questions: Flat question list tagged with ``section_id``
        time_unit: Unit of ``time_allocation`` on the questions

    Returns:
        Template dict with recomputed ``paper_info`` totals
    """
    totals = compute_totals(questions, time_unit)
    name = paper.get("name") or f"Paper {paper.get('paper_number')}"
    paper_info = {
        key: paper.get(key)
        for key in ("paper_number", "paper_level", "paper_type", "subject_id")
        if paper.get(key) is not None
    }
    paper_info["total_questions"] = totals["total_questions"]
    paper_info["total_marks"] = totals["total_marks"]
    paper_info["estimated_time_minutes"] = totals["estimated_duration"]
    return {
        "title": name,
        "description": f"Questions for {name}",
        "paper_info": paper_info,
        "instructions": list(DEFAULT_INSTRUCTIONS),
        "sections": assemble_sections(questions, sections),
    }


def _blank_index(text: str) -> int:
    idx = text.find("___")
    return idx if idx > -1 else 0


def to_app_question(q: Mapping[str, Any], index: int) -> Dict[str, Any]:
    """Convert one canonical question to the camelCase app format."""
    number = q.get("question_number") or index + 1
    marks = q.get("marks") or 1
    base: Dict[str, Any] = {
        "number": number,
        "questionText": q.get("question_text", ""),
        "questionImage": q.get("question_image", ""),
        "questionVideo": q.get("question_video", ""),
        "questionAudio": q.get("question_audio", ""),
        "questionPdf": "",
        "solutionText": q.get("explanation", ""),
        "solutionImage": q.get("explanation_image", ""),
        "solutionPdf": "",
        "solutionVideo": q.get("explanation_video", ""),
        "solutionUrl": "",
        "questionId": q.get("question_id") or q.get("id") or f"q_{index + 1}",
        "version": q.get("version", "1.0"),
        "isFree": q.get("is_free", False),
        "part": q.get("part"),
        "mainQuestion": q.get("main_question") or number,
        "subQuestion": q.get("sub_question"),
        "hasSubQuestions": q.get("has_sub_questions", False),
        "hasParts": q.get("has_sub_questions", False),
        "paperLevel": marks,
        "marks": marks,
        "difficultyLevel": q.get("difficulty_level", "INTERMEDIATE"),
        "timeAllocation": q.get("time_allocation", DEFAULT_TIME["minutes"]),
        "learningObjective": q.get("learning_objective", ""),
        "lastModified": q.get("last_modified", ""),
        "changeLog": q.get("change_log", ""),
    }
    qtype = q.get("question_type", "multiple_choice")
    base["type"] = APP_TYPE_ENUMS.get(qtype, "MULTIPLE_CHOICE")
    options = q.get("options") or []

    if qtype == "true_false":
        first = options[0] if options else {}
        base["isCorrectAnswer"] = first.get("is_correct", False) is True
        base["explanation"] = q.get("explanation") or "No explanation provided"
    elif qtype in ("fill_in_blank", "short_answer", "short_essay"):
        base["correctAnswer"] = q.get("correct_answer", "")
        if qtype == "fill_in_blank":
            base["blankIndex"] = _blank_index(base["questionText"])
    elif qtype == "matching":
        base["column_a"] = list(q.get("column_a") or [])
        base["column_b"] = list(q.get("column_b") or [])
    elif qtype == "ordering":
        base["items"] = list(q.get("items") or [])
        if q.get("correct_order"):
            base["correctOrder"] = q["correct_order"]
    else:
        base["options"] = [
            {
                "order": i + 1,
                "name": opt.get("option_letter", chr(65 + i)),
                "optionText": opt.get("option_text", ""),
                "optionImage": opt.get("option_image", ""),
                "explanation": opt.get("feedback")
                or ("Correct answer" if opt.get("is_correct") else "Incorrect answer"),
                "isCorrectAnswer": opt.get("is_correct", False) is True,
            }
            for i, opt in enumerate(options)
        ]
        if qtype == "multiple_response" and q.get("correct_answers"):
            base["correctAnswers"] = list(q["correct_answers"])
    return base


def build_quiz_document(
    quiz: Mapping[str, Any],
    questions: Sequence[Mapping[str, Any]],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Quiz document in the app format, as uploaded to quiz storage.

    Quiz questions keep ``time_allocation`` in minutes.
    """
    now = now or datetime.now(timezone.utc)
    topic_id = quiz.get("topic_id", "")
    difficulty = Counter(str(q.get("difficulty_level", "")).upper() for q in questions)
    return {
        "examSetId": f"examset_{now.year}_{topic_id}",
        "examSetName": f"{now.year} Quiz Data - {quiz.get('name', '')}",
        "subjectId": topic_id,
        "year": now.year,
        "version": "1.0.0",
        "createdDate": now.date().isoformat(),
        "lastModified": now.isoformat(),
        "accessLevel": "PAID",
        "defaultIsFree": False,
        "totalQuestions": len(questions),
        "metadata": {
            "totalMarks": sum_marks(questions, default=1),
            "estimatedDuration": estimated_minutes(questions, "minutes"),
            "difficultyDistribution": {
                bucket.lower(): difficulty.get(bucket, 0) for bucket in DIFFICULTY_BUCKETS
            },
            "freeQuestions": sum(1 for q in questions if q.get("is_free") is True),
            "paidQuestions": sum(1 for q in questions if q.get("is_free") is False),
        },
        "questions": [to_app_question(q, i) for i, q in enumerate(questions)],
    }

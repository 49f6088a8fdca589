"""Structural validation for quiz and past-paper templates."""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from .aliases import CHOICE_TYPES, QUESTION_TYPES
from .loader import read_template_file
from .normalizer import normalize_question, sum_marks
from .schemas import Question

logger = logging.getLogger(__name__)

REQUIRED_QUESTION_FIELDS = ("id", "question_text", "question_type")


class ValidationError(Exception):
    """Base exception for validation errors."""
    pass


class TemplateValidationError(ValidationError):
    """Raised when a template fails a structural check.

    ``section_index`` and ``question_index`` are 1-based and ``None`` when the
    problem is not tied to a particular section or question.
    """

    def __init__(
        self,
        message: str,
        section_index: Optional[int] = None,
        question_index: Optional[int] = None,
        errors: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.section_index = section_index
        self.question_index = question_index
        self.errors = errors or [message]


def _missing(question: Mapping[str, Any]) -> List[str]:
    missing = []
    for name in REQUIRED_QUESTION_FIELDS:
        value = question.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def _question_problems(
    question: Any, s: int, q: int, strict: bool
) -> Iterator[TemplateValidationError]:
    where = f"in section {s}"
    if not isinstance(question, Mapping):
        yield TemplateValidationError(
            f"Question {q} {where} is not an object.", s, q
        )
        return

    missing = _missing(question)
    if missing:
        yield TemplateValidationError(
            f"Question {q} {where} is missing required fields: {', '.join(missing)}", s, q
        )
        return

    qtype = question["question_type"]
    qid = question["id"]
    if qtype not in QUESTION_TYPES:
        yield TemplateValidationError(
            f"Question {q} {where} ({qid}) has invalid question type: {qtype}", s, q
        )
        return

    if qtype in CHOICE_TYPES:
        options = question.get("options")
        if not isinstance(options, list) or not options:
            yield TemplateValidationError(
                f"Question {q} {where} ({qid}) must have a non-empty options array.", s, q
            )
            return
    if qtype == "matching":
        if not question.get("column_a") or not question.get("column_b"):
            yield TemplateValidationError(
                f"Matching question {q} {where} ({qid}) must have column_a and column_b.", s, q
            )
            return
    if qtype == "ordering":
        if not question.get("items"):
            yield TemplateValidationError(
                f"Ordering question {q} {where} ({qid}) must have items array.", s, q
            )
            return

    if strict:
        typed = Question.from_dict(normalize_question(question, q - 1, question_type=qtype))
        for problem in typed.problems():
            yield TemplateValidationError(f"Question {q} {where} ({qid}) {problem}.", s, q)


def iter_template_problems(
    template: Any, strict: bool = True
) -> Iterator[TemplateValidationError]:
    """Yield structural problems in check order.

    Checks: top-level title and sections array; a questions array per
    section; id/question_text/question_type per question with the type drawn
    from the closed set; options for choice types; both columns for
    matching; items for ordering. Strict mode also checks that matching
    answers resolve, ordering positions run 1..N and choice questions mark a
    correct option.
    """
    if (
        not isinstance(template, Mapping)
        or not template.get("title")
        or not isinstance(template.get("sections"), list)
    ):
        yield TemplateValidationError(
            "Invalid template structure. Must have title and sections array."
        )
        return

    for s, section in enumerate(template["sections"], 1):
        questions = section.get("questions") if isinstance(section, Mapping) else None
        if not isinstance(questions, list):
            yield TemplateValidationError(f"Section {s} must have a questions array.", s)
            continue
        for q, question in enumerate(questions, 1):
            yield from _question_problems(question, s, q, strict)


def collect_template_errors(template: Any, strict: bool = True) -> List[str]:
    """Return every problem message instead of stopping at the first."""
    return [str(e) for e in iter_template_problems(template, strict=strict)]


def validate_template(template: Any, strict: bool = True) -> Dict[str, Any]:
    """Validate a parsed template and return a copy with recomputed totals.

    Args:
        template: Template as parsed from JSON, before normalization
        strict: Also enforce matching, ordering and correct-option invariants

    Returns:
        Deep copy of ``template`` with ``paper_info.total_questions`` and
        ``paper_info.total_marks`` recomputed

    Raises:
        TemplateValidationError: On the first failed check
    """
    for problem in iter_template_problems(template, strict=strict):
        raise problem

    checked = copy.deepcopy(dict(template))
    questions = [q for s in checked["sections"] for q in s["questions"]]
    paper_info = checked.get("paper_info")
    if not isinstance(paper_info, dict):
        paper_info = {}
        checked["paper_info"] = paper_info
    paper_info["total_questions"] = len(questions)
    paper_info["total_marks"] = sum_marks(questions, default=0)
    logger.info(
        "Template validation passed: %d sections, %d questions, %s marks",
        len(checked["sections"]), paper_info["total_questions"], paper_info["total_marks"],
    )
    return checked


def validate_template_file(path: Union[str, Path], strict: bool = True) -> Dict[str, Any]:
    """Read a JSON template from disk and validate it.

    Raises:
        FileNotFoundError: If the file doesn't exist
        TemplateParseError: If the file isn't valid JSON
        TemplateValidationError: If validation fails
    """
    return validate_template(read_template_file(path), strict=strict)

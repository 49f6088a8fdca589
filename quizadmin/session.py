"""In-memory editing state for one quiz or past paper."""

from __future__ import annotations

import copy
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .api.client import ContentApiClient
from .config import EditorConfig
from .data.assembly import DEFAULT_TIME, build_past_paper_document, build_quiz_document
from .data.loader import read_template_file, write_template_file
from .data.normalizer import (
    DEFAULT_SECTION_ID,
    DEFAULT_SECTION_NAME,
    flatten_template,
    normalize_question,
    normalize_template,
)
from .data.validator import collect_template_errors

logger = logging.getLogger(__name__)

QUIZ = "quiz"
PAST_PAPER = "past-paper"
MODES = (QUIZ, PAST_PAPER)


class EditorSession:
    """Section metadata plus a flat, section-tagged question list.

    Quiz sessions keep ``time_allocation`` in minutes and save through the
    quiz upload endpoint; past-paper sessions use the configured unit and save
    the nested document through the past-paper questions endpoint.

    Args:
        mode: ``"quiz"`` or ``"past-paper"``
        record: Quiz or past-paper record from the content API; its ``id``
            addresses the remote document
        config: Editor settings
    """

    def __init__(
        self,
        mode: str = PAST_PAPER,
        record: Optional[Mapping[str, Any]] = None,
        config: Optional[EditorConfig] = None,
    ):
        if mode not in MODES:
            raise ValueError(f"mode must be one of {', '.join(MODES)}, got {mode!r}")
        self.mode = mode
        self.record: Dict[str, Any] = dict(record or {})
        self.config = config or EditorConfig()
        self.time_unit = "minutes" if mode == QUIZ else self.config.time_unit
        self.sections: List[Dict[str, Any]] = []
        self.questions: List[Dict[str, Any]] = []
        self.reset()

    @property
    def record_id(self) -> str:
        rid = self.record.get("id")
        if not rid:
            raise ValueError("Session record has no id")
        return str(rid)

    def reset(self) -> None:
        """Replace the state with one section holding one starter question."""
        self.sections = [{"section_id": DEFAULT_SECTION_ID, "section_name": DEFAULT_SECTION_NAME}]
        self.questions = [{
            "id": "q_1",
            "question_number": 1,
            "question_text": "Enter your first question here...",
            "question_type": "multiple_choice",
            "options": [{"option_letter": "A", "option_text": "Option A", "is_correct": True}],
            "correct_answer": "A",
            "marks": self.config.default_marks,
            "section_id": DEFAULT_SECTION_ID,
        }]

    def load(self, raw: Any) -> None:
        """Normalize ``raw`` into the editing state.

        Input with no sections (unknown shape, empty document) resets to the
        starter state.
        """
        sections, questions = flatten_template(normalize_template(raw))
        if not sections:
            logger.info("No sections in loaded document; starting from the placeholder question")
            self.reset()
            return
        self.sections = sections
        self.questions = questions
        logger.debug("Loaded %d sections, %d questions", len(sections), len(questions))

    def _fresh_id(self) -> str:
        taken = {q.get("id") for q in self.questions}
        n = len(self.questions) + 1
        while f"q_{n}" in taken:
            n += 1
        return f"q_{n}"

    def _section_id(self, section_id: Optional[str]) -> str:
        if section_id is None:
            return self.sections[-1]["section_id"]
        if section_id not in {s["section_id"] for s in self.sections}:
            raise KeyError(f"Unknown section: {section_id}")
        return section_id

    def _renumber(self) -> None:
        for i, q in enumerate(self.questions, 1):
            q["question_number"] = i

    def add_question(
        self, section_id: Optional[str] = None, question_type: str = "multiple_choice"
    ) -> Dict[str, Any]:
        """Append a blank question to ``section_id`` (default: last section)."""
        sid = self._section_id(section_id)
        number = len(self.questions) + 1
        question = normalize_question({
            "id": self._fresh_id(),
            "question_type": question_type,
            "marks": self.config.default_marks,
            "is_free": False,
            "difficulty_level": "INTERMEDIATE",
            "time_allocation": DEFAULT_TIME[self.time_unit],
            "version": "1.0",
            "last_modified": date.today().isoformat(),
        }, number - 1)
        question["question_number"] = number
        question["section_id"] = sid
        self.questions.append(question)
        return question

    def delete_question(self, index: int) -> Dict[str, Any]:
        removed = self.questions.pop(index)
        self._renumber()
        return removed

    def duplicate_question(self, index: int) -> Dict[str, Any]:
        """Append a copy of question ``index`` with a fresh id."""
        question = copy.deepcopy(self.questions[index])
        question["id"] = self._fresh_id()
        question.pop("question_id", None)
        question["question_number"] = len(self.questions) + 1
        self.questions.append(question)
        return question

    def update_question(self, index: int, changes: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge ``changes`` into question ``index`` and re-normalize it."""
        current = self.questions[index]
        merged = {**current, **changes}
        if "section_id" in changes:
            self._section_id(changes["section_id"])
        question = normalize_question(merged, index)
        question["question_number"] = current["question_number"]
        self.questions[index] = question
        return question

    def add_section(self, section_name: str, section_id: Optional[str] = None) -> Dict[str, Any]:
        taken = {s["section_id"] for s in self.sections}
        if section_id is None:
            n = len(self.sections) + 1
            while f"section_{n}" in taken:
                n += 1
            section_id = f"section_{n}"
        elif section_id in taken:
            raise ValueError(f"Section id already in use: {section_id}")
        section = {"section_id": section_id, "section_name": section_name}
        self.sections.append(section)
        return section

    def import_file(self, path: Union[str, Path]) -> None:
        """Replace the state with a file's contents; a parse error leaves it untouched."""
        self.load(read_template_file(path))
        logger.info("Imported %d questions from %s", len(self.questions), path)

    def to_document(self) -> Dict[str, Any]:
        if self.mode == QUIZ:
            return build_quiz_document(self.record, self.questions)
        return build_past_paper_document(
            self.record, self.sections, self.questions, self.time_unit
        )

    def validation_errors(self) -> List[str]:
        if self.mode == QUIZ:
            document = normalize_template(self.to_document())
        else:
            document = self.to_document()
        return collect_template_errors(document, strict=self.config.strict_validation)

    def export(self, path: Union[str, Path]) -> Path:
        return write_template_file(path, self.to_document())

    def save(self, client: ContentApiClient) -> Any:
        """Send the assembled document; the state is kept whatever the outcome."""
        document = self.to_document()
        if self.mode == QUIZ:
            result = client.upload_quiz_data(self.record_id, document)
        else:
            result = client.save_past_paper_questions(self.record_id, document)
        logger.info(
            "Saved %d questions for %s %s", len(self.questions), self.mode, self.record_id
        )
        return result

    def refresh(self, client: ContentApiClient) -> None:
        """Reload from the remote document; on error the state is unchanged."""
        if self.mode == QUIZ:
            raw = client.get_quiz_questions(self.record_id)
        else:
            raw = client.get_past_paper_questions(self.record_id)
        self.load(raw)

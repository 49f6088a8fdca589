"""Typed view of canonical question templates.

Every question shares one envelope; the type-dependent part lives in exactly
one payload record selected by ``question_type``, so an ordering question
cannot carry options and a multiple-choice question cannot carry items.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from .aliases import CHOICE_TYPES, FREE_TEXT_TYPES, SINGLE_ANSWER_TYPES, as_flag


@dataclass
class Option:
    letter: str
    text: str = ""
    is_correct: bool = False
    image: Optional[str] = None
    video: Optional[str] = None
    audio: Optional[str] = None
    feedback: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Option":
        return cls(
            letter=str(d.get("option_letter", "")),
            text=d.get("option_text", ""),
            is_correct=as_flag(d.get("is_correct")) is True,
            image=d.get("option_image"),
            video=d.get("option_video"),
            audio=d.get("option_audio"),
            feedback=d.get("feedback"),
        )


@dataclass
class ChoicePayload:
    options: List[Option] = field(default_factory=list)
    correct_answer: Optional[str] = None
    correct_answers: Optional[List[str]] = None

    def problems(self, question_type: str) -> List[str]:
        if not self.options:
            return ["has no options"]
        n_correct = sum(1 for o in self.options if o.is_correct)
        if n_correct == 0:
            return ["has no option marked correct"]
        if question_type in SINGLE_ANSWER_TYPES and n_correct > 1:
            return [f"has {n_correct} options marked correct but allows one answer"]
        return []


@dataclass
class FreeTextPayload:
    correct_answer: Optional[str] = None

    def problems(self, question_type: str) -> List[str]:
        return []


@dataclass
class MatchingItem:
    text: str = ""
    image: Optional[str] = None
    number: Optional[str] = None  # column A
    correct_match: Optional[str] = None  # column A
    letter: Optional[str] = None  # column B

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "MatchingItem":
        def _str(v: Any) -> Optional[str]:
            return None if v is None else str(v)

        return cls(
            text=d.get("item_text", ""),
            image=d.get("item_image"),
            number=_str(d.get("item_number")),
            correct_match=_str(d.get("correct_match")),
            letter=_str(d.get("item_letter")),
        )


@dataclass
class MatchingPayload:
    column_a: List[MatchingItem] = field(default_factory=list)
    column_b: List[MatchingItem] = field(default_factory=list)

    def problems(self, question_type: str) -> List[str]:
        letters = {item.letter for item in self.column_b if item.letter is not None}
        out = []
        for i, item in enumerate(self.column_a, 1):
            if item.correct_match not in letters:
                out.append(
                    f"column_a item {i} matches '{item.correct_match}' "
                    f"which is not a column_b item_letter"
                )
        return out


@dataclass
class OrderingItem:
    item_id: str
    text: str = ""
    correct_position: Any = None
    image: Optional[str] = None


@dataclass
class OrderingPayload:
    items: List[OrderingItem] = field(default_factory=list)
    correct_order: Optional[str] = None

    def problems(self, question_type: str) -> List[str]:
        positions = [item.correct_position for item in self.items]
        if any(not isinstance(p, int) or isinstance(p, bool) for p in positions):
            return ["has an item without an integer correct_position"]
        expected = list(range(1, len(positions) + 1))
        if sorted(positions) != expected:
            return [
                f"correct_position values {sorted(positions)} are not the sequence 1..{len(positions)}"
            ]
        return []


Payload = Union[ChoicePayload, FreeTextPayload, MatchingPayload, OrderingPayload]


def payload_from_dict(question_type: str, d: Mapping[str, Any]) -> Payload:
    if question_type in CHOICE_TYPES:
        return ChoicePayload(
            options=[Option.from_dict(o) for o in d.get("options") or []],
            correct_answer=d.get("correct_answer"),
            correct_answers=d.get("correct_answers"),
        )
    if question_type in FREE_TEXT_TYPES:
        return FreeTextPayload(correct_answer=d.get("correct_answer"))
    if question_type == "matching":
        return MatchingPayload(
            column_a=[MatchingItem.from_dict(i) for i in d.get("column_a") or []],
            column_b=[MatchingItem.from_dict(i) for i in d.get("column_b") or []],
        )
    if question_type == "ordering":
        return OrderingPayload(
            items=[
                OrderingItem(
                    item_id=str(i.get("item_id", "")),
                    text=i.get("item_text", ""),
                    correct_position=i.get("correct_position"),
                    image=i.get("item_image"),
                )
                for i in d.get("items") or []
            ],
            correct_order=d.get("correct_order"),
        )
    raise ValueError(f"Unknown question type: {question_type}")


@dataclass
class Question:
    id: str
    number: int
    text: str
    question_type: str
    payload: Payload
    marks: Any = 1
    image: Optional[str] = None
    video: Optional[str] = None
    audio: Optional[str] = None
    is_free: Optional[bool] = None
    difficulty_level: Optional[str] = None
    time_allocation: Optional[float] = None
    explanation: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Question":
        qtype = d["question_type"]
        return cls(
            id=str(d["id"]),
            number=d.get("question_number", 0),
            text=d.get("question_text", ""),
            question_type=qtype,
            payload=payload_from_dict(qtype, d),
            marks=d.get("marks", 1),
            image=d.get("question_image"),
            video=d.get("question_video"),
            audio=d.get("question_audio"),
            is_free=d.get("is_free"),
            difficulty_level=d.get("difficulty_level"),
            time_allocation=d.get("time_allocation"),
            explanation=d.get("explanation"),
        )

    @property
    def option_count(self) -> int:
        if isinstance(self.payload, ChoicePayload):
            return len(self.payload.options)
        return 0

    def problems(self) -> List[str]:
        return self.payload.problems(self.question_type)


@dataclass
class Section:
    section_id: str
    name: str
    questions: List[Question] = field(default_factory=list)
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Section":
        return cls(
            section_id=str(d["section_id"]),
            name=d.get("section_name", ""),
            questions=[Question.from_dict(q) for q in d.get("questions", [])],
            description=d.get("section_description"),
        )


@dataclass
class Template:
    title: str
    sections: List[Section] = field(default_factory=list)
    paper_info: Dict[str, Any] = field(default_factory=dict)
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Template":
        return cls(
            title=d.get("title", ""),
            sections=[Section.from_dict(s) for s in d.get("sections", [])],
            paper_info=dict(d.get("paper_info") or {}),
            description=d.get("description"),
        )

    def questions(self) -> List[Question]:
        return [q for s in self.sections for q in s.questions]

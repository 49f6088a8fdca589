"""Field-alias tables for externally sourced question JSON.

Question data reaches the dashboard in several naming conventions: the
camelCase Android app format, the snake_case internal format and an older
flat list. Each logical field lists its source keys in priority order and
``resolve`` returns the first non-empty value.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

QUESTION_TYPES: Tuple[str, ...] = (
    "multiple_choice",
    "true_false",
    "short_answer",
    "fill_in_blank",
    "short_essay",
    "matching",
    "ordering",
    "multiple_response",
)
CHOICE_TYPES = frozenset({"multiple_choice", "true_false", "multiple_response"})
SINGLE_ANSWER_TYPES = frozenset({"multiple_choice", "true_false"})
FREE_TEXT_TYPES = frozenset({"short_answer", "fill_in_blank", "short_essay"})
DEFAULT_TYPE = "multiple_choice"

# External enum spellings -> internal tag
TYPE_ENUMS: Dict[str, str] = {
    "MULTIPLE_CHOICE": "multiple_choice",
    "TRUE_FALSE": "true_false",
    "FILL_IN_BLANK": "fill_in_blank",
    "FILL_IN_THE_BLANK": "fill_in_blank",
    "SHORT_ANSWER": "short_answer",
    "SHORT_ESSAY": "short_essay",
    "MATCHING": "matching",
    "ORDERING": "ordering",
    "MULTIPLE_RESPONSE": "multiple_response",
}

# Internal tag -> enum written when exporting in the app format
APP_TYPE_ENUMS: Dict[str, str] = {
    "multiple_choice": "MULTIPLE_CHOICE",
    "true_false": "TRUE_FALSE",
    "fill_in_blank": "FILL_IN_THE_BLANK",
    "short_answer": "SHORT_ANSWER",
    "short_essay": "SHORT_ESSAY",
    "matching": "MATCHING",
    "ordering": "ORDERING",
    "multiple_response": "MULTIPLE_RESPONSE",
}

QUESTION_FIELDS: Dict[str, Tuple[str, ...]] = {
    "id": ("id", "questionId", "question_id"),
    "question_number": ("number", "question_number", "questionNumber"),
    "question_text": ("questionText", "quizText", "question_text", "question"),
    "question_image": ("questionImage", "quizImage", "question_image", "image"),
    "question_video": ("questionVideo", "quizVideo", "question_video", "video"),
    "question_audio": ("questionAudio", "quizAudio", "question_audio", "audio"),
    "question_type": ("type", "question_type", "questionType"),
    "correct_answer": ("correctAnswer", "correct_answer", "answer"),
    "correct_answers": ("correctAnswers", "correct_answers"),
    "correct_order": ("correctOrder", "correct_order"),
    "explanation": ("explanation", "solutionText", "solution_text"),
    "explanation_image": ("explanation_image", "solutionImage", "explanationImage"),
    "explanation_video": ("explanation_video", "solutionVideo", "explanationVideo"),
    "marks": ("marks", "points", "paperLevel"),
    "is_free": ("isFree", "is_free"),
    "difficulty_level": ("difficultyLevel", "difficulty_level", "difficulty"),
    "time_allocation": ("timeAllocation", "time_allocation", "estimatedTime"),
    "learning_objective": ("learningObjective", "learning_objective", "objective"),
    "answer_space": ("answerSpace", "answer_space"),
    "question_id": ("questionId", "question_id"),
    "version": ("questionVersion", "version"),
    "part": ("part", "questionPart"),
    "main_question": ("mainQuestion", "main_question"),
    "sub_question": ("subQuestion", "sub_question"),
    "has_sub_questions": ("hasSubQuestions", "has_sub_questions"),
    "last_modified": ("lastModified", "last_modified"),
    "change_log": ("changeLog", "change_log"),
}

OPTION_FIELDS: Dict[str, Tuple[str, ...]] = {
    "option_letter": ("name", "option_letter", "letter", "label"),
    "option_text": ("optionText", "option_text", "text"),
    "option_image": ("optionImage", "option_image", "image"),
    "option_video": ("optionVideo", "option_video", "video"),
    "option_audio": ("optionAudio", "option_audio", "audio"),
    "is_correct": ("isCorrectAnswer", "is_correct", "correct"),
    "feedback": ("feedback", "explanation"),
}

COLUMN_A_FIELDS: Dict[str, Tuple[str, ...]] = {
    "item_number": ("item_number", "itemNumber", "number"),
    "item_text": ("item_text", "itemText", "text"),
    "item_image": ("item_image", "itemImage", "image"),
    "correct_match": ("correct_match", "correctMatch", "match"),
}

COLUMN_B_FIELDS: Dict[str, Tuple[str, ...]] = {
    "item_letter": ("item_letter", "itemLetter", "letter"),
    "item_text": ("item_text", "itemText", "text"),
    "item_image": ("item_image", "itemImage", "image"),
}

ORDERING_FIELDS: Dict[str, Tuple[str, ...]] = {
    "item_id": ("item_id", "itemId", "id"),
    "item_text": ("item_text", "itemText", "text"),
    "item_image": ("item_image", "itemImage", "image"),
    "correct_position": ("correct_position", "correctPosition", "position"),
}

SECTION_FIELDS: Dict[str, Tuple[str, ...]] = {
    "section_id": ("section_id", "sectionId", "id"),
    "section_name": ("section_name", "sectionName", "name"),
    "section_description": ("section_description", "sectionDescription", "description"),
    "section_instructions": ("section_instructions", "sectionInstructions", "instructions"),
    "section_image": ("section_image", "sectionImage", "image"),
    "section_video": ("section_video", "sectionVideo", "video"),
    "section_audio": ("section_audio", "sectionAudio", "audio"),
    "total_marks": ("total_marks", "totalMarks"),
    "estimated_duration": ("estimated_duration", "estimatedDuration"),
}

TEMPLATE_FIELDS: Dict[str, Tuple[str, ...]] = {
    "title": ("title", "quizName", "examSetName", "name"),
    "description": ("description",),
    "instructions": ("instructions",),
}

PAPER_INFO_FIELDS: Dict[str, Tuple[str, ...]] = {
    "paper_number": ("paper_number", "paperNumber"),
    "paper_level": ("paper_level", "paperLevel"),
    "paper_type": ("paper_type", "paperType"),
    "subject_id": ("subject_id", "subjectId", "topicId"),
    "total_questions": ("total_questions", "totalQuestions"),
    "total_marks": ("total_marks", "totalMarks"),
    "estimated_time_minutes": ("estimated_time_minutes", "estimatedDuration", "estimated_time"),
}


def is_empty(value: Any) -> bool:
    """Empty means absent for alias purposes; ``False`` and ``0`` are values."""
    if value is None:
        return True
    if isinstance(value, (str, list, dict)) and len(value) == 0:
        return True
    return False


def resolve(raw: Mapping[str, Any], candidates: Tuple[str, ...], default: Any = None) -> Any:
    for key in candidates:
        value = raw.get(key)
        if not is_empty(value):
            return value
    return default


def resolve_all(
    raw: Mapping[str, Any], table: Mapping[str, Tuple[str, ...]]
) -> Dict[str, Any]:
    """Resolve every field of ``table``, omitting the ones with no value."""
    out: Dict[str, Any] = {}
    for name, candidates in table.items():
        value = resolve(raw, candidates)
        if value is not None:
            out[name] = value
    return out


def type_tag(raw_type: Optional[Any]) -> Optional[str]:
    """Map one external type tag to the closed internal set, or None."""
    if not isinstance(raw_type, str) or not raw_type.strip():
        return None
    tag = raw_type.strip()
    if tag in TYPE_ENUMS:
        return TYPE_ENUMS[tag]
    if tag.lower() in QUESTION_TYPES:
        return tag.lower()
    return TYPE_ENUMS.get(tag.upper())


def resolve_type(raw: Mapping[str, Any]) -> str:
    """First recognised type tag among the aliases, else ``multiple_choice``."""
    for key in QUESTION_FIELDS["question_type"]:
        tag = type_tag(raw.get(key))
        if tag is not None:
            return tag
    return DEFAULT_TYPE



def as_flag(value: Any) -> Optional[bool]:
    """Read a correctness flag stored as bool, 0/1 or a ``"true"``/``"1"`` string.

    Returns None when ``value`` is not recognisable as a flag.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "1"):
            return True
        if text in ("false", "0"):
            return False
    return None


def resolve_flag(raw: Mapping[str, Any], candidates: Tuple[str, ...]) -> bool:
    """True when any alias holds a true flag; a false alias does not shadow the rest."""
    return any(as_flag(raw.get(key)) is True for key in candidates)

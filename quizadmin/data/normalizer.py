"""Normalize quiz and past-paper question JSON into the canonical template.

Three top-level shapes are recognised, checked in this order:

1. an object with a ``sections`` array (nested template);
2. an object with a top-level ``questions`` array (flat list with metadata);
3. a bare array of questions (legacy flat list).

The flat shapes are wrapped into one synthetic section. Remote responses of
the form ``{"success": true, "data": ...}`` are unwrapped first. Anything
else yields an empty template; the normalizer never raises on unknown input.

Output questions always carry an ``id``, a ``question_type`` from the closed
set and an ``options`` list. Normalizing canonical output is a no-op.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .aliases import (
    CHOICE_TYPES,
    COLUMN_A_FIELDS,
    COLUMN_B_FIELDS,
    OPTION_FIELDS,
    ORDERING_FIELDS,
    PAPER_INFO_FIELDS,
    QUESTION_FIELDS,
    SECTION_FIELDS,
    TEMPLATE_FIELDS,
    as_flag,
    is_empty,
    resolve,
    resolve_all,
    resolve_flag,
    resolve_type,
)

logger = logging.getLogger(__name__)

DEFAULT_SECTION_ID = "default_section"
DEFAULT_SECTION_NAME = "Main Section"

SHAPE_SECTIONS = "sections"
SHAPE_QUESTIONS = "questions"
SHAPE_LIST = "list"

# Keys of the app export format with no internal counterpart.
APP_ONLY_QUESTION_KEYS = frozenset(
    {"questionPdf", "solutionPdf", "solutionUrl", "hasParts", "blankIndex"}
)

_QUESTION_CONSUMED = frozenset(
    {key for keys in QUESTION_FIELDS.values() for key in keys}
    | {"options", "column_a", "column_b", "items", "isCorrectAnswer", "is_correct"}
    | APP_ONLY_QUESTION_KEYS
)
_OPTION_CONSUMED = frozenset({key for keys in OPTION_FIELDS.values() for key in keys} | {"order"})
_SECTION_CONSUMED = frozenset({key for keys in SECTION_FIELDS.values() for key in keys} | {"questions"})
_TEMPLATE_CONSUMED = frozenset(
    {key for keys in TEMPLATE_FIELDS.values() for key in keys}
    | {"paper_info", "sections", "questions", "success", "data"}
)


def _as_int(value: Any) -> Any:
    """Coerce integral numbers and digit strings to int; leave the rest alone."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return value


def numeric_value(value: Any, default: float = 0) -> float:
    """Numeric value of a marks or time field; absent or unparseable gives ``default``."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return default
    return default


def sum_marks(questions: Iterable[Mapping[str, Any]], default: float = 0) -> Any:
    return _as_int(sum(numeric_value(q.get("marks"), default) for q in questions))


def _extras(raw: Mapping[str, Any], consumed: Iterable[str]) -> Dict[str, Any]:
    consumed = set(consumed)
    return {k: v for k, v in raw.items() if k not in consumed}


def _keep_present(out: Dict[str, Any], raw: Mapping[str, Any], names: Iterable[str]) -> None:
    """Carry canonical keys that resolved to nothing, e.g. ``"explanation": ""``."""
    for name in names:
        if name not in out and name in raw:
            out[name] = raw[name]


def unwrap_envelope(data: Any) -> Any:
    """Strip ``{"success": ..., "data": X}`` wrappers returned by the API."""
    while (
        isinstance(data, dict)
        and "data" in data
        and isinstance(data["data"], (dict, list))
        and not isinstance(data.get("sections"), list)
        and not isinstance(data.get("questions"), list)
    ):
        data = data["data"]
    return data


def detect_shape(data: Any) -> Optional[str]:
    """Return which of the three known shapes ``data`` has, or None."""
    if isinstance(data, dict):
        if isinstance(data.get("sections"), list):
            return SHAPE_SECTIONS
        if isinstance(data.get("questions"), list):
            return SHAPE_QUESTIONS
        return None
    if isinstance(data, list):
        return SHAPE_LIST
    return None


def normalize_option(raw: Any, index: int) -> Dict[str, Any]:
    if not isinstance(raw, Mapping):
        raw = {"option_text": "" if raw is None else str(raw)}
    opt: Dict[str, Any] = {
        "option_letter": str(resolve(raw, OPTION_FIELDS["option_letter"], chr(65 + index))),
        "option_text": resolve(raw, OPTION_FIELDS["option_text"], ""),
    }
    for name in ("option_image", "option_video", "option_audio"):
        value = resolve(raw, OPTION_FIELDS[name])
        if value is not None:
            opt[name] = value
    opt["is_correct"] = resolve_flag(raw, OPTION_FIELDS["is_correct"])
    feedback = resolve(raw, OPTION_FIELDS["feedback"])
    if feedback is not None:
        opt["feedback"] = feedback
    _keep_present(opt, raw, OPTION_FIELDS)
    opt.update(_extras(raw, _OPTION_CONSUMED))
    return opt


def blank_options(count: int = 4) -> List[Dict[str, Any]]:
    return [
        {"option_letter": chr(65 + i), "option_text": "", "is_correct": False}
        for i in range(count)
    ]


def true_false_options(correct: Optional[bool]) -> List[Dict[str, Any]]:
    return [
        {"option_letter": "True", "option_text": "True", "is_correct": correct is True},
        {"option_letter": "False", "option_text": "False", "is_correct": correct is False},
    ]


def _true_false_flag(raw: Mapping[str, Any], correct_answer: Any) -> Optional[bool]:
    for key in ("isCorrectAnswer", "is_correct"):
        flag = as_flag(raw.get(key))
        if flag is not None:
            return flag
    if isinstance(correct_answer, str) and correct_answer.strip().lower() in ("true", "false"):
        return correct_answer.strip().lower() == "true"
    return None


def _normalize_items(raw_items: Any, table: Mapping[str, Tuple[str, ...]]) -> List[Dict[str, Any]]:
    if not isinstance(raw_items, list):
        return []
    consumed = {key for keys in table.values() for key in keys}
    out = []
    for raw in raw_items:
        if not isinstance(raw, Mapping):
            raw = {"item_text": "" if raw is None else str(raw)}
        item = resolve_all(raw, table)
        _keep_present(item, raw, table)
        item.setdefault("item_text", "")
        item.update(_extras(raw, consumed))
        out.append(item)
    return out


def normalize_question(
    raw: Any,
    index: int,
    sequence: Optional[int] = None,
    question_type: Optional[str] = None,
) -> Dict[str, Any]:
    """Map one question of any known naming convention to the canonical shape.

    Args:
        raw: Question object as found in the source document
        index: 0-based position within its section (default question number)
        sequence: 1-based position across the whole template (default id)
        question_type: Internal tag to use instead of resolving one from
            the type aliases

    Returns:
        Canonical question dict
    """
    if not isinstance(raw, Mapping):
        raw = {"question_text": "" if raw is None else str(raw)}
    seq = sequence if sequence is not None else index + 1
    qtype = question_type or resolve_type(raw)
    fields = resolve_all(raw, QUESTION_FIELDS)

    q: Dict[str, Any] = {
        "id": str(fields.get("id", f"q_{seq}")),
        "question_number": _as_int(fields.get("question_number", index + 1)),
        "question_text": fields.get("question_text", ""),
        "question_type": qtype,
    }
    for name in ("question_image", "question_video", "question_audio"):
        if name in fields:
            q[name] = fields[name]

    correct_answer = fields.get("correct_answer")
    raw_options = raw.get("options")
    if isinstance(raw_options, list) and raw_options:
        options = [normalize_option(opt, i) for i, opt in enumerate(raw_options)]
    elif qtype == "true_false":
        options = true_false_options(_true_false_flag(raw, correct_answer))
    elif qtype in CHOICE_TYPES:
        options = blank_options()
    else:
        options = []

    if qtype == "fill_in_blank" and is_empty(correct_answer):
        promoted = next((o["option_text"] for o in options if o["is_correct"]), None)
        if not is_empty(promoted):
            correct_answer = promoted

    q["options"] = options if qtype in CHOICE_TYPES else []
    if qtype == "matching":
        q["column_a"] = _normalize_items(raw.get("column_a"), COLUMN_A_FIELDS)
        q["column_b"] = _normalize_items(raw.get("column_b"), COLUMN_B_FIELDS)
    elif qtype == "ordering":
        items = _normalize_items(raw.get("items"), ORDERING_FIELDS)
        for item in items:
            if "correct_position" in item:
                item["correct_position"] = _as_int(item["correct_position"])
        q["items"] = items

    if correct_answer is not None:
        q["correct_answer"] = correct_answer
    q["marks"] = _as_int(fields.get("marks", 1))

    skip = {"id", "question_number", "question_text", "question_type", "correct_answer", "marks",
            "question_image", "question_video", "question_audio"}
    for name, value in fields.items():
        if name not in skip:
            q[name] = value
    _keep_present(q, raw, QUESTION_FIELDS)
    q.update(_extras(raw, _QUESTION_CONSUMED))
    return q


def normalize_section(raw: Mapping[str, Any], index: int, start: int = 1) -> Dict[str, Any]:
    """Normalize one section; ``start`` is the template-wide sequence of its first question."""
    meta = resolve_all(raw, SECTION_FIELDS)
    section: Dict[str, Any] = {
        "section_id": str(meta.pop("section_id", f"section_{index + 1}")),
        "section_name": meta.pop("section_name", f"Section {index + 1}"),
    }
    section.update(meta)
    _keep_present(section, raw, SECTION_FIELDS)
    section.update(_extras(raw, _SECTION_CONSUMED))
    raw_questions = raw.get("questions")
    if not isinstance(raw_questions, list):
        raw_questions = []
    section["questions"] = [
        normalize_question(q, i, start + i) for i, q in enumerate(raw_questions)
    ]
    return section


def _paper_info(raw: Mapping[str, Any], sections: List[Dict[str, Any]]) -> Dict[str, Any]:
    source = raw.get("paper_info")
    info = resolve_all(source, PAPER_INFO_FIELDS) if isinstance(source, Mapping) else {}
    if isinstance(source, Mapping):
        _keep_present(info, source, PAPER_INFO_FIELDS)
        info.update(_extras(source, {k for keys in PAPER_INFO_FIELDS.values() for k in keys}))
    questions = [q for s in sections for q in s["questions"]]
    info["total_questions"] = len(questions)
    info["total_marks"] = sum_marks(questions)
    return info


def empty_template() -> Dict[str, Any]:
    return {
        "title": "",
        "paper_info": {"total_questions": 0, "total_marks": 0},
        "sections": [],
    }


def normalize_template(data: Any) -> Dict[str, Any]:
    """Normalize any supported document into a canonical template.

    Args:
        data: Parsed JSON (object or array) from a file, the API or the editor

    Returns:
        Template dict with ``title``, ``paper_info``, ``sections`` and any
        extra top-level metadata carried through. Unrecognised input yields
        an empty template.
    """
    data = unwrap_envelope(data)
    shape = detect_shape(data)
    if shape is None:
        logger.warning("Unrecognised question document (type %s); using empty template", type(data).__name__)
        return empty_template()

    if shape == SHAPE_SECTIONS:
        raw_sections = [s if isinstance(s, Mapping) else {} for s in data["sections"]]
    else:
        raw_questions = data["questions"] if shape == SHAPE_QUESTIONS else data
        raw_sections = [{
            "section_id": DEFAULT_SECTION_ID,
            "section_name": DEFAULT_SECTION_NAME,
            "questions": raw_questions,
        }]
    logger.debug("Detected %s shape with %d section(s)", shape, len(raw_sections))

    sections = []
    seq = 1
    for i, raw_section in enumerate(raw_sections):
        section = normalize_section(raw_section, i, seq)
        seq += len(section["questions"])
        sections.append(section)

    meta = data if isinstance(data, Mapping) else {}
    template: Dict[str, Any] = {"title": resolve(meta, TEMPLATE_FIELDS["title"], "")}
    for name in ("description", "instructions"):
        value = resolve(meta, TEMPLATE_FIELDS[name])
        if value is not None:
            template[name] = value
    _keep_present(template, meta, ("description", "instructions"))
    template["paper_info"] = _paper_info(meta, sections)
    template["sections"] = sections
    template.update(_extras(meta, _TEMPLATE_CONSUMED))
    return template


def flatten_template(template: Mapping[str, Any]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Split a canonical template into section metadata and tagged questions.

    Returns:
        ``(sections, questions)`` where sections carry no ``questions`` key and
        each question carries the ``section_id`` of the section it came from.
    """
    sections: List[Dict[str, Any]] = []
    questions: List[Dict[str, Any]] = []
    for section in template.get("sections", []):
        meta = {k: v for k, v in section.items() if k != "questions"}
        sections.append(meta)
        for q in section.get("questions", []):
            questions.append({**q, "section_id": meta["section_id"]})
    return sections, questions

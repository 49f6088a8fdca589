from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Union

import pandas as pd

from quizadmin.data.aliases import CHOICE_TYPES
from quizadmin.data.normalizer import normalize_template

COLUMNS = [
    "section_id",
    "section_name",
    "question_number",
    "id",
    "question_type",
    "marks",
    "difficulty_level",
    "is_free",
    "time_allocation",
    "option_count",
]


def _number(value: float) -> Union[int, float]:
    value = float(value)
    return int(value) if value.is_integer() else value


def questions_frame(template: Any) -> pd.DataFrame:
    """One row per question; accepts any document the normalizer accepts."""
    canonical = normalize_template(template)
    rows = []
    for section in canonical["sections"]:
        for q in section["questions"]:
            rows.append({
                "section_id": section["section_id"],
                "section_name": section.get("section_name", ""),
                "question_number": q.get("question_number"),
                "id": q["id"],
                "question_type": q["question_type"],
                "marks": q.get("marks"),
                "difficulty_level": q.get("difficulty_level"),
                "is_free": q.get("is_free"),
                "time_allocation": q.get("time_allocation"),
                "option_count": len(q["options"]) if q["question_type"] in CHOICE_TYPES else 0,
            })
    if not rows:
        return pd.DataFrame(columns=COLUMNS)
    return pd.DataFrame(rows, columns=COLUMNS)


def summarize_template(template: Any) -> Dict[str, Any]:
    """Totals and breakdowns for a template.

    Returns:
        Dict with ``total_sections``, ``total_questions``, ``total_marks``,
        ``by_type``, ``marks_by_section``, ``difficulty``,
        ``free_questions`` and ``paid_questions``. Counts are plain ints.
    """
    canonical = normalize_template(template)
    df = questions_frame(canonical)
    marks = pd.to_numeric(df["marks"], errors="coerce").fillna(0)

    by_section = marks.groupby(df["section_id"]).sum() if not df.empty else pd.Series(dtype=float)
    marks_by_section = {
        s["section_id"]: _number(by_section.get(s["section_id"], 0))
        for s in canonical["sections"]
    }
    difficulty = (
        df["difficulty_level"].dropna().astype(str).str.upper().value_counts()
        if not df.empty else pd.Series(dtype=int)
    )
    by_type = df["question_type"].value_counts() if not df.empty else pd.Series(dtype=int)

    return {
        "title": canonical.get("title", ""),
        "total_sections": len(canonical["sections"]),
        "total_questions": int(len(df)),
        "total_marks": _number(marks.sum()),
        "by_type": {str(k): int(v) for k, v in by_type.items()},
        "marks_by_section": marks_by_section,
        "difficulty": {str(k): int(v) for k, v in difficulty.items()},
        "free_questions": int(df["is_free"].eq(True).sum()),
        "paid_questions": int(df["is_free"].eq(False).sum()),
    }


def write_summary_csv(template: Any, path: Union[str, Path]) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    questions_frame(template).to_csv(out, index=False)
    return out

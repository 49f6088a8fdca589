"""File import/export for question templates."""

import json
import re
from pathlib import Path
from typing import Any, Dict, Union

from ..utils.io import read_json, write_json
from .normalizer import normalize_template


class TemplateParseError(ValueError):
    """Raised when an imported file is not valid JSON."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Failed to parse JSON file {path}: {reason}")
        self.path = Path(path)
        self.reason = reason


def read_template_file(path: Union[str, Path]) -> Any:
    """Read a UTF-8 JSON document from disk.

    Args:
        path: Path to a ``.json`` file

    Returns:
        Parsed JSON value (object or array), not yet normalized

    Raises:
        FileNotFoundError: If file doesn't exist
        TemplateParseError: If the file isn't valid UTF-8 JSON
    """
    filepath = Path(path)
    if not filepath.exists():
        raise FileNotFoundError(f"Template file not found: {filepath}")
    if not filepath.is_file():
        raise ValueError(f"Path is not a file: {filepath}")
    try:
        return read_json(filepath)
    except UnicodeDecodeError as e:
        raise TemplateParseError(filepath, f"not UTF-8 text ({e.reason})") from e
    except json.JSONDecodeError as e:
        raise TemplateParseError(filepath, f"{e.msg} at line {e.lineno} column {e.colno}") from e


def load_template(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a template file and normalize it to the canonical shape."""
    return normalize_template(read_template_file(path))


def write_template_file(path: Union[str, Path], data: Any) -> Path:
    """Write ``data`` as pretty-printed UTF-8 JSON."""
    return write_json(path, data)


def export_filename(name: str) -> str:
    """Download name for a quiz or paper, e.g. ``Term 1 Quiz`` -> ``term_1_quiz_questions.json``."""
    stem = re.sub(r"\s+", "_", name.strip()).lower() or "template"
    return f"{stem}_questions.json"

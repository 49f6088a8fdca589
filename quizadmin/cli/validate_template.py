from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ..data.loader import TemplateParseError
from ..data.validator import TemplateValidationError, validate_template_file


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="python -m quizadmin.cli.validate_template",
        description=(
            "Validate a quiz or past-paper template JSON file before upload.\n"
            "On failure, prints the first problem found with its section and question."
        ),
    )
    ap.add_argument("template", help="Path to template JSON file")
    ap.add_argument(
        "--permissive",
        action="store_true",
        help="Only check required fields and arrays; skip answer-key checks",
    )
    args = ap.parse_args(argv)

    path = Path(args.template)
    try:
        checked = validate_template_file(path, strict=not args.permissive)
    except FileNotFoundError:
        print(f"[validate_template] Error: template not found: {path}")
        return 1
    except TemplateParseError as e:
        print(f"[validate_template] {e}")
        return 2
    except TemplateValidationError as e:
        # Dedicated exit code for structural failures
        print("[validate_template] Template validation failed.")
        print(f"[validate_template] {e}")
        return 4
    info = checked["paper_info"]
    print(
        f"[validate_template] OK: {path} "
        f"({info['total_questions']} questions, {info['total_marks']} marks)"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

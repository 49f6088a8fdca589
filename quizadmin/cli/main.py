from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm

from quizadmin.analysis.summary import summarize_template, write_summary_csv
from quizadmin.api.client import ContentApiClient, ContentApiError
from quizadmin.config import AppConfig, default_app_config
from quizadmin.data.loader import (
    TemplateParseError,
    load_template,
    read_template_file,
    write_template_file,
)
from quizadmin.data.normalizer import normalize_template
from quizadmin.data.templates import sample_past_paper_template, sample_quiz_template
from quizadmin.data.validator import TemplateValidationError, validate_template_file
from quizadmin.session import PAST_PAPER, QUIZ, EditorSession
from quizadmin.utils.io import dumps_pretty
from quizadmin.utils.logging import setup_logging
from quizadmin.utils.logging_config import configure_logging

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PARSE = 2
EXIT_VALIDATION = 4
EXIT_REMOTE = 5


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m quizadmin.cli.main",
        description="quizadmin CLI - normalize, validate and sync quiz and past-paper questions",
        epilog="""Examples:
  # Check a past-paper template before uploading it
  python -m quizadmin.cli.main validate papers/paper1.json

  # Convert app-format exports to the canonical nested template
  python -m quizadmin.cli.main normalize exports/*.json -o normalized/

  # Per-type and per-section breakdown, with a CSV of all questions
  python -m quizadmin.cli.main summary papers/paper1.json --csv reports/paper1.csv

  # Download a starter template
  python -m quizadmin.cli.main template past-paper -o paper_template.json

  # Fetch and save remote questions
  python -m quizadmin.cli.main pull past-paper pp_123 -o paper.json
  python -m quizadmin.cli.main push past-paper pp_123 paper.json
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", "-c", help="Config file (.json, .yaml or .yml)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    validate_parser = subparsers.add_parser("validate", help="Validate a template file")
    validate_parser.add_argument("path", help="Template JSON file")
    validate_parser.add_argument(
        "--permissive", action="store_true", help="Skip answer-key checks"
    )

    normalize_parser = subparsers.add_parser(
        "normalize", help="Rewrite question files in the canonical template shape"
    )
    normalize_parser.add_argument("paths", nargs="+", help="Question JSON files")
    normalize_parser.add_argument(
        "--output-dir", "-o", help="Directory for normalized files (default: print to stdout)"
    )

    summary_parser = subparsers.add_parser("summary", help="Summarize a question file")
    summary_parser.add_argument("path", help="Question JSON file")
    summary_parser.add_argument("--csv", help="Also write one row per question to this CSV")

    template_parser = subparsers.add_parser("template", help="Write a sample template")
    template_parser.add_argument("kind", choices=[QUIZ, PAST_PAPER])
    template_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    pull_parser = subparsers.add_parser("pull", help="Fetch remote questions and normalize them")
    pull_parser.add_argument("kind", choices=[QUIZ, PAST_PAPER])
    pull_parser.add_argument("id", help="Quiz or past paper id")
    pull_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    push_parser = subparsers.add_parser("push", help="Validate a question file and save it remotely")
    push_parser.add_argument("kind", choices=[QUIZ, PAST_PAPER])
    push_parser.add_argument("id", help="Quiz or past paper id")
    push_parser.add_argument("path", help="Question JSON file")
    return parser


def _emit(data: Any, output: str | None) -> None:
    if output:
        path = write_template_file(output, data)
        print(f"Wrote {path}")
    else:
        print(dumps_pretty(data))


def _cmd_validate(args, cfg: AppConfig, logger) -> int:
    strict = cfg.editor.strict_validation and not args.permissive
    checked = validate_template_file(args.path, strict=strict)
    info = checked["paper_info"]
    print(f"Template OK: {args.path}")
    print(f"  Sections: {len(checked['sections'])}")
    print(f"  Questions: {info['total_questions']}")
    print(f"  Total marks: {info['total_marks']}")
    return EXIT_OK


def _cmd_normalize(args, cfg: AppConfig, logger) -> int:
    out_dir = Path(args.output_dir) if args.output_dir else None
    failed = 0
    for path in tqdm(args.paths, desc="Normalizing", disable=out_dir is None or len(args.paths) < 2):
        try:
            template = load_template(path)
        except (FileNotFoundError, TemplateParseError) as e:
            print(f"Error: {e}", file=sys.stderr)
            logger.error("Skipping %s: %s", path, e)
            failed += 1
            continue
        if out_dir is None:
            print(dumps_pretty(template))
        else:
            write_template_file(out_dir / Path(path).name, template)
        logger.info(
            "Normalized %s: %d questions", path, template["paper_info"]["total_questions"]
        )
    if failed:
        print(f"{failed} of {len(args.paths)} file(s) could not be read", file=sys.stderr)
        return EXIT_PARSE
    return EXIT_OK


def _cmd_summary(args, cfg: AppConfig, logger) -> int:
    raw = read_template_file(args.path)
    summary = summarize_template(raw)
    print(dumps_pretty(summary))
    if args.csv:
        write_summary_csv(raw, args.csv)
        print(f"Wrote {args.csv}")
    return EXIT_OK


def _cmd_template(args, cfg: AppConfig, logger) -> int:
    data = sample_quiz_template() if args.kind == QUIZ else sample_past_paper_template()
    _emit(data, args.output)
    return EXIT_OK


def _cmd_pull(args, cfg: AppConfig, logger) -> int:
    client = ContentApiClient.from_config(cfg.api)
    if args.kind == QUIZ:
        raw = client.get_quiz_questions(args.id)
    else:
        raw = client.get_past_paper_questions(args.id)
    template = normalize_template(raw)
    logger.info(
        "Pulled %s %s: %d questions", args.kind, args.id, template["paper_info"]["total_questions"]
    )
    _emit(template, args.output)
    return EXIT_OK


def _cmd_push(args, cfg: AppConfig, logger) -> int:
    client = ContentApiClient.from_config(cfg.api)
    if args.kind == PAST_PAPER:
        document = validate_template_file(args.path, strict=cfg.editor.strict_validation)
        client.save_past_paper_questions(args.id, document)
        count = document["paper_info"]["total_questions"]
    else:
        record = {"id": args.id, **(client.get_quiz(args.id) or {})}
        session = EditorSession(QUIZ, record=record, config=cfg.editor)
        session.import_file(args.path)
        errors = session.validation_errors()
        if errors:
            raise TemplateValidationError(errors[0], errors=errors)
        session.save(client)
        count = len(session.questions)
    print(f"Saved {count} questions to {args.kind} {args.id}")
    return EXIT_OK


COMMANDS = {
    "validate": _cmd_validate,
    "normalize": _cmd_normalize,
    "summary": _cmd_summary,
    "template": _cmd_template,
    "pull": _cmd_pull,
    "push": _cmd_push,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_ERROR

    try:
        cfg = AppConfig.from_file(args.config) if args.config else default_app_config()
    except FileNotFoundError:
        print(f"Error: Config file '{args.config}' not found")
        return EXIT_ERROR
    except ValueError as e:
        print(f"Error: Invalid config '{args.config}': {e}")
        return EXIT_ERROR

    if cfg.logging.structured:
        configure_logging(cfg.logging.level, log_file=cfg.logging.file_path())
        logger = logging.getLogger("quizadmin")
    else:
        logger = setup_logging(cfg.logging.log_dir, cfg.logging.filename, cfg.logging.level)

    try:
        return COMMANDS[args.command](args, cfg, logger)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        logger.error("FileNotFoundError: %s", e)
        return EXIT_ERROR
    except TemplateParseError as e:
        print(f"Error: {e}")
        logger.error("TemplateParseError: %s", e)
        return EXIT_PARSE
    except TemplateValidationError as e:
        print("Template validation failed.")
        for message in e.errors:
            print(f"  {message}")
        logger.error("Template validation failed: %s", e)
        return EXIT_VALIDATION
    except ContentApiError as e:
        print(f"Error: content API request failed: {e}")
        logger.error("ContentApiError (status %s): %s", e.status_code, e)
        return EXIT_REMOTE


if __name__ == "__main__":
    sys.exit(main())

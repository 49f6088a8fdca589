"""Question data handling: normalization, validation and reassembly."""

from .assembly import build_past_paper_document, build_quiz_document, compute_totals
from .loader import TemplateParseError, load_template, read_template_file, write_template_file
from .normalizer import flatten_template, normalize_question, normalize_template
from .schemas import Question, Template
from .validator import TemplateValidationError, validate_template, validate_template_file

__all__ = [
    "Question",
    "Template",
    "TemplateParseError",
    "TemplateValidationError",
    "build_past_paper_document",
    "build_quiz_document",
    "compute_totals",
    "flatten_template",
    "load_template",
    "normalize_question",
    "normalize_template",
    "read_template_file",
    "validate_template",
    "validate_template_file",
    "write_template_file",
]

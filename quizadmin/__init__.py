"""quizadmin package.

Normalization, validation and reassembly of quiz and past-paper question
documents for the content admin dashboard, plus a client for the remote
content API.
"""

from .api import ContentApiClient, ContentApiError
from .config import AppConfig, default_app_config
from .data import (
    TemplateParseError,
    TemplateValidationError,
    build_past_paper_document,
    build_quiz_document,
    load_template,
    normalize_template,
    validate_template,
)
from .session import EditorSession
from .utils import setup_logging

__all__ = [
    "__version__",
    "AppConfig",
    "default_app_config",
    "ContentApiClient",
    "ContentApiError",
    "EditorSession",
    "TemplateParseError",
    "TemplateValidationError",
    "build_past_paper_document",
    "build_quiz_document",
    "load_template",
    "normalize_template",
    "validate_template",
    "setup_logging",
]

__version__ = "0.1.0"

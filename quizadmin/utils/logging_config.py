"""Structured logging configuration for quizadmin."""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from pathlib import Path

# Record attributes copied into the JSON payload when a call site passes
# them through ``extra=``.
CONTEXT_FIELDS = (
    "resource",
    "record_id",
    "document",
    "section_index",
    "question_index",
    "status_code",
    "duration_ms",
    "counts",
)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                log_obj[name] = getattr(record, name)

        if record.exc_info:
            log_obj["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_obj, default=str)


class DocumentContextFilter(logging.Filter):
    """Attach the document currently being edited to every record."""

    def __init__(self, document: str | None = None):
        super().__init__()
        self.document = document

    def filter(self, record: logging.LogRecord) -> bool:
        if self.document:
            record.document = self.document
        return True


def configure_logging(
    level: str = "INFO",
    log_file: str | None = None,
    structured: bool = True,
    document: str | None = None,
) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for logs
        structured: Whether to use structured JSON logging
        document: Optional quiz/past-paper id added to every record
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if structured:
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if document:
        doc_filter = DocumentContextFilter(document)
        for handler in root_logger.handlers:
            handler.addFilter(doc_filter)

    logging.getLogger("quizadmin").setLevel(log_level)

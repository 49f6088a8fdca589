from __future__ import annotations

import logging
from pathlib import Path


def setup_logging(
    log_dir: str = "logs",
    filename: str = "quizadmin.log",
    level: str | int = logging.INFO,
    name: str = "quizadmin",
) -> logging.Logger:
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if not logger.handlers:
        fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
        ch = logging.StreamHandler()
        ch.setLevel(level)
        ch.setFormatter(fmt)
        logger.addHandler(ch)
        fh = logging.FileHandler(Path(log_dir) / filename, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    return logger

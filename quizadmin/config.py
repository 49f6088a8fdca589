from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_API_URL = "http://localhost:8787/api"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_dir: str = "logs"
    filename: str = "quizadmin.log"
    structured: bool = False

    def file_path(self) -> Path:
        return Path(self.log_dir) / self.filename


@dataclass
class ApiConfig:
    """Remote content API connection settings.

    Defaults are read from the environment so a config file only needs to
    carry what differs per deployment.
    """

    base_url: str = field(
        default_factory=lambda: os.getenv("CLOUDFLARE_API_URL", DEFAULT_API_URL)
    )
    api_key: str = field(default_factory=lambda: os.getenv("CLOUDFLARE_API_KEY", ""))
    timeout: float = field(
        default_factory=lambda: float(os.getenv("QUIZADMIN_API_TIMEOUT", "30"))
    )


@dataclass
class EditorConfig:
    time_unit: str = "seconds"  # unit of per-question time_allocation
    strict_validation: bool = True
    default_marks: int = 1

    def __post_init__(self) -> None:
        if self.time_unit not in ("seconds", "minutes"):
            raise ValueError(
                f"time_unit must be 'seconds' or 'minutes', got {self.time_unit!r}"
            )


@dataclass
class AppConfig:
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    editor: EditorConfig = field(default_factory=EditorConfig)

    @staticmethod
    def from_dict(payload: Dict[str, Any]) -> "AppConfig":
        return AppConfig(
            logging=LoggingConfig(**(payload.get("logging") or {})),
            api=ApiConfig(**(payload.get("api") or {})),
            editor=EditorConfig(**(payload.get("editor") or {})),
        )

    @staticmethod
    def from_file(path: str | Path) -> "AppConfig":
        p = Path(path)
        with open(p, "r", encoding="utf-8") as f:
            if p.suffix in {".yaml", ".yml"}:
                payload = yaml.safe_load(f) or {}
            else:
                payload = json.load(f)
        if not isinstance(payload, dict):
            raise ValueError(f"Config root must be a mapping: {p}")
        return AppConfig.from_dict(payload)

    def to_json(self, path: str | Path) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        with open(p, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2, ensure_ascii=False)


def default_app_config() -> AppConfig:
    return AppConfig()

"""Thin client for the remote content API.

Every endpoint answers with ``{"success": bool, "data": ..., "error": ...}``.
Calls are made once; a failed call raises :class:`ContentApiError` and the
caller decides what to do with its in-memory state.
"""

from __future__ import annotations

import json
import logging
import time
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, List, Mapping, Optional

from ..config import ApiConfig

logger = logging.getLogger(__name__)

RESOURCES = (
    "courses",
    "subjects",
    "topics",
    "lessons",
    "examsets",
    "pastpapers",
    "quizzes",
    "products",
    "questions",
)


class ContentApiError(Exception):
    """Raised for network failures and unsuccessful API responses."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ContentApiClient:
    def __init__(self, base_url: str, api_key: str = "", timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ApiConfig) -> "ContentApiClient":
        return cls(config.base_url, config.api_key, config.timeout)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    def _url(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        url = f"{self.base_url}/{path.lstrip('/')}"
        query = {k: v for k, v in (params or {}).items() if v is not None}
        if query:
            url = f"{url}?{urllib.parse.urlencode(query)}"
        return url

    def _send(self, req: urllib.request.Request) -> Any:
        start = time.monotonic()
        logger.debug("%s %s", req.get_method(), req.full_url)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:  # noqa: S310
                body = resp.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            logger.error("%s %s failed: HTTP %s", req.get_method(), req.full_url, e.code)
            raise ContentApiError(_http_error_message(e), status_code=e.code) from e
        except urllib.error.URLError as e:
            logger.error("%s %s failed: %s", req.get_method(), req.full_url, e.reason)
            raise ContentApiError(f"Network error: {e.reason}") from e

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.debug(
            "%s %s completed", req.get_method(), req.full_url,
            extra={"duration_ms": duration_ms},
        )
        try:
            return json.loads(body) if body else None
        except json.JSONDecodeError as e:
            raise ContentApiError(f"Invalid JSON in response from {req.full_url}") from e

    def request(
        self,
        method: str,
        path: str,
        payload: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Call one endpoint and return the ``data`` of a successful envelope.

        Raises:
            ContentApiError: On HTTP or network failure, or ``success: false``
        """
        data = None if payload is None else json.dumps(payload, ensure_ascii=False).encode("utf-8")
        req = urllib.request.Request(
            self._url(path, params), data=data, headers=self._headers(), method=method
        )
        envelope = self._send(req)
        if isinstance(envelope, dict) and "success" in envelope:
            if envelope["success"] is not True:
                message = envelope.get("error") or envelope.get("message") or "Request failed"
                logger.error("%s %s rejected: %s", method, path, message)
                raise ContentApiError(str(message))
            return envelope.get("data")
        return envelope

    # Resource CRUD

    def list(self, resource: str, **params: Any) -> List[Dict[str, Any]]:
        _check_resource(resource)
        return self.request("GET", resource, params=params) or []

    def get(self, resource: str, record_id: str) -> Dict[str, Any]:
        _check_resource(resource)
        return self.request("GET", f"{resource}/{record_id}")

    def save(self, resource: str, record: Mapping[str, Any]) -> Any:
        """Create or update; records carrying an ``id`` update in place."""
        _check_resource(resource)
        return self.request("POST", resource, payload=dict(record))

    def delete(self, resource: str, record_id: str) -> Any:
        _check_resource(resource)
        return self.request("DELETE", f"{resource}/{record_id}")

    # Question documents

    def get_past_paper_questions(self, paper_id: str) -> Any:
        return self.request("GET", f"pastpapers/{paper_id}/questions")

    def save_past_paper_questions(self, paper_id: str, document: Mapping[str, Any]) -> Any:
        return self.request("POST", f"pastpapers/{paper_id}/questions", payload=dict(document))

    def get_quiz(self, quiz_id: str) -> Dict[str, Any]:
        return self.request("GET", f"quiz/{quiz_id}")

    def upload_quiz_data(self, quiz_id: str, document: Mapping[str, Any]) -> Any:
        return self.request("POST", f"quizzes/{quiz_id}/upload-data", payload=dict(document))

    def fetch_document(self, url: str) -> Any:
        """GET an absolute document URL (e.g. a quiz's ``quiz_data_url``)."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return self._send(urllib.request.Request(url, headers=headers))

    def get_quiz_questions(self, quiz_id: str) -> Optional[Any]:
        """Stored question document of a quiz, or None if it has none yet."""
        quiz = self.get_quiz(quiz_id) or {}
        url = quiz.get("quiz_data_url")
        if not url:
            logger.info("Quiz %s has no question document yet", quiz_id)
            return None
        return self.fetch_document(url)


def _check_resource(resource: str) -> None:
    if resource not in RESOURCES:
        raise ValueError(f"Unknown resource: {resource}. Expected one of {', '.join(RESOURCES)}")


def _http_error_message(e: urllib.error.HTTPError) -> str:
    body = None
    if getattr(e, "fp", None) is not None:
        try:
            body = json.loads(e.read().decode("utf-8"))
        except (ValueError, OSError):
            body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {e.code}: {e.reason}"

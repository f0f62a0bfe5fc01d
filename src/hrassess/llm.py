"""HTTP clients for the AI extraction, generation and text services."""

from __future__ import annotations

import base64
import http.client
import json
from typing import Any, Sequence
from urllib import error, request

import structlog

from .adapters.text import FilePayload
from .errors import AIServiceError


class HTTPAIClient:
    """JSON-over-HTTP client speaking the engine's service protocols.

    Each capability has its own endpoint; calling one that is not configured
    raises ``AIServiceError`` so adapters treat it like any other failure.
    """

    def __init__(
        self,
        *,
        analyze_endpoint: str | None = None,
        generate_endpoint: str | None = None,
        answer_endpoint: str | None = None,
        text_endpoint: str | None = None,
        api_key: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._endpoints = {
            "analyze": analyze_endpoint,
            "generate": generate_endpoint,
            "answer": answer_endpoint,
            "text": text_endpoint,
        }
        self._api_key = api_key
        self._timeout = timeout
        self._logger = structlog.get_logger(__name__)

    def analyze(self, payload: dict[str, Any]) -> Any:
        return self._post("analyze", payload)

    def generate(self, payload: dict[str, Any]) -> Any:
        return self._post("generate", payload)

    def answer(self, payload: dict[str, Any]) -> Any:
        return self._post("answer", payload)

    def extract_text(self, files: Sequence[FilePayload]) -> str:
        payload = {
            "files": [
                {
                    "name": item.name,
                    "contentType": item.content_type,
                    "content": base64.b64encode(item.content).decode("ascii"),
                }
                for item in files
            ]
        }
        body = self._post("text", payload)
        if isinstance(body, dict):
            return str(body.get("text") or "")
        return str(body or "")

    def _post(self, capability: str, payload: dict[str, Any]) -> Any:
        endpoint = self._endpoints.get(capability)
        if not endpoint:
            raise AIServiceError(f"No endpoint configured for {capability!r}")

        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        req = request.Request(endpoint, data=data, headers=headers, method="POST")
        try:
            with request.urlopen(req, timeout=self._timeout) as resp:
                raw = resp.read()
        except (error.URLError, http.client.HTTPException, OSError) as exc:
            self._logger.warning("ai.request_failed", capability=capability, error=str(exc))
            raise AIServiceError(str(exc) or type(exc).__name__) from exc

        try:
            body = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            self._logger.warning("ai.invalid_encoding", capability=capability)
            raise AIServiceError("Service returned a non UTF-8 body") from exc

        if not body:
            return {}
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            self._logger.warning("ai.invalid_json", capability=capability)
            raise AIServiceError("Service returned invalid JSON") from exc


__all__ = ["HTTPAIClient"]

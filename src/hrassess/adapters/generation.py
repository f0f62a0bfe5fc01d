"""Batch question generation adapter."""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping

import structlog

from ..core.bank import new_question_id
from ..errors import AIServiceError, GenerationFailed
from ..schemas import DIFFICULTIES, QUESTION_KINDS, GenerationRequest, Question


class QuestionGenerator:
    """Turn generator output into questions with locally assigned ids.

    Categories are left at their default; the workflow classifies them.
    """

    def __init__(self, service: Any, *, id_factory: Callable[[str], str] | None = None) -> None:
        self._service = service
        self._id_factory = id_factory or new_question_id
        self._logger = structlog.get_logger(__name__)

    def generate(self, request: GenerationRequest) -> list[Question]:
        try:
            raw = self._service.generate(request.to_payload())
        except (AIServiceError, OSError) as exc:
            self._logger.warning("generation.request_failed", error=str(exc))
            raise GenerationFailed(str(exc) or "Failed to generate assessment") from exc

        questions: list[Question] = []
        for item in self._items(raw):
            question = self._normalize(item, request.skill_level)
            if question is not None:
                questions.append(question)
        self._logger.info("generation.completed", requested_role=request.role_title, count=len(questions))
        return questions

    def suggest_answer(self, question: str, *, kind: str = "text", context: str = "") -> str:
        """Ask the service for a short reference answer."""
        if not question:
            raise ValueError("Missing question")
        try:
            raw = self._service.answer({"question": question, "type": kind, "context": context})
        except (AIServiceError, OSError) as exc:
            self._logger.warning("generation.answer_failed", error=str(exc))
            raise GenerationFailed(str(exc) or "Failed to generate answer") from exc
        if isinstance(raw, Mapping):
            return str(raw.get("answer") or "").strip()
        return str(raw or "").strip()

    @staticmethod
    def _items(raw: Any) -> list[Any]:
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise GenerationFailed("Malformed generation response") from exc
        if isinstance(raw, Mapping):
            if "success" in raw and not raw.get("success"):
                raise GenerationFailed(str(raw.get("error") or "Failed to generate assessment"))
            raw = raw.get("questions")
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise GenerationFailed("Malformed generation response")
        return raw

    def _normalize(self, item: Any, default_difficulty: str) -> Question | None:
        if not isinstance(item, Mapping):
            return None
        prompt = str(item.get("question") or item.get("prompt") or "").strip()
        if not prompt:
            return None
        kind = item.get("type") if item.get("type") in QUESTION_KINDS else "text"
        options = item.get("options") if kind == "multiple_choice" else None
        difficulty = item.get("difficulty")
        return Question(
            id=self._id_factory("ai"),
            kind=kind,
            prompt=prompt,
            options=[str(option) for option in options] if isinstance(options, list) else [],
            weight=_positive_int(item.get("weight"), default=1),
            difficulty=difficulty if difficulty in DIFFICULTIES else default_difficulty,
        )


def _positive_int(value: Any, *, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


__all__ = ["QuestionGenerator"]

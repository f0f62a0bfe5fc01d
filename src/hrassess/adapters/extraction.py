"""Normalizes AI extraction responses into suggestions."""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

import structlog

from ..core.tagger import normalize_tag_map
from ..errors import AIServiceError, ExtractionFailed
from ..schemas import DIFFICULTIES, ExtractionSuggestion

MAX_SKILLS = 40
MAX_TAGS = 12


class ExtractionAdapter:
    """Wrap the AI extraction service and tolerate partial responses."""

    def __init__(self, service: Any, *, max_skills: int = MAX_SKILLS, max_tags: int = MAX_TAGS) -> None:
        self._service = service
        self._max_skills = max_skills
        self._max_tags = max_tags
        self._logger = structlog.get_logger(__name__)

    def extract(self, text: str, preferred_categories: Sequence[str] = ()) -> ExtractionSuggestion:
        payload = {"text": text, "preferTypes": list(preferred_categories)}
        try:
            raw = self._service.analyze(payload)
        except (AIServiceError, OSError) as exc:
            self._logger.warning("extraction.request_failed", error=str(exc))
            raise ExtractionFailed(str(exc) or "AI analysis failed") from exc

        data = self._unwrap(raw)
        return ExtractionSuggestion(
            skills=self._string_list(data.get("skills"), limit=self._max_skills),
            types=self._string_list(data.get("types")),
            duration=self._positive_int(data.get("duration")),
            difficulty=data.get("difficulty") if data.get("difficulty") in DIFFICULTIES else None,
            categories=self._categories(data.get("categories")),
            languages=self._string_list(data.get("languages")),
            tags=self._string_list(data.get("tags"), limit=self._max_tags),
        )

    def _unwrap(self, raw: Any) -> Mapping[str, Any]:
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise ExtractionFailed("Malformed extraction response") from exc
        if not isinstance(raw, Mapping):
            raise ExtractionFailed("Malformed extraction response")
        if "success" in raw:
            if not raw.get("success"):
                raise ExtractionFailed(str(raw.get("error") or "AI analysis failed"))
            raw = raw.get("data")
            if not isinstance(raw, Mapping):
                raise ExtractionFailed("Malformed extraction response")
        return raw

    @staticmethod
    def _string_list(value: Any, *, limit: int | None = None) -> list[str] | None:
        if not isinstance(value, list):
            return None
        items = [str(item).strip() for item in value if isinstance(item, (str, int, float))]
        items = [item for item in items if item]
        return items[:limit] if limit is not None else items

    @staticmethod
    def _positive_int(value: Any) -> int | None:
        if isinstance(value, bool):
            return None
        try:
            number = int(float(value))
        except (TypeError, ValueError):
            return None
        return number if number > 0 else None

    @staticmethod
    def _categories(value: Any) -> dict[str, list[str]] | None:
        if not isinstance(value, Mapping):
            return None
        usable: dict[str, list[Any]] = {}
        for name, tags in value.items():
            if isinstance(tags, str):
                tags = [tags]
            if not isinstance(tags, list):
                continue
            usable[str(name)] = [tag for tag in tags if isinstance(tag, (str, int, float))]
        return normalize_tag_map(usable)


__all__ = ["ExtractionAdapter", "MAX_SKILLS", "MAX_TAGS"]

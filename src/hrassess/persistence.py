"""Record store collaborators and JSON output."""

from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any, Protocol

import pendulum
import structlog


class RecordStore(Protocol):
    """External store receiving saved assessments as opaque payloads."""

    def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Persist the payload and return the stored record."""


class InMemoryRecordStore:
    def __init__(self) -> None:
        self.records: list[dict[str, Any]] = []

    def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        record = _stamp(payload)
        self.records.append(record)
        return record


class JSONRecordStore:
    """Write one JSON document per saved assessment."""

    def __init__(self, directory: Path):
        self._directory = Path(directory)
        self._writer = OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        record = _stamp(payload)
        path = self._directory / f"{record['id']}.json"
        self._writer.write(path, record)
        self._logger.info("record_store.saved", record_id=record["id"], path=str(path))
        return record


class OutputWriter:
    """Persist JSON payloads."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, default=_json_default),
            encoding="utf-8",
        )


def _stamp(payload: dict[str, Any]) -> dict[str, Any]:
    record = json.loads(json.dumps(payload, ensure_ascii=False, default=_json_default))
    record.setdefault("id", f"asm_{uuid.uuid4().hex[:12]}")
    record.setdefault("created_at", pendulum.now().to_iso8601_string())
    return record


def _json_default(value):  # type: ignore[override]
    if isinstance(value, pendulum.DateTime):
        return value.to_iso8601_string()
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


__all__ = ["InMemoryRecordStore", "JSONRecordStore", "OutputWriter", "RecordStore"]

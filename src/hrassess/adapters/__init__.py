"""Adapters around the external AI and text extraction services."""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from .extraction import ExtractionAdapter
from .generation import QuestionGenerator
from .heuristic import HeuristicExtractionService, MockGenerationService
from .text import FilePayload, TextExtractionAdapter


@runtime_checkable
class ExtractionService(Protocol):
    """AI extraction service contract.

    Takes ``{text, preferTypes}`` and returns a mapping whose fields
    (``skills``, ``types``, ``duration``, ``difficulty``, ``categories``)
    are all optional.
    """

    def analyze(self, payload: dict[str, Any]) -> Any:
        """Return structured suggestions for the given text."""


@runtime_checkable
class GenerationService(Protocol):
    """Batch question generation contract."""

    def generate(self, payload: dict[str, Any]) -> Any:
        """Return ``{"questions": [...]}`` for the given brief."""

    def answer(self, payload: dict[str, Any]) -> Any:
        """Return ``{"answer": str}`` for a single question."""


@runtime_checkable
class TextExtractionService(Protocol):
    """File or audio to plain text contract."""

    def extract_text(self, files: Sequence[FilePayload]) -> str:
        """Return the concatenated text of every payload."""


__all__ = [
    "ExtractionAdapter",
    "ExtractionService",
    "FilePayload",
    "GenerationService",
    "HeuristicExtractionService",
    "MockGenerationService",
    "QuestionGenerator",
    "TextExtractionAdapter",
    "TextExtractionService",
]

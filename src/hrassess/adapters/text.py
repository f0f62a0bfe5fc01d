"""Text extraction for uploaded briefs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence

import structlog

from ..errors import AIServiceError, ExtractionFailed
from ..pdf_utils import extract_markdown_from_bytes


@dataclass(frozen=True, slots=True)
class FilePayload:
    """Uploaded file handed to the text extraction service."""

    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def is_pdf(self) -> bool:
        return self.content_type == "application/pdf" or self.name.lower().endswith(".pdf")

    @property
    def is_text(self) -> bool:
        return self.content_type.startswith("text/") or self.name.lower().endswith((".txt", ".md"))


class TextExtractionAdapter:
    """Send uploads to the extraction service, falling back to a direct parse.

    The fallback only reads the first payload.
    """

    def __init__(
        self,
        service: Any | None = None,
        *,
        pdf_reader: Callable[[bytes], str] | None = None,
    ) -> None:
        self._service = service
        self._pdf_reader = pdf_reader or extract_markdown_from_bytes
        self._logger = structlog.get_logger(__name__)

    def extract(self, files: Sequence[FilePayload]) -> str:
        if not files:
            raise ValueError("No files to extract")
        if self._service is not None:
            try:
                text = self._service.extract_text(list(files))
            except (AIServiceError, OSError) as exc:
                self._logger.warning(
                    "text_extraction.service_failed",
                    error=str(exc),
                    files=[item.name for item in files],
                )
            else:
                return str(text or "").strip()
        return self.direct_parse(files[0])

    def direct_parse(self, payload: FilePayload) -> str:
        if payload.is_pdf:
            return self._pdf_reader(payload.content)
        if payload.is_text:
            return payload.content.decode("utf-8", errors="replace").strip()
        raise ExtractionFailed(f"Unsupported file for direct parse: {payload.name}")


__all__ = ["FilePayload", "TextExtractionAdapter"]

"""Utilities for extracting markdown from uploaded PDF briefs."""

from __future__ import annotations

import re
import tempfile
from pathlib import Path
from typing import Iterable, Sequence

import pymupdf4llm

# Bare page counters such as "3 / 12" left behind by exported job specs.
_PAGE_COUNTER = re.compile(r"^\s*\d+\s*/\s*\d+\s*$")


def extract_markdown(
    pdf_path: str | Path,
    *,
    exclude_patterns: Sequence[str] = (),
) -> str:
    """Return markdown text extracted from a PDF, removing boilerplate lines.

    Parameters
    ----------
    pdf_path:
        Path to the source PDF file.
    exclude_patterns:
        Substrings (case-sensitive) marking lines to drop, for instance a
        recruiter's confidentiality footer. Each may carry a trailing page
        counter. Lines consisting only of a page counter are always dropped.
    """

    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise FileNotFoundError(pdf_path)

    markdown = pymupdf4llm.to_markdown(str(pdf_path))
    patterns = _build_patterns(exclude_patterns)

    cleaned_lines: list[str] = []
    for line in markdown.splitlines():
        if not line.strip():
            cleaned_lines.append(line)
            continue
        if _PAGE_COUNTER.match(line) or any(pattern.search(line) for pattern in patterns):
            continue
        cleaned_lines.append(line)
    return "\n".join(cleaned_lines).strip()


def extract_markdown_from_bytes(
    content: bytes,
    *,
    exclude_patterns: Sequence[str] = (),
) -> str:
    """Spool an in-memory upload to disk and extract it."""
    with tempfile.TemporaryDirectory() as workdir:
        path = Path(workdir) / "upload.pdf"
        path.write_bytes(content)
        return extract_markdown(path, exclude_patterns=exclude_patterns)


def _build_patterns(excludes: Iterable[str]) -> list[re.Pattern[str]]:
    patterns: list[re.Pattern[str]] = []
    for text in excludes:
        escaped = re.escape(text)
        pattern = re.compile(rf"{escaped}(?:\s+\d+\s*/\s*\d+)?")
        patterns.append(pattern)
    return patterns


__all__ = ["extract_markdown", "extract_markdown_from_bytes"]

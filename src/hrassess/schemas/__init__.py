"""Pydantic schema definitions for assessment authoring."""

from __future__ import annotations

from .assessment import (
    DIFFICULTIES,
    QUESTION_KINDS,
    UNCATEGORIZED,
    AssessmentBlock,
    AssessmentDraft,
    AssessmentTemplate,
    Question,
    TemplateBlock,
)
from .extraction import ExtractionSuggestion, GenerationRequest
from .invitation import CandidateInvite, Invitation, PreviewSnapshot

__all__ = [
    "DIFFICULTIES",
    "QUESTION_KINDS",
    "UNCATEGORIZED",
    "AssessmentBlock",
    "AssessmentDraft",
    "AssessmentTemplate",
    "Question",
    "TemplateBlock",
    "ExtractionSuggestion",
    "GenerationRequest",
    "CandidateInvite",
    "Invitation",
    "PreviewSnapshot",
]

"""Payload shapes exchanged with the AI services."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .assessment import Difficulty


class ExtractionSuggestion(BaseModel):
    """Normalized analysis of a role description.

    ``None`` means the service did not provide the field and the draft keeps
    its current value.
    """

    skills: list[str] | None = None
    types: list[str] | None = None
    duration: int | None = None
    difficulty: Difficulty | None = None
    categories: dict[str, list[str]] | None = None
    languages: list[str] | None = None
    tags: list[str] | None = None

    model_config = ConfigDict(extra="forbid")


class GenerationRequest(BaseModel):
    """Brief sent to the batch question generator."""

    role_title: str = Field(serialization_alias="jobTitle")
    brief: str = Field(default="", serialization_alias="jobDescription")
    assessment_type: str = Field(default="technical", serialization_alias="assessmentType")
    skill_level: Difficulty = Field(default="intermediate", serialization_alias="skillLevel")
    duration_minutes: int = Field(default=60, ge=1, serialization_alias="duration")
    focus_areas: list[str] = Field(default_factory=list, serialization_alias="focusAreas")
    include_code_challenges: bool = Field(
        default=True, serialization_alias="includeCodeChallenges"
    )

    model_config = ConfigDict(extra="forbid")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

"""Authored assessment content: questions, blocks, templates and drafts."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

QuestionKind = Literal["multiple_choice", "text", "code", "rating"]
Difficulty = Literal["beginner", "intermediate", "advanced"]
ExperienceTier = Literal["junior", "senior", "expert"]
BlockKind = Literal[
    "multiple_choice",
    "code",
    "debugging",
    "architecture",
    "scenario",
    "take_home",
    "language",
    "personality",
    "cognitive",
]

QUESTION_KINDS: tuple[str, ...] = ("multiple_choice", "text", "code", "rating")
DIFFICULTIES: tuple[str, ...] = ("beginner", "intermediate", "advanced")
UNCATEGORIZED = "Uncategorized"


class Question(BaseModel):
    """Single authored question."""

    id: str
    kind: QuestionKind = "text"
    prompt: str = ""
    options: list[str] = Field(default_factory=list)
    weight: int = Field(default=1, ge=1)
    difficulty: Difficulty = "intermediate"
    category: str = UNCATEGORIZED

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _options_only_for_multiple_choice(self) -> "Question":
        if self.kind != "multiple_choice" and self.options:
            self.options = []
        return self


class AssessmentBlock(BaseModel):
    """Outline entry of the lightweight block builder."""

    id: str
    kind: BlockKind
    label: str
    duration: int = Field(ge=1)
    weight: int = Field(default=1, ge=1)
    difficulty: Difficulty = "intermediate"

    model_config = ConfigDict(extra="forbid")


class TemplateBlock(BaseModel):
    kind: BlockKind
    label: str
    duration: int = Field(ge=1)
    weight: int = Field(default=1, ge=1)
    difficulty: Difficulty = "intermediate"

    model_config = ConfigDict(extra="forbid")


class AssessmentTemplate(BaseModel):
    """Reusable block outline offered before the describe stage."""

    id: str
    name: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    blocks: list[TemplateBlock] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class AssessmentDraft(BaseModel):
    """Scalar settings of an in-progress assessment."""

    title: str = ""
    role: str = ""
    experience: ExperienceTier = "senior"
    description: str = ""
    skills: list[str] = Field(default_factory=list)
    assessment_types: list[str] = Field(default_factory=list)
    duration: int = Field(default=60, ge=1)
    difficulty: Difficulty = "intermediate"
    job_id: str | None = None
    template_id: str | None = None

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

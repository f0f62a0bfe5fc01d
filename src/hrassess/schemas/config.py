"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .assessment import AssessmentTemplate, Difficulty


class AIConfig(BaseModel):
    analyze_endpoint: str | None = None
    generate_endpoint: str | None = None
    answer_endpoint: str | None = None
    text_endpoint: str | None = None
    api_key: str | None = None
    timeout: float = Field(default=10.0, gt=0)


class DefaultsConfig(BaseModel):
    duration: int = Field(default=60, ge=1)
    difficulty: Difficulty = "intermediate"
    assessment_type: str = "technical"
    include_code_challenges: bool = True


class InvitationConfig(BaseModel):
    origin: str = "http://localhost:3000"
    take_path: str = "/assessments/take"


class HeuristicConfig(BaseModel):
    min_similarity: float = Field(default=90.0, ge=0, le=100)
    default_duration: int = Field(default=45, ge=1)


class AppConfig(BaseModel):
    ai: AIConfig = Field(default_factory=AIConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    invitations: InvitationConfig = Field(default_factory=InvitationConfig)
    heuristics: HeuristicConfig = Field(default_factory=HeuristicConfig)
    templates: list[AssessmentTemplate] = Field(default_factory=list)

    def to_settings(self) -> dict[str, Any]:
        return self.model_dump(mode="python")


def load_config(raw: Any) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValueError("Config must be a mapping")
    return AppConfig.model_validate(raw)

"""Preview snapshots and candidate invitations."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .assessment import Question


class PreviewSnapshot(BaseModel):
    """Frozen copy of an assembled assessment bound to a preview token."""

    title: str
    duration: int
    questions: list[Question] = Field(default_factory=list)
    issued_at: str | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)


class Invitation(BaseModel):
    token: str
    url: str

    model_config = ConfigDict(frozen=True)


class CandidateInvite(BaseModel):
    """Invitation record handed to the notification collaborator."""

    id: str
    assessment_id: str
    candidate_id: str
    job_id: str | None = None
    status: Literal["SENT"] = "SENT"
    created_at: str
    message: str | None = None

    model_config = ConfigDict(extra="forbid")

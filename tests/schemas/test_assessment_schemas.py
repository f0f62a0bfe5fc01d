from __future__ import annotations

import pytest
from pydantic import ValidationError

from hrassess.schemas import UNCATEGORIZED, AssessmentDraft, GenerationRequest, PreviewSnapshot, Question
from hrassess.schemas.config import AppConfig, load_config


def test_question_defaults():
    question = Question(id="q1")

    assert question.kind == "text"
    assert question.weight == 1
    assert question.difficulty == "intermediate"
    assert question.category == UNCATEGORIZED
    assert question.options == []


def test_options_only_kept_for_multiple_choice():
    assert Question(id="q1", kind="code", options=["a"]).options == []
    assert Question(id="q2", kind="multiple_choice", options=["a"]).options == ["a"]


@pytest.mark.parametrize(
    "payload",
    [
        {"id": "q1", "weight": 0},
        {"id": "q1", "kind": "essay"},
        {"id": "q1", "difficulty": "expert"},
        {"id": "q1", "points": 10},
    ],
)
def test_question_validation_errors(payload: dict):
    with pytest.raises(ValidationError):
        Question(**payload)


def test_draft_defaults():
    draft = AssessmentDraft()

    assert draft.experience == "senior"
    assert draft.duration == 60
    assert draft.skills == []
    assert draft.job_id is None


def test_draft_rejects_unknown_experience_on_assignment():
    draft = AssessmentDraft()

    with pytest.raises(ValidationError):
        draft.experience = "wizard"
    assert draft.experience == "senior"


def test_generation_request_serializes_wire_names():
    payload = GenerationRequest(role_title="QA", focus_areas=["Selenium"]).to_payload()

    assert payload == {
        "jobTitle": "QA",
        "jobDescription": "",
        "assessmentType": "technical",
        "skillLevel": "intermediate",
        "duration": 60,
        "focusAreas": ["Selenium"],
        "includeCodeChallenges": True,
    }


def test_preview_snapshot_is_frozen():
    snapshot = PreviewSnapshot(title="T", duration=30)

    with pytest.raises(ValidationError):
        snapshot.title = "changed"


def test_load_config_validation():
    app_config = load_config({"defaults": {"duration": 30}, "ai": {"timeout": 2.5}})

    assert isinstance(app_config, AppConfig)
    settings = app_config.to_settings()
    assert settings["defaults"]["duration"] == 30
    assert settings["ai"]["timeout"] == 2.5
    assert settings["invitations"]["take_path"] == "/assessments/take"
    assert load_config(None) == AppConfig()


def test_load_config_rejects_non_mapping():
    with pytest.raises(ValueError):
        load_config(["not", "a", "mapping"])
    with pytest.raises(ValidationError):
        load_config({"defaults": {"difficulty": "impossible"}})

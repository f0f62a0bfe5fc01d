from __future__ import annotations

from typing import Any

import pytest

from hrassess.adapters import ExtractionAdapter, MockGenerationService, QuestionGenerator
from hrassess.core import AuthoringWorkflow, PendingRequest, Stage, WorkflowConfig
from hrassess.core.workflow import ANALYSIS_ERROR_MESSAGE, suggest_title
from hrassess.errors import AIServiceError, InvalidTransition, RequestPending, WorkflowError
from hrassess.invitations import InvitationIssuer
from hrassess.persistence import InMemoryRecordStore
from hrassess.schemas import UNCATEGORIZED, AssessmentDraft, ExtractionSuggestion


class StubExtractionService:
    def __init__(self, response: Any = None, error: Exception | None = None):
        self.response = response if response is not None else {}
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def analyze(self, payload: dict[str, Any]) -> Any:
        self.calls.append(payload)
        if self.error is not None:
            raise self.error
        return self.response


class StubGenerationService:
    def __init__(self, batches: list[list[dict[str, Any]]] | None = None, error: Exception | None = None):
        self.batches = list(batches or [])
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def generate(self, payload: dict[str, Any]) -> Any:
        self.calls.append(payload)
        if self.error is not None:
            raise self.error
        return {"questions": self.batches.pop(0) if self.batches else []}

    def answer(self, payload: dict[str, Any]) -> Any:
        return {"answer": f"Answer to {payload['question']}"}


def build_workflow(
    extraction: StubExtractionService | None = None,
    generation: Any | None = None,
    **kwargs: Any,
) -> AuthoringWorkflow:
    return AuthoringWorkflow(
        extraction=ExtractionAdapter(extraction or StubExtractionService()),
        generator=QuestionGenerator(generation or StubGenerationService()),
        **kwargs,
    )


def analyzed_session(workflow: AuthoringWorkflow, role: str = "Frontend Engineer"):
    session = workflow.start()
    session.draft.role = role
    workflow.analyze(session)
    return session


def test_analysis_guard_blocks_without_role_or_description():
    service = StubExtractionService({"skills": ["React"]})
    workflow = build_workflow(service)
    session = workflow.start()
    session.draft.role = "   "

    ticket = workflow.request_analysis(session)
    workflow.analyze(session)

    assert ticket is None
    assert service.calls == []
    assert session.stage is Stage.DESCRIBE
    assert session.draft.title == ""


def test_analysis_merges_only_returned_fields():
    service = StubExtractionService(
        {"skills": ["React", "TypeScript"], "categories": {"Frontend": ["React"]}}
    )
    workflow = build_workflow(service)
    session = workflow.start()
    session.draft.role = "Frontend Engineer"
    session.draft.description = "Build UI"
    session.draft.assessment_types = ["technical"]

    workflow.analyze(session)

    assert service.calls == [{"text": "Frontend Engineer\n\nBuild UI", "preferTypes": ["technical"]}]
    assert session.stage is Stage.ANALYZE
    assert session.draft.skills == ["React", "TypeScript"]
    assert session.draft.duration == 60
    assert session.draft.difficulty == "intermediate"
    assert session.draft.assessment_types == ["technical"]
    assert session.draft.title == "Senior Frontend Engineer Assessment"
    assert session.tagger.as_dict() == {"Frontend": ["React"]}
    assert session.error is None
    assert not session.busy


def test_complete_analysis_keeps_fields_that_are_none():
    workflow = build_workflow()
    session = workflow.start()
    session.draft.role = "QA"
    session.draft.skills = ["Selenium"]
    session.tagger.add_tag("Testing", "Selenium")

    ticket = workflow.request_analysis(session)
    applied = workflow.complete_analysis(session, ticket, ExtractionSuggestion(duration=30))

    assert applied is True
    assert session.draft.duration == 30
    assert session.draft.skills == ["Selenium"]
    assert session.tagger.as_dict() == {"Testing": ["Selenium"]}


def test_analysis_failure_stays_in_analyze_and_keeps_prior_state():
    service = StubExtractionService(error=AIServiceError("timeout"))
    workflow = build_workflow(service)
    session = workflow.start()
    session.draft.role = "Backend Engineer"
    session.draft.skills = ["Go"]

    workflow.analyze(session)

    assert session.stage is Stage.ANALYZE
    assert session.error == ANALYSIS_ERROR_MESSAGE
    assert session.draft.skills == ["Go"]
    assert not session.busy

    service.error = None
    service.response = {"skills": ["Go", "gRPC"]}
    workflow.analyze(session)

    assert session.error is None
    assert session.draft.skills == ["Go", "gRPC"]
    assert len(service.calls) == 2


def test_suggest_title_from_description_first_clause():
    draft = AssessmentDraft(description="Build scalable payment APIs in Go and Rust daily, with on-call duty")

    assert suggest_title(draft) == "Build scalable payment APIs in Go - Assessment"
    assert suggest_title(AssessmentDraft()) == "New Assessment"


def test_open_editor_classifies_generated_questions():
    extraction = StubExtractionService({"categories": {"Frontend": ["react"], "Data": ["sql"]}})
    generation = StubGenerationService(
        [
            [
                {"type": "text", "question": "Explain React reconciliation", "weight": 2},
                {"type": "code", "question": "Write a SQL join"},
                {"type": "rating", "question": "Rate your patience"},
            ]
        ]
    )
    workflow = build_workflow(extraction, generation)
    session = analyzed_session(workflow)

    workflow.open_editor(session)

    assert session.stage is Stage.EDITOR
    assert [q.category for q in session.bank] == ["Frontend", "Data", UNCATEGORIZED]
    payload = generation.calls[0]
    assert payload["jobTitle"] == "Frontend Engineer"
    assert payload["jobDescription"] == "Frontend: react | Data: sql"
    assert payload["focusAreas"] == ["react", "sql"]
    assert payload["assessmentType"] == "technical"


def test_empty_generation_seeds_one_placeholder_per_category():
    extraction = StubExtractionService({"categories": {"A": ["alpha"], "B": ["beta"]}})
    workflow = build_workflow(extraction, StubGenerationService([[]]))
    session = analyzed_session(workflow)

    workflow.open_editor(session)

    questions = session.bank.questions()
    assert len(questions) == 2
    assert [q.category for q in questions] == ["A", "B"]
    assert all(q.kind == "text" for q in questions)
    assert "A" in questions[0].prompt and "B" in questions[1].prompt


def test_failed_generation_falls_back_to_placeholders():
    extraction = StubExtractionService({"categories": {"Technical": ["python"]}})
    generation = StubGenerationService(error=AIServiceError("boom"))
    workflow = build_workflow(extraction, generation)
    session = analyzed_session(workflow)

    workflow.open_editor(session)

    assert session.stage is Stage.EDITOR
    assert [q.category for q in session.bank] == ["Technical"]


def test_regeneration_replaces_manual_questions():
    generation = StubGenerationService(
        [[{"question": "First batch"}], [{"question": "Second batch"}]]
    )
    workflow = build_workflow(generation=generation)
    session = analyzed_session(workflow)
    workflow.open_editor(session)
    workflow.add_manual_question(session, {"prompt": "My own question"})
    assert len(session.bank) == 2

    workflow.back(session)
    assert session.stage is Stage.ANALYZE
    assert len(session.bank) == 2

    workflow.open_editor(session)

    assert [q.prompt for q in session.bank] == ["Second batch"]


def test_generate_more_appends_and_empty_append_adds_nothing():
    generation = StubGenerationService([[{"question": "One"}], [{"question": "Two"}], []])
    workflow = build_workflow(generation=generation)
    session = analyzed_session(workflow)
    workflow.open_editor(session)

    workflow.generate_more(session)
    workflow.generate_more(session)

    assert [q.prompt for q in session.bank] == ["One", "Two"]


def test_generate_more_requires_editor_stage():
    workflow = build_workflow()
    session = analyzed_session(workflow)

    with pytest.raises(InvalidTransition):
        workflow.generate_more(session)


def test_stale_analysis_after_back_is_ignored():
    workflow = build_workflow()
    session = workflow.start()
    session.draft.role = "Designer"
    ticket = workflow.request_analysis(session)
    assert session.busy

    workflow.back(session)
    applied = workflow.complete_analysis(session, ticket, ExtractionSuggestion(skills=["Figma"]))

    assert applied is False
    assert session.stage is Stage.DESCRIBE
    assert session.draft.skills == []
    assert not session.busy


def test_stale_generation_after_reset_is_ignored():
    workflow = build_workflow()
    session = analyzed_session(workflow)
    ticket = workflow.request_generation(session)

    workflow.reset(session)
    applied = workflow.complete_generation(session, ticket, [])

    assert applied is False
    assert len(session.bank) == 0
    assert session.stage is Stage.DESCRIBE
    assert session.draft.role == ""


def test_second_request_while_pending_raises():
    workflow = build_workflow()
    session = workflow.start()
    session.draft.role = "SRE"
    workflow.request_analysis(session)

    with pytest.raises(RequestPending):
        workflow.request_analysis(session)


def test_back_is_non_destructive_and_stops_at_initial_stage():
    workflow = build_workflow(StubExtractionService({"skills": ["Go"]}))
    session = analyzed_session(workflow)

    workflow.back(session)
    workflow.back(session)

    assert session.stage is Stage.DESCRIBE
    assert session.draft.skills == ["Go"]
    assert session.draft.role == "Frontend Engineer"


def test_template_choice_seeds_blocks_and_skills():
    workflow = build_workflow()
    session = workflow.start(with_templates=True)
    assert session.stage is Stage.TEMPLATE

    workflow.choose_template(session, "tpl_fe_senior")

    assert session.stage is Stage.DESCRIBE
    assert session.draft.template_id == "tpl_fe_senior"
    assert session.draft.skills == ["React", "TypeScript", "Debugging"]
    assert len(session.blocks) == 3

    workflow.back(session)
    assert session.stage is Stage.TEMPLATE


def test_skip_template_goes_to_describe():
    workflow = build_workflow()
    session = workflow.start(with_templates=True)

    workflow.skip_template(session)

    assert session.stage is Stage.DESCRIBE
    assert len(session.blocks) == 0


def test_reset_returns_to_initial_stage_and_clears_state():
    workflow = build_workflow(StubExtractionService({"categories": {"A": ["x"]}}))
    session = workflow.start(with_templates=True)
    workflow.skip_template(session)
    session.draft.role = "PM"
    workflow.analyze(session)
    workflow.open_editor(session)

    workflow.reset(session)

    assert session.stage is Stage.TEMPLATE
    assert len(session.bank) == 0
    assert len(session.tagger) == 0
    assert session.draft.title == ""


def test_summary_reports_aggregates_and_blocks():
    generation = StubGenerationService(
        [[{"question": "a", "weight": 1}, {"question": "b", "weight": 2}, {"question": "c", "weight": 3}]]
    )
    workflow = build_workflow(generation=generation)
    session = analyzed_session(workflow)
    workflow.open_editor(session)
    workflow.add_block(session, kind="code", label="Coding", duration=20)
    workflow.open_summary(session)

    summary = workflow.summary(session).to_dict()

    assert session.stage is Stage.SUMMARY
    assert summary["total_points"] == 60
    assert summary["estimated_minutes"] == 6
    assert summary["expected_average_score_percent"] == 97
    assert summary["block_minutes"] == 20
    assert summary["blocks"][0]["label"] == "Coding"
    assert summary["stage"] == "summary"


def test_open_summary_requires_editor():
    workflow = build_workflow()
    session = workflow.start()

    with pytest.raises(InvalidTransition):
        workflow.open_summary(session)


def test_save_hands_full_bank_and_groupings_to_store():
    extraction = StubExtractionService({"categories": {"Frontend": ["react"], "Soft skills": ["team"]}})
    generation = StubGenerationService([[{"question": "React state"}, {"question": "Other"}]])
    workflow = build_workflow(extraction, generation)
    session = analyzed_session(workflow)
    workflow.open_editor(session)
    manual = workflow.add_manual_question(session, {"prompt": "Manual"})
    store = InMemoryRecordStore()

    record = workflow.save(session, store)

    assert store.records == [record]
    assert record["id"].startswith("asm_")
    assert record["created_at"]
    assert [q["prompt"] for q in record["questions"]] == ["React state", "Other", "Manual"]
    categories = record["categories"]
    assert categories["Frontend"]["tags"] == ["react"]
    assert len(categories["Frontend"]["question_ids"]) == 1
    assert categories["Soft skills"]["question_ids"] == []
    assert manual.id in categories[UNCATEGORIZED]["question_ids"]
    assert record["title"] == "Senior Frontend Engineer Assessment"


def test_preview_uses_issuer_and_configured_defaults():
    issuer = InvitationIssuer(origin="https://hr.example", token_factory=lambda: "tok123")
    workflow = build_workflow(
        generation=StubGenerationService([[{"question": "Q"}]]),
        issuer=issuer,
        config=WorkflowConfig(default_duration=90),
    )
    session = analyzed_session(workflow)
    workflow.open_editor(session)

    invitation = workflow.preview(session)

    assert invitation.token == "tok123"
    assert invitation.url == "https://hr.example/assessments/take?token=tok123&duration=90"
    assert issuer.resolve("tok123").questions[0].prompt == "Q"


def test_suggest_answer_uses_generator_and_skips_unknown_ids():
    workflow = build_workflow(generation=MockGenerationService())
    session = analyzed_session(workflow)
    workflow.open_editor(session)
    question = session.bank.questions()[0]

    assert workflow.suggest_answer(session, question.id) == MockGenerationService.MOCK_ANSWER
    assert workflow.suggest_answer(session, "missing") is None


def test_connection_error_during_analysis_is_recoverable():
    service = StubExtractionService(error=ConnectionError("connection reset"))
    workflow = build_workflow(service)
    session = workflow.start()
    session.draft.role = "Platform Engineer"

    workflow.analyze(session)

    assert session.error == ANALYSIS_ERROR_MESSAGE
    assert session.stage is Stage.ANALYZE
    assert not session.busy

    service.error = None
    service.response = {"skills": ["Terraform"]}
    workflow.analyze(session)

    assert session.error is None
    assert session.draft.skills == ["Terraform"]


def test_unexpected_analysis_error_releases_the_request():
    service = StubExtractionService(error=RuntimeError("bug in service"))
    workflow = build_workflow(service)
    session = workflow.start()
    session.draft.role = "Platform Engineer"

    with pytest.raises(RuntimeError):
        workflow.analyze(session)
    assert not session.busy

    service.error = None
    service.response = {"skills": ["Ansible"]}
    workflow.analyze(session)

    assert session.draft.skills == ["Ansible"]


def test_connection_error_during_generation_seeds_placeholders():
    extraction = StubExtractionService({"categories": {"Infra": ["terraform"]}})
    generation = StubGenerationService(error=ConnectionError("connection reset"))
    workflow = build_workflow(extraction, generation)
    session = analyzed_session(workflow)

    workflow.open_editor(session)

    assert [q.category for q in session.bank] == ["Infra"]
    assert not session.busy


def test_unexpected_generation_error_releases_the_request():
    generation = StubGenerationService(error=RuntimeError("bug in generator"))
    workflow = build_workflow(generation=generation)
    session = analyzed_session(workflow)

    with pytest.raises(RuntimeError):
        workflow.open_editor(session)
    assert not session.busy
    assert session.stage is Stage.EDITOR

    generation.error = None
    generation.batches = [[{"question": "Recovered"}]]
    workflow.back(session)
    workflow.open_editor(session)

    assert [q.prompt for q in session.bank] == ["Recovered"]


class RecordingLogger:
    def __init__(self) -> None:
        self.events: list[str] = []

    def _record(self, event: str, **_: Any) -> None:
        self.events.append(event)

    debug = info = warning = _record


def test_stale_generation_failure_is_not_logged_as_failure():
    workflow = build_workflow()
    session = analyzed_session(workflow)
    ticket = workflow.request_generation(session)
    workflow.back(session)
    logger = RecordingLogger()
    workflow._logger = logger

    applied = workflow.fail_generation(session, ticket, AIServiceError("late"))

    assert applied is False
    events = logger.events
    assert "workflow.generation_failed" not in events
    assert "workflow.stale_response" in events
    assert len(session.bank) == 0


def test_generation_ticket_without_brief_is_rejected(monkeypatch: pytest.MonkeyPatch):
    generation = StubGenerationService([[{"question": "Never sent"}]])
    workflow = build_workflow(generation=generation)
    session = analyzed_session(workflow)

    def bare_request(target, mode="replace"):
        ticket = PendingRequest(
            session_id=target.session_id,
            request_id="bare",
            kind="generation",
            epoch=target.epoch,
            mode=mode,
        )
        target.pending = ticket
        return ticket

    monkeypatch.setattr(workflow, "request_generation", bare_request)

    with pytest.raises(WorkflowError):
        workflow.open_editor(session)
    assert not session.busy
    assert generation.calls == []

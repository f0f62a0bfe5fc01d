"""Authoring workflow state machine.

Sessions move through ``template? -> describe -> analyze -> editor -> summary``.
The two AI calls are split into ``request_*`` / ``complete_*`` pairs: a request
returns a :class:`PendingRequest` ticket and a completion is applied only while
that ticket is still the session's outstanding request for the current epoch.
Stepping back or resetting bumps the epoch so late responses are dropped.
The ``analyze``, ``open_editor`` and ``generate_more`` helpers run both halves
synchronously.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal, Mapping

import structlog

from ..errors import ExtractionFailed, GenerationFailed, InvalidTransition, RequestPending, WorkflowError
from ..schemas import (
    AssessmentBlock,
    AssessmentDraft,
    ExtractionSuggestion,
    GenerationRequest,
    Invitation,
    PreviewSnapshot,
    Question,
)
from .aggregates import AggregateCalculator, AssessmentAggregates
from .bank import InsertMode, QuestionBank
from .blocks import BlockOutline, TemplateCatalog
from .classifier import HeuristicClassifier
from .tagger import CategoryTagger

if TYPE_CHECKING:
    from ..adapters import ExtractionAdapter, QuestionGenerator
    from ..invitations import InvitationIssuer
    from ..persistence import RecordStore


class Stage(str, Enum):
    TEMPLATE = "template"
    DESCRIBE = "describe"
    ANALYZE = "analyze"
    EDITOR = "editor"
    SUMMARY = "summary"


_PREVIOUS: dict[Stage, Stage] = {
    Stage.DESCRIBE: Stage.TEMPLATE,
    Stage.ANALYZE: Stage.DESCRIBE,
    Stage.EDITOR: Stage.ANALYZE,
    Stage.SUMMARY: Stage.EDITOR,
}

RequestKind = Literal["analysis", "generation"]

ANALYSIS_ERROR_MESSAGE = "AI analysis failed"


@dataclass(frozen=True, slots=True)
class PendingRequest:
    """Ticket for one outstanding asynchronous call."""

    session_id: str
    request_id: str
    kind: RequestKind
    epoch: int
    mode: InsertMode = "replace"
    generation: GenerationRequest | None = None


@dataclass
class WorkflowConfig:
    """Session defaults and generation brief settings."""

    default_duration: int = 60
    default_difficulty: str = "intermediate"
    assessment_type: str = "technical"
    include_code_challenges: bool = True
    fallback_role: str = "Assessment"


@dataclass(slots=True)
class AuthoringSession:
    """All mutable state of one authoring session."""

    session_id: str
    draft: AssessmentDraft
    tagger: CategoryTagger = field(default_factory=CategoryTagger)
    bank: QuestionBank = field(default_factory=QuestionBank)
    blocks: BlockOutline = field(default_factory=BlockOutline)
    stage: Stage = Stage.DESCRIBE
    initial_stage: Stage = Stage.DESCRIBE
    epoch: int = 0
    pending: PendingRequest | None = None
    error: str | None = None

    @property
    def busy(self) -> bool:
        return self.pending is not None


@dataclass(slots=True)
class AssessmentSummary:
    """Read-only recap shown on the summary stage."""

    title: str
    role: str
    duration: int
    difficulty: str
    stage: Stage
    aggregates: AssessmentAggregates
    blocks: list[AssessmentBlock]
    block_minutes: int

    def to_dict(self) -> dict[str, Any]:
        aggregates = self.aggregates
        return {
            "title": self.title,
            "role": self.role,
            "duration": self.duration,
            "difficulty": self.difficulty,
            "stage": self.stage.value,
            "total_points": aggregates.total_points,
            "total_questions": aggregates.total_questions,
            "estimated_minutes": aggregates.estimated_minutes,
            "expected_average_score_percent": aggregates.expected_average_score_percent,
            "categories": {
                name: {
                    "count": item.count,
                    "estimated_minutes": item.estimated_minutes,
                    "points": item.points,
                }
                for name, item in aggregates.categories.items()
            },
            "blocks": [block.model_dump(mode="json") for block in self.blocks],
            "block_minutes": self.block_minutes,
        }


def suggest_title(draft: AssessmentDraft) -> str:
    """Derive a draft title from the role, or from the description's first clause."""
    if draft.role.strip():
        tier = draft.experience.capitalize() if draft.experience else ""
        return f"{tier + ' ' if tier else ''}{draft.role.strip()} Assessment"
    if draft.description.strip():
        first = re.split(r"[\n.,]", draft.description.strip())[0]
        words = first.strip().split()[:6]
        return f"{' '.join(words)} - Assessment"
    return "New Assessment"


def analysis_text(draft: AssessmentDraft) -> str:
    parts = [part for part in (draft.role.strip(), draft.description.strip()) if part]
    return "\n\n".join(parts)


class AuthoringWorkflow:
    """Drives authoring sessions and orchestrates the engine components."""

    def __init__(
        self,
        *,
        extraction: "ExtractionAdapter",
        generator: "QuestionGenerator",
        classifier: HeuristicClassifier | None = None,
        calculator: AggregateCalculator | None = None,
        issuer: "InvitationIssuer | None" = None,
        templates: TemplateCatalog | None = None,
        config: WorkflowConfig | None = None,
    ) -> None:
        self._extraction = extraction
        self._generator = generator
        self._classifier = classifier or HeuristicClassifier()
        self._calculator = calculator or AggregateCalculator()
        self._issuer = issuer
        self._templates = templates or TemplateCatalog()
        self._config = config or WorkflowConfig()
        self._logger = structlog.get_logger(__name__)

    # -- lifecycle -------------------------------------------------------

    def start(self, *, with_templates: bool = False, session_id: str | None = None) -> AuthoringSession:
        initial = Stage.TEMPLATE if with_templates else Stage.DESCRIBE
        session = AuthoringSession(
            session_id=session_id or uuid.uuid4().hex,
            draft=self._new_draft(),
            stage=initial,
            initial_stage=initial,
        )
        self._logger.info("workflow.started", session_id=session.session_id, stage=initial.value)
        return session

    def reset(self, session: AuthoringSession) -> AuthoringSession:
        """Discard everything and return to the initial stage."""
        session.draft = self._new_draft()
        session.tagger = CategoryTagger()
        session.bank = QuestionBank()
        session.blocks = BlockOutline()
        session.stage = session.initial_stage
        session.epoch += 1
        session.pending = None
        session.error = None
        self._logger.info("workflow.reset", session_id=session.session_id, epoch=session.epoch)
        return session

    def back(self, session: AuthoringSession) -> AuthoringSession:
        previous = _PREVIOUS.get(session.stage)
        if previous is None or (previous is Stage.TEMPLATE and session.initial_stage is not Stage.TEMPLATE):
            return session
        session.epoch += 1
        session.pending = None
        session.error = None
        session.stage = previous
        self._logger.info("workflow.back", session_id=session.session_id, stage=previous.value)
        return session

    # -- template pre-stage ---------------------------------------------

    def skip_template(self, session: AuthoringSession) -> AuthoringSession:
        self._require_stage(session, "skip template", Stage.TEMPLATE)
        session.stage = Stage.DESCRIBE
        return session

    def choose_template(self, session: AuthoringSession, template_id: str) -> AuthoringSession:
        self._require_stage(session, "choose template", Stage.TEMPLATE)
        template = self._templates.get(template_id)
        session.blocks.extend_from_template(template)
        for tag in template.tags:
            if tag not in session.draft.skills:
                session.draft.skills.append(tag)
        session.draft.template_id = template.id
        session.stage = Stage.DESCRIBE
        self._logger.info("workflow.template_chosen", session_id=session.session_id, template_id=template.id)
        return session

    # -- describe -> analyze ---------------------------------------------

    def can_analyze(self, session: AuthoringSession) -> bool:
        return bool(session.draft.role.strip() or session.draft.description.strip())

    def request_analysis(self, session: AuthoringSession) -> PendingRequest | None:
        """Enter ``analyze`` and open an extraction request.

        Returns ``None`` without touching the session when neither a role nor
        a description is present.
        """
        self._require_stage(session, "analyze", Stage.DESCRIBE, Stage.ANALYZE)
        if not self.can_analyze(session):
            self._logger.info("workflow.analysis_blocked", session_id=session.session_id)
            return None
        self._ensure_idle(session)
        if not session.draft.title.strip():
            session.draft.title = suggest_title(session.draft)
        session.stage = Stage.ANALYZE
        session.error = None
        return self._open_request(session, "analysis")

    def complete_analysis(
        self,
        session: AuthoringSession,
        ticket: PendingRequest,
        suggestion: ExtractionSuggestion,
    ) -> bool:
        if not self._accept(session, ticket):
            return False
        draft = session.draft
        if suggestion.skills is not None:
            draft.skills = list(suggestion.skills)
        if suggestion.types is not None:
            draft.assessment_types = list(suggestion.types)
        if suggestion.duration is not None:
            draft.duration = suggestion.duration
        if suggestion.difficulty is not None:
            draft.difficulty = suggestion.difficulty
        if suggestion.categories is not None:
            session.tagger.replace_all(suggestion.categories)
        self._logger.info(
            "workflow.analysis_applied",
            session_id=session.session_id,
            skills=len(draft.skills),
            categories=session.tagger.categories(),
        )
        return True

    def fail_analysis(self, session: AuthoringSession, ticket: PendingRequest, exc: Exception) -> bool:
        if not self._accept(session, ticket):
            return False
        session.error = ANALYSIS_ERROR_MESSAGE
        self._logger.warning("workflow.analysis_failed", session_id=session.session_id, error=str(exc))
        return True

    def analyze(self, session: AuthoringSession) -> AuthoringSession:
        ticket = self.request_analysis(session)
        if ticket is None:
            return session
        try:
            suggestion = self._extraction.extract(
                analysis_text(session.draft), session.draft.assessment_types
            )
        except ExtractionFailed as exc:
            self.fail_analysis(session, ticket, exc)
        else:
            self.complete_analysis(session, ticket, suggestion)
        finally:
            self._release(session, ticket)
        return session

    # -- analyze -> editor -----------------------------------------------

    def build_generation_request(self, session: AuthoringSession) -> GenerationRequest:
        draft = session.draft
        brief = session.tagger.brief() or ", ".join(draft.skills) or draft.description
        return GenerationRequest(
            role_title=draft.role.strip() or self._config.fallback_role,
            brief=brief,
            assessment_type=self._config.assessment_type,
            skill_level=draft.difficulty,
            duration_minutes=draft.duration,
            focus_areas=session.tagger.focus_areas() or list(draft.skills),
            include_code_challenges=self._config.include_code_challenges,
        )

    def request_generation(self, session: AuthoringSession, mode: InsertMode = "replace") -> PendingRequest:
        """Open a generation request.

        ``replace`` is the analyze -> editor transition and always discards the
        current bank, manual questions included. ``append`` extends the bank
        from the editor.
        """
        if mode == "replace":
            self._require_stage(session, "open editor", Stage.ANALYZE)
        else:
            self._require_stage(session, "generate more", Stage.EDITOR)
        self._ensure_idle(session)
        session.stage = Stage.EDITOR
        session.error = None
        return self._open_request(
            session, "generation", mode=mode, generation=self.build_generation_request(session)
        )

    def complete_generation(
        self,
        session: AuthoringSession,
        ticket: PendingRequest,
        questions: list[Question],
    ) -> bool:
        if not self._accept(session, ticket):
            return False
        self._apply_generation(session, ticket, questions)
        return True

    def fail_generation(self, session: AuthoringSession, ticket: PendingRequest, exc: Exception) -> bool:
        """Treat a failed generation like an empty one."""
        if not self._accept(session, ticket):
            return False
        self._logger.warning("workflow.generation_failed", session_id=session.session_id, error=str(exc))
        self._apply_generation(session, ticket, [])
        return True

    def _apply_generation(
        self,
        session: AuthoringSession,
        ticket: PendingRequest,
        questions: list[Question],
    ) -> None:
        categorized = self._classifier.categorize(questions, session.tagger.as_dict())
        if not categorized and ticket.mode == "replace":
            categorized = self._placeholders(session)
            self._logger.info(
                "workflow.generation_empty_fallback",
                session_id=session.session_id,
                placeholders=len(categorized),
            )
        session.bank.insert_batch(categorized, ticket.mode)
        self._logger.info(
            "workflow.generation_applied",
            session_id=session.session_id,
            mode=ticket.mode,
            added=len(categorized),
            total=len(session.bank),
        )

    def open_editor(self, session: AuthoringSession) -> AuthoringSession:
        return self._generate(session, "replace")

    def generate_more(self, session: AuthoringSession) -> AuthoringSession:
        return self._generate(session, "append")

    def _generate(self, session: AuthoringSession, mode: InsertMode) -> AuthoringSession:
        ticket = self.request_generation(session, mode)
        if ticket.generation is None:
            self._release(session, ticket)
            raise WorkflowError("Generation request is missing its brief")
        try:
            questions = self._generator.generate(ticket.generation)
        except GenerationFailed as exc:
            self.fail_generation(session, ticket, exc)
        else:
            self.complete_generation(session, ticket, questions)
        finally:
            self._release(session, ticket)
        return session

    # -- editor ------------------------------------------------------------

    def add_manual_question(
        self,
        session: AuthoringSession,
        partial: Mapping[str, Any] | None = None,
    ) -> Question:
        return session.bank.insert_manual(partial, difficulty=session.draft.difficulty)

    def add_block(
        self,
        session: AuthoringSession,
        *,
        kind: str,
        label: str,
        duration: int,
        weight: int = 1,
        difficulty: str | None = None,
    ) -> AssessmentBlock:
        return session.blocks.add(
            kind=kind,
            label=label,
            duration=duration,
            weight=weight,
            difficulty=difficulty or session.draft.difficulty,
        )

    def suggest_answer(self, session: AuthoringSession, question_id: str) -> str | None:
        question = session.bank.get(question_id)
        if question is None or not question.prompt:
            return None
        return self._generator.suggest_answer(
            question.prompt, kind=question.kind, context=session.draft.role
        )

    # -- editor -> summary -------------------------------------------------

    def open_summary(self, session: AuthoringSession) -> AuthoringSession:
        self._require_stage(session, "open summary", Stage.EDITOR)
        session.stage = Stage.SUMMARY
        return session

    def aggregates(self, session: AuthoringSession) -> AssessmentAggregates:
        return self._calculator.compute(session.bank.questions(), session.tagger.categories())

    def summary(self, session: AuthoringSession) -> AssessmentSummary:
        draft = session.draft
        return AssessmentSummary(
            title=self._title(session),
            role=draft.role,
            duration=draft.duration,
            difficulty=draft.difficulty,
            stage=session.stage,
            aggregates=self.aggregates(session),
            blocks=session.blocks.blocks(),
            block_minutes=session.blocks.total_minutes(),
        )

    # -- publishing --------------------------------------------------------

    def preview(self, session: AuthoringSession, *, origin: str | None = None) -> Invitation:
        if self._issuer is None:
            raise WorkflowError("No invitation issuer configured")
        snapshot = PreviewSnapshot(
            title=self._title(session),
            duration=session.draft.duration,
            questions=session.bank.questions(),
        )
        return self._issuer.issue(snapshot, origin=origin)

    def save(self, session: AuthoringSession, store: "RecordStore") -> dict[str, Any]:
        """Hand the draft, full bank and category groupings to the record store."""
        draft = session.draft
        questions = session.bank.questions()
        groupings: dict[str, dict[str, list[str]]] = {
            name: {"tags": session.tagger.tags(name), "question_ids": []}
            for name in session.tagger.categories()
        }
        for question in questions:
            groupings.setdefault(question.category, {"tags": [], "question_ids": []})
            groupings[question.category]["question_ids"].append(question.id)

        payload = {
            "title": self._title(session),
            "description": draft.description or ", ".join(draft.skills),
            "role": draft.role,
            "experience": draft.experience,
            "duration": draft.duration,
            "difficulty": draft.difficulty,
            "skills": list(draft.skills),
            "assessment_types": list(draft.assessment_types),
            "job_id": draft.job_id,
            "template_id": draft.template_id,
            "questions": session.bank.snapshot(),
            "categories": groupings,
            "blocks": [block.model_dump(mode="json") for block in session.blocks.blocks()],
        }
        record = store.create(payload)
        self._logger.info(
            "workflow.saved",
            session_id=session.session_id,
            record_id=record.get("id"),
            questions=len(questions),
        )
        return record

    # -- internals ---------------------------------------------------------

    def _new_draft(self) -> AssessmentDraft:
        return AssessmentDraft(
            duration=self._config.default_duration,
            difficulty=self._config.default_difficulty,
        )

    def _title(self, session: AuthoringSession) -> str:
        draft = session.draft
        return draft.title.strip() or draft.role.strip() or self._config.fallback_role

    def _placeholders(self, session: AuthoringSession) -> list[Question]:
        return [
            Question(
                id=f"seed_{name}",
                kind="text",
                prompt=f"Category: {name}",
                category=name,
                weight=1,
                difficulty=session.draft.difficulty,
            )
            for name in session.tagger.categories()
        ]

    def _open_request(
        self,
        session: AuthoringSession,
        kind: RequestKind,
        *,
        mode: InsertMode = "replace",
        generation: GenerationRequest | None = None,
    ) -> PendingRequest:
        ticket = PendingRequest(
            session_id=session.session_id,
            request_id=uuid.uuid4().hex,
            kind=kind,
            epoch=session.epoch,
            mode=mode,
            generation=generation,
        )
        session.pending = ticket
        self._logger.debug("workflow.request_opened", session_id=session.session_id, kind=kind, mode=mode)
        return ticket

    def _accept(self, session: AuthoringSession, ticket: PendingRequest) -> bool:
        current = session.pending
        if (
            current is None
            or ticket.session_id != session.session_id
            or ticket.epoch != session.epoch
            or ticket.request_id != current.request_id
        ):
            self._logger.info(
                "workflow.stale_response",
                session_id=session.session_id,
                kind=ticket.kind,
                ticket_epoch=ticket.epoch,
                epoch=session.epoch,
            )
            return False
        session.pending = None
        return True

    @staticmethod
    def _release(session: AuthoringSession, ticket: PendingRequest) -> None:
        """Drop the ticket if a call raised before it was settled."""
        if session.pending is not None and session.pending.request_id == ticket.request_id:
            session.pending = None

    @staticmethod
    def _ensure_idle(session: AuthoringSession) -> None:
        if session.pending is not None:
            raise RequestPending(
                f"A {session.pending.kind} request is already pending for session {session.session_id}"
            )

    @staticmethod
    def _require_stage(session: AuthoringSession, action: str, *stages: Stage) -> None:
        if session.stage not in stages:
            raise InvalidTransition(session.stage.value, action)


__all__ = [
    "ANALYSIS_ERROR_MESSAGE",
    "AssessmentSummary",
    "AuthoringSession",
    "AuthoringWorkflow",
    "PendingRequest",
    "Stage",
    "WorkflowConfig",
    "analysis_text",
    "suggest_title",
]

"""Dependency injection container for the assessment engine."""

from __future__ import annotations

from dependency_injector import containers, providers

from .adapters import (
    ExtractionAdapter,
    HeuristicExtractionService,
    MockGenerationService,
    QuestionGenerator,
    TextExtractionAdapter,
)
from .adapters.heuristic import HeuristicExtractionConfig
from .core import (
    AggregateCalculator,
    AuthoringWorkflow,
    HeuristicClassifier,
    SessionRegistry,
    TemplateCatalog,
    WorkflowConfig,
)
from .invitations import InMemorySessionStore, InvitationIssuer
from .llm import HTTPAIClient
from .persistence import InMemoryRecordStore
from .schemas.config import AppConfig, load_config


class AssessmentContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    ai_client = providers.Singleton(
        HTTPAIClient,
        analyze_endpoint=config.ai.analyze_endpoint,
        generate_endpoint=config.ai.generate_endpoint,
        answer_endpoint=config.ai.answer_endpoint,
        text_endpoint=config.ai.text_endpoint,
        api_key=config.ai.api_key,
        timeout=config.ai.timeout,
    )

    extraction_service = providers.Singleton(
        HeuristicExtractionService,
        config=providers.Factory(
            HeuristicExtractionConfig,
            min_similarity=config.heuristics.min_similarity,
            default_duration=config.heuristics.default_duration,
        ),
    )
    generation_service = providers.Singleton(MockGenerationService)
    text_service = providers.Object(None)

    extraction_adapter = providers.Singleton(ExtractionAdapter, service=extraction_service)
    question_generator = providers.Singleton(QuestionGenerator, service=generation_service)
    text_extractor = providers.Singleton(TextExtractionAdapter, service=text_service)

    classifier = providers.Singleton(HeuristicClassifier)
    calculator = providers.Singleton(AggregateCalculator)
    templates = providers.Singleton(TemplateCatalog, extra=config.templates)

    session_store = providers.Singleton(InMemorySessionStore)
    issuer = providers.Singleton(
        InvitationIssuer,
        store=session_store,
        origin=config.invitations.origin,
        take_path=config.invitations.take_path,
    )
    record_store = providers.Singleton(InMemoryRecordStore)

    workflow_config = providers.Singleton(
        WorkflowConfig,
        default_duration=config.defaults.duration,
        default_difficulty=config.defaults.difficulty,
        assessment_type=config.defaults.assessment_type,
        include_code_challenges=config.defaults.include_code_challenges,
    )

    workflow = providers.Singleton(
        AuthoringWorkflow,
        extraction=extraction_adapter,
        generator=question_generator,
        classifier=classifier,
        calculator=calculator,
        issuer=issuer,
        templates=templates,
        config=workflow_config,
    )

    sessions = providers.Factory(SessionRegistry, workflow=workflow)


def create_container(*, settings: dict | AppConfig | None = None) -> AssessmentContainer:
    """Instantiate container, switching to HTTP services where endpoints are set."""

    app_config = settings if isinstance(settings, AppConfig) else load_config(settings or {})

    container = AssessmentContainer()
    container.config.from_dict(app_config.to_settings())

    ai = app_config.ai
    if ai.analyze_endpoint:
        container.extraction_service.override(container.ai_client)
    if ai.generate_endpoint:
        container.generation_service.override(container.ai_client)
    if ai.text_endpoint:
        container.text_service.override(container.ai_client)

    return container

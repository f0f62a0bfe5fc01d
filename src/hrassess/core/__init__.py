"""Core assessment composition components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .aggregates import AggregateCalculator, AssessmentAggregates, CategoryBreakdown
from .bank import QuestionBank, new_question_id
from .blocks import BUILTIN_TEMPLATES, BlockOutline, TemplateCatalog
from .classifier import HeuristicClassifier, classify
from .sessions import SessionRegistry
from .tagger import CategoryTagger
from .workflow import (
    AssessmentSummary,
    AuthoringSession,
    AuthoringWorkflow,
    PendingRequest,
    Stage,
    WorkflowConfig,
)

__all__ = [
    "AggregateCalculator",
    "AssessmentAggregates",
    "AssessmentSummary",
    "AuthoringSession",
    "AuthoringWorkflow",
    "BUILTIN_TEMPLATES",
    "BlockOutline",
    "CategoryBreakdown",
    "CategoryTagger",
    "HeuristicClassifier",
    "PendingRequest",
    "QuestionBank",
    "SessionRegistry",
    "Stage",
    "TemplateCatalog",
    "WorkflowConfig",
    "classify",
    "new_question_id",
]

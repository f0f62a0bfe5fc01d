"""Exception hierarchy for the assessment composition engine."""

from __future__ import annotations


class AssessmentError(Exception):
    """Base class for engine errors."""


class AIServiceError(AssessmentError):
    """Raised by service clients when an outbound call fails or times out."""


class ExtractionFailed(AssessmentError):
    """AI extraction failed or returned a malformed payload.

    Recoverable: the workflow surfaces it inline and keeps prior state.
    """


class GenerationFailed(AssessmentError):
    """Batch question generation failed."""


class InvitationNotFound(AssessmentError, LookupError):
    """No preview snapshot is stored under the given token."""

    def __init__(self, token: str):
        super().__init__(f"Unknown invitation token: {token!r}")
        self.token = token


class WorkflowError(AssessmentError):
    """Base class for authoring workflow errors."""


class InvalidTransition(WorkflowError):
    """The requested action is not available from the current stage."""

    def __init__(self, stage: str, action: str):
        super().__init__(f"Cannot {action} from stage {stage!r}")
        self.stage = stage
        self.action = action


class RequestPending(WorkflowError):
    """An asynchronous request is already outstanding for the session."""


class TemplateNotFound(WorkflowError, LookupError):
    """Unknown assessment template id."""


__all__ = [
    "AssessmentError",
    "AIServiceError",
    "ExtractionFailed",
    "GenerationFailed",
    "InvitationNotFound",
    "WorkflowError",
    "InvalidTransition",
    "RequestPending",
    "TemplateNotFound",
]

"""Arena of authoring sessions keyed by session id."""

from __future__ import annotations

from typing import Iterator

from .workflow import AuthoringSession, AuthoringWorkflow


class SessionRegistry:
    """Owns independent sessions; nothing is shared between them."""

    def __init__(self, workflow: AuthoringWorkflow):
        self._workflow = workflow
        self._sessions: dict[str, AuthoringSession] = {}

    @property
    def workflow(self) -> AuthoringWorkflow:
        return self._workflow

    def open(self, *, with_templates: bool = False) -> AuthoringSession:
        session = self._workflow.start(with_templates=with_templates)
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> AuthoringSession:
        try:
            return self._sessions[session_id]
        except KeyError as exc:
            raise KeyError(f"Unknown session: {session_id!r}") from exc

    def close(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def session_ids(self) -> list[str]:
        return list(self._sessions.keys())

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[AuthoringSession]:
        return iter(list(self._sessions.values()))


__all__ = ["SessionRegistry"]

"""Preview tokens and candidate invitations."""

from __future__ import annotations

import secrets
from typing import Callable, Iterable, Protocol
from urllib.parse import urlencode

import pendulum
import structlog

from .errors import InvitationNotFound
from .schemas import CandidateInvite, Invitation, PreviewSnapshot

PREVIEW_KEY_PREFIX = "assessment_preview_"


class SessionStore(Protocol):
    """Session-scoped key/value storage (string values)."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemorySessionStore:
    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def __len__(self) -> int:
        return len(self._items)


class InvitationIssuer:
    """Mint opaque tokens bound to serialized assessment snapshots.

    Snapshots are stored serialized, so later edits to the live draft never
    reach an issued token. The issuer enforces no expiry.
    """

    def __init__(
        self,
        store: SessionStore | None = None,
        *,
        origin: str = "http://localhost:3000",
        take_path: str = "/assessments/take",
        token_factory: Callable[[], str] | None = None,
        clock: Callable[[], pendulum.DateTime] | None = None,
    ) -> None:
        self._store = store if store is not None else InMemorySessionStore()
        self._origin = origin
        self._take_path = take_path
        self._token_factory = token_factory or (lambda: secrets.token_urlsafe(12))
        self._clock = clock or pendulum.now
        self._logger = structlog.get_logger(__name__)

    def issue(self, snapshot: PreviewSnapshot, *, origin: str | None = None) -> Invitation:
        token = self._token_factory()
        while self._store.get(self._key(token)) is not None:
            token = self._token_factory()

        stored = snapshot.model_copy(
            update={"issued_at": snapshot.issued_at or self._clock().to_iso8601_string()}
        )
        self._store.set(self._key(token), stored.model_dump_json())
        url = self.build_url(token, snapshot.duration, origin=origin)
        self._logger.info(
            "invitation.issued",
            token=token,
            title=snapshot.title,
            questions=len(snapshot.questions),
        )
        return Invitation(token=token, url=url)

    def resolve(self, token: str) -> PreviewSnapshot:
        raw = self._store.get(self._key(token))
        if raw is None:
            raise InvitationNotFound(token)
        return PreviewSnapshot.model_validate_json(raw)

    def build_url(self, token: str, duration: int, *, origin: str | None = None) -> str:
        base = (origin or self._origin).rstrip("/")
        query = urlencode({"token": token, "duration": duration})
        return f"{base}{self._take_path}?{query}"

    def invite_candidates(
        self,
        assessment_id: str,
        candidate_ids: Iterable[str],
        *,
        job_id: str | None = None,
        message: str | None = None,
    ) -> list[CandidateInvite]:
        """Build invitation records; delivery belongs to the notification service."""
        candidates = [str(cid) for cid in candidate_ids if cid]
        if not assessment_id or not candidates:
            raise ValueError("Missing assessment_id or candidate_ids")
        now = self._clock()
        invites = [
            CandidateInvite(
                id=f"inv_{now.int_timestamp}_{candidate_id}",
                assessment_id=assessment_id,
                candidate_id=candidate_id,
                job_id=job_id,
                created_at=now.to_iso8601_string(),
                message=message,
            )
            for candidate_id in candidates
        ]
        self._logger.info("invitation.candidates_invited", assessment_id=assessment_id, count=len(invites))
        return invites

    @staticmethod
    def _key(token: str) -> str:
        return f"{PREVIEW_KEY_PREFIX}{token}"


__all__ = ["InMemorySessionStore", "InvitationIssuer", "SessionStore", "PREVIEW_KEY_PREFIX"]

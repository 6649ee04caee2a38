"""Repository contracts and in-memory implementations.

The offer tracker and grade profile store talk to persistence through the
protocols below. The in-memory repositories back tests and local use;
a remote store implements the same contracts.
"""

from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, Protocol

from pydantic import ValidationError

from multiflow.core.exceptions import (
    CommentPermissionError,
    NotFoundError,
    ValidationFailedError,
)
from multiflow.core.logging import get_logger
from multiflow.domain.models.grade_profile import GradeProfile
from multiflow.domain.models.offer import (
    ActivityType,
    OfferActivityEvent,
    OfferClientDecision,
    OfferComment,
    OfferDetail,
    OfferRevision,
    OfferRevisionDraft,
    OfferStatus,
    PropertyOffer,
)

log = get_logger(__name__)

ChangeListener = Callable[[], None]
Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class OfferRepository(Protocol):
    """Persistence contract for offers, revisions, comments and activity.

    Writes return the id of the created or updated record, or raise a
    RepositoryError subclass.
    """

    def fetch_offers(self, property_id: str, owner_user_id: str) -> list[PropertyOffer]: ...

    def fetch_offer(self, offer_id: str) -> PropertyOffer: ...

    def fetch_detail(self, offer_id: str) -> OfferDetail: ...

    def create_offer(
        self,
        property_id: str,
        owner_user_id: str,
        title: str,
        initial_revision: OfferRevisionDraft | None = None,
        expires_at: datetime | None = None,
        deal_room_id: str | None = None,
    ) -> str: ...

    def create_revision(self, offer_id: str, draft: OfferRevisionDraft, created_by_user_id: str) -> str: ...

    def update_status(self, offer_id: str, status: OfferStatus, actor_user_id: str) -> str: ...

    def update_client_decision(
        self, offer_id: str, decision: OfferClientDecision, actor_user_id: str
    ) -> str: ...

    def add_comment(self, offer_id: str, author_user_id: str, body: str) -> str: ...

    def delete_comment(self, comment_id: str, actor_user_id: str) -> str: ...

    def archive_offer(self, offer_id: str, actor_user_id: str) -> str: ...

    def start_listening(self, callback: ChangeListener) -> None: ...

    def stop_listening(self, callback: ChangeListener) -> None: ...


class GradeProfileRepository(Protocol):
    """Persistence contract for grade profiles."""

    def fetch_profiles(self, user_id: str) -> list[GradeProfile]: ...

    def save_profile(self, profile: GradeProfile) -> GradeProfile: ...

    def delete_profile(self, user_id: str, profile_id: str) -> None: ...

    def set_default(self, user_id: str, profile_id: str | None) -> None: ...


class _ListenerRegistry:
    """Change callbacks, invoked outside the repository lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: list[ChangeListener] = []

    def add(self, callback: ChangeListener) -> None:
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def remove(self, callback: ChangeListener) -> None:
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for callback in listeners:
            try:
                callback()
            except Exception as e:
                log.error("change_listener_failed", listener=repr(callback), error=str(e))


class InMemoryOfferRepository:
    """Thread-safe offer store.

    Revision numbers are assigned here as max(existing) + 1. Every write
    appends the matching activity event.
    """

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or utcnow
        self._lock = threading.RLock()
        self._offers: dict[str, PropertyOffer] = {}
        self._revisions: dict[str, list[OfferRevision]] = {}
        self._comments: dict[str, list[OfferComment]] = {}
        self._activity: dict[str, list[OfferActivityEvent]] = {}
        self._listeners = _ListenerRegistry()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_offers(self, property_id: str, owner_user_id: str) -> list[PropertyOffer]:
        with self._lock:
            offers = [
                o for o in self._offers.values()
                if o.property_id == property_id and o.owner_user_id == owner_user_id
            ]
        return sorted(offers, key=lambda o: o.updated_at, reverse=True)

    def fetch_offer(self, offer_id: str) -> PropertyOffer:
        with self._lock:
            return self._get_offer(offer_id)

    def fetch_detail(self, offer_id: str) -> OfferDetail:
        with self._lock:
            self._get_offer(offer_id)
            revisions = sorted(self._revisions[offer_id], key=lambda r: r.revision_number, reverse=True)
            comments = sorted(self._comments[offer_id], key=lambda c: c.created_at)
            activity = sorted(self._activity[offer_id], key=lambda a: a.created_at, reverse=True)
        return OfferDetail(revisions=revisions, comments=comments, activity=activity)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_offer(
        self,
        property_id: str,
        owner_user_id: str,
        title: str,
        initial_revision: OfferRevisionDraft | None = None,
        expires_at: datetime | None = None,
        deal_room_id: str | None = None,
    ) -> str:
        now = self._clock()
        offer_id = new_id()
        try:
            offer = PropertyOffer(
                id=offer_id,
                property_id=property_id,
                owner_user_id=owner_user_id,
                title=title.strip(),
                expires_at=expires_at,
                deal_room_id=deal_room_id,
                created_at=now,
                updated_at=now,
            )
        except ValidationError as e:
            raise ValidationFailedError(_first_error(e)) from e

        with self._lock:
            self._offers[offer_id] = offer
            self._revisions[offer_id] = []
            self._comments[offer_id] = []
            self._activity[offer_id] = []
            self._record(offer_id, owner_user_id, ActivityType.OFFER_CREATED, {"title": offer.title})
            if initial_revision is not None:
                self._append_revision(offer_id, initial_revision, owner_user_id)

        self._listeners.notify()
        return offer_id

    def create_revision(self, offer_id: str, draft: OfferRevisionDraft, created_by_user_id: str) -> str:
        with self._lock:
            self._get_offer(offer_id)
            revision_id = self._append_revision(offer_id, draft, created_by_user_id)
        self._listeners.notify()
        return revision_id

    def update_status(self, offer_id: str, status: OfferStatus, actor_user_id: str) -> str:
        with self._lock:
            offer = self._get_offer(offer_id)
            now = self._clock()
            update: dict = {"status": status, "updated_at": now}
            if status is OfferStatus.SUBMITTED:
                update["submitted_at"] = now
            self._offers[offer_id] = offer.model_copy(update=update)
            self._record(
                offer_id,
                actor_user_id,
                ActivityType.STATUS_CHANGED,
                {"from": offer.status.value, "to": status.value},
            )
        self._listeners.notify()
        return offer_id

    def update_client_decision(
        self, offer_id: str, decision: OfferClientDecision, actor_user_id: str
    ) -> str:
        with self._lock:
            offer = self._get_offer(offer_id)
            self._offers[offer_id] = offer.model_copy(
                update={"client_decision": decision, "updated_at": self._clock()}
            )
            self._record(
                offer_id,
                actor_user_id,
                ActivityType.CLIENT_DECISION_CHANGED,
                {"from": offer.client_decision.value, "to": decision.value},
            )
        self._listeners.notify()
        return offer_id

    def add_comment(self, offer_id: str, author_user_id: str, body: str) -> str:
        with self._lock:
            self._get_offer(offer_id)
            try:
                comment = OfferComment(
                    id=new_id(),
                    offer_id=offer_id,
                    author_user_id=author_user_id,
                    body=body.strip(),
                    created_at=self._clock(),
                )
            except ValidationError as e:
                raise ValidationFailedError(_first_error(e)) from e
            self._comments[offer_id].append(comment)
            self._record(offer_id, author_user_id, ActivityType.COMMENT_ADDED, {"comment_id": comment.id})
        self._listeners.notify()
        return comment.id

    def delete_comment(self, comment_id: str, actor_user_id: str) -> str:
        with self._lock:
            comments, comment = self._find_comment(comment_id)
            if comment.author_user_id != actor_user_id:
                raise CommentPermissionError(comment_id)
            comments.remove(comment)
        self._listeners.notify()
        return comment_id

    def archive_offer(self, offer_id: str, actor_user_id: str) -> str:
        with self._lock:
            offer = self._get_offer(offer_id)
            if offer.is_archived:
                return offer_id
            update: dict = {"is_archived": True, "updated_at": self._clock()}
            if not offer.is_terminal:
                update["status"] = OfferStatus.WITHDRAWN
            self._offers[offer_id] = offer.model_copy(update=update)
            self._record(offer_id, actor_user_id, ActivityType.OFFER_ARCHIVED, {"status": offer.status.value})
        self._listeners.notify()
        return offer_id

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def start_listening(self, callback: ChangeListener) -> None:
        self._listeners.add(callback)

    def stop_listening(self, callback: ChangeListener) -> None:
        self._listeners.remove(callback)

    # ------------------------------------------------------------------
    # Internals (caller holds the lock)
    # ------------------------------------------------------------------

    def _get_offer(self, offer_id: str) -> PropertyOffer:
        offer = self._offers.get(offer_id)
        if offer is None:
            raise NotFoundError("offer", offer_id)
        return offer

    def _find_comment(self, comment_id: str) -> tuple[list[OfferComment], OfferComment]:
        for comments in self._comments.values():
            for comment in comments:
                if comment.id == comment_id:
                    return comments, comment
        raise NotFoundError("comment", comment_id)

    def _append_revision(self, offer_id: str, draft: OfferRevisionDraft, user_id: str) -> str:
        existing = self._revisions[offer_id]
        number = max((r.revision_number for r in existing), default=0) + 1
        now = self._clock()
        revision = OfferRevision(
            **draft.model_dump(include=set(OfferRevisionDraft.model_fields)),
            id=new_id(),
            offer_id=offer_id,
            revision_number=number,
            created_by_user_id=user_id,
            created_at=now,
        )
        existing.append(revision)
        self._offers[offer_id] = self._offers[offer_id].model_copy(
            update={"current_revision_id": revision.id, "updated_at": now}
        )
        self._record(offer_id, user_id, ActivityType.REVISION_CREATED, {"revision_number": str(number)})
        return revision.id

    def _record(self, offer_id: str, actor_user_id: str, event: ActivityType, metadata: dict[str, str]) -> None:
        self._activity[offer_id].append(
            OfferActivityEvent(
                id=new_id(),
                offer_id=offer_id,
                actor_user_id=actor_user_id,
                event_type=event.value,
                metadata=metadata,
                created_at=self._clock(),
            )
        )


class InMemoryGradeProfileRepository:
    """Grade profiles per owner.

    The default is stored as a single id per owner, so at most one
    profile can carry is_default at any time.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._profiles: dict[str, dict[str, GradeProfile]] = {}
        self._defaults: dict[str, str] = {}

    def fetch_profiles(self, user_id: str) -> list[GradeProfile]:
        with self._lock:
            default_id = self._defaults.get(user_id)
            profiles = list(self._profiles.get(user_id, {}).values())
        return [p.model_copy(update={"is_default": p.id == default_id}) for p in profiles]

    def save_profile(self, profile: GradeProfile) -> GradeProfile:
        if profile.user_id is None:
            raise ValidationFailedError("grade profile has no owner")
        stored = profile if profile.id else profile.model_copy(update={"id": new_id()})
        with self._lock:
            self._profiles.setdefault(stored.user_id, {})[stored.id] = stored
            if stored.is_default:
                self._defaults[stored.user_id] = stored.id
            elif self._defaults.get(stored.user_id) == stored.id:
                del self._defaults[stored.user_id]
        return stored

    def delete_profile(self, user_id: str, profile_id: str) -> None:
        with self._lock:
            profiles = self._profiles.get(user_id, {})
            if profile_id not in profiles:
                raise NotFoundError("grade profile", profile_id)
            del profiles[profile_id]
            if self._defaults.get(user_id) == profile_id:
                del self._defaults[user_id]

    def set_default(self, user_id: str, profile_id: str | None) -> None:
        with self._lock:
            if profile_id is None:
                self._defaults.pop(user_id, None)
                return
            if profile_id not in self._profiles.get(user_id, {}):
                raise NotFoundError("grade profile", profile_id)
            self._defaults[user_id] = profile_id


def _first_error(error: ValidationError) -> str:
    errors = error.errors()
    if not errors:
        return str(error)
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    return f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "invalid value")

"""Offer negotiation tracker.

Enforces the offer rules on top of an OfferRepository: the active offer
quota, the status transition table and the terminal-offer guard. Writes
against one offer are serialised; reads go straight to the repository.
"""

from __future__ import annotations

import threading
import weakref
from datetime import datetime

from multiflow.core.exceptions import (
    InvalidStatusTransitionError,
    NotAuthenticatedError,
    NotFoundError,
    OfferLimitReachedError,
    TerminalOfferError,
)
from multiflow.core.logging import get_logger
from multiflow.domain.calculator.deadlines import deadline_items, next_deadline
from multiflow.domain.models.offer import (
    DeadlineItem,
    OfferClientDecision,
    OfferDetail,
    OfferRevisionDraft,
    OfferStatus,
    PropertyOffer,
    can_transition,
)
from multiflow.domain.models.signals import Entitlement

from .repository import ChangeListener, Clock, OfferRepository, utcnow

log = get_logger(__name__)


class _KeyedLocks:
    """One lock per key, created on first use.

    Entries are weak: a key's lock is dropped once no caller holds it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()

    def __call__(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock


class OfferTracker:
    """Offer state machine for one signed-in user."""

    def __init__(
        self,
        repository: OfferRepository,
        entitlement: Entitlement,
        user_id: str | None,
        clock: Clock | None = None,
    ):
        self.repository = repository
        self.entitlement = entitlement
        self.user_id = user_id
        self._clock = clock or utcnow
        self._offer_locks = _KeyedLocks()
        self._property_locks = _KeyedLocks()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_offers(self, property_id: str, include_archived: bool = True) -> list[PropertyOffer]:
        offers = self.repository.fetch_offers(property_id, self._require_user())
        if include_archived:
            return offers
        return [o for o in offers if not o.is_archived]

    def fetch_offer(self, offer_id: str) -> PropertyOffer:
        return self._owned_offer(offer_id)

    def fetch_detail(self, offer_id: str) -> OfferDetail:
        self._owned_offer(offer_id)
        return self.repository.fetch_detail(offer_id)

    def active_offer_count(self, property_id: str) -> int:
        return sum(1 for o in self.fetch_offers(property_id) if o.is_active)

    def can_create_offer(self, property_id: str) -> bool:
        return self.active_offer_count(property_id) < self.entitlement.offer_limit

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_offer(
        self,
        property_id: str,
        title: str,
        initial_revision: OfferRevisionDraft | None = None,
        expires_at: datetime | None = None,
        deal_room_id: str | None = None,
    ) -> str:
        """Create an offer, optionally with its first revision.

        Raises:
            OfferLimitReachedError: The property already has as many active
                offers as the entitlement allows.
        """
        user_id = self._require_user()
        with self._property_locks(property_id):
            active = self.active_offer_count(property_id)
            limit = self.entitlement.offer_limit
            if active >= limit:
                log.warning(
                    "offer_limit_reached",
                    property_id=property_id,
                    active=active,
                    limit=limit,
                    tier=self.entitlement.tier.value,
                )
                raise OfferLimitReachedError(limit)

            offer_id = self.repository.create_offer(
                property_id=property_id,
                owner_user_id=user_id,
                title=title,
                initial_revision=initial_revision,
                expires_at=expires_at,
                deal_room_id=deal_room_id,
            )
        log.info("offer_created", offer_id=offer_id, property_id=property_id, active=active + 1, limit=limit)
        return offer_id

    def create_revision(self, offer_id: str, draft: OfferRevisionDraft) -> str:
        """Append a revision. Status is left untouched.

        Raises:
            TerminalOfferError: The offer is accepted, rejected, withdrawn
                or expired.
        """
        user_id = self._require_user()
        with self._offer_locks(offer_id):
            offer = self._owned_offer(offer_id)
            if offer.is_terminal:
                log.warning("revision_rejected_terminal", offer_id=offer_id, status=offer.status.value)
                raise TerminalOfferError(offer_id, offer.status)
            revision_id = self.repository.create_revision(offer_id, draft, user_id)
        log.info("revision_created", offer_id=offer_id, revision_id=revision_id)
        return revision_id

    def update_status(self, offer_id: str, status: OfferStatus) -> str:
        """Move the offer to a new status.

        Raises:
            InvalidStatusTransitionError: The move is not in the transition
                table, including a move to the current status.
        """
        user_id = self._require_user()
        with self._offer_locks(offer_id):
            offer = self._owned_offer(offer_id)
            if not can_transition(offer.status, status):
                log.warning(
                    "status_transition_rejected",
                    offer_id=offer_id,
                    current=offer.status.value,
                    requested=status.value,
                )
                raise InvalidStatusTransitionError(offer.status, status)
            self.repository.update_status(offer_id, status, user_id)
        log.info("offer_status_changed", offer_id=offer_id, previous=offer.status.value, status=status.value)
        return offer_id

    def update_client_decision(self, offer_id: str, decision: OfferClientDecision) -> str:
        user_id = self._require_user()
        with self._offer_locks(offer_id):
            offer = self._owned_offer(offer_id)
            if offer.client_decision is decision:
                return offer_id
            self.repository.update_client_decision(offer_id, decision, user_id)
        log.info("client_decision_changed", offer_id=offer_id, decision=decision.value)
        return offer_id

    def add_comment(self, offer_id: str, body: str) -> str:
        user_id = self._require_user()
        self._owned_offer(offer_id)
        comment_id = self.repository.add_comment(offer_id, user_id, body)
        log.info("comment_added", offer_id=offer_id, comment_id=comment_id)
        return comment_id

    def delete_comment(self, comment_id: str) -> str:
        self.repository.delete_comment(comment_id, self._require_user())
        log.info("comment_deleted", comment_id=comment_id)
        return comment_id

    def archive_offer(self, offer_id: str) -> str:
        """Archive the offer. A non-terminal offer is withdrawn as well."""
        user_id = self._require_user()
        with self._offer_locks(offer_id):
            offer = self._owned_offer(offer_id)
            self.repository.archive_offer(offer_id, user_id)
        log.info("offer_archived", offer_id=offer_id, status=offer.status.value)
        return offer_id

    # ------------------------------------------------------------------
    # Deadlines
    # ------------------------------------------------------------------

    def deadlines(self, offer: PropertyOffer, detail: OfferDetail) -> list[DeadlineItem]:
        return deadline_items(detail.current_revision(offer), offer.expires_at)

    def next_deadline(
        self,
        offer: PropertyOffer,
        detail: OfferDetail,
        now: datetime | None = None,
    ) -> DeadlineItem | None:
        return next_deadline(detail.current_revision(offer), offer.expires_at, now or self._clock())

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def start_listening(self, callback: ChangeListener) -> None:
        self.repository.start_listening(callback)

    def stop_listening(self, callback: ChangeListener) -> None:
        self.repository.stop_listening(callback)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_user(self) -> str:
        if self.user_id is None:
            raise NotAuthenticatedError()
        return self.user_id

    def _owned_offer(self, offer_id: str) -> PropertyOffer:
        offer = self.repository.fetch_offer(offer_id)
        if offer.owner_user_id != self._require_user():
            raise NotFoundError("offer", offer_id)
        return offer

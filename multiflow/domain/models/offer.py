"""Offer negotiation data models.

An offer moves through a status lifecycle while its terms live in an
append-only list of revisions. Comments and activity events form the
audit trail.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Annotated

from pydantic import AfterValidator, BaseModel, Field

if TYPE_CHECKING:
    from .property import Property


class OfferStatus(str, Enum):
    DRAFT = "draft"
    READY_TO_SUBMIT = "ready_to_submit"
    SUBMITTED = "submitted"
    COUNTER_RECEIVED = "counter_received"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"
    EXPIRED = "expired"

    @property
    def display_name(self) -> str:
        return _STATUS_TITLES[self]

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


_STATUS_TITLES = {
    OfferStatus.DRAFT: "Draft",
    OfferStatus.READY_TO_SUBMIT: "Ready",
    OfferStatus.SUBMITTED: "Submitted",
    OfferStatus.COUNTER_RECEIVED: "Counter",
    OfferStatus.ACCEPTED: "Accepted",
    OfferStatus.REJECTED: "Rejected",
    OfferStatus.WITHDRAWN: "Withdrawn",
    OfferStatus.EXPIRED: "Expired",
}

TERMINAL_STATUSES = frozenset({
    OfferStatus.ACCEPTED,
    OfferStatus.REJECTED,
    OfferStatus.WITHDRAWN,
    OfferStatus.EXPIRED,
})

ALLOWED_TRANSITIONS: dict[OfferStatus, frozenset[OfferStatus]] = {
    OfferStatus.DRAFT: frozenset({
        OfferStatus.READY_TO_SUBMIT,
        OfferStatus.SUBMITTED,
        OfferStatus.WITHDRAWN,
    }),
    OfferStatus.READY_TO_SUBMIT: frozenset({
        OfferStatus.DRAFT,
        OfferStatus.SUBMITTED,
        OfferStatus.WITHDRAWN,
    }),
    OfferStatus.SUBMITTED: frozenset({
        OfferStatus.COUNTER_RECEIVED,
        OfferStatus.ACCEPTED,
        OfferStatus.REJECTED,
        OfferStatus.WITHDRAWN,
        OfferStatus.EXPIRED,
    }),
    OfferStatus.COUNTER_RECEIVED: frozenset({
        OfferStatus.SUBMITTED,
        OfferStatus.ACCEPTED,
        OfferStatus.REJECTED,
        OfferStatus.WITHDRAWN,
        OfferStatus.EXPIRED,
    }),
    OfferStatus.ACCEPTED: frozenset(),
    OfferStatus.REJECTED: frozenset(),
    OfferStatus.WITHDRAWN: frozenset(),
    OfferStatus.EXPIRED: frozenset(),
}


def can_transition(current: OfferStatus, requested: OfferStatus) -> bool:
    return requested in ALLOWED_TRANSITIONS[current]


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with stored ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class OfferClientDecision(str, Enum):
    """Client recommendation, independent of the offer status."""

    UNDECIDED = "undecided"
    APPROVED_TO_SUBMIT = "approved_to_submit"
    NEEDS_REVISION = "needs_revision"

    @property
    def display_name(self) -> str:
        return _DECISION_TITLES[self]


_DECISION_TITLES = {
    OfferClientDecision.UNDECIDED: "Undecided",
    OfferClientDecision.APPROVED_TO_SUBMIT: "Approved",
    OfferClientDecision.NEEDS_REVISION: "Needs Revision",
}


class ActivityType(str, Enum):
    OFFER_CREATED = "offer_created"
    REVISION_CREATED = "revision_created"
    STATUS_CHANGED = "status_changed"
    CLIENT_DECISION_CHANGED = "client_decision_changed"
    COMMENT_ADDED = "comment_added"
    OFFER_ARCHIVED = "offer_archived"


_ACTIVITY_TITLES = {
    ActivityType.OFFER_CREATED.value: "Offer created",
    ActivityType.REVISION_CREATED.value: "Revision saved",
    ActivityType.STATUS_CHANGED.value: "Status updated",
    ActivityType.CLIENT_DECISION_CHANGED.value: "Client recommendation updated",
    ActivityType.COMMENT_ADDED.value: "Comment added",
    ActivityType.OFFER_ARCHIVED.value: "Offer archived",
}


class PropertyOffer(BaseModel):
    """Offer record. Terms live on the revision pointed to by current_revision_id."""

    id: str
    property_id: str
    owner_user_id: str
    title: str = Field(..., min_length=1)
    status: OfferStatus = OfferStatus.DRAFT
    client_decision: OfferClientDecision = OfferClientDecision.UNDECIDED
    current_revision_id: str | None = None
    deal_room_id: str | None = None
    expires_at: UtcDatetime | None = None
    submitted_at: UtcDatetime | None = None
    is_archived: bool = False
    created_at: UtcDatetime
    updated_at: UtcDatetime

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def is_active(self) -> bool:
        """Counts against the offer quota."""
        return not self.is_archived and not self.is_terminal


class OfferRevisionDraft(BaseModel):
    """Terms for a revision that has not been stored yet."""

    purchase_price: float = Field(..., gt=0)
    earnest_money: float | None = Field(None, ge=0)
    down_payment_percent: float | None = Field(None, ge=0, le=100)
    closing_cost_credit: float | None = Field(None, ge=0)
    option_period_days: int | None = Field(None, ge=0)
    inspection_period_days: int | None = Field(None, ge=0)
    financing_contingency_days: int | None = Field(None, ge=0)
    appraisal_contingency: bool = False
    seller_concessions: float | None = Field(None, ge=0)
    estimated_close_date: date | None = None
    notes: str | None = None

    @classmethod
    def from_property(cls, prop: Property) -> OfferRevisionDraft:
        """Seed a first revision from the property's underwriting terms."""
        price = prop.suggested_offer_price or prop.purchase_price
        return cls(
            purchase_price=price,
            down_payment_percent=prop.down_payment_percent,
        )


class OfferRevision(OfferRevisionDraft):
    """Immutable snapshot of offer terms."""

    id: str
    offer_id: str
    revision_number: int = Field(..., ge=1)
    created_by_user_id: str
    created_at: UtcDatetime

    model_config = {
        "frozen": True,
    }


class OfferComment(BaseModel):
    id: str
    offer_id: str
    author_user_id: str
    body: str = Field(..., min_length=1)
    created_at: UtcDatetime


class OfferActivityEvent(BaseModel):
    """System-generated audit entry."""

    id: str
    offer_id: str
    actor_user_id: str
    event_type: str
    metadata: dict[str, str] = Field(default_factory=dict)
    created_at: UtcDatetime

    model_config = {
        "frozen": True,
    }

    @property
    def display_title(self) -> str:
        known = _ACTIVITY_TITLES.get(self.event_type)
        if known:
            return known
        return self.event_type.replace("_", " ").title()


class OfferDetail(BaseModel):
    """Everything shown on an offer's detail screen."""

    revisions: list[OfferRevision] = Field(default_factory=list)
    comments: list[OfferComment] = Field(default_factory=list)
    activity: list[OfferActivityEvent] = Field(default_factory=list)

    def current_revision(self, offer: PropertyOffer) -> OfferRevision | None:
        """Revision the offer points at, else the newest one."""
        if offer.current_revision_id:
            for rev in self.revisions:
                if rev.id == offer.current_revision_id:
                    return rev
        if not self.revisions:
            return None
        return max(self.revisions, key=lambda r: r.revision_number)


class DeadlineKind(str, Enum):
    OPTION = "option"
    INSPECTION = "inspection"
    FINANCING = "financing"
    CLOSE = "close"
    EXPIRATION = "expiration"

    @property
    def display_name(self) -> str:
        return _DEADLINE_TITLES[self]


_DEADLINE_TITLES = {
    DeadlineKind.OPTION: "Option",
    DeadlineKind.INSPECTION: "Inspection",
    DeadlineKind.FINANCING: "Financing",
    DeadlineKind.CLOSE: "Close",
    DeadlineKind.EXPIRATION: "Expires",
}


class DeadlineItem(BaseModel):
    kind: DeadlineKind
    due_at: UtcDatetime

    model_config = {
        "frozen": True,
    }

    @property
    def title(self) -> str:
        return self.kind.display_name

    def short_label(self) -> str:
        return f"{self.due_at:%b} {self.due_at.day}"

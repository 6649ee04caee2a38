"""Offer deadline derivation.

Contingency deadlines are calendar-day offsets from the revision's own
creation instant.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from multiflow.domain.models.offer import DeadlineItem, DeadlineKind, OfferRevision, ensure_utc

# Items considered for the "next deadline" summary
NEXT_DEADLINE_KINDS = frozenset({
    DeadlineKind.OPTION,
    DeadlineKind.INSPECTION,
    DeadlineKind.FINANCING,
    DeadlineKind.EXPIRATION,
})


def _close_instant(d: date) -> datetime:
    return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)


def revision_deadlines(revision: OfferRevision) -> list[DeadlineItem]:
    """Contingency deadlines plus the estimated close date, soonest first."""
    anchor = revision.created_at
    items = []
    for kind, days in (
        (DeadlineKind.OPTION, revision.option_period_days),
        (DeadlineKind.INSPECTION, revision.inspection_period_days),
        (DeadlineKind.FINANCING, revision.financing_contingency_days),
    ):
        if days is not None:
            items.append(DeadlineItem(kind=kind, due_at=anchor + timedelta(days=days)))

    if revision.estimated_close_date is not None:
        items.append(DeadlineItem(kind=DeadlineKind.CLOSE, due_at=_close_instant(revision.estimated_close_date)))

    return sorted(items, key=lambda i: i.due_at)


def deadline_items(
    revision: OfferRevision | None,
    expires_at: datetime | None = None,
) -> list[DeadlineItem]:
    """All dated items for an offer's current terms, soonest first."""
    items = revision_deadlines(revision) if revision is not None else []
    if expires_at is not None:
        items.append(DeadlineItem(kind=DeadlineKind.EXPIRATION, due_at=expires_at))
    return sorted(items, key=lambda i: i.due_at)


def next_deadline(
    revision: OfferRevision | None,
    expires_at: datetime | None,
    now: datetime,
) -> DeadlineItem | None:
    """Earliest upcoming deadline, or the earliest overdue one if none is upcoming.

    Only returns None when no deadline exists at all. A naive ``now`` is
    taken as UTC.
    """
    now = ensure_utc(now)
    candidates = [i for i in deadline_items(revision, expires_at) if i.kind in NEXT_DEADLINE_KINDS]
    if not candidates:
        return None

    upcoming = [i for i in candidates if i.due_at > now]
    if upcoming:
        return upcoming[0]
    return candidates[0]

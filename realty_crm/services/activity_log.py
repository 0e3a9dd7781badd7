"""Lead interaction and system activity journal.

Entries are added to the caller's session and committed together with the
change they describe.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from realty_crm.core.enums import ActivityKind, InteractionKind
from realty_crm.database.models import LeadInteraction, SystemActivity


def record_interaction(
    db: Session,
    lead_id: str,
    kind: InteractionKind | str,
    description: str,
) -> LeadInteraction:
    interaction = LeadInteraction(
        lead_id=lead_id,
        kind=InteractionKind(kind).value,
        description=description,
    )
    db.add(interaction)
    return interaction


def record_activity(
    db: Session,
    kind: ActivityKind | str,
    title: str,
    description: str | None = None,
    lead_id: str | None = None,
    proposal_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> SystemActivity:
    activity = SystemActivity(
        kind=ActivityKind(kind).value,
        title=title,
        description=description,
        lead_id=lead_id,
        proposal_id=proposal_id,
        details=details or {},
    )
    db.add(activity)
    return activity


def list_activities(db: Session, limit: int = 50, lead_id: str | None = None) -> list[SystemActivity]:
    """Most recent activity first."""
    query = db.query(SystemActivity)
    if lead_id is not None:
        query = query.filter(SystemActivity.lead_id == lead_id)
    return query.order_by(SystemActivity.created_at.desc()).limit(limit).all()


def list_interactions(db: Session, lead_id: str) -> list[LeadInteraction]:
    return (
        db.query(LeadInteraction)
        .filter(LeadInteraction.lead_id == lead_id)
        .order_by(LeadInteraction.created_at.asc())
        .all()
    )

"""Canonical enum values for the funnel CRM schema."""

from __future__ import annotations

import enum


class GateAction(str, enum.Enum):
    """Downstream actions gated behind a minimum funnel stage."""

    VISIT = "visit"
    PROPOSAL = "proposal"


class LeadTemperature(str, enum.Enum):
    COLD = "cold"
    WARM = "warm"
    HOT = "hot"


class VisitType(str, enum.Enum):
    IN_PERSON = "in_person"
    VIRTUAL = "virtual"


class VisitStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProposalStatus(str, enum.Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class InteractionKind(str, enum.Enum):
    NOTE = "note"
    VISIT = "visit"
    PROPOSAL = "proposal"


class ActivityKind(str, enum.Enum):
    STAGE_CHANGED = "stage_changed"
    LEAD_FINALIZED = "lead_finalized"
    LEAD_REACTIVATED = "lead_reactivated"
    VISIT_SCHEDULED = "visit_scheduled"
    PROPOSAL_CREATED = "proposal_created"
    PROPOSAL_STATUS_CHANGED = "proposal_status_changed"

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from realty_crm.utils.ids import new_id

from .db import Base


def utcnow() -> datetime:
    """Naive UTC timestamp; columns are stored without tz info."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class FunnelStage(Base):
    __tablename__ = "funnel_stages"
    __table_args__ = (UniqueConstraint("stage_order", name="uq_funnel_stages_order"),)

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    order = Column("stage_order", Integer, nullable=False)
    color = Column(String(7), nullable=False, default="#6b7280")
    description = Column(Text)

    positions = relationship("LeadFunnelPosition", back_populates="stage")


class TransitionRule(Base):
    __tablename__ = "funnel_transition_rules"
    __table_args__ = (
        UniqueConstraint("origin_stage_id", "destination_stage_id", name="uq_transition_rules_pair"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    origin_stage_id = Column(String(36), ForeignKey("funnel_stages.id", ondelete="CASCADE"), nullable=False)
    destination_stage_id = Column(String(36), ForeignKey("funnel_stages.id", ondelete="CASCADE"), nullable=False)
    allowed = Column(Boolean, nullable=False, default=True)
    justification = Column(Text)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    origin_stage = relationship("FunnelStage", foreign_keys=[origin_stage_id])
    destination_stage = relationship("FunnelStage", foreign_keys=[destination_stage_id])


class Lead(Base):
    __tablename__ = "leads"
    __table_args__ = (Index("idx_leads_finalized", "finalized"),)

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255))
    phone = Column(String(40), nullable=False)
    source = Column(String(100), nullable=False, default="manual")
    temperature = Column(String(10), nullable=False, default="warm")
    budget_min = Column(Float)
    budget_max = Column(Float)
    interest = Column(Text)
    notes = Column(Text)
    finalized = Column(Boolean, nullable=False, default=False)
    finalized_at = Column(DateTime)
    last_contact_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    position = relationship("LeadFunnelPosition", back_populates="lead", uselist=False)
    proposals = relationship("Proposal", back_populates="lead")


class LeadFunnelPosition(Base):
    __tablename__ = "lead_funnel_positions"
    __table_args__ = (
        UniqueConstraint("lead_id", name="uq_lead_funnel_positions_lead"),
        Index("idx_lead_funnel_positions_stage", "stage_id"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    lead_id = Column(String(36), ForeignKey("leads.id", ondelete="CASCADE"), nullable=False)
    stage_id = Column(String(36), ForeignKey("funnel_stages.id", ondelete="RESTRICT"), nullable=False)
    entered_at = Column(DateTime, default=utcnow, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    lead = relationship("Lead", back_populates="position")
    stage = relationship("FunnelStage", back_populates="positions")


class Visit(Base):
    __tablename__ = "visits"
    __table_args__ = (
        Index("idx_visits_lead", "lead_id"),
        Index("idx_visits_scheduled_at", "scheduled_at"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    lead_id = Column(String(36), ForeignKey("leads.id"), nullable=False)
    property_ref = Column(String(100), nullable=False)
    agent_id = Column(String(36))
    scheduled_at = Column(DateTime, nullable=False)
    duration_minutes = Column(Integer, default=60)
    visit_type = Column(String(20), nullable=False, default="in_person")
    status = Column(String(20), nullable=False, default="scheduled")
    notes = Column(Text)
    feedback = Column(Text)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    lead = relationship("Lead")


class Proposal(Base):
    __tablename__ = "proposals"
    __table_args__ = (
        Index("idx_proposals_lead", "lead_id"),
        Index("idx_proposals_status", "status"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    code = Column(String(40), nullable=False, unique=True)
    lead_id = Column(String(36), ForeignKey("leads.id"), nullable=False)
    property_ref = Column(String(100), nullable=False)
    agent_id = Column(String(36))
    amount = Column(Float, nullable=False)
    down_payment = Column(Float)
    installments = Column(Integer)
    uses_fgts = Column(Boolean, nullable=False, default=False)
    special_conditions = Column(Text)
    status = Column(String(20), nullable=False, default="pending")
    valid_until = Column(Date, nullable=False)
    archived = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    lead = relationship("Lead", back_populates="proposals")


class LeadInteraction(Base):
    __tablename__ = "lead_interactions"
    __table_args__ = (Index("idx_lead_interactions_lead", "lead_id"),)

    id = Column(String(36), primary_key=True, default=new_id)
    lead_id = Column(String(36), ForeignKey("leads.id", ondelete="CASCADE"), nullable=False)
    kind = Column(String(20), nullable=False, default="note")
    description = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class SystemActivity(Base):
    __tablename__ = "system_activities"
    __table_args__ = (
        Index("idx_system_activities_kind", "kind"),
        Index("idx_system_activities_lead", "lead_id"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    kind = Column(String(40), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    lead_id = Column(String(36), ForeignKey("leads.id", ondelete="SET NULL"))
    proposal_id = Column(String(36), ForeignKey("proposals.id", ondelete="SET NULL"))
    details = Column(JSON)
    created_at = Column(DateTime, default=utcnow, nullable=False)

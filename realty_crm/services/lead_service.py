"""Lead service: intake, finalization into customers and reactivation."""

from __future__ import annotations

import logging
from typing import Any

from realty_crm.core.enums import ActivityKind, InteractionKind
from realty_crm.core.exceptions import NotFoundError, ValidationError
from realty_crm.database.models import Lead, Proposal, utcnow
from realty_crm.services.activity_log import record_activity, record_interaction
from realty_crm.services.base_service import BaseService
from realty_crm.services.funnel_service import FunnelService

logger = logging.getLogger(__name__)


class LeadService(BaseService):
    """Service for lead CRUD and the finalize/reactivate lifecycle.

    Finalizing a lead removes it from the funnel entirely; the funnel policy
    never sees finalized leads. Reactivation puts the lead back at the entry
    stage.
    """

    def _funnel(self) -> FunnelService:
        return FunnelService(db=self.db, config=self.config)

    def create_lead(self, data: dict[str, Any]) -> Lead:
        lead = Lead(**data)
        self.db.add(lead)
        self.db.flush()
        self._funnel().place_at_entry_stage(lead.id)
        self.commit()
        self.db.refresh(lead)
        return lead

    def get_lead(self, lead_id: str) -> Lead | None:
        return self.db.get(Lead, lead_id)

    def list_leads(self, finalized: bool = False) -> list[Lead]:
        return (
            self.db.query(Lead)
            .filter(Lead.finalized.is_(finalized))
            .order_by(Lead.created_at.desc())
            .all()
        )

    def _require_lead(self, lead_id: str) -> Lead:
        lead = self.get_lead(lead_id)
        if lead is None:
            raise NotFoundError(f"Lead not found: {lead_id}")
        return lead

    def finalize_lead(self, lead_id: str) -> Lead:
        lead = self._require_lead(lead_id)
        if lead.finalized:
            raise ValidationError(f"Lead {lead_id} is already finalized.")

        now = utcnow()
        lead.finalized = True
        lead.finalized_at = now

        position = self._funnel().get_position(lead_id)
        if position is not None:
            self.db.delete(position)

        archived = (
            self.db.query(Proposal)
            .filter(Proposal.lead_id == lead_id, Proposal.archived.is_(False))
            .update({Proposal.archived: True, Proposal.updated_at: now}, synchronize_session=False)
        )

        record_interaction(
            self.db, lead_id, InteractionKind.NOTE, "Lead finalized and converted into a customer"
        )
        record_activity(
            self.db,
            ActivityKind.LEAD_FINALIZED,
            title=f"Lead {lead.name} was finalized",
            description="Lead removed from the funnel and proposals archived",
            lead_id=lead_id,
            details={"archived_proposals": archived},
        )
        self.commit()
        self.db.refresh(lead)
        logger.info("lead.finalized", extra={"event": "lead.finalized", "lead_id": lead_id})
        return lead

    def reactivate_lead(self, lead_id: str) -> Lead:
        lead = self._require_lead(lead_id)
        if not lead.finalized:
            raise ValidationError(f"Lead {lead_id} is not finalized.")

        lead.finalized = False
        lead.finalized_at = None
        self._funnel().place_at_entry_stage(lead_id)

        record_interaction(self.db, lead_id, InteractionKind.NOTE, "Customer reactivated in the sales funnel")
        record_activity(
            self.db,
            ActivityKind.LEAD_REACTIVATED,
            title=f"Lead {lead.name} was reactivated",
            description="Lead returned to the first funnel stage",
            lead_id=lead_id,
        )
        self.commit()
        self.db.refresh(lead)
        logger.info("lead.reactivated", extra={"event": "lead.reactivated", "lead_id": lead_id})
        return lead

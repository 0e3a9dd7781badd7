"""Commercial proposals gated on the lead's funnel stage."""

from __future__ import annotations

import logging
from datetime import date

from realty_crm.core.enums import ActivityKind, GateAction, InteractionKind, ProposalStatus
from realty_crm.core.exceptions import EligibilityError, ValidationError
from realty_crm.database.models import Lead, LeadFunnelPosition, Proposal
from realty_crm.orchestration.funnel_policy import Verdict
from realty_crm.services.activity_log import record_activity, record_interaction
from realty_crm.services.base_service import BaseService
from realty_crm.services.funnel_service import FunnelService
from realty_crm.utils.ids import new_proposal_code

logger = logging.getLogger(__name__)


class ProposalService(BaseService):
    """Service for proposal creation, listing and status changes."""

    def _funnel(self) -> FunnelService:
        return FunnelService(db=self.db, config=self.config)

    def eligible_leads(self) -> list[LeadFunnelPosition]:
        return self._funnel().eligible_positions()

    def check_eligibility(self, lead_id: str) -> Verdict:
        return self._funnel().check_gate(lead_id, GateAction.PROPOSAL)

    def _unique_code(self) -> str:
        base = new_proposal_code()
        code, suffix = base, 1
        while self.db.query(Proposal.id).filter(Proposal.code == code).first() is not None:
            suffix += 1
            code = f"{base}-{suffix}"
        return code

    def create_proposal(
        self,
        lead_id: str,
        property_ref: str,
        amount: float,
        valid_until: date,
        down_payment: float | None = None,
        installments: int | None = None,
        uses_fgts: bool = False,
        special_conditions: str | None = None,
        agent_id: str | None = None,
    ) -> Proposal:
        verdict = self.check_eligibility(lead_id)
        if not verdict.allowed:
            raise EligibilityError(verdict)

        lead = self.db.get(Lead, lead_id)
        proposal = Proposal(
            code=self._unique_code(),
            lead_id=lead_id,
            property_ref=property_ref,
            amount=amount,
            down_payment=down_payment,
            installments=installments,
            uses_fgts=uses_fgts,
            special_conditions=special_conditions,
            valid_until=valid_until,
            agent_id=agent_id,
            status=ProposalStatus.PENDING.value,
        )
        self.db.add(proposal)
        self.db.flush()

        record_interaction(
            self.db,
            lead_id,
            InteractionKind.PROPOSAL,
            f"Proposal {proposal.code} created for {amount:,.2f}",
        )
        record_activity(
            self.db,
            ActivityKind.PROPOSAL_CREATED,
            title=f"New proposal {proposal.code} created",
            description=f"Lead: {lead.name} - Amount: {amount:,.2f}",
            lead_id=lead_id,
            proposal_id=proposal.id,
        )
        self.commit()
        self.db.refresh(proposal)
        logger.info("proposal.created", extra={"event": "proposal.created", "lead_id": lead_id})
        return proposal

    def get_proposal(self, proposal_id: str) -> Proposal | None:
        return self.db.get(Proposal, proposal_id)

    def list_proposals(self, include_archived: bool = False, lead_id: str | None = None) -> list[Proposal]:
        query = self.db.query(Proposal)
        if not include_archived:
            query = query.filter(Proposal.archived.is_(False))
        if lead_id is not None:
            query = query.filter(Proposal.lead_id == lead_id)
        return query.order_by(Proposal.created_at.desc()).all()

    def update_status(self, proposal_id: str, status: str) -> Proposal | None:
        try:
            new_status = ProposalStatus(status).value
        except ValueError as exc:
            raise ValidationError(f"Unknown proposal status: {status}") from exc

        proposal = self.get_proposal(proposal_id)
        if proposal is None:
            return None

        proposal.status = new_status
        record_activity(
            self.db,
            ActivityKind.PROPOSAL_STATUS_CHANGED,
            title=f"Proposal {proposal.code} changed to {new_status}",
            description=f"Lead: {proposal.lead.name}",
            lead_id=proposal.lead_id,
            proposal_id=proposal.id,
            details={"new_status": new_status},
        )
        self.commit()
        self.db.refresh(proposal)
        return proposal

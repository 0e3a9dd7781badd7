"""Visit scheduling gated on the lead's funnel stage."""

from __future__ import annotations

import logging
from datetime import datetime

from realty_crm.core.enums import ActivityKind, GateAction, InteractionKind, VisitStatus, VisitType
from realty_crm.core.exceptions import EligibilityError, ValidationError
from realty_crm.database.models import Lead, LeadFunnelPosition, Visit
from realty_crm.orchestration.funnel_policy import Verdict
from realty_crm.services.activity_log import record_activity, record_interaction
from realty_crm.services.base_service import BaseService
from realty_crm.services.funnel_service import FunnelService

logger = logging.getLogger(__name__)


class VisitService(BaseService):
    """Service for property visits."""

    def _funnel(self) -> FunnelService:
        return FunnelService(db=self.db, config=self.config)

    def eligible_leads(self) -> list[LeadFunnelPosition]:
        return self._funnel().eligible_positions()

    def check_eligibility(self, lead_id: str) -> Verdict:
        return self._funnel().check_gate(lead_id, GateAction.VISIT)

    def schedule_visit(
        self,
        lead_id: str,
        property_ref: str,
        scheduled_at: datetime,
        visit_type: VisitType | str = VisitType.IN_PERSON,
        duration_minutes: int = 60,
        agent_id: str | None = None,
        notes: str | None = None,
    ) -> Visit:
        # Re-checked at submission; the selection list the form used may be stale.
        verdict = self.check_eligibility(lead_id)
        if not verdict.allowed:
            raise EligibilityError(verdict)

        lead = self.db.get(Lead, lead_id)
        visit = Visit(
            lead_id=lead_id,
            property_ref=property_ref,
            scheduled_at=scheduled_at,
            visit_type=VisitType(visit_type).value,
            duration_minutes=duration_minutes,
            agent_id=agent_id,
            notes=notes,
        )
        self.db.add(visit)
        record_interaction(
            self.db,
            lead_id,
            InteractionKind.VISIT,
            f"Visit to {property_ref} scheduled for {scheduled_at:%Y-%m-%d %H:%M}",
        )
        record_activity(
            self.db,
            ActivityKind.VISIT_SCHEDULED,
            title=f"Visit scheduled with {lead.name}",
            description=f"Property: {property_ref}",
            lead_id=lead_id,
            details={"scheduled_at": scheduled_at.isoformat()},
        )
        self.commit()
        self.db.refresh(visit)
        logger.info("visit.scheduled", extra={"event": "visit.scheduled", "lead_id": lead_id})
        return visit

    def get_visit(self, visit_id: str) -> Visit | None:
        return self.db.get(Visit, visit_id)

    def list_visits(self, status: str | None = None) -> list[Visit]:
        query = self.db.query(Visit)
        if status is not None:
            try:
                status = VisitStatus(status).value
            except ValueError as exc:
                raise ValidationError(f"Unknown visit status: {status}") from exc
            query = query.filter(Visit.status == status)
        return query.order_by(Visit.scheduled_at.asc()).all()

    def update_status(self, visit_id: str, status: str, feedback: str | None = None) -> Visit | None:
        try:
            new_status = VisitStatus(status).value
        except ValueError as exc:
            raise ValidationError(f"Unknown visit status: {status}") from exc

        visit = self.get_visit(visit_id)
        if visit is None:
            return None

        visit.status = new_status
        if feedback is not None:
            visit.feedback = feedback
        self.commit()
        self.db.refresh(visit)
        return visit

"""Funnel service: loads policy snapshots and applies accepted stage moves."""

from __future__ import annotations

import logging

from sqlalchemy import update

from realty_crm.core.enums import ActivityKind, GateAction, InteractionKind
from realty_crm.core.exceptions import NotFoundError, ServiceError, TransitionRejectedError, ValidationError
from realty_crm.database.models import FunnelStage, Lead, LeadFunnelPosition, TransitionRule, utcnow
from realty_crm.orchestration.funnel_policy import FunnelPolicy, StageRecord, TransitionRuleRecord, Verdict
from realty_crm.services.activity_log import record_activity, record_interaction
from realty_crm.services.base_service import BaseService

logger = logging.getLogger(__name__)

NOT_IN_FUNNEL = "Lead is not in the sales funnel."


def to_stage_record(stage: FunnelStage) -> StageRecord:
    return StageRecord(id=stage.id, name=stage.name, order=stage.order)


def to_rule_record(rule: TransitionRule) -> TransitionRuleRecord:
    return TransitionRuleRecord(
        origin_stage_id=rule.origin_stage_id,
        destination_stage_id=rule.destination_stage_id,
        allowed=bool(rule.allowed),
        justification=rule.justification,
    )


class FunnelService(BaseService):
    """Service for funnel stages, lead positions and stage moves."""

    def list_stages(self) -> list[FunnelStage]:
        return self.db.query(FunnelStage).order_by(FunnelStage.order.asc()).all()

    def list_rules(self) -> list[TransitionRule]:
        return self.db.query(TransitionRule).order_by(TransitionRule.created_at.asc()).all()

    def list_positions(self) -> list[LeadFunnelPosition]:
        """Positions of leads still in the funnel, most recent entry first."""
        return (
            self.db.query(LeadFunnelPosition)
            .join(Lead, Lead.id == LeadFunnelPosition.lead_id)
            .filter(Lead.finalized.is_(False))
            .order_by(LeadFunnelPosition.entered_at.desc())
            .all()
        )

    def get_position(self, lead_id: str) -> LeadFunnelPosition | None:
        return self.db.query(LeadFunnelPosition).filter(LeadFunnelPosition.lead_id == lead_id).first()

    def build_policy(self) -> FunnelPolicy:
        """Stages and rules are read in the same session so the policy sees one snapshot."""
        stages = [to_stage_record(stage) for stage in self.list_stages()]
        rules = [to_rule_record(rule) for rule in self.list_rules()]
        return FunnelPolicy(
            stages,
            rules,
            qualification_fragment=self.config.FUNNEL_QUALIFICATION_FRAGMENT,
            default_min_order=self.config.FUNNEL_DEFAULT_MIN_ORDER,
        )

    def _get_lead(self, lead_id: str) -> Lead:
        lead = self.db.get(Lead, lead_id)
        if lead is None:
            raise NotFoundError(f"Lead not found: {lead_id}")
        return lead

    def _require_active_position(self, lead_id: str) -> LeadFunnelPosition:
        lead = self._get_lead(lead_id)
        position = self.get_position(lead_id)
        if lead.finalized or position is None:
            raise NotFoundError(f"Lead {lead_id} is not in the sales funnel.")
        return position

    def evaluate_move(self, lead_id: str, destination_stage_id: str) -> Verdict:
        position = self._require_active_position(lead_id)
        return self.build_policy().evaluate_transition(position.stage_id, destination_stage_id)

    def move_lead(self, lead_id: str, destination_stage_id: str) -> LeadFunnelPosition:
        position = self._require_active_position(lead_id)
        origin_stage_id = position.stage_id
        policy = self.build_policy()

        verdict = policy.evaluate_transition(origin_stage_id, destination_stage_id)
        if not verdict.allowed:
            logger.info(
                "funnel.move.rejected",
                extra={
                    "event": "funnel.move.rejected",
                    "lead_id": lead_id,
                    "origin_stage_id": origin_stage_id,
                    "destination_stage_id": destination_stage_id,
                    "reason": verdict.reason,
                },
            )
            raise TransitionRejectedError(verdict)

        origin = policy.stage(origin_stage_id)
        destination = policy.stage(destination_stage_id)
        now = utcnow()

        # Compare-and-set on the origin stage keeps one active position per lead
        # when two moves race.
        result = self.db.execute(
            update(LeadFunnelPosition)
            .where(
                LeadFunnelPosition.lead_id == lead_id,
                LeadFunnelPosition.stage_id == origin_stage_id,
            )
            .values(stage_id=destination_stage_id, entered_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.rollback()
            raise ServiceError(f"Lead {lead_id} changed stage concurrently; reload and retry.")

        lead = self._get_lead(lead_id)
        lead.last_contact_at = now
        record_interaction(self.db, lead_id, InteractionKind.NOTE, "Lead moved in the funnel")
        record_activity(
            self.db,
            ActivityKind.STAGE_CHANGED,
            title=f"{lead.name} moved to {destination.name}",
            description="Lead advanced in the sales funnel",
            lead_id=lead_id,
            details={
                "previous_stage": origin.name,
                "new_stage": destination.name,
                "justification": verdict.justification,
            },
        )
        self.commit()

        logger.info(
            "funnel.move.applied",
            extra={
                "event": "funnel.move.applied",
                "lead_id": lead_id,
                "origin_stage_id": origin_stage_id,
                "destination_stage_id": destination_stage_id,
            },
        )
        return self.get_position(lead_id)

    def place_at_entry_stage(self, lead_id: str) -> LeadFunnelPosition:
        """Add a position at the entry stage to the session; the caller commits."""
        if self.get_position(lead_id) is not None:
            raise ValidationError(f"Lead {lead_id} is already in the sales funnel.")
        entry = self.build_policy().entry_stage()
        position = LeadFunnelPosition(lead_id=lead_id, stage_id=entry.id, entered_at=utcnow())
        self.db.add(position)
        return position

    def sync_leads_to_funnel(self) -> int:
        """Put every active lead without a position into the entry stage."""
        missing = (
            self.db.query(Lead)
            .outerjoin(LeadFunnelPosition, LeadFunnelPosition.lead_id == Lead.id)
            .filter(Lead.finalized.is_(False), LeadFunnelPosition.id.is_(None))
            .all()
        )
        if not missing:
            return 0

        entry = self.build_policy().entry_stage()
        now = utcnow()
        for lead in missing:
            self.db.add(LeadFunnelPosition(lead_id=lead.id, stage_id=entry.id, entered_at=now))
        self.commit()
        logger.info(
            "funnel.sync.completed",
            extra={"event": "funnel.sync.completed", "stage_id": entry.id, "synced": len(missing)},
        )
        return len(missing)

    def check_gate(self, lead_id: str, action: GateAction | str) -> Verdict:
        lead = self._get_lead(lead_id)
        position = self.get_position(lead_id)
        if lead.finalized or position is None:
            return Verdict.block(NOT_IN_FUNNEL)
        return self.build_policy().meets_minimum_stage(position.stage_id, action)

    def eligible_positions(self) -> list[LeadFunnelPosition]:
        """Positions whose stage has reached the visit/proposal threshold."""
        return self.build_policy().filter_eligible(self.list_positions())

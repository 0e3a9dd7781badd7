"""Administrator-managed overrides of the default funnel transition policy."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from realty_crm.core.exceptions import DuplicateTransitionRuleError, StageNotFoundError, ValidationError
from realty_crm.database.models import FunnelStage, TransitionRule
from realty_crm.orchestration.funnel_policy import TransitionRuleRecord, duplicate_rule_pairs
from realty_crm.services.base_service import BaseService

logger = logging.getLogger(__name__)


class TransitionRuleService(BaseService):
    """Service for transition rule CRUD.

    The (origin, destination) pair is unique both here and in the schema, so
    the policy never has to choose between conflicting rules.
    """

    def list_rules(self) -> list[TransitionRule]:
        return self.db.query(TransitionRule).order_by(TransitionRule.created_at.asc()).all()

    def get_rule(self, rule_id: str) -> TransitionRule | None:
        return self.db.get(TransitionRule, rule_id)

    def _validate_pair(self, origin_stage_id: str, destination_stage_id: str) -> None:
        if origin_stage_id == destination_stage_id:
            raise ValidationError("A transition rule needs two different stages.")
        for stage_id in (origin_stage_id, destination_stage_id):
            if self.db.get(FunnelStage, stage_id) is None:
                raise StageNotFoundError(stage_id)

    def upsert_rule(
        self,
        origin_stage_id: str,
        destination_stage_id: str,
        allowed: bool,
        justification: str | None = None,
    ) -> TransitionRule:
        self._validate_pair(origin_stage_id, destination_stage_id)

        rule = (
            self.db.query(TransitionRule)
            .filter(
                TransitionRule.origin_stage_id == origin_stage_id,
                TransitionRule.destination_stage_id == destination_stage_id,
            )
            .first()
        )
        if rule is None:
            rule = TransitionRule(
                origin_stage_id=origin_stage_id,
                destination_stage_id=destination_stage_id,
                allowed=allowed,
                justification=justification,
            )
            self.db.add(rule)
        else:
            rule.allowed = allowed
            rule.justification = justification

        self.commit()
        self.db.refresh(rule)
        logger.info(
            "funnel.rule.saved",
            extra={
                "event": "funnel.rule.saved",
                "origin_stage_id": origin_stage_id,
                "destination_stage_id": destination_stage_id,
            },
        )
        return rule

    def delete_rule(self, rule_id: str) -> bool:
        rule = self.get_rule(rule_id)
        if rule is None:
            return False
        self.db.delete(rule)
        self.commit()
        logger.info("funnel.rule.deleted", extra={"event": "funnel.rule.deleted"})
        return True

    def replace_rules(self, rules: Iterable[TransitionRuleRecord]) -> list[TransitionRule]:
        """Swap the whole rule set in a single transaction."""
        records = list(rules)
        duplicates = duplicate_rule_pairs(records)
        if duplicates:
            (origin_stage_id, destination_stage_id), count = next(iter(duplicates.items()))
            raise DuplicateTransitionRuleError(origin_stage_id, destination_stage_id, count)
        for record in records:
            self._validate_pair(record.origin_stage_id, record.destination_stage_id)

        self.db.query(TransitionRule).delete(synchronize_session=False)
        saved = [
            TransitionRule(
                origin_stage_id=record.origin_stage_id,
                destination_stage_id=record.destination_stage_id,
                allowed=record.allowed,
                justification=record.justification,
            )
            for record in records
        ]
        self.db.add_all(saved)
        self.commit()
        logger.info("funnel.rules.replaced", extra={"event": "funnel.rules.replaced"})
        return self.list_rules()

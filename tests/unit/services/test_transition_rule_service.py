from __future__ import annotations

import pytest

from realty_crm.core.exceptions import DuplicateTransitionRuleError, ServiceError, StageNotFoundError, ValidationError
from realty_crm.database.models import TransitionRule
from realty_crm.orchestration.funnel_policy import TransitionRuleRecord
from realty_crm.services.transition_rule_service import TransitionRuleService


def test_upsert_updates_existing_pair(db_session, stages):
    service = TransitionRuleService(db=db_session)
    first = service.upsert_rule(stages["new"].id, stages["visit"].id, allowed=True)
    second = service.upsert_rule(stages["new"].id, stages["visit"].id, allowed=False, justification="Paused")

    assert first.id == second.id
    assert len(service.list_rules()) == 1
    assert second.allowed is False
    assert second.justification == "Paused"


def test_upsert_rejects_same_stage(db_session, stages):
    with pytest.raises(ValidationError):
        TransitionRuleService(db=db_session).upsert_rule(stages["new"].id, stages["new"].id, allowed=True)


def test_upsert_rejects_unknown_stage(db_session, stages):
    with pytest.raises(StageNotFoundError):
        TransitionRuleService(db=db_session).upsert_rule(stages["new"].id, "missing", allowed=True)


def test_replace_rules_swaps_whole_set(db_session, stages):
    service = TransitionRuleService(db=db_session)
    service.upsert_rule(stages["new"].id, stages["visit"].id, allowed=True)

    saved = service.replace_rules(
        [
            TransitionRuleRecord(stages["contact"].id, stages["proposal"].id, allowed=True),
            TransitionRuleRecord(stages["visit"].id, stages["new"].id, allowed=False, justification="No restart"),
        ]
    )

    pairs = {(rule.origin_stage_id, rule.destination_stage_id) for rule in saved}
    assert pairs == {
        (stages["contact"].id, stages["proposal"].id),
        (stages["visit"].id, stages["new"].id),
    }


def test_replace_rules_rejects_duplicates_and_keeps_old_set(db_session, stages):
    service = TransitionRuleService(db=db_session)
    service.upsert_rule(stages["new"].id, stages["visit"].id, allowed=True)
    duplicate = TransitionRuleRecord(stages["contact"].id, stages["proposal"].id, allowed=True)

    with pytest.raises(DuplicateTransitionRuleError):
        service.replace_rules([duplicate, duplicate])

    assert len(service.list_rules()) == 1


def test_delete_rule(db_session, stages):
    service = TransitionRuleService(db=db_session)
    rule = service.upsert_rule(stages["new"].id, stages["visit"].id, allowed=True)

    assert service.delete_rule(rule.id) is True
    assert service.delete_rule(rule.id) is False


def test_upsert_losing_insert_race_raises_service_error(db_session, stages):
    db_session.add(
        TransitionRule(origin_stage_id=stages["new"].id, destination_stage_id=stages["visit"].id, allowed=False)
    )
    service = TransitionRuleService(db=db_session)

    with pytest.raises(ServiceError):
        service.upsert_rule(stages["new"].id, stages["visit"].id, allowed=True)

    assert service.list_rules() == []

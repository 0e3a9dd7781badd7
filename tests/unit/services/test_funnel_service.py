from __future__ import annotations

import pytest

from realty_crm.core.enums import ActivityKind, GateAction
from realty_crm.core.exceptions import NotFoundError, ServiceError, StageNotFoundError, TransitionRejectedError
from realty_crm.database.models import Lead, LeadFunnelPosition, SystemActivity
from realty_crm.orchestration.funnel_policy import NO_STAGE_SKIPPING
from realty_crm.services.funnel_service import NOT_IN_FUNNEL, FunnelService
from realty_crm.services.lead_service import LeadService
from realty_crm.services.transition_rule_service import TransitionRuleService


def _new_lead(session, name="Marina"):
    return LeadService(db=session).create_lead({"name": name, "phone": "11999990000"})


def test_new_lead_starts_at_entry_stage(db_session, stages):
    lead = _new_lead(db_session)
    position = FunnelService(db=db_session).get_position(lead.id)
    assert position.stage_id == stages["new"].id


def test_move_one_step_updates_position_and_journal(db_session, stages):
    lead = _new_lead(db_session)
    service = FunnelService(db=db_session)

    position = service.move_lead(lead.id, stages["contact"].id)

    assert position.stage_id == stages["contact"].id
    assert db_session.query(LeadFunnelPosition).filter_by(lead_id=lead.id).count() == 1
    activity = db_session.query(SystemActivity).filter_by(kind=ActivityKind.STAGE_CHANGED.value).one()
    assert activity.details["previous_stage"] == "Novo Lead"
    assert activity.details["new_stage"] == "Contato Inicial"
    assert db_session.get(Lead, lead.id).last_contact_at is not None


def test_move_skipping_stages_is_rejected(db_session, stages):
    lead = _new_lead(db_session)
    service = FunnelService(db=db_session)

    with pytest.raises(TransitionRejectedError) as exc:
        service.move_lead(lead.id, stages["visit"].id)

    assert exc.value.verdict.reason == NO_STAGE_SKIPPING
    assert service.get_position(lead.id).stage_id == stages["new"].id


def test_move_with_allowing_rule_records_justification(db_session, stages):
    lead = _new_lead(db_session)
    TransitionRuleService(db=db_session).upsert_rule(
        stages["new"].id, stages["proposal"].id, allowed=True, justification="Returning buyer"
    )

    FunnelService(db=db_session).move_lead(lead.id, stages["proposal"].id)

    activity = db_session.query(SystemActivity).filter_by(kind=ActivityKind.STAGE_CHANGED.value).one()
    assert activity.details["justification"] == "Returning buyer"


def test_move_to_unknown_stage_raises(db_session, stages):
    lead = _new_lead(db_session)
    with pytest.raises(StageNotFoundError):
        FunnelService(db=db_session).move_lead(lead.id, "missing-stage")


def test_move_detects_concurrent_stage_change(db_session, stages, monkeypatch):
    lead = _new_lead(db_session)
    service = FunnelService(db=db_session)
    stale = LeadFunnelPosition(lead_id=lead.id, stage_id=stages["contact"].id)
    monkeypatch.setattr(service, "_require_active_position", lambda lead_id: stale)

    with pytest.raises(ServiceError, match="changed stage concurrently"):
        service.move_lead(lead.id, stages["qualified"].id)


def test_evaluate_move_for_unknown_lead_raises(db_session, stages):
    with pytest.raises(NotFoundError):
        FunnelService(db=db_session).evaluate_move("nobody", stages["contact"].id)


def test_sync_places_unpositioned_leads(db_session, stages):
    db_session.add_all([Lead(name="A", phone="11111"), Lead(name="B", phone="22222")])
    db_session.add(Lead(name="C", phone="33333", finalized=True))
    db_session.commit()
    service = FunnelService(db=db_session)

    assert service.sync_leads_to_funnel() == 2
    assert service.sync_leads_to_funnel() == 0
    assert {p.stage_id for p in service.list_positions()} == {stages["new"].id}


def test_check_gate_blocks_leads_outside_funnel(db_session, stages):
    lead = _new_lead(db_session)
    LeadService(db=db_session).finalize_lead(lead.id)

    verdict = FunnelService(db=db_session).check_gate(lead.id, GateAction.VISIT)
    assert verdict.allowed is False
    assert verdict.reason == NOT_IN_FUNNEL


def test_eligible_positions_follow_threshold(db_session, stages):
    early = _new_lead(db_session, "Early")
    ready = _new_lead(db_session, "Ready")
    service = FunnelService(db=db_session)
    service.move_lead(ready.id, stages["contact"].id)
    service.move_lead(ready.id, stages["qualified"].id)

    eligible = service.eligible_positions()

    assert [p.lead_id for p in eligible] == [ready.id]
    assert service.check_gate(early.id, GateAction.PROPOSAL).allowed is False


def test_sync_losing_insert_race_raises_service_error(db_session, stages):
    lead = Lead(name="Race", phone="44444")
    db_session.add(lead)
    db_session.commit()
    db_session.add(LeadFunnelPosition(lead_id=lead.id, stage_id=stages["contact"].id))

    with pytest.raises(ServiceError):
        FunnelService(db=db_session).sync_leads_to_funnel()

    assert db_session.query(LeadFunnelPosition).count() == 0

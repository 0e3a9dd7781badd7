from __future__ import annotations

from datetime import date, timedelta

import pytest

from realty_crm.core.enums import ActivityKind
from realty_crm.core.exceptions import DataIntegrityError, ValidationError
from realty_crm.database.models import Lead, LeadInteraction, Proposal, SystemActivity
from realty_crm.services.funnel_service import FunnelService
from realty_crm.services.lead_service import LeadService


def test_create_and_fetch_lead(db_session, stages):
    service = LeadService(db=db_session)

    created = service.create_lead({"name": "Ari", "phone": "11988887777", "email": "ari@example.com"})
    fetched = service.get_lead(created.id)

    assert fetched is not None
    assert fetched.email == "ari@example.com"
    assert fetched.finalized is False


def test_create_lead_without_stages_fails(db_session):
    with pytest.raises(DataIntegrityError):
        LeadService(db=db_session).create_lead({"name": "Ari", "phone": "11988887777"})


def test_finalize_removes_position_and_archives_proposals(db_session, stages):
    service = LeadService(db=db_session)
    lead = service.create_lead({"name": "Taylor", "phone": "11977776666"})
    db_session.add(
        Proposal(
            code="PROP-1",
            lead_id=lead.id,
            property_ref="APT-101",
            amount=450000,
            valid_until=date.today() + timedelta(days=10),
        )
    )
    db_session.commit()

    finalized = service.finalize_lead(lead.id)

    assert finalized.finalized is True
    assert finalized.finalized_at is not None
    assert FunnelService(db=db_session).get_position(lead.id) is None
    assert db_session.query(Proposal).filter_by(lead_id=lead.id).one().archived is True
    activity = db_session.query(SystemActivity).filter_by(kind=ActivityKind.LEAD_FINALIZED.value).one()
    assert activity.details["archived_proposals"] == 1
    assert service.list_leads() == []
    assert [item.id for item in service.list_leads(finalized=True)] == [lead.id]


def test_finalize_twice_is_rejected(db_session, stages):
    service = LeadService(db=db_session)
    lead = service.create_lead({"name": "Taylor", "phone": "11977776666"})
    service.finalize_lead(lead.id)

    with pytest.raises(ValidationError):
        service.finalize_lead(lead.id)


def test_reactivate_returns_lead_to_entry_stage(db_session, stages):
    service = LeadService(db=db_session)
    funnel = FunnelService(db=db_session)
    lead = service.create_lead({"name": "Noah", "phone": "11966665555"})
    funnel.move_lead(lead.id, stages["contact"].id)
    service.finalize_lead(lead.id)

    reactivated = service.reactivate_lead(lead.id)

    assert reactivated.finalized is False
    assert funnel.get_position(lead.id).stage_id == stages["new"].id
    notes = db_session.query(LeadInteraction).filter_by(lead_id=lead.id).all()
    assert any("reactivated" in note.description for note in notes)


def test_reactivate_active_lead_is_rejected(db_session, stages):
    service = LeadService(db=db_session)
    lead = service.create_lead({"name": "Noah", "phone": "11966665555"})

    with pytest.raises(ValidationError):
        service.reactivate_lead(lead.id)
    assert db_session.get(Lead, lead.id).finalized is False

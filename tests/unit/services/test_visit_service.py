from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from realty_crm.core.enums import VisitStatus, VisitType
from realty_crm.core.exceptions import EligibilityError, NotFoundError, ValidationError
from realty_crm.database.models import LeadInteraction
from realty_crm.services.funnel_service import FunnelService
from realty_crm.services.lead_service import LeadService
from realty_crm.services.visit_service import VisitService


def _qualified_lead(session, stages):
    lead = LeadService(db=session).create_lead({"name": "Bruna", "phone": "11955554444"})
    funnel = FunnelService(db=session)
    funnel.move_lead(lead.id, stages["contact"].id)
    funnel.move_lead(lead.id, stages["qualified"].id)
    return lead


def test_schedule_visit_for_qualified_lead(db_session, stages):
    lead = _qualified_lead(db_session, stages)
    when = datetime(2026, 11, 3, 14, 30)

    visit = VisitService(db=db_session).schedule_visit(
        lead.id, "HOUSE-22", when, visit_type=VisitType.VIRTUAL, duration_minutes=45
    )

    assert visit.status == VisitStatus.SCHEDULED.value
    assert visit.visit_type == "virtual"
    notes = db_session.query(LeadInteraction).filter_by(lead_id=lead.id, kind="visit").all()
    assert len(notes) == 1
    assert "2026-11-03 14:30" in notes[0].description


def test_schedule_visit_rejects_early_stage_lead(db_session, stages):
    lead = LeadService(db=db_session).create_lead({"name": "Caio", "phone": "11944443333"})

    with pytest.raises(EligibilityError) as exc:
        VisitService(db=db_session).schedule_visit(lead.id, "HOUSE-22", datetime.now() + timedelta(days=1))

    assert "schedule a visit" in str(exc.value)
    assert VisitService(db=db_session).list_visits() == []


def test_check_eligibility_unknown_lead(db_session, stages):
    with pytest.raises(NotFoundError):
        VisitService(db=db_session).check_eligibility("missing")


def test_update_status_and_feedback(db_session, stages):
    lead = _qualified_lead(db_session, stages)
    service = VisitService(db=db_session)
    visit = service.schedule_visit(lead.id, "HOUSE-22", datetime(2026, 11, 3, 9, 0))

    updated = service.update_status(visit.id, "completed", feedback="Loved the balcony")

    assert updated.status == "completed"
    assert updated.feedback == "Loved the balcony"
    assert service.list_visits(status="completed")[0].id == visit.id
    assert service.update_status("missing", "completed") is None
    with pytest.raises(ValidationError):
        service.update_status(visit.id, "lost")


def test_list_visits_rejects_unknown_status(db_session, stages):
    with pytest.raises(ValidationError):
        VisitService(db=db_session).list_visits(status="lost")

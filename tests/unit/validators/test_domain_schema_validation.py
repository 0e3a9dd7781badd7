from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from realty_crm.core.enums import LeadTemperature, VisitType
from realty_crm.schemas.funnel import TransitionRuleBulkRequest, TransitionRuleUpsertRequest, VerdictResponse
from realty_crm.schemas.leads import LeadCreateRequest
from realty_crm.schemas.proposals import ProposalCreateRequest
from realty_crm.schemas.visits import VisitCreateRequest
from realty_crm.orchestration.funnel_policy import Verdict


def test_lead_schema_accepts_minimum_payload():
    payload = LeadCreateRequest(name="Ari", phone="11999990000")
    assert payload.temperature == LeadTemperature.WARM
    assert payload.source == "manual"


def test_lead_schema_rejects_inverted_budget():
    with pytest.raises(ValidationError):
        LeadCreateRequest(name="Ari", phone="11999990000", budget_min=500000, budget_max=100000)


def test_rule_schema_rejects_same_stage():
    with pytest.raises(ValidationError):
        TransitionRuleUpsertRequest(origin_stage_id="a", destination_stage_id="a", allowed=True)


def test_bulk_rule_schema_defaults_to_empty_set():
    assert TransitionRuleBulkRequest().rules == []


def test_visit_schema_parses_datetime():
    payload = VisitCreateRequest(lead_id="l1", property_ref="APT-1", scheduled_at="2026-11-03T10:00:00")
    assert payload.visit_type == VisitType.IN_PERSON
    assert payload.scheduled_at.hour == 10


def test_proposal_schema_requires_positive_amount():
    with pytest.raises(ValidationError):
        ProposalCreateRequest(lead_id="l1", property_ref="APT-1", amount=0, valid_until=date(2026, 12, 1))


def test_verdict_response_reads_dataclass():
    response = VerdictResponse.model_validate(Verdict.block("Nope"))
    assert response.allowed is False
    assert response.reason == "Nope"

"""Pydantic schema package for API contracts."""

from realty_crm.schemas.common import ActivityResponse, APIEnvelope, InteractionResponse
from realty_crm.schemas.funnel import (
    LeadMoveRequest,
    PositionResponse,
    StageResponse,
    TransitionEvaluateRequest,
    TransitionRuleBulkRequest,
    TransitionRuleResponse,
    TransitionRuleUpsertRequest,
    VerdictResponse,
)
from realty_crm.schemas.leads import LeadCreateRequest, LeadResponse
from realty_crm.schemas.proposals import ProposalCreateRequest, ProposalResponse, ProposalStatusUpdateRequest
from realty_crm.schemas.visits import VisitCreateRequest, VisitResponse, VisitStatusUpdateRequest

__all__ = [
    "APIEnvelope",
    "ActivityResponse",
    "InteractionResponse",
    "LeadCreateRequest",
    "LeadMoveRequest",
    "LeadResponse",
    "PositionResponse",
    "ProposalCreateRequest",
    "ProposalResponse",
    "ProposalStatusUpdateRequest",
    "StageResponse",
    "TransitionEvaluateRequest",
    "TransitionRuleBulkRequest",
    "TransitionRuleResponse",
    "TransitionRuleUpsertRequest",
    "VerdictResponse",
    "VisitCreateRequest",
    "VisitResponse",
    "VisitStatusUpdateRequest",
]

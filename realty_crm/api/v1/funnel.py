"""Funnel board endpoints: stages, positions, moves and override rules."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from realty_crm.api.v1._errors import http_error
from realty_crm.core.exceptions import RealtyCRMException
from realty_crm.database.db import get_db
from realty_crm.orchestration.funnel_policy import TransitionRuleRecord
from realty_crm.schemas.common import APIEnvelope
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
from realty_crm.services.funnel_service import FunnelService
from realty_crm.services.transition_rule_service import TransitionRuleService

router = APIRouter(prefix="/funnel", tags=["funnel"])


@router.get("/stages", response_model=list[StageResponse])
def list_stages(db: Session = Depends(get_db)) -> list[StageResponse]:
    return [StageResponse.model_validate(stage) for stage in FunnelService(db=db).list_stages()]


@router.get("/positions", response_model=list[PositionResponse])
def list_positions(db: Session = Depends(get_db)) -> list[PositionResponse]:
    return [PositionResponse.model_validate(item) for item in FunnelService(db=db).list_positions()]


@router.post("/evaluate", response_model=VerdictResponse)
def evaluate_transition(payload: TransitionEvaluateRequest, db: Session = Depends(get_db)) -> VerdictResponse:
    try:
        verdict = FunnelService(db=db).build_policy().evaluate_transition(
            payload.origin_stage_id, payload.destination_stage_id
        )
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    return VerdictResponse.model_validate(verdict)


@router.post("/leads/{lead_id}/evaluate", response_model=VerdictResponse)
def evaluate_lead_move(lead_id: str, payload: LeadMoveRequest, db: Session = Depends(get_db)) -> VerdictResponse:
    try:
        verdict = FunnelService(db=db).evaluate_move(lead_id, payload.destination_stage_id)
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    return VerdictResponse.model_validate(verdict)


@router.post("/leads/{lead_id}/move", response_model=PositionResponse)
def move_lead(lead_id: str, payload: LeadMoveRequest, db: Session = Depends(get_db)) -> PositionResponse:
    try:
        position = FunnelService(db=db).move_lead(lead_id, payload.destination_stage_id)
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    return PositionResponse.model_validate(position)


@router.post("/sync", response_model=APIEnvelope)
def sync_leads(db: Session = Depends(get_db)) -> APIEnvelope:
    try:
        synced = FunnelService(db=db).sync_leads_to_funnel()
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    message = f"{synced} lead(s) added to the funnel." if synced else "All leads are already in the funnel."
    return APIEnvelope(message=message)


@router.get("/rules", response_model=list[TransitionRuleResponse])
def list_rules(db: Session = Depends(get_db)) -> list[TransitionRuleResponse]:
    return [TransitionRuleResponse.model_validate(rule) for rule in TransitionRuleService(db=db).list_rules()]


@router.put("/rules", response_model=TransitionRuleResponse)
def upsert_rule(payload: TransitionRuleUpsertRequest, db: Session = Depends(get_db)) -> TransitionRuleResponse:
    try:
        rule = TransitionRuleService(db=db).upsert_rule(
            origin_stage_id=payload.origin_stage_id,
            destination_stage_id=payload.destination_stage_id,
            allowed=payload.allowed,
            justification=payload.justification,
        )
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    return TransitionRuleResponse.model_validate(rule)


@router.put("/rules/bulk", response_model=list[TransitionRuleResponse])
def replace_rules(payload: TransitionRuleBulkRequest, db: Session = Depends(get_db)) -> list[TransitionRuleResponse]:
    records = [
        TransitionRuleRecord(
            origin_stage_id=item.origin_stage_id,
            destination_stage_id=item.destination_stage_id,
            allowed=item.allowed,
            justification=item.justification,
        )
        for item in payload.rules
    ]
    try:
        rules = TransitionRuleService(db=db).replace_rules(records)
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    return [TransitionRuleResponse.model_validate(rule) for rule in rules]


@router.delete("/rules/{rule_id}", response_model=APIEnvelope)
def delete_rule(rule_id: str, db: Session = Depends(get_db)) -> APIEnvelope:
    if not TransitionRuleService(db=db).delete_rule(rule_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Transition rule not found: {rule_id}")
    return APIEnvelope(message="Transition rule removed.")

"""Visit scheduling endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from realty_crm.api.v1._errors import http_error
from realty_crm.core.exceptions import RealtyCRMException
from realty_crm.database.db import get_db
from realty_crm.schemas.funnel import PositionResponse, VerdictResponse
from realty_crm.schemas.visits import VisitCreateRequest, VisitResponse, VisitStatusUpdateRequest
from realty_crm.services.visit_service import VisitService

router = APIRouter(prefix="/visits", tags=["visits"])


@router.get("", response_model=list[VisitResponse])
def list_visits(status_filter: str | None = None, db: Session = Depends(get_db)) -> list[VisitResponse]:
    try:
        items = VisitService(db=db).list_visits(status=status_filter)
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    return [VisitResponse.model_validate(visit) for visit in items]


@router.get("/eligible-leads", response_model=list[PositionResponse])
def eligible_leads(db: Session = Depends(get_db)) -> list[PositionResponse]:
    return [PositionResponse.model_validate(item) for item in VisitService(db=db).eligible_leads()]


@router.get("/eligibility/{lead_id}", response_model=VerdictResponse)
def check_eligibility(lead_id: str, db: Session = Depends(get_db)) -> VerdictResponse:
    try:
        verdict = VisitService(db=db).check_eligibility(lead_id)
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    return VerdictResponse.model_validate(verdict)


@router.post("", response_model=VisitResponse, status_code=status.HTTP_201_CREATED)
def schedule_visit(payload: VisitCreateRequest, db: Session = Depends(get_db)) -> VisitResponse:
    try:
        visit = VisitService(db=db).schedule_visit(
            lead_id=payload.lead_id,
            property_ref=payload.property_ref,
            scheduled_at=payload.scheduled_at,
            visit_type=payload.visit_type,
            duration_minutes=payload.duration_minutes,
            agent_id=payload.agent_id,
            notes=payload.notes,
        )
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    return VisitResponse.model_validate(visit)


@router.patch("/{visit_id}/status", response_model=VisitResponse)
def update_visit_status(
    visit_id: str,
    payload: VisitStatusUpdateRequest,
    db: Session = Depends(get_db),
) -> VisitResponse:
    try:
        visit = VisitService(db=db).update_status(visit_id, payload.status.value, feedback=payload.feedback)
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    if visit is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Visit not found: {visit_id}")
    return VisitResponse.model_validate(visit)

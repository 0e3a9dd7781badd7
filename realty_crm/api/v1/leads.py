"""Lead intake and lifecycle endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from realty_crm.api.v1._errors import http_error
from realty_crm.core.exceptions import RealtyCRMException
from realty_crm.database.db import get_db
from realty_crm.schemas.common import ActivityResponse, InteractionResponse
from realty_crm.schemas.leads import LeadCreateRequest, LeadResponse
from realty_crm.services.activity_log import list_activities, list_interactions
from realty_crm.services.lead_service import LeadService

router = APIRouter(tags=["leads"])


@router.post("/leads", response_model=LeadResponse, status_code=status.HTTP_201_CREATED)
def create_lead(payload: LeadCreateRequest, db: Session = Depends(get_db)) -> LeadResponse:
    try:
        lead = LeadService(db=db).create_lead(payload.model_dump(mode="json"))
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    return LeadResponse.model_validate(lead)


@router.get("/leads", response_model=list[LeadResponse])
def list_leads(finalized: bool = False, db: Session = Depends(get_db)) -> list[LeadResponse]:
    return [LeadResponse.model_validate(lead) for lead in LeadService(db=db).list_leads(finalized=finalized)]


@router.get("/leads/{lead_id}", response_model=LeadResponse)
def get_lead(lead_id: str, db: Session = Depends(get_db)) -> LeadResponse:
    lead = LeadService(db=db).get_lead(lead_id)
    if lead is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Lead not found: {lead_id}")
    return LeadResponse.model_validate(lead)


@router.get("/leads/{lead_id}/interactions", response_model=list[InteractionResponse])
def lead_interactions(lead_id: str, db: Session = Depends(get_db)) -> list[InteractionResponse]:
    if LeadService(db=db).get_lead(lead_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Lead not found: {lead_id}")
    return [InteractionResponse.model_validate(item) for item in list_interactions(db, lead_id)]


@router.post("/leads/{lead_id}/finalize", response_model=LeadResponse)
def finalize_lead(lead_id: str, db: Session = Depends(get_db)) -> LeadResponse:
    try:
        lead = LeadService(db=db).finalize_lead(lead_id)
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    return LeadResponse.model_validate(lead)


@router.post("/leads/{lead_id}/reactivate", response_model=LeadResponse)
def reactivate_lead(lead_id: str, db: Session = Depends(get_db)) -> LeadResponse:
    try:
        lead = LeadService(db=db).reactivate_lead(lead_id)
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    return LeadResponse.model_validate(lead)


@router.get("/activities", response_model=list[ActivityResponse])
def recent_activities(limit: int = 50, lead_id: str | None = None, db: Session = Depends(get_db)) -> list[ActivityResponse]:
    limit = max(1, min(limit, 500))
    return [ActivityResponse.model_validate(item) for item in list_activities(db, limit=limit, lead_id=lead_id)]

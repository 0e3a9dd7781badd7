"""Commercial proposal endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from realty_crm.api.v1._errors import http_error
from realty_crm.core.exceptions import RealtyCRMException
from realty_crm.database.db import get_db
from realty_crm.schemas.funnel import PositionResponse, VerdictResponse
from realty_crm.schemas.proposals import ProposalCreateRequest, ProposalResponse, ProposalStatusUpdateRequest
from realty_crm.services.proposal_service import ProposalService

router = APIRouter(prefix="/proposals", tags=["proposals"])


@router.get("", response_model=list[ProposalResponse])
def list_proposals(
    include_archived: bool = False,
    lead_id: str | None = None,
    db: Session = Depends(get_db),
) -> list[ProposalResponse]:
    items = ProposalService(db=db).list_proposals(include_archived=include_archived, lead_id=lead_id)
    return [ProposalResponse.model_validate(item) for item in items]


@router.get("/eligible-leads", response_model=list[PositionResponse])
def eligible_leads(db: Session = Depends(get_db)) -> list[PositionResponse]:
    return [PositionResponse.model_validate(item) for item in ProposalService(db=db).eligible_leads()]


@router.get("/eligibility/{lead_id}", response_model=VerdictResponse)
def check_eligibility(lead_id: str, db: Session = Depends(get_db)) -> VerdictResponse:
    try:
        verdict = ProposalService(db=db).check_eligibility(lead_id)
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    return VerdictResponse.model_validate(verdict)


@router.post("", response_model=ProposalResponse, status_code=status.HTTP_201_CREATED)
def create_proposal(payload: ProposalCreateRequest, db: Session = Depends(get_db)) -> ProposalResponse:
    try:
        proposal = ProposalService(db=db).create_proposal(**payload.model_dump())
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    return ProposalResponse.model_validate(proposal)


@router.patch("/{proposal_id}/status", response_model=ProposalResponse)
def update_proposal_status(
    proposal_id: str,
    payload: ProposalStatusUpdateRequest,
    db: Session = Depends(get_db),
) -> ProposalResponse:
    try:
        proposal = ProposalService(db=db).update_status(proposal_id, payload.status.value)
    except RealtyCRMException as exc:
        raise http_error(exc) from exc
    if proposal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Proposal not found: {proposal_id}")
    return ProposalResponse.model_validate(proposal)

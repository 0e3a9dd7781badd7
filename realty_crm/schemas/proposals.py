"""Proposal request/response schemas."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from realty_crm.core.enums import ProposalStatus


class ProposalCreateRequest(BaseModel):
    lead_id: str = Field(min_length=1, max_length=36)
    property_ref: str = Field(min_length=1, max_length=100)
    amount: float = Field(gt=0)
    valid_until: date
    down_payment: float | None = Field(default=None, ge=0)
    installments: int | None = Field(default=None, ge=1, le=600)
    uses_fgts: bool = False
    special_conditions: str | None = Field(default=None, max_length=5000)
    agent_id: str | None = Field(default=None, max_length=36)


class ProposalStatusUpdateRequest(BaseModel):
    status: ProposalStatus


class ProposalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    lead_id: str
    property_ref: str
    agent_id: str | None = None
    amount: float
    down_payment: float | None = None
    installments: int | None = None
    uses_fgts: bool
    special_conditions: str | None = None
    status: str
    valid_until: date
    archived: bool
    created_at: datetime | None = None

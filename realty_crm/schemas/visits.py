"""Visit request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from realty_crm.core.enums import VisitStatus, VisitType


class VisitCreateRequest(BaseModel):
    lead_id: str = Field(min_length=1, max_length=36)
    property_ref: str = Field(min_length=1, max_length=100)
    scheduled_at: datetime
    visit_type: VisitType = VisitType.IN_PERSON
    duration_minutes: int = Field(default=60, ge=5, le=600)
    agent_id: str | None = Field(default=None, max_length=36)
    notes: str | None = Field(default=None, max_length=5000)


class VisitStatusUpdateRequest(BaseModel):
    status: VisitStatus
    feedback: str | None = Field(default=None, max_length=5000)


class VisitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    lead_id: str
    property_ref: str
    agent_id: str | None = None
    scheduled_at: datetime
    duration_minutes: int | None = None
    visit_type: str
    status: str
    notes: str | None = None
    feedback: str | None = None

"""Common schema module."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class APIEnvelope(BaseModel):
    status: str = "ok"
    message: str | None = None


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    kind: str
    title: str
    description: str | None = None
    lead_id: str | None = None
    proposal_id: str | None = None
    details: dict[str, Any] | None = None
    created_at: datetime


class InteractionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    lead_id: str
    kind: str
    description: str
    created_at: datetime

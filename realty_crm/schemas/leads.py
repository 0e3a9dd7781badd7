"""Lead request/response schemas for API contracts."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from realty_crm.core.enums import LeadTemperature


class LeadCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=5, max_length=40)
    email: str | None = Field(default=None, min_length=3, max_length=255)
    source: str = Field(default="manual", min_length=1, max_length=100)
    temperature: LeadTemperature = LeadTemperature.WARM
    budget_min: float | None = Field(default=None, ge=0)
    budget_max: float | None = Field(default=None, ge=0)
    interest: str | None = Field(default=None, max_length=2000)
    notes: str | None = Field(default=None, max_length=10000)

    @model_validator(mode="after")
    def budget_range_is_ordered(self) -> "LeadCreateRequest":
        if self.budget_min is not None and self.budget_max is not None and self.budget_min > self.budget_max:
            raise ValueError("budget_min must not exceed budget_max")
        return self


class LeadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    phone: str
    email: str | None = None
    source: str
    temperature: str
    budget_min: float | None = None
    budget_max: float | None = None
    interest: str | None = None
    notes: str | None = None
    finalized: bool
    finalized_at: datetime | None = None
    last_contact_at: datetime | None = None
    created_at: datetime | None = None

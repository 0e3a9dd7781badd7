"""Funnel stage, position, rule and verdict schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    order: int
    color: str
    description: str | None = None


class PositionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    lead_id: str
    stage_id: str
    entered_at: datetime


class VerdictResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    allowed: bool
    reason: str | None = None
    justification: str | None = None


class TransitionEvaluateRequest(BaseModel):
    origin_stage_id: str = Field(min_length=1, max_length=36)
    destination_stage_id: str = Field(min_length=1, max_length=36)


class LeadMoveRequest(BaseModel):
    destination_stage_id: str = Field(min_length=1, max_length=36)


class TransitionRuleUpsertRequest(BaseModel):
    origin_stage_id: str = Field(min_length=1, max_length=36)
    destination_stage_id: str = Field(min_length=1, max_length=36)
    allowed: bool
    justification: str | None = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def stages_differ(self) -> "TransitionRuleUpsertRequest":
        if self.origin_stage_id == self.destination_stage_id:
            raise ValueError("origin and destination stages must differ")
        return self


class TransitionRuleBulkRequest(BaseModel):
    rules: list[TransitionRuleUpsertRequest] = Field(default_factory=list, max_length=500)


class TransitionRuleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    origin_stage_id: str
    destination_stage_id: str
    allowed: bool
    justification: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

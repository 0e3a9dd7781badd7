"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from realty_crm.api.v1 import funnel, health, leads, proposals, visits
from realty_crm.core.config import get_config


def get_api_router() -> APIRouter:
    api_router = APIRouter(prefix=get_config().API_PREFIX)
    api_router.include_router(health.router)
    api_router.include_router(funnel.router)
    api_router.include_router(leads.router)
    api_router.include_router(visits.router)
    api_router.include_router(proposals.router)
    return api_router

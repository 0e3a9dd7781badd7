"""Translate domain exceptions into HTTP errors for API v1 route modules."""

from __future__ import annotations

from fastapi import HTTPException, status

from realty_crm.core.exceptions import (
    DataIntegrityError,
    NotFoundError,
    ServiceError,
    StageNotFoundError,
    ValidationError,
    VerdictRejectedError,
)


def map_domain_error(exc: Exception) -> tuple[int, str]:
    if isinstance(exc, (NotFoundError, StageNotFoundError)):
        return status.HTTP_404_NOT_FOUND, str(exc)
    if isinstance(exc, VerdictRejectedError):
        # The reason may be administrator-authored text; the UI shows it verbatim.
        return status.HTTP_409_CONFLICT, str(exc)
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST, str(exc)
    if isinstance(exc, (DataIntegrityError, ServiceError)):
        return status.HTTP_409_CONFLICT, str(exc)
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error."


def http_error(exc: Exception) -> HTTPException:
    code, detail = map_domain_error(exc)
    return HTTPException(status_code=code, detail=detail)

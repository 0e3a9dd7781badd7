"""Custom exceptions for the Realty CRM application."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from realty_crm.orchestration.funnel_policy import Verdict


class RealtyCRMException(Exception):
    """Base exception for Realty CRM application."""

    pass


class ValidationError(RealtyCRMException):
    """Raised when validation fails."""

    pass


class NotFoundError(RealtyCRMException):
    """Raised when a resource is not found."""

    pass


class ServiceError(RealtyCRMException):
    """Raised when a service operation fails."""

    pass


class ConfigurationError(RealtyCRMException):
    """Raised when configuration is invalid."""

    pass


class DataIntegrityError(RealtyCRMException):
    """Raised when stage or rule data handed to the funnel policy is inconsistent."""

    pass


class StageNotFoundError(DataIntegrityError):
    """Raised when a stage id does not resolve against the supplied stage list."""

    def __init__(self, stage_id: str) -> None:
        super().__init__(f"Funnel stage not found: {stage_id}")
        self.stage_id = stage_id


class DuplicateTransitionRuleError(DataIntegrityError):
    """Raised when more than one override rule exists for the same stage pair."""

    def __init__(self, origin_stage_id: str, destination_stage_id: str, count: int) -> None:
        super().__init__(
            f"{count} transition rules found for {origin_stage_id} -> {destination_stage_id}; "
            "expected at most one."
        )
        self.origin_stage_id = origin_stage_id
        self.destination_stage_id = destination_stage_id
        self.count = count


class VerdictRejectedError(ServiceError):
    """Base for business actions refused by a blocked verdict."""

    def __init__(self, verdict: "Verdict") -> None:
        super().__init__(verdict.reason or "Action not allowed.")
        self.verdict = verdict


class TransitionRejectedError(VerdictRejectedError):
    """Raised when a funnel move is refused by the transition policy."""


class EligibilityError(VerdictRejectedError):
    """Raised when a lead has not reached the minimum stage for an action."""

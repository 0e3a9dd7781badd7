"""Startup validation and bootstrap helpers."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from realty_crm.core.config import get_config
from realty_crm.core.logging_config import configure_logging
from realty_crm.database.db import get_active_database_url, get_db_session, verify_database_connection
from realty_crm.database.models import FunnelStage
from realty_crm.orchestration.funnel_policy import FunnelPolicy, StageRecord

logger = logging.getLogger(__name__)


def check_funnel_stages(config) -> None:
    """Warn when the funnel is empty or the visit/proposal threshold falls back to a fixed order."""
    try:
        with get_db_session() as db:
            rows = db.query(FunnelStage).order_by(FunnelStage.order.asc()).all()
            stages = [StageRecord(id=row.id, name=row.name, order=row.order) for row in rows]
    except SQLAlchemyError:
        # Tables may not exist yet when bootstrap runs ahead of the first migration.
        logger.warning("startup.funnel.check_skipped", extra={"event": "startup.funnel.check_skipped"})
        return

    if not stages:
        logger.warning("startup.funnel.no_stages", extra={"event": "startup.funnel.no_stages"})
        return

    policy = FunnelPolicy(
        stages,
        qualification_fragment=config.FUNNEL_QUALIFICATION_FRAGMENT,
        default_min_order=config.FUNNEL_DEFAULT_MIN_ORDER,
    )
    threshold = policy.threshold_stage()
    if threshold is None:
        logger.warning(
            "startup.funnel.threshold_fallback",
            extra={"event": "startup.funnel.threshold_fallback", "min_order": policy.minimum_order()},
        )
        return
    logger.info(
        "startup.funnel.threshold_resolved",
        extra={"event": "startup.funnel.threshold_resolved", "stage_id": threshold.id, "min_order": threshold.order},
    )


def validate_startup_config() -> None:
    """Fail-fast config and connectivity checks."""
    config = get_config()
    database_ok = verify_database_connection()
    active_database_url = get_active_database_url()
    if not database_ok and config.DB_CONNECTIVITY_REQUIRED:
        raise RuntimeError("Database connectivity check failed.")
    if not database_ok:
        logger.warning(
            "startup.database.connectivity_optional_failed",
            extra={"event": "startup.database.connectivity_optional_failed"},
        )
    else:
        check_funnel_stages(config)

    if config.is_production and active_database_url.startswith("sqlite"):
        logger.warning(
            "startup.production.sqlite_detected",
            extra={"event": "startup.production.sqlite_detected"},
        )

    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": config.ENV,
            "database_url_scheme": active_database_url.split("://", 1)[0],
        },
    )


def bootstrap() -> None:
    """Initialize logging and validate runtime configuration."""
    configure_logging()
    validate_startup_config()

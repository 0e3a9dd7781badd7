"""Shared service base with robust session lifecycle behavior."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from realty_crm.core.config import Config, get_config
from realty_crm.core.exceptions import ServiceError
from realty_crm.database.db import SessionLocal

logger = logging.getLogger(__name__)


class BaseService:
    """Base class for services that operate on a SQLAlchemy session."""

    def __init__(self, db: Session | None = None, config: Config | None = None) -> None:
        self.db = db or SessionLocal()
        self.config = config or get_config()

    def commit(self) -> None:
        """Commit current transaction and rollback on failure.

        A unique-constraint violation means another writer got there first;
        it surfaces as a ``ServiceError`` so callers report a conflict.
        """
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning(
                "database.commit.conflict",
                extra={"event": "database.commit.conflict", "reason": str(exc.orig)},
            )
            raise ServiceError("The record was changed concurrently; reload and retry.") from exc
        except Exception:
            self.db.rollback()
            raise

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()

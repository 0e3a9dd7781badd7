"""Identifier generation helpers."""

from __future__ import annotations

import time
import uuid


def new_id() -> str:
    """Create a UUID4-based row identifier."""
    return str(uuid.uuid4())


def new_proposal_code() -> str:
    """Proposal codes are `PROP-` followed by the epoch in milliseconds."""
    return f"PROP-{int(time.time() * 1000)}"

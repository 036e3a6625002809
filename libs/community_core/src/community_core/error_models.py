"""
community_core.error_models - Structured error detail shared by all layers.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from community_core.error_enums import ErrorCode


class ErrorDetail(BaseModel):
    """Structured description of a failure.

    Carried by every CommunityError so callers can branch on error_code
    without parsing messages.
    """

    model_config = ConfigDict(frozen=True)

    error_code: ErrorCode
    message: str
    correlation_id: UUID
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    service: str
    operation: str
    status_code: int | None = None
    details: dict[str, Any] = Field(default_factory=dict)

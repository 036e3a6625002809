"""UI collaborator DTOs.

Vendor UI primitives (toast, modal, image picker) are callback based; the
client only sees them through awaitable protocols that exchange these models.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class NoticeIcon(str, Enum):
    SUCCESS = "success"
    NONE = "none"


class PickedImage(BaseModel):
    """One image returned by the picker: local temp path and size in bytes."""

    path: str
    size: int = 0

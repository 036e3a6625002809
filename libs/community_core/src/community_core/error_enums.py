"""
community_core.error_enums - Centralized error code definitions.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    # Classified gateway failures
    AUTH_REQUIRED = "AUTH_REQUIRED"  # Identity could not be established server-side
    NETWORK = "NETWORK"  # Transport, timeout and upload failures
    SERVER = "SERVER"  # 5xx or malformed responses

    # Client-side, raised before any network activity
    VALIDATION = "VALIDATION"


class FailureKind(str, Enum):
    """
    Kinds a CallFailure can carry.

    Subset of ErrorCode: VALIDATION never originates from a gateway call.
    """

    AUTH_REQUIRED = ErrorCode.AUTH_REQUIRED.value
    NETWORK = ErrorCode.NETWORK.value
    SERVER = ErrorCode.SERVER.value

    @property
    def error_code(self) -> ErrorCode:
        return ErrorCode(self.value)

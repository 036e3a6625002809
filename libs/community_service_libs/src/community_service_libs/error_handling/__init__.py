"""Structured error handling for the community client."""

from .community_error import CallFailure, CommunityError, ValidationFailure
from .factories import (
    raise_auth_required,
    raise_network_error,
    raise_server_error,
    raise_validation_error,
    reraise_with_prefix,
)

__all__ = [
    "CallFailure",
    "CommunityError",
    "ValidationFailure",
    "raise_auth_required",
    "raise_network_error",
    "raise_server_error",
    "raise_validation_error",
    "reraise_with_prefix",
]

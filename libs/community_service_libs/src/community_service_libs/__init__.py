"""
Community Service Libraries Package.

Shared logging and error handling used by the mini program client.
"""

from .error_handling import CallFailure, CommunityError, ValidationFailure
from .logging_utils import configure_service_logging, create_service_logger

__all__ = [
    "CallFailure",
    "CommunityError",
    "ValidationFailure",
    "configure_service_logging",
    "create_service_logger",
]

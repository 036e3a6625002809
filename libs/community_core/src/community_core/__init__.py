"""
Community Core Package.

Enums and pydantic models shared by the mini program client layers.
"""

from .config_enums import Environment
from .error_enums import ErrorCode, FailureKind
from .error_models import ErrorDetail
from .forum_models import ApiEnvelope, UploadResult, UserProfile
from .gateway_models import CallRequest, CallResult, HttpMethod

__all__ = [
    "ApiEnvelope",
    "CallRequest",
    "CallResult",
    "Environment",
    "ErrorCode",
    "ErrorDetail",
    "FailureKind",
    "HttpMethod",
    "UploadResult",
    "UserProfile",
]

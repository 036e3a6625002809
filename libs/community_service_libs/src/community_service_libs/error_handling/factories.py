"""Factory functions that build an ErrorDetail and raise the matching exception.

All factories are ``NoReturn``: call sites read as a single statement and
type checkers know control flow ends there.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NoReturn
from uuid import UUID, uuid4

from community_core.error_enums import ErrorCode
from community_core.error_models import ErrorDetail

from .community_error import CallFailure, ValidationFailure

if TYPE_CHECKING:
    from community_core.gateway_models import CallRequest


def _build_detail(
    error_code: ErrorCode,
    service: str,
    operation: str,
    message: str,
    correlation_id: UUID | None,
    status_code: int | None,
    details: dict[str, Any],
) -> ErrorDetail:
    return ErrorDetail(
        error_code=error_code,
        message=message,
        correlation_id=correlation_id or uuid4(),
        service=service,
        operation=operation,
        status_code=status_code,
        details=details,
    )


def raise_auth_required(
    service: str,
    operation: str,
    message: str,
    correlation_id: UUID | None = None,
    *,
    status_code: int | None = 401,
    request: CallRequest | None = None,
    cause: BaseException | None = None,
    **additional_context: Any,
) -> NoReturn:
    """Raise AUTH_REQUIRED for an identity-sensitive call the server rejected."""
    detail = _build_detail(
        ErrorCode.AUTH_REQUIRED,
        service,
        operation,
        message,
        correlation_id,
        status_code,
        additional_context,
    )
    raise CallFailure(detail, cause=cause, request=request)


def raise_network_error(
    service: str,
    operation: str,
    message: str,
    correlation_id: UUID | None = None,
    *,
    request: CallRequest | None = None,
    cause: BaseException | None = None,
    **additional_context: Any,
) -> NoReturn:
    """Raise NETWORK for transport, timeout and upload failures."""
    detail = _build_detail(
        ErrorCode.NETWORK,
        service,
        operation,
        message,
        correlation_id,
        None,
        additional_context,
    )
    raise CallFailure(detail, cause=cause, request=request)


def raise_server_error(
    service: str,
    operation: str,
    message: str,
    correlation_id: UUID | None = None,
    *,
    status_code: int | None = None,
    request: CallRequest | None = None,
    cause: BaseException | None = None,
    **additional_context: Any,
) -> NoReturn:
    """Raise SERVER for 5xx responses, malformed bodies and rejected envelopes."""
    detail = _build_detail(
        ErrorCode.SERVER,
        service,
        operation,
        message,
        correlation_id,
        status_code,
        additional_context,
    )
    raise CallFailure(detail, cause=cause, request=request)


def raise_validation_error(
    service: str,
    operation: str,
    field: str,
    message: str,
    correlation_id: UUID | None = None,
    value: Any = None,
    **additional_context: Any,
) -> NoReturn:
    """Raise VALIDATION; ``message`` is shown to the user as-is."""
    details: dict[str, Any] = {"field": field}
    if value is not None:
        details["value"] = value
    details.update(additional_context)
    detail = _build_detail(
        ErrorCode.VALIDATION,
        service,
        operation,
        message,
        correlation_id,
        None,
        details,
    )
    raise ValidationFailure(detail)


def reraise_with_prefix(error: CallFailure, prefix: str, *, operation: str) -> NoReturn:
    """Re-raise a wrapper-boundary failure with a domain prefix.

    AUTH_REQUIRED propagates unchanged so pages can still detect it. Other
    kinds keep their code, status and request; the original is the cause.
    """
    if error.is_auth_required:
        raise error

    detail = error.error_detail.model_copy(
        update={"message": f"{prefix}: {error.message}", "operation": operation}
    )
    raise CallFailure(detail, cause=error, request=error.request) from error

"""Exception classes for the community client.

Every raised error carries an ErrorDetail, so pages and tests can branch on
``error_code``/``kind`` rather than parsing human-readable messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from community_core.error_enums import FailureKind
from community_core.error_models import ErrorDetail

if TYPE_CHECKING:
    from community_core.gateway_models import CallRequest

_FAILURE_KIND_VALUES = frozenset(kind.value for kind in FailureKind)


class CommunityError(Exception):
    """Base exception wrapping a structured ErrorDetail."""

    def __init__(self, error_detail: ErrorDetail, cause: BaseException | None = None) -> None:
        super().__init__(error_detail.message)
        self.error_detail = error_detail
        self.cause = cause

    def __str__(self) -> str:
        return f"[{self.error_detail.error_code.value}] {self.error_detail.message}"

    @property
    def error_code(self) -> str:
        return self.error_detail.error_code.value

    @property
    def message(self) -> str:
        return self.error_detail.message

    @property
    def correlation_id(self) -> str:
        return str(self.error_detail.correlation_id)

    @property
    def service(self) -> str:
        return self.error_detail.service

    @property
    def operation(self) -> str:
        return self.error_detail.operation

    @property
    def status_code(self) -> int | None:
        return self.error_detail.status_code

    def to_dict(self) -> dict[str, Any]:
        return self.error_detail.model_dump(mode="json")


class CallFailure(CommunityError):
    """Classified failure of one gateway call (AUTH_REQUIRED, NETWORK or SERVER).

    ``request`` is the CallRequest that failed; pages store it in the pending
    slot when they redirect to registration.
    """

    def __init__(
        self,
        error_detail: ErrorDetail,
        cause: BaseException | None = None,
        request: CallRequest | None = None,
    ) -> None:
        if error_detail.error_code.value not in _FAILURE_KIND_VALUES:
            raise ValueError(f"CallFailure cannot carry {error_detail.error_code.value}")
        super().__init__(error_detail, cause)
        self.request = request

    @property
    def kind(self) -> FailureKind:
        return FailureKind(self.error_detail.error_code.value)

    @property
    def is_auth_required(self) -> bool:
        return self.kind is FailureKind.AUTH_REQUIRED


class ValidationFailure(CommunityError):
    """Client-side validation error raised before any network activity."""

    @property
    def field(self) -> str | None:
        return self.error_detail.details.get("field")

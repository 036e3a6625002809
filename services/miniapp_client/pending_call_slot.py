"""Pending-Call Slot.

Holds at most one CallRequest to replay after the user registers. ``set``
overwrites unconditionally (last write wins, no queue); ``take_and_clear``
reads and empties the slot with no suspension point in between, which is all
the exclusion a single-threaded event loop needs. Memory only.
"""

from __future__ import annotations

from community_core.gateway_models import CallRequest
from community_service_libs.logging_utils import create_service_logger

logger = create_service_logger("miniapp.pending_call")


class PendingCallSlot:
    """Single-slot store for the call that triggered a registration redirect."""

    def __init__(self) -> None:
        self._pending: CallRequest | None = None

    def set(self, call: CallRequest) -> None:
        if self._pending is not None:
            # Earlier pending call is discarded without user-visible indication
            logger.warning(
                "Overwriting pending call",
                discarded_path=self._pending.path,
                new_path=call.path,
            )
        self._pending = call.model_copy(deep=True)

    def take_and_clear(self) -> CallRequest | None:
        pending, self._pending = self._pending, None
        return pending

    @property
    def is_set(self) -> bool:
        return self._pending is not None

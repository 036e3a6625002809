"""Redirect to registration on AUTH_REQUIRED.

The page stores the exact failed request in the pending-call slot before it
navigates, so the registration flow can replay it afterwards.
"""

from __future__ import annotations

import asyncio

from community_service_libs.error_handling import CallFailure
from community_service_libs.logging_utils import create_service_logger

from services.miniapp_client.pending_call_slot import PendingCallSlot
from services.miniapp_client.protocols import NavigatorProtocol, NotifierProtocol

logger = create_service_logger("miniapp.auth_redirect")

REGISTER_PAGE = "/pages/user-register/user-register"
REGISTER_REDIRECT_URL = f"{REGISTER_PAGE}?from=401"
MSG_REDIRECT_FAILED = "跳转失败，请手动前往注册"


class AuthRedirector:
    """Shared AUTH_REQUIRED handling for every page."""

    def __init__(
        self,
        pending_calls: PendingCallSlot,
        navigator: NavigatorProtocol,
        notifier: NotifierProtocol,
        delay_seconds: float = 0.1,
    ) -> None:
        self._pending_calls = pending_calls
        self._navigator = navigator
        self._notifier = notifier
        self._delay_seconds = delay_seconds

    async def handle(self, failure: CallFailure) -> bool:
        """Store the failed call and send the user to registration.

        Returns:
            True if a navigation succeeded
        """
        if failure.request is not None:
            self._pending_calls.set(failure.request)
        logger.info(
            "Redirecting to registration",
            path=failure.request.path if failure.request else None,
        )

        # Let the current page settle before leaving it
        await asyncio.sleep(self._delay_seconds)

        if await self._navigator.redirect_to(REGISTER_REDIRECT_URL):
            return True
        logger.warning("redirect_to refused, falling back to navigate_to")
        if await self._navigator.navigate_to(REGISTER_REDIRECT_URL):
            return True

        logger.error("Navigation to registration failed")
        await self._notifier.show_notice(MSG_REDIRECT_FAILED)
        return False

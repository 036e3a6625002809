"""Shared page controller plumbing."""

from __future__ import annotations

from community_service_libs.error_handling import CallFailure
from community_service_libs.logging_utils import create_service_logger

from services.miniapp_client.api.forum_api import ForumApi
from services.miniapp_client.pages.auth_redirect import AuthRedirector
from services.miniapp_client.protocols import NavigatorProtocol, NotifierProtocol

logger = create_service_logger("miniapp.pages")

MSG_NETWORK_ERROR = "网络错误，请重试"


class PageController:
    """Base for page controllers: one notice per failed operation."""

    def __init__(
        self,
        api: ForumApi,
        redirector: AuthRedirector,
        navigator: NavigatorProtocol,
        notifier: NotifierProtocol,
    ) -> None:
        self.api = api
        self.redirector = redirector
        self.navigator = navigator
        self.notifier = notifier

    async def handle_failure(self, failure: CallFailure, notice: str = MSG_NETWORK_ERROR) -> None:
        """AUTH_REQUIRED redirects to registration; anything else shows ``notice``."""
        if failure.is_auth_required:
            await self.redirector.handle(failure)
            return
        logger.error(
            "Page operation failed",
            page=type(self).__name__,
            error_code=failure.error_code,
            error=failure.message,
        )
        await self.notifier.show_notice(notice)

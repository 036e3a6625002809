"""Profile page: show, sync and clear the stored user profile."""

from __future__ import annotations

from community_core.forum_models import UserProfile
from community_service_libs.error_handling import CallFailure
from community_service_libs.logging_utils import create_service_logger

from services.miniapp_client.api.forum_api import ForumApi
from services.miniapp_client.dto.ui_v1 import NoticeIcon
from services.miniapp_client.pages._base import PageController
from services.miniapp_client.pages.auth_redirect import AuthRedirector
from services.miniapp_client.protocols import (
    NavigatorProtocol,
    NotifierProtocol,
    ProfileStoreProtocol,
)

logger = create_service_logger("miniapp.pages.profile")

MY_POSTS_PAGE = "/pages/my-posts/my-posts"


class ProfilePage(PageController):
    def __init__(
        self,
        api: ForumApi,
        redirector: AuthRedirector,
        navigator: NavigatorProtocol,
        notifier: NotifierProtocol,
        profile_store: ProfileStoreProtocol,
    ) -> None:
        super().__init__(api, redirector, navigator, notifier)
        self.profile_store = profile_store
        self.user_info: UserProfile | None = None

    @property
    def has_user_info(self) -> bool:
        return self.user_info is not None and bool(self.user_info.display_name)

    async def load_user_info(self) -> UserProfile | None:
        self.user_info = await self.profile_store.load()
        return self.user_info

    async def save_user_info(self, profile: UserProfile) -> None:
        """Store a freshly authorized profile locally, then mirror it to the server."""
        try:
            await self.profile_store.save(profile)
        except OSError as e:
            logger.error("Failed to save user profile", error=str(e))
        self.user_info = profile
        await self.sync_to_server(profile)

    async def sync_to_server(self, profile: UserProfile) -> bool:
        """Local storage already holds the profile, so failures are only logged."""
        try:
            envelope = await self.api.update_user_profile(profile.to_storage())
        except CallFailure as e:
            logger.error("Profile sync failed", error_code=e.error_code, error=e.message)
            return False

        if not envelope.ok:
            logger.warning("Profile sync rejected", message=envelope.error_message(""))
            return False
        await self.notifier.show_notice("信息已同步", NoticeIcon.SUCCESS)
        return True

    async def clear_user_info(self) -> bool:
        if not await self.notifier.confirm("确认清除", "确定要清除用户信息吗？"):
            return False
        try:
            await self.profile_store.clear()
        except OSError as e:
            logger.error("Failed to clear user profile", error=str(e))
        self.user_info = None
        await self.notifier.show_notice("已清除", NoticeIcon.SUCCESS)
        return True

    async def open_my_posts(self) -> bool:
        return await self.navigator.navigate_to(MY_POSTS_PAGE)

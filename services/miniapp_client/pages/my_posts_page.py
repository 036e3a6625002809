"""My posts page.

Requires a stored profile. Without one the user is asked to log in and sent
to the profile page (or back, on cancel).
"""

from __future__ import annotations

from typing import Any

from community_service_libs.error_handling import CallFailure

from services.miniapp_client.api.forum_api import ForumApi
from services.miniapp_client.dto.ui_v1 import NoticeIcon
from services.miniapp_client.pages._base import PageController
from services.miniapp_client.pages.auth_redirect import AuthRedirector
from services.miniapp_client.protocols import (
    NavigatorProtocol,
    NotifierProtocol,
    ProfileStoreProtocol,
)
from services.miniapp_client.utils.time_format import format_relative_time

PROFILE_PAGE = "/pages/profile/profile"
DETAIL_PAGE = "/pages/detail/detail"


def map_my_post(post: dict[str, Any]) -> dict[str, Any]:
    """Flatten a server post into the list-row shape."""
    stats = post.get("stats") or {}
    return {
        "id": post.get("id"),
        "title": post.get("title"),
        "content": post.get("excerpt") or post.get("content"),
        "images": post.get("images") or [],
        "status": "published",
        "viewCount": stats.get("views", 0),
        "likeCount": stats.get("likes", 0),
        "commentCount": stats.get("comments", 0),
        "createdAt": format_relative_time(post.get("createdAt")),
        "category": post.get("category"),
        "categoryName": post.get("categoryName"),
        "author": post.get("author"),
    }


class MyPostsPage(PageController):
    def __init__(
        self,
        api: ForumApi,
        redirector: AuthRedirector,
        navigator: NavigatorProtocol,
        notifier: NotifierProtocol,
        profile_store: ProfileStoreProtocol,
        page_size: int = 10,
    ) -> None:
        super().__init__(api, redirector, navigator, notifier)
        self.profile_store = profile_store
        self.page_size = page_size
        self.posts: list[dict[str, Any]] = []
        self.page = 1
        self.total = 0
        self.has_more = True
        self.loading = False
        self.has_user_info = False

    async def on_show(self) -> None:
        profile = await self.profile_store.load()
        if profile is not None and profile.display_name:
            self.has_user_info = True
            await self.load_posts()
            return
        self.has_user_info = False
        await self.show_auth_prompt()

    async def show_auth_prompt(self) -> None:
        if await self.notifier.confirm("需要登录", "查看我的帖子需要先登录账号", "去登录"):
            await self.navigator.navigate_to(PROFILE_PAGE)
        else:
            await self.navigator.navigate_back()

    async def load_posts(self) -> None:
        if self.loading:
            return
        self.loading = True
        try:
            envelope = await self.api.get_my_posts(page=self.page, page_size=self.page_size)
            if envelope.ok:
                data = envelope.data or {}
                rows = [map_my_post(post) for post in data.get("list", [])]
                self.posts = rows if self.page == 1 else [*self.posts, *rows]
                pagination = data.get("pagination") or {}
                self.total = pagination.get("total", len(self.posts))
                self.has_more = bool(pagination.get("hasMore", False))
            else:
                await self.notifier.show_notice(envelope.error_message("获取失败"))
        except CallFailure as e:
            await self.handle_failure(e, "获取失败，请重试")
        finally:
            self.loading = False

    async def refresh(self) -> None:
        self.posts = []
        self.page = 1
        self.has_more = True
        await self.load_posts()

    async def load_more(self) -> None:
        if self.loading or not self.has_more:
            return
        self.page += 1
        await self.load_posts()

    async def open_post(self, post_id: str) -> bool:
        return await self.navigator.navigate_to(f"{DETAIL_PAGE}?id={post_id}")

    async def delete_post(self, post_id: str) -> bool:
        """Confirm, delete, then reload from the first page."""
        confirmed = await self.notifier.confirm(
            "确认删除", "确定要删除这条帖子吗？删除后无法恢复。", "删除"
        )
        if not confirmed:
            return False

        try:
            envelope = await self.api.delete_post(post_id)
        except CallFailure as e:
            await self.handle_failure(e, "删除失败，请重试")
            return False

        if not envelope.ok:
            await self.notifier.show_notice(envelope.error_message("删除失败"))
            return False

        await self.notifier.show_notice("删除成功", NoticeIcon.SUCCESS)
        await self.refresh()
        return True

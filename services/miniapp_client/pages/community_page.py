"""Community feed page: topic tabs and the paginated post list."""

from __future__ import annotations

import asyncio
from typing import Any

from community_service_libs.error_handling import CallFailure

from services.miniapp_client.pages._base import PageController
from services.miniapp_client.utils.time_format import format_relative_time

ALL_TOPIC: dict[str, Any] = {
    "id": 0,
    "name": "全部",
    "value": "all",
    "icon": "🏠",
    "code": "all",
}


class CommunityPage(PageController):
    page_size = 10

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.categories: list[dict[str, Any]] = [dict(ALL_TOPIC)]
        self.current_tab = 0
        self.posts: list[dict[str, Any]] = []
        self.current_page = 1
        self.has_more = True
        self.loading = False
        self.topics_loading = False

    @property
    def current_category(self) -> str:
        return self.categories[self.current_tab].get("value", "all")

    async def on_load(self) -> None:
        await asyncio.gather(self.load_hot_topics(), self.load_posts())

    async def load_hot_topics(self) -> None:
        self.topics_loading = True
        try:
            envelope = await self.api.get_hot_topics()
            if envelope.ok:
                self.categories = [dict(ALL_TOPIC), *(envelope.data or [])]
            else:
                await self.notifier.show_notice(envelope.error_message("获取话题失败"))
        except CallFailure as e:
            await self.handle_failure(e)
        finally:
            self.topics_loading = False

    async def load_posts(self, refresh: bool = False) -> None:
        if self.loading:
            return
        self.loading = True
        try:
            page = 1 if refresh else self.current_page
            envelope = await self.api.get_community_posts(
                page=page, page_size=self.page_size, category=self.current_category
            )
            if not envelope.ok:
                await self.notifier.show_notice(envelope.error_message("获取数据失败"))
                return
            data = envelope.data or {}
            rows = [
                {**post, "createdAt": format_relative_time(post.get("createdAt"))}
                for post in data.get("list", [])
            ]
            self.posts = rows if refresh else [*self.posts, *rows]
            self.current_page = page + 1
            self.has_more = bool((data.get("pagination") or {}).get("hasMore", False))
        except CallFailure as e:
            await self.handle_failure(e)
        finally:
            self.loading = False

    async def switch_tab(self, index: int) -> None:
        """Select a category tab and reload from the first page."""
        self.current_tab = index
        self.posts = []
        self.current_page = 1
        self.has_more = True
        await self.load_posts(refresh=True)

    async def load_more(self) -> None:
        if self.has_more and not self.loading:
            await self.load_posts()

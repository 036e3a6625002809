"""Post detail page: post, comments, like and comment."""

from __future__ import annotations

import asyncio
from typing import Any

from community_service_libs.error_handling import CallFailure

from services.miniapp_client.dto.ui_v1 import NoticeIcon
from services.miniapp_client.pages._base import PageController
from services.miniapp_client.utils.time_format import format_relative_time


class DetailPage(PageController):
    post_id: str | None = None
    post: dict[str, Any]
    comments: list[dict[str, Any]]
    loading: bool = False
    comments_loading: bool = False

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.post = {}
        self.comments = []

    async def on_load(self, post_id: str) -> None:
        """Load the post and its comments concurrently."""
        self.post_id = post_id
        await asyncio.gather(self.load_post_detail(post_id), self.load_comments(post_id))

    async def load_post_detail(self, post_id: str) -> dict[str, Any] | None:
        self.loading = True
        try:
            envelope = await self.api.get_post_detail(post_id)
            if not envelope.ok:
                await self.notifier.show_notice(envelope.error_message("获取帖子详情失败"))
                return None
            post = dict(envelope.data or {})
            post["createdAt"] = format_relative_time(post.get("createdAt"))
            self.post = post
            return post
        except CallFailure as e:
            await self.handle_failure(e)
            return None
        finally:
            self.loading = False

    async def load_comments(self, post_id: str) -> list[dict[str, Any]] | None:
        self.comments_loading = True
        try:
            envelope = await self.api.get_post_comments(post_id)
            if not envelope.ok:
                await self.notifier.show_notice(envelope.error_message("获取评论失败"))
                return None
            items = (envelope.data or {}).get("list", [])
            self.comments = [
                {**comment, "createdAt": format_relative_time(comment.get("createdAt"))}
                for comment in items
            ]
            return self.comments
        except CallFailure as e:
            await self.handle_failure(e)
            return None
        finally:
            self.comments_loading = False

    async def on_like(self) -> None:
        """Toggle like; the server's answer decides the final state."""
        post = self.post
        post_id = post.get("id") or self.post_id
        if not post_id:
            await self.notifier.show_notice("帖子尚未加载")
            return
        currently_liked = bool(post.get("isLiked"))
        action = "unlike" if currently_liked else "like"
        try:
            envelope = await self.api.like_post(post_id, action)
        except CallFailure as e:
            await self.handle_failure(e)
            return

        if not envelope.ok:
            await self.notifier.show_notice(envelope.error_message("操作失败"))
            return

        data = envelope.data if isinstance(envelope.data, dict) else {}
        is_liked = data.get("isLiked", not currently_liked)
        likes = post.get("stats", {}).get("likes", 0)
        likes_count = data.get("likesCount", likes + 1 if is_liked else likes - 1)
        self.post = {
            **post,
            "isLiked": is_liked,
            "stats": {**post.get("stats", {}), "likes": likes_count},
        }
        await self.notifier.show_notice("点赞成功" if is_liked else "取消点赞", NoticeIcon.SUCCESS)

    async def send_comment(self, text: str) -> bool:
        if not text.strip():
            await self.notifier.show_notice("请输入评论内容")
            return False
        if self.post_id is None:
            return False

        try:
            envelope = await self.api.add_comment(self.post_id, {"content": text})
        except CallFailure as e:
            await self.handle_failure(e)
            return False

        if not envelope.ok:
            await self.notifier.show_notice(envelope.error_message("评论失败"))
            return False

        await self.load_comments(self.post_id)
        await self.notifier.show_notice("评论成功", NoticeIcon.SUCCESS)
        return True

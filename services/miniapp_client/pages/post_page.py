"""New post page: category, text, images and tags, then publish."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any

from community_service_libs.error_handling import CallFailure
from community_service_libs.logging_utils import create_service_logger

from services.miniapp_client.api.forum_api import ForumApi
from services.miniapp_client.config import MiniAppClientSettings
from services.miniapp_client.dto.ui_v1 import NoticeIcon
from services.miniapp_client.pages._base import PageController
from services.miniapp_client.pages.auth_redirect import AuthRedirector
from services.miniapp_client.protocols import (
    ImagePickerProtocol,
    NavigatorProtocol,
    NotifierProtocol,
)
from services.miniapp_client.utils.cloud_paths import post_image_cloud_path

logger = create_service_logger("miniapp.pages.post")

MSG_IMAGE_TOO_LARGE = "图片大小不能超过10MB"
MSG_UPLOADING = "正在上传中，请稍候"
MSG_INCOMPLETE = "请完善帖子内容"


class PostPage(PageController):
    def __init__(
        self,
        api: ForumApi,
        redirector: AuthRedirector,
        navigator: NavigatorProtocol,
        notifier: NotifierProtocol,
        image_picker: ImagePickerProtocol,
        config: MiniAppClientSettings,
    ) -> None:
        super().__init__(api, redirector, navigator, notifier)
        self.image_picker = image_picker
        self._max_images = config.MAX_IMAGES_PER_POST
        self._max_image_bytes = config.MAX_IMAGE_BYTES
        self._success_delay = config.POST_SUCCESS_DELAY_SECONDS

        self.categories: list[dict[str, Any]] = []
        self.selected_category = ""
        self.title = ""
        self.content = ""
        # Local paths until uploaded, then the content reference
        self.images: list[str] = []
        self.uploaded_images: list[str | None] = []
        self.tag_input = ""
        self.tags: list[str] = []
        self.publishing = False
        self.uploading = False
        self.choosing_image = False

    @property
    def can_publish(self) -> bool:
        return bool(self.selected_category and self.title.strip() and self.content.strip())

    async def load_hot_topics(self) -> None:
        try:
            envelope = await self.api.get_hot_topics()
        except CallFailure as e:
            await self.handle_failure(e)
            return
        if envelope.ok:
            self.categories = list(envelope.data or [])
        else:
            await self.notifier.show_notice(envelope.error_message("获取话题失败"))

    async def add_images(self) -> list[str]:
        """Pick images, drop oversize and duplicate ones, upload the rest.

        Returns:
            The newly accepted local paths
        """
        if self.uploading:
            await self.notifier.show_notice(MSG_UPLOADING)
            return []
        if self.choosing_image:
            return []
        remaining = self._max_images - len(self.images)
        if remaining <= 0:
            return []

        self.choosing_image = True
        try:
            picked = await self.image_picker.choose_images(remaining)
        finally:
            self.choosing_image = False

        accepted: list[str] = []
        for image in picked:
            if image.size > self._max_image_bytes:
                await self.notifier.show_notice(MSG_IMAGE_TOO_LARGE)
                continue
            if image.path in self.images or image.path in accepted:
                continue
            accepted.append(image.path)

        if not accepted:
            return []
        self.images.extend(accepted)
        self.uploaded_images.extend([None] * len(accepted))
        await self.upload_images(accepted)
        return accepted

    async def upload_images(self, image_paths: list[str]) -> bool:
        """Upload concurrently; each local path is replaced by its content reference."""
        self.uploading = True
        now = datetime.now()
        try:
            results = await asyncio.gather(
                *(
                    self.api.upload_file(path, post_image_cloud_path(path, index, now))
                    for index, path in enumerate(image_paths)
                )
            )
        except CallFailure as e:
            logger.error("Image upload failed", error=e.message, count=len(image_paths))
            await self.notifier.show_notice("图片上传失败")
            return False
        finally:
            self.uploading = False

        for local_path, result in zip(image_paths, results):
            if local_path in self.images:
                index = self.images.index(local_path)
                self.images[index] = result.file_id
                self.uploaded_images[index] = result.file_id
        await self.notifier.show_notice("图片上传成功", NoticeIcon.SUCCESS)
        return True

    def delete_image(self, index: int) -> None:
        del self.images[index]
        del self.uploaded_images[index]

    def on_tag_input(self, value: str) -> None:
        """A trailing comma commits the tag typed so far."""
        self.tag_input = value
        if not value.endswith(","):
            return
        tag = value[:-1].strip()
        if tag and tag not in self.tags:
            self.tags.append(tag)
            self.tag_input = ""

    def delete_tag(self, index: int) -> None:
        del self.tags[index]

    async def cancel(self) -> None:
        if await self.notifier.confirm("确认取消", "确定要取消发布吗？已输入的内容将会丢失。"):
            await self.navigator.navigate_back()

    async def publish(self) -> bool:
        if not self.can_publish:
            await self.notifier.show_notice(MSG_INCOMPLETE)
            return False
        if self.publishing:
            return False

        category = next(
            (c.get("code") for c in self.categories if c.get("name") == self.selected_category),
            None,
        ) or "other"
        post_data = {
            "title": self.title.strip(),
            "content": self.content.strip(),
            "category": category,
            "tags": list(self.tags),
            "images": [ref for ref in self.uploaded_images if ref],
        }

        self.publishing = True
        try:
            envelope = await self.api.create_post(post_data)
        except CallFailure as e:
            await self.handle_failure(e)
            return False
        finally:
            self.publishing = False

        if not envelope.ok:
            await self.notifier.show_notice(envelope.error_message("发布失败"))
            return False

        await self.notifier.show_notice("发布成功", NoticeIcon.SUCCESS)
        await asyncio.sleep(self._success_delay)
        await self.navigator.navigate_back()
        return True

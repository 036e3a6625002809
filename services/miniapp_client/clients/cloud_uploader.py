"""Cloud storage upload client.

Two-step upload against the cloud development storage API: request an upload
ticket for ``cloud_path``, then POST the file bytes to the signed COS URL the
ticket names. The ticket's ``file_id`` (``cloud://...``) is the content
reference the backend stores.
"""

from __future__ import annotations

from typing import Any

import aiofiles
import httpx
from community_core.forum_models import UploadResult
from community_service_libs.error_handling import raise_network_error
from community_service_libs.logging_utils import create_service_logger

from services.miniapp_client.clients._utils import SERVICE
from services.miniapp_client.config import MiniAppClientSettings

logger = create_service_logger("miniapp.cloud_uploader")

UPLOAD_FAILURE_PREFIX = "文件上传失败"


class _TicketError(Exception):
    """Upload ticket was refused or incomplete."""


class CloudStorageUploader:
    """FileUploaderProtocol implementation over httpx."""

    def __init__(self, http_client: httpx.AsyncClient, config: MiniAppClientSettings) -> None:
        self._client = http_client
        self._api_url = config.STORAGE_API_URL
        self._access_token = config.STORAGE_ACCESS_TOKEN
        self._env_id = config.CLOUD_ENV_ID

    async def upload(self, local_path: str, cloud_path: str) -> UploadResult:
        """Upload ``local_path`` to ``cloud_path``.

        Args:
            local_path: Local/temporary file path
            cloud_path: Destination path inside cloud storage

        Returns:
            UploadResult carrying the cloud:// file id

        Raises:
            CallFailure: NETWORK, message "文件上传失败: <diagnostic>"
        """
        logger.info("Starting file upload", local_path=local_path, cloud_path=cloud_path)
        try:
            async with aiofiles.open(local_path, "rb") as f:
                content = await f.read()
            ticket = await self._request_ticket(cloud_path)
            await self._post_to_storage(ticket, cloud_path, content)
        except (OSError, httpx.HTTPError, _TicketError) as e:
            logger.error(
                "File upload failed",
                local_path=local_path,
                cloud_path=cloud_path,
                env=self._env_id,
                error=str(e),
            )
            raise_network_error(
                service=SERVICE,
                operation="upload_file",
                message=f"{UPLOAD_FAILURE_PREFIX}: {e}",
                cause=e,
                local_path=local_path,
                cloud_path=cloud_path,
            )

        logger.info("File upload succeeded", file_id=ticket["file_id"])
        return UploadResult(file_id=ticket["file_id"], cloud_path=cloud_path)

    async def _request_ticket(self, cloud_path: str) -> dict[str, Any]:
        response = await self._client.post(
            self._api_url,
            params={"access_token": self._access_token.get_secret_value()},
            json={"env": self._env_id, "path": cloud_path},
        )
        response.raise_for_status()
        try:
            ticket = response.json()
        except ValueError as e:
            raise _TicketError(f"invalid upload ticket response: {e}") from e

        if ticket.get("errcode", 0) != 0:
            raise _TicketError(ticket.get("errmsg") or f"errcode {ticket['errcode']}")
        missing = [key for key in ("url", "file_id") if not ticket.get(key)]
        if missing:
            raise _TicketError(f"upload ticket missing {', '.join(missing)}")
        return ticket

    async def _post_to_storage(
        self, ticket: dict[str, Any], cloud_path: str, content: bytes
    ) -> None:
        response = await self._client.post(
            ticket["url"],
            data={
                "key": cloud_path,
                "Signature": ticket.get("authorization", ""),
                "x-cos-security-token": ticket.get("token", ""),
                "x-cos-meta-fileid": ticket.get("cos_file_id", ""),
            },
            files={"file": (cloud_path.rsplit("/", 1)[-1], content)},
        )
        response.raise_for_status()

"""Unit tests for the cloud storage uploader."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
from community_core.error_enums import FailureKind
from community_service_libs.error_handling import CallFailure
from respx import MockRouter

from services.miniapp_client.clients.cloud_uploader import CloudStorageUploader
from services.miniapp_client.config import MiniAppClientSettings

STORAGE_URL = "https://storage.test/tcb/uploadfile"
COS_URL = "https://cos.test/upload"

TICKET = {
    "errcode": 0,
    "url": COS_URL,
    "token": "tok",
    "authorization": "sig",
    "file_id": "cloud://test-env.1234/posts/20240615/1_0.png",
    "cos_file_id": "cos-1",
}


@pytest.fixture
def uploader(
    http_client: httpx.AsyncClient, test_settings: MiniAppClientSettings
) -> CloudStorageUploader:
    return CloudStorageUploader(http_client, test_settings)


@pytest.fixture
def image_file(tmp_path: Path) -> Path:
    path = tmp_path / "photo.png"
    path.write_bytes(b"\x89PNG fake")
    return path


@pytest.mark.asyncio
async def test_upload_returns_content_reference(
    uploader: CloudStorageUploader, image_file: Path, respx_mock: MockRouter
) -> None:
    ticket_route = respx_mock.post(STORAGE_URL).mock(
        return_value=httpx.Response(200, json=TICKET)
    )
    cos_route = respx_mock.post(COS_URL).mock(return_value=httpx.Response(204))

    result = await uploader.upload(str(image_file), "posts/20240615/1_0.png")

    assert result.file_id == TICKET["file_id"]
    assert result.cloud_path == "posts/20240615/1_0.png"
    assert json.loads(ticket_route.calls[0].request.content) == {
        "env": "test-env",
        "path": "posts/20240615/1_0.png",
    }
    assert b"\x89PNG fake" in cos_route.calls[0].request.content


@pytest.mark.asyncio
async def test_refused_ticket_is_prefixed_network_failure(
    uploader: CloudStorageUploader, image_file: Path, respx_mock: MockRouter
) -> None:
    respx_mock.post(STORAGE_URL).mock(
        return_value=httpx.Response(200, json={"errcode": 40001, "errmsg": "invalid credential"})
    )

    with pytest.raises(CallFailure) as exc_info:
        await uploader.upload(str(image_file), "avatars/1_abc.jpg")

    assert exc_info.value.kind is FailureKind.NETWORK
    assert exc_info.value.message == "文件上传失败: invalid credential"


@pytest.mark.asyncio
async def test_storage_rejection_is_network_failure(
    uploader: CloudStorageUploader, image_file: Path, respx_mock: MockRouter
) -> None:
    respx_mock.post(STORAGE_URL).mock(return_value=httpx.Response(200, json=TICKET))
    respx_mock.post(COS_URL).mock(return_value=httpx.Response(403))

    with pytest.raises(CallFailure) as exc_info:
        await uploader.upload(str(image_file), "avatars/1_abc.jpg")

    assert exc_info.value.kind is FailureKind.NETWORK
    assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_missing_local_file_is_network_failure(
    uploader: CloudStorageUploader, tmp_path: Path, respx_mock: MockRouter
) -> None:
    with pytest.raises(CallFailure) as exc_info:
        await uploader.upload(str(tmp_path / "gone.png"), "avatars/1_abc.jpg")

    assert exc_info.value.message.startswith("文件上传失败: ")
    assert not respx_mock.calls

"""Shared fixtures for Mini Program Client tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from pathlib import Path
from unittest.mock import AsyncMock

import httpx
import pytest
from community_core.error_enums import FailureKind
from community_core.gateway_models import CallRequest
from community_service_libs.error_handling import (
    CallFailure,
    raise_auth_required,
    raise_network_error,
    raise_server_error,
)

from services.miniapp_client.config import MiniAppClientSettings
from services.miniapp_client.pending_call_slot import PendingCallSlot
from services.miniapp_client.protocols import NavigatorProtocol, NotifierProtocol

GATEWAY_URL = "https://gateway.test"
STORAGE_URL = "https://storage.test/tcb/uploadfile"


@pytest.fixture
def test_settings(tmp_path: Path) -> MiniAppClientSettings:
    """Settings with zero UI delays and a temporary profile store."""
    return MiniAppClientSettings(
        GATEWAY_BASE_URL=GATEWAY_URL,
        CLOUD_ENV_ID="test-env",
        CLOUD_SERVICE_NAME="forum-api",
        STORAGE_API_URL=STORAGE_URL,
        PROFILE_STORE_PATH=tmp_path / "userInfo.json",
        REDIRECT_DELAY_SECONDS=0,
        POST_SUCCESS_DELAY_SECONDS=0,
        DEFAULT_TIMEOUT_MS=5000,
    )


@pytest.fixture
async def http_client() -> AsyncIterator[httpx.AsyncClient]:
    """Real httpx client for respx mocking."""
    async with httpx.AsyncClient(base_url=GATEWAY_URL) as client:
        yield client


@pytest.fixture
def navigator() -> AsyncMock:
    mock = AsyncMock(spec=NavigatorProtocol)
    mock.redirect_to.return_value = True
    mock.navigate_to.return_value = True
    mock.navigate_back.return_value = True
    return mock


@pytest.fixture
def notifier() -> AsyncMock:
    mock = AsyncMock(spec=NotifierProtocol)
    mock.confirm.return_value = True
    return mock


@pytest.fixture
def pending_calls() -> PendingCallSlot:
    return PendingCallSlot()


@pytest.fixture
def make_failure() -> Callable[..., CallFailure]:
    """Build (without raising) a CallFailure of the given kind."""

    factories = {
        FailureKind.AUTH_REQUIRED: raise_auth_required,
        FailureKind.NETWORK: raise_network_error,
        FailureKind.SERVER: raise_server_error,
    }

    def _make(
        kind: FailureKind, request: CallRequest | None = None, message: str = "failed"
    ) -> CallFailure:
        with pytest.raises(CallFailure) as raised:
            factories[kind](
                service="test", operation="gateway_call", message=message, request=request
            )
        return raised.value

    return _make

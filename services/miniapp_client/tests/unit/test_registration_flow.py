"""Unit tests for registration and resume-after-registration."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest
from community_core.error_enums import ErrorCode, FailureKind
from community_core.forum_models import ApiEnvelope, UploadResult
from community_core.gateway_models import CallRequest, CallResult, HttpMethod
from community_service_libs.error_handling import CallFailure, ValidationFailure

from services.miniapp_client.api.forum_api import ForumApi
from services.miniapp_client.config import MiniAppClientSettings
from services.miniapp_client.dto.ui_v1 import NoticeIcon
from services.miniapp_client.implementations.profile_store import InMemoryProfileStore
from services.miniapp_client.pending_call_slot import PendingCallSlot
from services.miniapp_client.protocols import GatewayClientProtocol
from services.miniapp_client.registration.flow import (
    MSG_CHOOSE_AVATAR,
    MSG_COMPLETE_PROFILE,
    MSG_ENTER_NICKNAME,
    MSG_IDENTITY_FAILED,
    MSG_REGISTERED,
    MSG_REPLAY_FAILED,
    RegistrationFlow,
    RegistrationState,
    ReplayOutcome,
)

REGISTERED = {"id": "u1", "nickname": "Lin", "avatar": "cloud://env/avatars/1.jpg", "level": 1}


def _registered_envelope() -> ApiEnvelope:
    return ApiEnvelope(code=0, data=dict(REGISTERED), success_code=0)


@pytest.fixture
def api() -> AsyncMock:
    mock = AsyncMock(spec=ForumApi)
    mock.register_user.return_value = _registered_envelope()
    mock.upload_file.return_value = UploadResult(
        file_id="cloud://env/avatars/1.jpg", cloud_path="avatars/1.jpg"
    )
    return mock


@pytest.fixture
def gateway() -> AsyncMock:
    mock = AsyncMock(spec=GatewayClientProtocol)
    mock.call.return_value = CallResult(status_code=200, body={"code": 200})
    return mock


@pytest.fixture
def profile_store() -> InMemoryProfileStore:
    return InMemoryProfileStore()


@pytest.fixture
def flow(
    api: AsyncMock,
    gateway: AsyncMock,
    pending_calls: PendingCallSlot,
    profile_store: InMemoryProfileStore,
    navigator: AsyncMock,
    notifier: AsyncMock,
    test_settings: MiniAppClientSettings,
) -> RegistrationFlow:
    return RegistrationFlow(
        api, gateway, pending_calls, profile_store, navigator, notifier, test_settings
    )


class TestValidation:
    @pytest.mark.asyncio
    async def test_whitespace_name_fails_before_network(
        self, flow: RegistrationFlow, api: AsyncMock, gateway: AsyncMock
    ) -> None:
        with pytest.raises(ValidationFailure) as exc_info:
            await flow.submit("   ", "cloud://env/a.jpg")

        assert exc_info.value.error_code == ErrorCode.VALIDATION.value
        assert exc_info.value.message == MSG_ENTER_NICKNAME
        assert exc_info.value.field == "nickname"
        api.register_user.assert_not_awaited()
        api.upload_file.assert_not_awaited()
        gateway.call.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_avatar_is_checked_first(
        self, flow: RegistrationFlow, api: AsyncMock
    ) -> None:
        with pytest.raises(ValidationFailure) as exc_info:
            await flow.submit("", "")

        assert exc_info.value.message == MSG_CHOOSE_AVATAR
        api.register_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_avatar_optional_when_not_required(
        self,
        api: AsyncMock,
        gateway: AsyncMock,
        pending_calls: PendingCallSlot,
        profile_store: InMemoryProfileStore,
        navigator: AsyncMock,
        notifier: AsyncMock,
        test_settings: MiniAppClientSettings,
    ) -> None:
        config = test_settings.model_copy(update={"REQUIRE_AVATAR": False})
        flow = RegistrationFlow(
            api, gateway, pending_calls, profile_store, navigator, notifier, config
        )

        await flow.submit("Lin", "")

        assert api.register_user.await_args.args[0]["avatar"] == ""


class TestSubmit:
    @pytest.mark.asyncio
    async def test_local_avatar_is_uploaded_and_reference_registered(
        self, flow: RegistrationFlow, api: AsyncMock, profile_store: InMemoryProfileStore
    ) -> None:
        profile = await flow.submit("  Lin ", "/tmp/wx_tmp_avatar.png")

        local_path, cloud_path = api.upload_file.await_args.args
        assert local_path == "/tmp/wx_tmp_avatar.png"
        assert cloud_path.startswith("avatars/")
        api.register_user.assert_awaited_once_with(
            {"nickname": "Lin", "avatar": "cloud://env/avatars/1.jpg", "bio": ""}
        )
        assert profile.id == "u1"
        assert profile.display_name == "Lin"
        assert await profile_store.load() == profile
        assert flow.state is RegistrationState.SUCCESS

    @pytest.mark.parametrize(
        "avatar", ["cloud://env/avatars/1.jpg", "https://thirdwx.qlogo.cn/avatar.png"]
    )
    @pytest.mark.asyncio
    async def test_existing_references_are_not_uploaded(
        self, flow: RegistrationFlow, api: AsyncMock, avatar: str
    ) -> None:
        await flow.submit("Lin", avatar)

        api.upload_file.assert_not_awaited()
        assert api.register_user.await_args.args[0]["avatar"] == avatar

    @pytest.mark.asyncio
    async def test_rejected_envelope_is_server_failure(
        self, flow: RegistrationFlow, api: AsyncMock
    ) -> None:
        api.register_user.return_value = ApiEnvelope(code=1, msg="昵称已存在", success_code=0)

        with pytest.raises(CallFailure) as exc_info:
            await flow.submit("Lin", "cloud://env/a.jpg")

        assert exc_info.value.kind is FailureKind.SERVER
        assert exc_info.value.message == "昵称已存在"
        assert flow.state is RegistrationState.FAILED

    @pytest.mark.asyncio
    async def test_malformed_user_data_is_server_failure(
        self, flow: RegistrationFlow, api: AsyncMock
    ) -> None:
        api.register_user.return_value = ApiEnvelope(
            code=0, data={"nickname": "Lin"}, success_code=0
        )

        with pytest.raises(CallFailure) as exc_info:
            await flow.submit("Lin", "cloud://env/a.jpg")

        assert exc_info.value.kind is FailureKind.SERVER
        assert flow.state is RegistrationState.FAILED

    @pytest.mark.asyncio
    async def test_upload_failure_propagates_as_network(
        self,
        flow: RegistrationFlow,
        api: AsyncMock,
        make_failure: Callable[..., CallFailure],
    ) -> None:
        api.upload_file.side_effect = make_failure(
            FailureKind.NETWORK, message="文件上传失败: disk"
        )

        with pytest.raises(CallFailure) as exc_info:
            await flow.submit("Lin", "/tmp/a.jpg")

        assert exc_info.value.kind is FailureKind.NETWORK
        api.register_user.assert_not_awaited()


class TestReplay:
    @pytest.mark.asyncio
    async def test_empty_slot_replays_nothing(
        self, flow: RegistrationFlow, gateway: AsyncMock
    ) -> None:
        assert await flow.replay_pending() is ReplayOutcome.NONE
        gateway.call.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_pending_call_replayed_once_and_cleared(
        self, flow: RegistrationFlow, gateway: AsyncMock, pending_calls: PendingCallSlot
    ) -> None:
        pending = CallRequest(
            path="/api/posts/p1/like", method=HttpMethod.POST, body={"action": "like"}
        )
        pending_calls.set(pending)

        assert await flow.replay_pending() is ReplayOutcome.SUCCEEDED
        gateway.call.assert_awaited_once_with(pending)
        assert not pending_calls.is_set

    @pytest.mark.asyncio
    async def test_failed_replay_is_not_retried(
        self,
        flow: RegistrationFlow,
        gateway: AsyncMock,
        pending_calls: PendingCallSlot,
        make_failure: Callable[..., CallFailure],
    ) -> None:
        pending_calls.set(CallRequest(path="/api/posts/my?page=1&pageSize=10"))
        gateway.call.side_effect = make_failure(FailureKind.AUTH_REQUIRED)

        assert await flow.replay_pending() is ReplayOutcome.FAILED
        assert gateway.call.await_count == 1
        assert not pending_calls.is_set


class TestComplete:
    @pytest.mark.asyncio
    async def test_success_replays_then_navigates_back(
        self,
        flow: RegistrationFlow,
        gateway: AsyncMock,
        navigator: AsyncMock,
        notifier: AsyncMock,
        pending_calls: PendingCallSlot,
    ) -> None:
        pending_calls.set(CallRequest(path="/api/posts/my?page=1&pageSize=10"))

        profile = await flow.complete("Lin", "cloud://env/a.jpg")

        assert profile is not None
        notifier.show_notice.assert_awaited_once_with(MSG_REGISTERED, NoticeIcon.SUCCESS)
        gateway.call.assert_awaited_once()
        navigator.navigate_back.assert_awaited_once()
        assert flow.state is RegistrationState.IDLE

    @pytest.mark.asyncio
    async def test_replay_failure_still_navigates_back(
        self,
        flow: RegistrationFlow,
        gateway: AsyncMock,
        navigator: AsyncMock,
        notifier: AsyncMock,
        pending_calls: PendingCallSlot,
        make_failure: Callable[..., CallFailure],
    ) -> None:
        pending_calls.set(CallRequest(path="/api/posts/p1/comments", method=HttpMethod.POST))
        gateway.call.side_effect = make_failure(FailureKind.SERVER)

        await flow.complete("Lin", "cloud://env/a.jpg")

        notifier.show_notice.assert_any_await(MSG_REPLAY_FAILED)
        navigator.navigate_back.assert_awaited_once()
        assert gateway.call.await_count == 1

    @pytest.mark.asyncio
    async def test_auth_required_on_register_shows_identity_message(
        self,
        flow: RegistrationFlow,
        api: AsyncMock,
        navigator: AsyncMock,
        notifier: AsyncMock,
        make_failure: Callable[..., CallFailure],
    ) -> None:
        api.register_user.side_effect = make_failure(FailureKind.AUTH_REQUIRED)

        assert await flow.complete("Lin", "cloud://env/a.jpg") is None

        notifier.show_notice.assert_awaited_once_with(MSG_IDENTITY_FAILED)
        navigator.redirect_to.assert_not_awaited()
        navigator.navigate_back.assert_not_awaited()
        assert flow.state is RegistrationState.IDLE

    @pytest.mark.asyncio
    async def test_validation_failure_shows_single_notice(
        self, flow: RegistrationFlow, notifier: AsyncMock
    ) -> None:
        assert await flow.complete(" ", "cloud://env/a.jpg") is None

        notifier.show_notice.assert_awaited_once_with(MSG_ENTER_NICKNAME)

    @pytest.mark.asyncio
    async def test_redirect_entry_explains_detour(
        self, flow: RegistrationFlow, notifier: AsyncMock
    ) -> None:
        await flow.on_enter(from_auth_redirect=True)

        notifier.show_notice.assert_awaited_once_with(MSG_COMPLETE_PROFILE)

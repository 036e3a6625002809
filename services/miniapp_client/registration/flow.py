"""Registration Flow.

Collects the minimal profile (display name, avatar), uploads a local avatar,
registers the user and mirrors the resulting profile into persisted storage.
After a successful registration the pending call (if any) is replayed once
and navigation resumes whatever the replay outcome.

States: IDLE -> SUBMITTING -> {SUCCESS, FAILED} -> IDLE once feedback shown.
"""

from __future__ import annotations

import asyncio
from enum import Enum

from community_core.forum_models import UserProfile
from community_service_libs.error_handling import (
    CallFailure,
    ValidationFailure,
    raise_server_error,
    raise_validation_error,
)
from community_service_libs.logging_utils import create_service_logger
from pydantic import ValidationError

from services.miniapp_client.api.forum_api import ForumApi
from services.miniapp_client.clients._utils import SERVICE
from services.miniapp_client.config import MiniAppClientSettings
from services.miniapp_client.dto.ui_v1 import NoticeIcon
from services.miniapp_client.pending_call_slot import PendingCallSlot
from services.miniapp_client.protocols import (
    GatewayClientProtocol,
    NavigatorProtocol,
    NotifierProtocol,
    ProfileStoreProtocol,
)
from services.miniapp_client.utils.cloud_paths import avatar_cloud_path, needs_upload

logger = create_service_logger("miniapp.registration")

MSG_CHOOSE_AVATAR = "请选择头像"
MSG_ENTER_NICKNAME = "请输入昵称"
MSG_SUBMITTING = "正在提交，请稍候"
MSG_COMPLETE_PROFILE = "请先完善用户信息"
MSG_REGISTERED = "注册成功"
MSG_REGISTER_FAILED = "注册失败"
MSG_REGISTER_RETRY = "注册失败，请重试"
MSG_IDENTITY_FAILED = "用户信息验证失败，请重新填写"
MSG_REPLAY_FAILED = "操作失败，请重试"


class RegistrationState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class ReplayOutcome(str, Enum):
    NONE = "none"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RegistrationFlow:
    """Registration plus resume-after-registration of the pending call."""

    def __init__(
        self,
        api: ForumApi,
        gateway: GatewayClientProtocol,
        pending_calls: PendingCallSlot,
        profile_store: ProfileStoreProtocol,
        navigator: NavigatorProtocol,
        notifier: NotifierProtocol,
        config: MiniAppClientSettings,
    ) -> None:
        self._api = api
        self._gateway = gateway
        self._pending_calls = pending_calls
        self._profile_store = profile_store
        self._navigator = navigator
        self._notifier = notifier
        self._require_avatar = config.REQUIRE_AVATAR
        self._success_delay = config.POST_SUCCESS_DELAY_SECONDS
        self.state = RegistrationState.IDLE

    async def on_enter(self, from_auth_redirect: bool = False) -> None:
        """Page entry; explains the detour when opened by an auth redirect."""
        if from_auth_redirect:
            await self._notifier.show_notice(MSG_COMPLETE_PROFILE)

    def _validate(self, display_name: str, avatar_source: str) -> None:
        if self._require_avatar and not avatar_source:
            raise_validation_error(
                service=SERVICE,
                operation="submit_registration",
                field="avatar",
                message=MSG_CHOOSE_AVATAR,
            )
        if not display_name or not display_name.strip():
            raise_validation_error(
                service=SERVICE,
                operation="submit_registration",
                field="nickname",
                message=MSG_ENTER_NICKNAME,
            )

    async def _resolve_avatar(self, avatar_source: str) -> str:
        if not avatar_source or not needs_upload(avatar_source):
            return avatar_source
        uploaded = await self._api.upload_file(avatar_source, avatar_cloud_path())
        logger.info("Avatar uploaded", file_id=uploaded.file_id)
        return uploaded.file_id

    async def submit(self, display_name: str, avatar_source: str) -> UserProfile:
        """Validate, upload the avatar if local, register and persist the profile.

        Raises:
            ValidationFailure: before any network activity
            CallFailure: NETWORK (upload/transport), AUTH_REQUIRED, SERVER
        """
        if self.state is RegistrationState.SUBMITTING:
            raise_validation_error(
                service=SERVICE,
                operation="submit_registration",
                field="state",
                message=MSG_SUBMITTING,
            )
        self._validate(display_name, avatar_source)

        self.state = RegistrationState.SUBMITTING
        try:
            avatar_reference = await self._resolve_avatar(avatar_source)
            envelope = await self._api.register_user(
                {"nickname": display_name.strip(), "avatar": avatar_reference, "bio": ""}
            )
            if not envelope.ok or not isinstance(envelope.data, dict):
                raise_server_error(
                    service=SERVICE,
                    operation="submit_registration",
                    message=envelope.error_message(MSG_REGISTER_FAILED),
                    envelope_code=envelope.code,
                )
            try:
                profile = UserProfile.from_registration(envelope.data)
            except (KeyError, ValidationError) as e:
                raise_server_error(
                    service=SERVICE,
                    operation="submit_registration",
                    message=f"{MSG_REGISTER_FAILED}: malformed user data",
                    cause=e,
                )
        except Exception:
            self.state = RegistrationState.FAILED
            raise

        try:
            await self._profile_store.save(profile)
        except OSError as e:
            logger.error("Failed to persist user profile", error=str(e))

        self.state = RegistrationState.SUCCESS
        logger.info("User registered", user_id=profile.id)
        return profile

    async def replay_pending(self) -> ReplayOutcome:
        """Drain the pending-call slot and replay its call once."""
        pending = self._pending_calls.take_and_clear()
        if pending is None:
            return ReplayOutcome.NONE

        try:
            await self._gateway.call(pending)
        except CallFailure as e:
            logger.warning(
                "Replay of pending call failed",
                path=pending.path,
                error_code=e.error_code,
                error=e.message,
            )
            return ReplayOutcome.FAILED

        logger.info("Replayed pending call", path=pending.path)
        return ReplayOutcome.SUCCEEDED

    async def complete(self, display_name: str, avatar_source: str) -> UserProfile | None:
        """Page submit handler: register, give feedback, replay, navigate back.

        Returns the registered profile, or None when registration failed (the
        failure has already been shown as a single notice).
        """
        if self.state is RegistrationState.SUBMITTING:
            return None

        try:
            profile = await self.submit(display_name, avatar_source)
        except ValidationFailure as e:
            await self._notifier.show_notice(e.message)
            self.state = RegistrationState.IDLE
            return None
        except CallFailure as e:
            # Never re-enter the redirect loop from the registration page itself
            if e.is_auth_required:
                message = MSG_IDENTITY_FAILED
            else:
                message = e.message or MSG_REGISTER_RETRY
            logger.error("Registration failed", error_code=e.error_code, error=e.message)
            await self._notifier.show_notice(message)
            self.state = RegistrationState.IDLE
            return None

        await self._notifier.show_notice(MSG_REGISTERED, NoticeIcon.SUCCESS)
        await asyncio.sleep(self._success_delay)

        outcome = await self.replay_pending()
        if outcome is ReplayOutcome.FAILED:
            await self._notifier.show_notice(MSG_REPLAY_FAILED)

        await self._navigator.navigate_back()
        self.state = RegistrationState.IDLE
        return profile

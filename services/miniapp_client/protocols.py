"""Protocol definitions for the Mini Program Client.

Defines the collaborator interfaces the core depends on. Vendor primitives
(navigation, toast/modal, image picker, storage, cloud upload) are all
normalized to awaitables at this edge so page and flow code reads
sequentially.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from community_core.forum_models import UploadResult, UserProfile
    from community_core.gateway_models import CallRequest, CallResult

    from services.miniapp_client.dto.ui_v1 import NoticeIcon, PickedImage


class GatewayClientProtocol(Protocol):
    """Single chokepoint for backend calls."""

    async def call(self, request: CallRequest) -> CallResult:
        """Issue one transport attempt.

        Raises:
            CallFailure: AUTH_REQUIRED, NETWORK or SERVER
        """
        ...


class FileUploaderProtocol(Protocol):
    """Cloud storage upload collaborator."""

    async def upload(self, local_path: str, cloud_path: str) -> UploadResult:
        """Upload a local file and return its content reference.

        Raises:
            CallFailure: NETWORK, message carries the original diagnostic
        """
        ...


class ProfileStoreProtocol(Protocol):
    """Process-wide persisted slot for the current UserProfile."""

    async def load(self) -> UserProfile | None:
        """Return the stored profile, or None if never registered."""
        ...

    async def save(self, profile: UserProfile) -> None:
        """Overwrite the stored profile."""
        ...

    async def clear(self) -> None:
        """Remove the stored profile."""
        ...


class NavigatorProtocol(Protocol):
    """Page navigation. Each method returns False when the runtime refuses."""

    async def redirect_to(self, url: str) -> bool: ...

    async def navigate_to(self, url: str) -> bool: ...

    async def navigate_back(self) -> bool: ...


class NotifierProtocol(Protocol):
    """Transient notices and confirmation dialogs."""

    async def show_notice(self, title: str, icon: NoticeIcon = ...) -> None: ...

    async def confirm(self, title: str, content: str, confirm_text: str = "确定") -> bool: ...


class ImagePickerProtocol(Protocol):
    """Album/camera image selection."""

    async def choose_images(self, count: int) -> list[PickedImage]:
        """Return up to ``count`` picked images; empty list when cancelled."""
        ...

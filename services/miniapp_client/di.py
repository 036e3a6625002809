"""Dependency Injection providers for the Mini Program Client.

APP scope holds the process-wide infrastructure: settings, the shared HTTP
client, the gateway, the pending-call slot and the profile store. Page
controllers are REQUEST scoped, one scope per page visit. The UI
collaborators come from the hosting runtime through the container context.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
from dishka import AsyncContainer, Provider, Scope, from_context, make_async_container, provide

from services.miniapp_client.api.forum_api import ForumApi
from services.miniapp_client.clients.cloud_uploader import CloudStorageUploader
from services.miniapp_client.clients.gateway_client import GatewayClient
from services.miniapp_client.config import MiniAppClientSettings, settings
from services.miniapp_client.implementations.profile_store import JsonFileProfileStore
from services.miniapp_client.pages.auth_redirect import AuthRedirector
from services.miniapp_client.pages.community_page import CommunityPage
from services.miniapp_client.pages.detail_page import DetailPage
from services.miniapp_client.pages.my_posts_page import MyPostsPage
from services.miniapp_client.pages.post_page import PostPage
from services.miniapp_client.pages.profile_page import ProfilePage
from services.miniapp_client.pending_call_slot import PendingCallSlot
from services.miniapp_client.protocols import (
    FileUploaderProtocol,
    GatewayClientProtocol,
    ImagePickerProtocol,
    NavigatorProtocol,
    NotifierProtocol,
    ProfileStoreProtocol,
)
from services.miniapp_client.registration.flow import RegistrationFlow


class MiniAppClientProvider(Provider):
    """Infrastructure provider for the Mini Program Client."""

    scope = Scope.APP

    navigator = from_context(provides=NavigatorProtocol, scope=Scope.APP)
    notifier = from_context(provides=NotifierProtocol, scope=Scope.APP)
    image_picker = from_context(provides=ImagePickerProtocol, scope=Scope.APP)

    def __init__(self, config: MiniAppClientSettings | None = None) -> None:
        super().__init__()
        self._config = config or settings

    @provide
    def get_config(self) -> MiniAppClientSettings:
        return self._config

    @provide
    async def get_http_client(
        self, config: MiniAppClientSettings
    ) -> AsyncIterator[httpx.AsyncClient]:
        """Shared HTTP client; per-call timeouts override the default."""
        async with httpx.AsyncClient(
            base_url=config.GATEWAY_BASE_URL,
            timeout=httpx.Timeout(config.DEFAULT_TIMEOUT_MS / 1000),
        ) as client:
            yield client

    @provide
    def provide_gateway(
        self, http_client: httpx.AsyncClient, config: MiniAppClientSettings
    ) -> GatewayClientProtocol:
        return GatewayClient(http_client, config)

    @provide
    def provide_uploader(
        self, http_client: httpx.AsyncClient, config: MiniAppClientSettings
    ) -> FileUploaderProtocol:
        return CloudStorageUploader(http_client, config)

    @provide
    def provide_pending_call_slot(self) -> PendingCallSlot:
        """Single slot shared by every page of the process."""
        return PendingCallSlot()

    @provide
    def provide_profile_store(self, config: MiniAppClientSettings) -> ProfileStoreProtocol:
        return JsonFileProfileStore(config.PROFILE_STORE_PATH)

    @provide
    def provide_forum_api(
        self, gateway: GatewayClientProtocol, uploader: FileUploaderProtocol
    ) -> ForumApi:
        return ForumApi(gateway, uploader)

    @provide
    def provide_auth_redirector(
        self,
        pending_calls: PendingCallSlot,
        navigator: NavigatorProtocol,
        notifier: NotifierProtocol,
        config: MiniAppClientSettings,
    ) -> AuthRedirector:
        return AuthRedirector(pending_calls, navigator, notifier, config.REDIRECT_DELAY_SECONDS)


class PageProvider(Provider):
    """REQUEST-scoped page controllers, one per page visit."""

    scope = Scope.REQUEST

    @provide
    def provide_community_page(
        self,
        api: ForumApi,
        redirector: AuthRedirector,
        navigator: NavigatorProtocol,
        notifier: NotifierProtocol,
    ) -> CommunityPage:
        return CommunityPage(api, redirector, navigator, notifier)

    @provide
    def provide_detail_page(
        self,
        api: ForumApi,
        redirector: AuthRedirector,
        navigator: NavigatorProtocol,
        notifier: NotifierProtocol,
    ) -> DetailPage:
        return DetailPage(api, redirector, navigator, notifier)

    @provide
    def provide_my_posts_page(
        self,
        api: ForumApi,
        redirector: AuthRedirector,
        navigator: NavigatorProtocol,
        notifier: NotifierProtocol,
        profile_store: ProfileStoreProtocol,
    ) -> MyPostsPage:
        return MyPostsPage(api, redirector, navigator, notifier, profile_store)

    @provide
    def provide_post_page(
        self,
        api: ForumApi,
        redirector: AuthRedirector,
        navigator: NavigatorProtocol,
        notifier: NotifierProtocol,
        image_picker: ImagePickerProtocol,
        config: MiniAppClientSettings,
    ) -> PostPage:
        return PostPage(api, redirector, navigator, notifier, image_picker, config)

    @provide
    def provide_profile_page(
        self,
        api: ForumApi,
        redirector: AuthRedirector,
        navigator: NavigatorProtocol,
        notifier: NotifierProtocol,
        profile_store: ProfileStoreProtocol,
    ) -> ProfilePage:
        return ProfilePage(api, redirector, navigator, notifier, profile_store)

    @provide
    def provide_registration_flow(
        self,
        api: ForumApi,
        gateway: GatewayClientProtocol,
        pending_calls: PendingCallSlot,
        profile_store: ProfileStoreProtocol,
        navigator: NavigatorProtocol,
        notifier: NotifierProtocol,
        config: MiniAppClientSettings,
    ) -> RegistrationFlow:
        return RegistrationFlow(
            api, gateway, pending_calls, profile_store, navigator, notifier, config
        )


def create_container(
    navigator: NavigatorProtocol,
    notifier: NotifierProtocol,
    image_picker: ImagePickerProtocol,
    config: MiniAppClientSettings | None = None,
) -> AsyncContainer:
    """Build the async container around the host's UI collaborators."""
    return make_async_container(
        MiniAppClientProvider(config),
        PageProvider(),
        context={
            NavigatorProtocol: navigator,
            NotifierProtocol: notifier,
            ImagePickerProtocol: image_picker,
        },
    )

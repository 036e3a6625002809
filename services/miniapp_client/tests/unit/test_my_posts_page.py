"""Unit tests for the my posts page controller."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest
from community_core.error_enums import FailureKind
from community_core.forum_models import ApiEnvelope, UserProfile
from community_core.gateway_models import CallRequest
from community_service_libs.error_handling import CallFailure

from services.miniapp_client.api.forum_api import ForumApi
from services.miniapp_client.implementations.profile_store import InMemoryProfileStore
from services.miniapp_client.pages.auth_redirect import AuthRedirector
from services.miniapp_client.pages.my_posts_page import PROFILE_PAGE, MyPostsPage, map_my_post

SERVER_POST = {
    "id": "p1",
    "title": "周末活动",
    "excerpt": "短摘要",
    "content": "完整内容",
    "stats": {"views": 12, "likes": 3, "comments": 1},
    "createdAt": None,
    "category": "event",
    "categoryName": "活动",
    "author": {"id": "u1"},
}


def _page_envelope(posts: list[dict], has_more: bool) -> ApiEnvelope:
    return ApiEnvelope(
        code=200,
        data={"list": posts, "pagination": {"total": len(posts), "hasMore": has_more}},
    )


@pytest.fixture
def api() -> AsyncMock:
    mock = AsyncMock(spec=ForumApi)
    mock.get_my_posts.return_value = _page_envelope([SERVER_POST], has_more=True)
    return mock


@pytest.fixture
def profile_store() -> InMemoryProfileStore:
    return InMemoryProfileStore(UserProfile(id="u1", display_name="Lin"))


@pytest.fixture
def page(
    api: AsyncMock,
    navigator: AsyncMock,
    notifier: AsyncMock,
    profile_store: InMemoryProfileStore,
) -> MyPostsPage:
    return MyPostsPage(api, AsyncMock(spec=AuthRedirector), navigator, notifier, profile_store)


def test_map_my_post_flattens_stats() -> None:
    row = map_my_post(SERVER_POST)

    assert row["content"] == "短摘要"
    assert row["status"] == "published"
    assert (row["viewCount"], row["likeCount"], row["commentCount"]) == (12, 3, 1)
    assert row["createdAt"] == ""


@pytest.mark.asyncio
async def test_on_show_with_profile_loads_posts(page: MyPostsPage, api: AsyncMock) -> None:
    await page.on_show()

    assert page.has_user_info
    api.get_my_posts.assert_awaited_once_with(page=1, page_size=10)
    assert [row["id"] for row in page.posts] == ["p1"]
    assert page.has_more


@pytest.mark.asyncio
async def test_on_show_without_profile_prompts_login(
    page: MyPostsPage,
    api: AsyncMock,
    navigator: AsyncMock,
    notifier: AsyncMock,
    profile_store: InMemoryProfileStore,
) -> None:
    await profile_store.clear()

    await page.on_show()

    api.get_my_posts.assert_not_awaited()
    notifier.confirm.assert_awaited_once()
    navigator.navigate_to.assert_awaited_once_with(PROFILE_PAGE)


@pytest.mark.asyncio
async def test_declined_login_navigates_back(
    page: MyPostsPage,
    navigator: AsyncMock,
    notifier: AsyncMock,
    profile_store: InMemoryProfileStore,
) -> None:
    await profile_store.clear()
    notifier.confirm.return_value = False

    await page.on_show()

    navigator.navigate_back.assert_awaited_once()


@pytest.mark.asyncio
async def test_load_more_appends_next_page(page: MyPostsPage, api: AsyncMock) -> None:
    await page.load_posts()
    api.get_my_posts.return_value = _page_envelope([{**SERVER_POST, "id": "p2"}], has_more=False)

    await page.load_more()

    api.get_my_posts.assert_awaited_with(page=2, page_size=10)
    assert [row["id"] for row in page.posts] == ["p1", "p2"]
    assert not page.has_more


@pytest.mark.asyncio
async def test_auth_failure_goes_to_redirector_without_notice(
    page: MyPostsPage,
    api: AsyncMock,
    notifier: AsyncMock,
    make_failure: Callable[..., CallFailure],
) -> None:
    failure = make_failure(FailureKind.AUTH_REQUIRED, CallRequest(path="/api/posts/my"))
    api.get_my_posts.side_effect = failure

    await page.load_posts()

    page.redirector.handle.assert_awaited_once_with(failure)
    notifier.show_notice.assert_not_awaited()
    assert page.loading is False


@pytest.mark.asyncio
async def test_delete_confirmed_refreshes(
    page: MyPostsPage, api: AsyncMock, notifier: AsyncMock
) -> None:
    api.delete_post.return_value = ApiEnvelope(code=200)

    assert await page.delete_post("p1")

    api.delete_post.assert_awaited_once_with("p1")
    api.get_my_posts.assert_awaited_once_with(page=1, page_size=10)


@pytest.mark.asyncio
async def test_delete_cancelled_does_nothing(
    page: MyPostsPage, api: AsyncMock, notifier: AsyncMock
) -> None:
    notifier.confirm.return_value = False

    assert not await page.delete_post("p1")

    api.delete_post.assert_not_awaited()

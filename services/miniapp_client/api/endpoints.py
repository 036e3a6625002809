"""Backend endpoint declarations.

Each endpoint declares its route, method, the envelope ``code`` that means
success, and the prefix its failures are reported under. The auth endpoints
answer ``code == 0`` on success while every forum resource answers 200; the
difference lives here instead of at call sites.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlencode

from community_core.gateway_models import CallRequest, HttpMethod

SUCCESS_CODE_DEFAULT = 200
SUCCESS_CODE_AUTH = 0


@dataclass(frozen=True)
class Endpoint:
    name: str
    method: HttpMethod
    path_template: str
    error_prefix: str
    success_code: int = SUCCESS_CODE_DEFAULT
    # Failures re-raised as-is instead of domain-prefixed
    passthrough_errors: bool = False

    def build(
        self,
        path_params: dict[str, Any] | None = None,
        query: dict[str, Any] | None = None,
        body: Any = None,
    ) -> CallRequest:
        """Interpolate identifiers, append the query string and wrap in a CallRequest."""
        encoded = {key: quote(str(value), safe="") for key, value in (path_params or {}).items()}
        path = self.path_template.format(**encoded)
        if query:
            path = f"{path}?{urlencode(query)}"
        return CallRequest(path=path, method=self.method, body=body)


GET_POSTS = Endpoint("get_posts", HttpMethod.GET, "/api/posts", "获取社区帖子失败")
GET_HOT_POSTS = Endpoint("get_hot_posts", HttpMethod.GET, "/api/posts", "获取热门推荐失败")
GET_POST_DETAIL = Endpoint(
    "get_post_detail", HttpMethod.GET, "/api/posts/{post_id}", "获取帖子详情失败"
)
GET_POST_COMMENTS = Endpoint(
    "get_post_comments", HttpMethod.GET, "/api/posts/{post_id}/comments", "获取帖子评论失败"
)
ADD_COMMENT = Endpoint(
    "add_comment", HttpMethod.POST, "/api/posts/{post_id}/comments", "添加评论失败"
)
CREATE_POST = Endpoint("create_post", HttpMethod.POST, "/api/posts", "发布帖子失败")
DELETE_POST = Endpoint("delete_post", HttpMethod.DELETE, "/api/posts/{post_id}", "删除帖子失败")
LIKE_POST = Endpoint("like_post", HttpMethod.POST, "/api/posts/{post_id}/like", "点赞帖子失败")
GET_MY_POSTS = Endpoint("get_my_posts", HttpMethod.GET, "/api/posts/my", "获取我的帖子失败")
GET_HOT_TOPICS = Endpoint("get_hot_topics", HttpMethod.GET, "/api/topics/hot", "获取热门话题失败")
UPDATE_USER_PROFILE = Endpoint(
    "update_user_profile", HttpMethod.PUT, "/api/user/profile", "更新用户信息失败"
)
CHECK_USER_REGISTRATION = Endpoint(
    "check_user_registration",
    HttpMethod.GET,
    "/api/auth/check",
    "检查用户注册状态失败",
    success_code=SUCCESS_CODE_AUTH,
    passthrough_errors=True,
)
REGISTER_USER = Endpoint(
    "register_user",
    HttpMethod.POST,
    "/api/auth/register",
    "用户注册失败",
    success_code=SUCCESS_CODE_AUTH,
)

"""Domain call wrappers for the community forum backend.

Each wrapper builds a CallRequest from typed arguments and delegates to the
Gateway Client. AUTH_REQUIRED failures propagate unchanged so pages can
redirect to registration; every other failure is logged and re-raised with
the endpoint's domain prefix.
"""

from __future__ import annotations

from typing import Any

from community_core.forum_models import ApiEnvelope, UploadResult
from community_core.gateway_models import CallRequest
from community_service_libs.error_handling import (
    CallFailure,
    raise_server_error,
    raise_validation_error,
    reraise_with_prefix,
)
from community_service_libs.logging_utils import create_service_logger
from pydantic import ValidationError

from services.miniapp_client.api import endpoints
from services.miniapp_client.api.endpoints import Endpoint
from services.miniapp_client.clients._utils import SERVICE
from services.miniapp_client.protocols import FileUploaderProtocol, GatewayClientProtocol

logger = create_service_logger("miniapp.forum_api")

LIKE_ACTIONS = ("like", "unlike")


class ForumApi:
    """Typed facade over the forum REST endpoints."""

    def __init__(self, gateway: GatewayClientProtocol, uploader: FileUploaderProtocol) -> None:
        self._gateway = gateway
        self._uploader = uploader

    async def _invoke(self, endpoint: Endpoint, request: CallRequest) -> ApiEnvelope:
        try:
            result = await self._gateway.call(request)
        except CallFailure as e:
            if e.is_auth_required:
                logger.warning("Call requires registration", endpoint=endpoint.name)
                raise
            logger.error(
                endpoint.error_prefix,
                endpoint=endpoint.name,
                error_code=e.error_code,
                error=e.message,
            )
            if endpoint.passthrough_errors:
                raise
            reraise_with_prefix(e, endpoint.error_prefix, operation=endpoint.name)

        body = result.body if isinstance(result.body, dict) else {"data": result.body}
        try:
            envelope = ApiEnvelope.model_validate({**body, "success_code": endpoint.success_code})
        except ValidationError as e:
            raise_server_error(
                service=SERVICE,
                operation=endpoint.name,
                message=f"{endpoint.error_prefix}: malformed response envelope",
                status_code=result.status_code,
                request=request,
                cause=e,
            )

        logger.debug("Call result", endpoint=endpoint.name, code=envelope.code, ok=envelope.ok)
        return envelope

    async def get_hot_posts(
        self, page: int = 1, page_size: int = 10, category: str = "all", sort: str = "hot"
    ) -> ApiEnvelope:
        query = {"page": page, "pageSize": page_size, "category": category, "sort": sort}
        return await self._invoke(
            endpoints.GET_HOT_POSTS, endpoints.GET_HOT_POSTS.build(query=query)
        )

    async def get_community_posts(
        self, page: int = 1, page_size: int = 10, category: str = "all", sort: str = "latest"
    ) -> ApiEnvelope:
        query = {"page": page, "pageSize": page_size, "category": category, "sort": sort}
        return await self._invoke(endpoints.GET_POSTS, endpoints.GET_POSTS.build(query=query))

    async def get_post_detail(self, post_id: str) -> ApiEnvelope:
        request = endpoints.GET_POST_DETAIL.build(path_params={"post_id": post_id})
        return await self._invoke(endpoints.GET_POST_DETAIL, request)

    async def get_post_comments(
        self, post_id: str, page: int = 1, page_size: int = 20
    ) -> ApiEnvelope:
        request = endpoints.GET_POST_COMMENTS.build(
            path_params={"post_id": post_id}, query={"page": page, "pageSize": page_size}
        )
        return await self._invoke(endpoints.GET_POST_COMMENTS, request)

    async def create_post(self, post_data: dict[str, Any]) -> ApiEnvelope:
        return await self._invoke(
            endpoints.CREATE_POST, endpoints.CREATE_POST.build(body=post_data)
        )

    async def add_comment(self, post_id: str, comment_data: dict[str, Any]) -> ApiEnvelope:
        request = endpoints.ADD_COMMENT.build(path_params={"post_id": post_id}, body=comment_data)
        return await self._invoke(endpoints.ADD_COMMENT, request)

    async def like_post(self, post_id: str, action: str = "like") -> ApiEnvelope:
        if action not in LIKE_ACTIONS:
            raise_validation_error(
                service=SERVICE,
                operation="like_post",
                field="action",
                message=f"action must be one of {', '.join(LIKE_ACTIONS)}",
                value=action,
            )
        request = endpoints.LIKE_POST.build(
            path_params={"post_id": post_id}, body={"action": action}
        )
        return await self._invoke(endpoints.LIKE_POST, request)

    async def get_hot_topics(self) -> ApiEnvelope:
        return await self._invoke(endpoints.GET_HOT_TOPICS, endpoints.GET_HOT_TOPICS.build())

    async def update_user_profile(self, user_info: dict[str, Any]) -> ApiEnvelope:
        return await self._invoke(
            endpoints.UPDATE_USER_PROFILE, endpoints.UPDATE_USER_PROFILE.build(body=user_info)
        )

    async def get_my_posts(self, page: int = 1, page_size: int = 10) -> ApiEnvelope:
        request = endpoints.GET_MY_POSTS.build(query={"page": page, "pageSize": page_size})
        return await self._invoke(endpoints.GET_MY_POSTS, request)

    async def delete_post(self, post_id: str) -> ApiEnvelope:
        request = endpoints.DELETE_POST.build(path_params={"post_id": post_id})
        return await self._invoke(endpoints.DELETE_POST, request)

    async def check_user_registration(self) -> ApiEnvelope:
        return await self._invoke(
            endpoints.CHECK_USER_REGISTRATION, endpoints.CHECK_USER_REGISTRATION.build()
        )

    async def register_user(self, user_data: dict[str, Any]) -> ApiEnvelope:
        return await self._invoke(
            endpoints.REGISTER_USER, endpoints.REGISTER_USER.build(body=user_data)
        )

    async def upload_file(self, local_path: str, cloud_path: str) -> UploadResult:
        """Upload through the storage collaborator; failures are already prefixed."""
        return await self._uploader.upload(local_path, cloud_path)

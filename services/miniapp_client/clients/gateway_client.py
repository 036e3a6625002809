"""Gateway Client for the cloud hosting backend.

Every backend call goes through ``GatewayClient.call``: one transport attempt
with the service/environment envelope headers, followed by classification of
the outcome. No retries and no shared mutable state beyond the static
configuration captured at construction.
"""

from __future__ import annotations

import json
from typing import Any
from uuid import UUID, uuid4

import httpx
from community_core.gateway_models import CallRequest, CallResult
from community_service_libs.error_handling import (
    raise_auth_required,
    raise_network_error,
    raise_server_error,
)
from community_service_libs.logging_utils import (
    bind_call_context,
    clear_call_context,
    create_service_logger,
)

from services.miniapp_client.clients._utils import SERVICE, build_gateway_headers
from services.miniapp_client.clients.auth_routes import requires_identity
from services.miniapp_client.config import MiniAppClientSettings

logger = create_service_logger("miniapp.gateway")

AUTH_FAILURE_MESSAGE = "User not found, please register first"


class GatewayClient:
    """HTTP gateway implementing GatewayClientProtocol over httpx."""

    def __init__(self, http_client: httpx.AsyncClient, config: MiniAppClientSettings) -> None:
        """Initialize with shared HTTP client and static configuration.

        Args:
            http_client: Shared httpx AsyncClient, base_url set to the gateway
            config: Client settings; env id and service name are read once
        """
        self._client = http_client
        self._env_id = config.CLOUD_ENV_ID
        self._service_name = config.CLOUD_SERVICE_NAME
        self._default_timeout_ms = config.DEFAULT_TIMEOUT_MS
        self._debug = config.DEBUG

    async def call(self, request: CallRequest) -> CallResult:
        """Issue ``request`` once and classify the outcome.

        Args:
            request: The call envelope

        Returns:
            CallResult with the raw status code and parsed JSON body

        Raises:
            CallFailure: AUTH_REQUIRED for 401s on identity-sensitive routes,
                NETWORK for timeouts/transport errors, SERVER for 5xx and
                unparseable bodies
        """
        call_id = uuid4()
        timeout_ms = request.timeout_ms or self._default_timeout_ms
        headers = build_gateway_headers(self._service_name, self._env_id, request.headers)

        bind_call_context(str(call_id), request.route, request.method.value)
        try:
            try:
                response = await self._client.request(
                    request.method.value,
                    request.path,
                    headers=headers,
                    json=request.body,
                    timeout=timeout_ms / 1000,
                )
            except httpx.TimeoutException as e:
                logger.error("Gateway call timed out", timeout_ms=timeout_ms, error=str(e))
                raise_network_error(
                    service=SERVICE,
                    operation="gateway_call",
                    message=f"Request timed out after {timeout_ms}ms",
                    correlation_id=call_id,
                    request=request,
                    cause=e,
                    timeout_ms=timeout_ms,
                )
            except httpx.RequestError as e:
                logger.error("Gateway transport error", error=str(e))
                raise_network_error(
                    service=SERVICE,
                    operation="gateway_call",
                    message=f"Transport error: {e}",
                    correlation_id=call_id,
                    request=request,
                    cause=e,
                )
            except httpx.HTTPError as e:
                logger.error("Gateway client error", error=str(e))
                raise_server_error(
                    service=SERVICE,
                    operation="gateway_call",
                    message=f"Gateway error: {e}",
                    correlation_id=call_id,
                    request=request,
                    cause=e,
                )
            except (httpx.InvalidURL, RuntimeError, TypeError) as e:
                # Closed client, bad URL or a body that cannot be JSON encoded
                logger.error(
                    "Gateway request could not be sent",
                    error_type=type(e).__name__,
                    error=str(e),
                )
                raise_server_error(
                    service=SERVICE,
                    operation="gateway_call",
                    message=f"Request could not be sent: {e}",
                    correlation_id=call_id,
                    request=request,
                    cause=e,
                )

            return self._classify(request, response, call_id)
        finally:
            clear_call_context()

    def _classify(
        self, request: CallRequest, response: httpx.Response, call_id: UUID
    ) -> CallResult:
        status_code = response.status_code
        identity_required = requires_identity(request.route)

        logger.info("Gateway call completed", status_code=status_code)

        if identity_required and status_code == 401:
            logger.warning("401 on identity-sensitive route, registration required")
            raise_auth_required(
                service=SERVICE,
                operation="gateway_call",
                message=AUTH_FAILURE_MESSAGE,
                correlation_id=call_id,
                request=request,
            )

        try:
            body = _parse_body(response)
        except ValueError as e:
            logger.error("Gateway response is not valid JSON", status_code=status_code)
            raise_server_error(
                service=SERVICE,
                operation="gateway_call",
                message="Malformed response body",
                correlation_id=call_id,
                status_code=status_code,
                request=request,
                cause=e,
            )

        if self._debug:
            logger.debug("Gateway response body", body=body)

        if identity_required and isinstance(body, dict) and body.get("code") == 401:
            logger.warning("Body code 401 on identity-sensitive route, registration required")
            raise_auth_required(
                service=SERVICE,
                operation="gateway_call",
                message=AUTH_FAILURE_MESSAGE,
                correlation_id=call_id,
                request=request,
                body_code=401,
                http_status=status_code,
            )

        if status_code >= 500:
            server_message = body.get("message") if isinstance(body, dict) else None
            raise_server_error(
                service=SERVICE,
                operation="gateway_call",
                message=server_message or f"Server error ({status_code})",
                correlation_id=call_id,
                status_code=status_code,
                request=request,
            )

        return CallResult(status_code=status_code, body=body)


def _parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValueError(str(e)) from e

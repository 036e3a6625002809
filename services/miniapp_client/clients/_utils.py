"""Shared utilities for the Mini Program Client HTTP clients."""

from __future__ import annotations

SERVICE = "miniapp_client"

# Keys the gateway always owns; caller headers never override them
OWNED_HEADERS = ("Content-Type", "X-WX-SERVICE", "X-WX-ENV")


def build_gateway_headers(
    service_name: str, env_id: str, caller_headers: dict[str, str] | None = None
) -> dict[str, str]:
    """Merge caller headers under the gateway-owned envelope headers.

    Args:
        service_name: Cloud hosting service name (X-WX-SERVICE)
        env_id: Cloud hosting environment identifier (X-WX-ENV)
        caller_headers: Headers supplied on the CallRequest

    Returns:
        Headers dict; owned keys win regardless of caller casing
    """
    owned_lower = {key.lower() for key in OWNED_HEADERS}
    headers = {
        key: value
        for key, value in (caller_headers or {}).items()
        if key.lower() not in owned_lower
    }
    headers.update(
        {
            "Content-Type": "application/json",
            "X-WX-SERVICE": service_name,
            "X-WX-ENV": env_id,
        }
    )
    return headers

"""Routes whose 401 responses mean "register first".

Only these routes elevate a 401 (status or body code) to AUTH_REQUIRED;
anywhere else a 401 is ordinary data for the caller. Matching is by whole
route against the templates below, never by substring, so an unrelated path
that merely contains "/comments" is not caught.
"""

from __future__ import annotations

import re

AUTH_REQUIRED_ROUTES: tuple[str, ...] = (
    "/api/auth/check",
    "/api/auth/register",
    "/api/user/profile",
    "/api/posts",
    "/api/posts/my",
    "/api/posts/{post_id}",
    "/api/posts/{post_id}/comments",
    "/api/posts/{post_id}/like",
)

_PLACEHOLDER = re.compile(r"\{[a-z_]+\}")


def _compile(template: str) -> re.Pattern[str]:
    parts = _PLACEHOLDER.split(template)
    return re.compile("[^/]+".join(re.escape(part) for part in parts))


_ROUTE_PATTERNS = tuple(_compile(template) for template in AUTH_REQUIRED_ROUTES)


def requires_identity(route: str) -> bool:
    """Return True if ``route`` (path without query) is identity-sensitive."""
    return any(pattern.fullmatch(route) for pattern in _ROUTE_PATTERNS)

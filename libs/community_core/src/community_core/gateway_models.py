"""Gateway call envelope models.

A CallRequest identifies one logical backend operation and is immutable once
issued; the Gateway Client turns it into a single transport attempt and
produces either a CallResult or a CallFailure.
"""

from __future__ import annotations

from enum import Enum
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class CallRequest(BaseModel):
    """Uniform envelope for one outbound call.

    ``path`` may carry a query string; route matching only looks at the part
    before ``?``. ``timeout_ms`` of None means the client default applies.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    method: HttpMethod = HttpMethod.GET
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any | None = None
    timeout_ms: int | None = Field(default=None, gt=0)

    @field_validator("path")
    @classmethod
    def _path_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("path must start with '/'")
        return value

    @property
    def route(self) -> str:
        """Path without query string or trailing slash (root stays '/')."""
        route = urlsplit(self.path).path
        if len(route) > 1:
            route = route.rstrip("/")
        return route or "/"


class CallResult(BaseModel):
    """Successful transport outcome: raw status plus parsed JSON body."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    body: Any | None = None

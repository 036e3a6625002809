"""Community forum models.

Backend responses share the ``{code, data?, message?}`` envelope. The success
code is not uniform across endpoints (200 for forum resources, 0 for the auth
endpoints), so each envelope records the code its endpoint declared.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ApiEnvelope(BaseModel):
    """Parsed backend response envelope."""

    model_config = ConfigDict(extra="allow")

    code: int | None = None
    data: Any | None = None
    message: str | None = None
    # Registration errors use "msg" instead of "message"
    msg: str | None = None
    success_code: int = Field(default=200, exclude=True)

    @property
    def ok(self) -> bool:
        return self.code == self.success_code

    def error_message(self, fallback: str) -> str:
        return self.message or self.msg or fallback


class UserProfile(BaseModel):
    """Registered user as mirrored into persisted client storage.

    Serialized with the storage field names the mini program has always
    used (nickName, avatarUrl, isVerified).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: str = Field(alias="nickName")
    avatar_reference: str = Field(default="", alias="avatarUrl")
    level: int | None = None
    verified: bool = Field(default=False, alias="isVerified")

    @classmethod
    def from_registration(cls, data: dict[str, Any]) -> UserProfile:
        """Build from the /api/auth/register response payload."""
        return cls(
            id=str(data["id"]),
            display_name=data.get("nickname", ""),
            avatar_reference=data.get("avatar") or "",
            level=data.get("level"),
            verified=bool(data.get("isVerified", False)),
        )

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class UploadResult(BaseModel):
    """Outcome of a file upload: the content reference (cloud:// file id)."""

    file_id: str
    cloud_path: str | None = None

"""Persisted UserProfile storage.

One process-wide key (``userInfo``) holding the current profile, or absent
if the user never registered. Writes are full overwrites; no versioning.
"""

from __future__ import annotations

import json
from pathlib import Path

import aiofiles
import aiofiles.os
from community_core.forum_models import UserProfile
from community_service_libs.logging_utils import create_service_logger
from pydantic import ValidationError

from services.miniapp_client.protocols import ProfileStoreProtocol

logger = create_service_logger("miniapp.profile_store")

STORAGE_KEY = "userInfo"


class JsonFileProfileStore(ProfileStoreProtocol):
    """File-backed profile store."""

    def __init__(self, path: Path) -> None:
        self.path = path

    async def load(self) -> UserProfile | None:
        if not await aiofiles.os.path.isfile(str(self.path)):
            return None
        try:
            async with aiofiles.open(self.path, encoding="utf-8") as f:
                raw = json.loads(await f.read())
            stored = raw.get(STORAGE_KEY) if isinstance(raw, dict) else None
            if stored is None:
                return None
            return UserProfile.model_validate(stored)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            # Unreadable storage behaves like "never registered"
            logger.error("Failed to load stored profile", path=str(self.path), error=str(e))
            return None

    async def save(self, profile: UserProfile) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps({STORAGE_KEY: profile.to_storage()}, ensure_ascii=False)
        async with aiofiles.open(self.path, "w", encoding="utf-8") as f:
            await f.write(payload)
        logger.info("Stored user profile", user_id=profile.id)

    async def clear(self) -> None:
        if await aiofiles.os.path.isfile(str(self.path)):
            await aiofiles.os.remove(str(self.path))
            logger.info("Cleared stored user profile")


class InMemoryProfileStore(ProfileStoreProtocol):
    """Memory-only profile store for tests and headless runs."""

    def __init__(self, profile: UserProfile | None = None) -> None:
        self._profile = profile

    async def load(self) -> UserProfile | None:
        return self._profile

    async def save(self, profile: UserProfile) -> None:
        self._profile = profile

    async def clear(self) -> None:
        self._profile = None

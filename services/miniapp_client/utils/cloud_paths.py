"""Cloud storage path helpers and content reference checks."""

from __future__ import annotations

import random
import string
import time
from datetime import datetime

CONTENT_REFERENCE_PREFIX = "cloud://"
IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp", "bmp"})
DEFAULT_IMAGE_EXTENSION = "jpg"

_BASE36 = string.digits + string.ascii_lowercase


def is_content_reference(source: str) -> bool:
    return source.startswith(CONTENT_REFERENCE_PREFIX)


def is_remote_url(source: str) -> bool:
    return source.startswith("http")


def needs_upload(source: str) -> bool:
    """True for local/temporary paths that still have to be uploaded."""
    return not (is_content_reference(source) or is_remote_url(source))


def image_extension(file_path: str) -> str:
    """Known image extension of ``file_path``, lower-cased; ``jpg`` otherwise."""
    _, dot, ext = file_path.rpartition(".")
    ext = ext.lower()
    if dot and "/" not in ext and ext in IMAGE_EXTENSIONS:
        return ext
    return DEFAULT_IMAGE_EXTENSION


def avatar_cloud_path(now_ms: int | None = None) -> str:
    """``avatars/<ms>_<9 random base36 chars>.jpg``."""
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"avatars/{timestamp}_{suffix}.jpg"


def post_image_cloud_path(file_path: str, index: int, now: datetime | None = None) -> str:
    """``posts/<YYYYMMDD>/<ms>_<index>.<ext>``."""
    moment = now or datetime.now()
    timestamp = int(moment.timestamp() * 1000)
    return f"posts/{moment:%Y%m%d}/{timestamp}_{index}.{image_extension(file_path)}"

"""In-memory photo cache."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

DEFAULT_MAX_PHOTOS = 50


@dataclass
class StoredPhoto:
    """A cached photo with its metadata."""

    request_id: str
    buffer: bytes
    timestamp: datetime
    user_id: str
    mime_type: str
    filename: str  # basename only, e.g. "photo_...jpg"
    size: int

    def __post_init__(self) -> None:
        # Naive camera timestamps are UTC, matching the snapshot filename
        if self.timestamp.tzinfo is None:
            self.timestamp = self.timestamp.replace(tzinfo=timezone.utc)

    @property
    def timestamp_ms(self) -> int:
        return int(self.timestamp.timestamp() * 1000)

    def to_summary(self) -> dict[str, Any]:
        """Metadata returned by the photo list API."""
        return {
            "requestId": self.request_id,
            "timestamp": self.timestamp_ms,
            "filename": self.filename,
            "size": self.size,
            "mimeType": self.mime_type,
        }


class PhotoStore:
    """Per-user photo lists, newest first, bounded to ``max_per_user``."""

    def __init__(self, max_per_user: int = DEFAULT_MAX_PHOTOS) -> None:
        if max_per_user < 1:
            raise ValueError("max_per_user must be >= 1")
        self.max_per_user = max_per_user
        self._photos: dict[str, list[StoredPhoto]] = {}
        self._latest_timestamp: dict[str, int] = {}

    def add(self, photo: StoredPhoto) -> None:
        photos = self._photos.setdefault(photo.user_id, [])
        photos.insert(0, photo)
        del photos[self.max_per_user :]
        self._latest_timestamp[photo.user_id] = photo.timestamp_ms

    def list(self, user_id: str) -> list[StoredPhoto]:
        return list(self._photos.get(user_id, []))

    def latest(self, user_id: str) -> StoredPhoto | None:
        photos = self._photos.get(user_id)
        return photos[0] if photos else None

    def find(self, user_id: str, request_id: str) -> StoredPhoto | None:
        for photo in self._photos.get(user_id, []):
            if photo.request_id == request_id:
                return photo
        return None

    def latest_timestamp(self, user_id: str) -> int | None:
        """Epoch milliseconds of the most recently cached photo."""
        return self._latest_timestamp.get(user_id)

    def count(self, user_id: str) -> int:
        return len(self._photos.get(user_id, []))

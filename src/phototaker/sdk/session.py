"""Session interface expected from the glasses platform.

The platform owns the real session: it pairs with the glasses, relays button
presses and performs camera captures. Apps only see the small surface below.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from phototaker.sdk.events import EventManager


@dataclass
class PhotoData:
    """A photo delivered by the session camera."""

    buffer: bytes
    mime_type: str
    request_id: str
    timestamp: datetime
    size: int
    filename: str = ""


class CameraModule(ABC):
    """Camera access for a session."""

    @abstractmethod
    async def request_photo(self) -> PhotoData:
        """Capture a photo.

        Raises:
            CaptureError: If the glasses could not take the photo.
        """


class LayoutManager(ABC):
    """Display surface of the glasses."""

    @abstractmethod
    def show_text_wall(self, text: str, duration_ms: int | None = None) -> None:
        """Show a full-screen text message."""


class AppSession(ABC):
    """A live connection between the platform and one user's glasses."""

    def __init__(self, session_id: str, user_id: str) -> None:
        self.session_id = session_id
        self.user_id = user_id
        self.events = EventManager(session_id)

    @property
    @abstractmethod
    def camera(self) -> CameraModule:
        ...

    @property
    @abstractmethod
    def layouts(self) -> LayoutManager:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(session_id={self.session_id!r}, user_id={self.user_id!r})"

"""Mock session for development and tests."""

from __future__ import annotations

import asyncio
import io
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable

from aiohttp import web

from phototaker.common.logging import get_logger
from phototaker.errors import CaptureError
from phototaker.sdk.auth import get_auth_user_id
from phototaker.sdk.events import ButtonPress, PressType
from phototaker.sdk.session import AppSession, CameraModule, LayoutManager, PhotoData

# Callable returning the server's live sessions
MOCK_SESSIONS = web.AppKey("mock_sessions", Callable[[], Iterable[AppSession]])


class MockCamera(CameraModule):
    """Camera that renders a solid-color JPEG for every request."""

    def __init__(
        self,
        size: tuple[int, int] = (640, 480),
        quality: int = 85,
        capture_delay: float = 0.0,
    ) -> None:
        self.size = size
        self.quality = quality
        self.capture_delay = capture_delay
        self.fail_next = 0
        self.capture_count = 0

    async def request_photo(self) -> PhotoData:
        if self.capture_delay:
            await asyncio.sleep(self.capture_delay)

        if self.fail_next > 0:
            self.fail_next -= 1
            raise CaptureError("Mock camera failure")

        self.capture_count += 1

        from PIL import Image

        # Shift the color per frame so consecutive photos differ
        shade = (self.capture_count * 37) % 256
        img = Image.new("RGB", self.size, color=(73, 109, shade))
        buffer = io.BytesIO()
        img.save(buffer, format="JPEG", quality=self.quality)
        data = buffer.getvalue()

        return PhotoData(
            buffer=data,
            mime_type="image/jpeg",
            request_id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc),
            size=len(data),
            filename="photo.jpg",
        )


class MockLayouts(LayoutManager):
    """Layout manager that records what would have been displayed."""

    def __init__(self) -> None:
        self.text_walls: list[tuple[str, int | None]] = []

    def show_text_wall(self, text: str, duration_ms: int | None = None) -> None:
        self.text_walls.append((text, duration_ms))


class MockAppSession(AppSession):
    """In-process session with a mock camera and display."""

    def __init__(
        self,
        user_id: str,
        session_id: str | None = None,
        camera: MockCamera | None = None,
    ) -> None:
        super().__init__(session_id or f"mock-{uuid.uuid4().hex[:8]}", user_id)
        self._camera = camera or MockCamera()
        self._layouts = MockLayouts()
        self.logger = get_logger("sdk.mock", session_id=self.session_id)

    @property
    def camera(self) -> MockCamera:
        return self._camera

    @property
    def layouts(self) -> MockLayouts:
        return self._layouts

    async def press_button(
        self,
        press_type: PressType = "short",
        button_id: str = "camera",
    ) -> None:
        """Simulate a button press on the glasses."""
        self.logger.debug("mock_button_press", press_type=press_type)
        await self.events.emit_button_press(ButtonPress(button_id=button_id, press_type=press_type))


async def handle_mock_button(request: web.Request) -> web.Response:
    """Press the button on the caller's mock glasses (mock mode only).

    ``POST /mock/button?press=short|long``
    """
    user_id = get_auth_user_id(request)
    if not user_id:
        return web.json_response({"error": "Not authenticated"}, status=401)

    press_type = request.query.get("press", "short")
    if press_type not in ("short", "long"):
        return web.json_response({"error": f"Unknown press type: {press_type}"}, status=400)

    sessions = [
        s for s in request.app[MOCK_SESSIONS]()
        if isinstance(s, MockAppSession) and s.user_id == user_id
    ]
    if not sessions:
        return web.json_response({"error": "No mock session for user"}, status=404)

    for session in sessions:
        await session.press_button(press_type)
    return web.json_response({"success": True, "pressType": press_type, "sessions": len(sessions)})

"""Glasses app SDK surface used by the Photo Taker app.

The platform delivers an ``AppSession`` per connected user; apps subclass
``AppServer`` and react in ``on_session``:

    class MyApp(AppServer):
        async def on_session(self, session):
            async def on_press(press):
                photo = await session.camera.request_photo()
                ...
            session.events.on_button_press(on_press)

        async def on_stop(self, session):
            ...

For development, ``MockAppSession`` stands in for real glasses.
"""

from phototaker.sdk.auth import get_auth_user_id
from phototaker.sdk.events import ButtonPress, EventManager
from phototaker.sdk.mock import MockAppSession, MockCamera
from phototaker.sdk.server import AppServer, ServerState
from phototaker.sdk.session import AppSession, CameraModule, LayoutManager, PhotoData

__all__ = [
    "AppServer",
    "AppSession",
    "ButtonPress",
    "CameraModule",
    "EventManager",
    "LayoutManager",
    "MockAppSession",
    "MockCamera",
    "PhotoData",
    "ServerState",
    "get_auth_user_id",
]

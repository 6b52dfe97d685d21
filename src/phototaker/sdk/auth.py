"""Authenticated-user resolution for webview and API requests."""

from __future__ import annotations

from aiohttp import web

from phototaker.config import AuthConfig

AUTH_USER_KEY = "auth_user_id"


def create_auth_middleware(auth: AuthConfig, mock_mode: bool = False):
    """Build middleware that stores the caller's user id on the request.

    The platform's proxy injects the user id in ``auth.user_header``. In mock
    mode ``auth.dev_user_id`` stands in when the header is absent. Requests
    without a user id pass through with ``None``; handlers decide whether to
    reject them.
    """

    @web.middleware
    async def auth_middleware(request: web.Request, handler):
        user_id = request.headers.get(auth.user_header, "").strip() or None
        if user_id is None and mock_mode:
            user_id = auth.dev_user_id
        request[AUTH_USER_KEY] = user_id
        return await handler(request)

    return auth_middleware


def get_auth_user_id(request: web.Request) -> str | None:
    """Return the authenticated user id, or None for anonymous requests."""
    return request.get(AUTH_USER_KEY)

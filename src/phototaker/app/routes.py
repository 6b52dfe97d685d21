"""Webview and photo API routes."""

from __future__ import annotations

from aiohttp import web
from jinja2 import Environment, PackageLoader, select_autoescape

from phototaker.app.photos import PhotoStore
from phototaker.sdk.auth import get_auth_user_id

PHOTO_STORE = web.AppKey("photo_store", PhotoStore)
TEMPLATES = web.AppKey("templates", Environment)

NOT_AUTHENTICATED_HTML = (
    "<html><head><title>Not Authenticated</title></head>"
    "<body><h1>Please open from MentraOS app</h1></body></html>"
)


def create_template_env() -> Environment:
    return Environment(
        loader=PackageLoader("phototaker", "templates"),
        autoescape=select_autoescape(["html", "j2"]),
    )


def _not_authenticated() -> web.Response:
    return web.json_response({"error": "Not authenticated"}, status=401)


async def handle_latest_photo(request: web.Request) -> web.Response:
    """Metadata of the user's most recent photo."""
    user_id = get_auth_user_id(request)
    if not user_id:
        return _not_authenticated()

    photo = request.app[PHOTO_STORE].latest(user_id)
    if photo is None:
        return web.json_response({"error": "No photo available"}, status=404)

    return web.json_response({
        "requestId": photo.request_id,
        "timestamp": photo.timestamp_ms,
        "hasPhoto": True,
    })


async def handle_photos(request: web.Request) -> web.Response:
    """Metadata of all cached photos, newest first."""
    user_id = get_auth_user_id(request)
    if not user_id:
        return _not_authenticated()

    photos = request.app[PHOTO_STORE].list(user_id)
    return web.json_response([p.to_summary() for p in photos])


async def handle_photo(request: web.Request) -> web.Response:
    """Raw image bytes of one cached photo."""
    user_id = get_auth_user_id(request)
    if not user_id:
        return _not_authenticated()

    request_id = request.match_info["request_id"]
    photo = request.app[PHOTO_STORE].find(user_id, request_id)
    if photo is None:
        return web.json_response({"error": "Photo not found"}, status=404)

    return web.Response(
        body=photo.buffer,
        content_type=photo.mime_type,
        headers={"Cache-Control": "no-cache"},
    )


async def handle_webview(request: web.Request) -> web.Response:
    """Photo viewer page."""
    user_id = get_auth_user_id(request)
    if not user_id:
        return web.Response(text=NOT_AUTHENTICATED_HTML, status=401, content_type="text/html")

    template = request.app[TEMPLATES].get_template("photo_viewer.html.j2")
    html = template.render(poll_interval_ms=3000)
    return web.Response(text=html, content_type="text/html")


async def handle_root(request: web.Request) -> web.Response:
    raise web.HTTPFound("/webview")


def setup_routes(
    app: web.Application,
    store: PhotoStore,
    templates: Environment | None = None,
) -> None:
    """Attach the webview and API routes to an aiohttp application."""
    app[PHOTO_STORE] = store
    app[TEMPLATES] = templates or create_template_env()

    app.router.add_get("/api/latest-photo", handle_latest_photo)
    app.router.add_get("/api/photos", handle_photos)
    app.router.add_get("/api/photo/{request_id}", handle_photo)
    app.router.add_get("/webview", handle_webview)
    app.router.add_get("/", handle_root)

"""Photo Taker app: button-driven capture, auto-capture and storage."""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from pathlib import Path

from phototaker.app.cloud import FirebaseUploader
from phototaker.app.photos import PhotoStore, StoredPhoto
from phototaker.app.routes import setup_routes
from phototaker.app.snapshots import SnapshotWriter, build_filename
from phototaker.common.health import check_directory_writable
from phototaker.config import Config
from phototaker.errors import StorageError, UploadError
from phototaker.sdk.events import ButtonPress
from phototaker.sdk.server import AppServer
from phototaker.sdk.session import AppSession, PhotoData


class PhotoTakerApp(AppServer):
    """Takes photos on button presses and serves them to the webview.

    - Short press: show a notice, take one photo.
    - Long press: toggle auto-capture for the user.

    Every photo is written to the snapshots directory, cached in memory
    (bounded per user) and uploaded when a storage bucket is configured.
    """

    def __init__(
        self,
        config: Config | None = None,
        mock_mode: bool = False,
        uploader: FirebaseUploader | None = None,
    ) -> None:
        super().__init__(config, mock_mode)

        capture = self.config.capture
        self.store = PhotoStore(capture.max_photos_per_user)
        self.snapshots = SnapshotWriter(self.config.snapshots_path)
        self.uploader = uploader or FirebaseUploader(
            self.config.storage.bucket,
            prefix=self.config.storage.upload_prefix,
        )

        # Per-user capture state
        self._streaming: dict[str, bool] = {}
        self._next_photo_time: dict[str, float] = {}
        self._user_sessions: dict[str, AppSession] = {}
        # Per-session auto-capture loops
        self._capture_tasks: dict[str, asyncio.Task] = {}

        self.snapshots.ensure_dir()
        self.health.add_check(
            "snapshots_dir",
            lambda: check_directory_writable(self.snapshots.directory),
        )
        setup_routes(self.web_app, self.store)

    def is_streaming(self, user_id: str) -> bool:
        return self._streaming.get(user_id, False)

    async def on_session(self, session: AppSession) -> None:
        user_id = session.user_id
        self.logger.info("session_started", session_id=session.session_id, user_id=user_id)

        self._streaming[user_id] = False
        self._next_photo_time[user_id] = time.monotonic()
        self._user_sessions[user_id] = session

        async def on_button_press(press: ButtonPress) -> None:
            await self._handle_button_press(session, press)

        session.events.on_button_press(on_button_press)

        self._capture_tasks[session.session_id] = asyncio.create_task(
            self._auto_capture_loop(session),
            name=f"auto-capture-{session.session_id}",
        )

    async def on_stop(self, session: AppSession) -> None:
        user_id = session.user_id
        self.logger.info("session_stopped", session_id=session.session_id, user_id=user_id)

        task = self._capture_tasks.pop(session.session_id, None)
        if task:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        # A newer session for the same user keeps its state
        if self._user_sessions.get(user_id) is session:
            self._streaming.pop(user_id, None)
            self._next_photo_time.pop(user_id, None)
            self._user_sessions.pop(user_id, None)

    async def _handle_button_press(self, session: AppSession, press: ButtonPress) -> None:
        user_id = session.user_id
        self.logger.info("button_pressed", button_id=press.button_id, press_type=press.press_type)

        if press.press_type == "long":
            self._streaming[user_id] = not self.is_streaming(user_id)
            self.logger.info("auto_capture_toggled", user_id=user_id, streaming=self._streaming[user_id])
            return

        capture = self.config.capture
        session.layouts.show_text_wall(capture.text_wall_message, duration_ms=capture.text_wall_duration_ms)

        try:
            photo = await session.camera.request_photo()
        except Exception as e:
            self.logger.error("photo_capture_failed", user_id=user_id, error=str(e))
            return

        self.logger.info("photo_taken", user_id=user_id, timestamp=photo.timestamp.isoformat())
        await self.cache_photo(photo, user_id, session)

    async def _auto_capture_loop(self, session: AppSession) -> None:
        interval = self.config.capture.auto_capture_interval_seconds
        while True:
            await asyncio.sleep(interval)
            await self._auto_capture_tick(session)

    async def _auto_capture_tick(self, session: AppSession) -> None:
        user_id = session.user_id
        if not self.is_streaming(user_id):
            return
        if time.monotonic() <= self._next_photo_time.get(user_id, 0.0):
            return

        # Hold off further ticks while capturing; stays in place after a failure
        self._next_photo_time[user_id] = time.monotonic() + self.config.capture.auto_capture_guard_seconds
        try:
            self.logger.debug("auto_capture_requesting", user_id=user_id)
            photo = await session.camera.request_photo()
            self.logger.info("auto_capture_photo_taken", user_id=user_id, timestamp=photo.timestamp.isoformat())
            self._next_photo_time[user_id] = time.monotonic()
            await self.cache_photo(photo, user_id, session)
        except Exception as e:
            self.logger.error("auto_capture_failed", user_id=user_id, error=str(e))

    def _to_stored(self, photo: PhotoData, user_id: str, filename: str) -> StoredPhoto:
        return StoredPhoto(
            request_id=photo.request_id,
            buffer=photo.buffer,
            timestamp=photo.timestamp or datetime.now(timezone.utc),
            user_id=user_id,
            mime_type=photo.mime_type,
            filename=filename,
            size=photo.size,
        )

    async def cache_photo(
        self,
        photo: PhotoData,
        user_id: str,
        session: AppSession | None = None,
    ) -> StoredPhoto:
        """Save a photo to disk, cache it and upload it.

        A failed disk write is logged and the photo is still cached. When a
        session is given and the write succeeded, one follow-up photo is taken
        and stored with save_photo_only before this photo is cached, so the
        photo passed in ends up as the user's latest.
        """
        filename = build_filename(photo)
        path: Path | None = None
        try:
            path = await self.snapshots.write(filename, photo.buffer)
            self.logger.info("photo_saved", path=str(path))
        except StorageError as e:
            self.logger.error("photo_save_failed", filename=filename, error=str(e))

        if path is not None and session is not None and self.config.capture.follow_up_capture:
            await self._take_follow_up(session, user_id)

        stored = self._to_stored(photo, user_id, filename)
        self.store.add(stored)
        self.logger.info("photo_cached", user_id=user_id, request_id=stored.request_id)
        await self._upload(stored, path)

        return stored

    async def save_photo_only(self, photo: PhotoData, user_id: str) -> StoredPhoto | None:
        """Save, cache and upload a photo without triggering another capture.

        Returns None (and caches nothing) when the disk write fails.
        """
        filename = build_filename(photo)
        try:
            path = await self.snapshots.write(filename, photo.buffer)
        except StorageError as e:
            self.logger.error("follow_up_save_failed", filename=filename, error=str(e))
            return None

        self.logger.info("follow_up_photo_saved", path=str(path))
        stored = self._to_stored(photo, user_id, filename)
        self.store.add(stored)
        self.logger.info("follow_up_photo_cached", user_id=user_id, request_id=stored.request_id)
        await self._upload(stored, path)
        return stored

    async def _take_follow_up(self, session: AppSession, user_id: str) -> None:
        try:
            self.logger.info("follow_up_capture", user_id=user_id)
            photo = await session.camera.request_photo()
        except Exception as e:
            self.logger.error("follow_up_capture_failed", user_id=user_id, error=str(e))
            return
        await self.save_photo_only(photo, user_id)

    async def _upload(self, photo: StoredPhoto, path: Path | None) -> str | None:
        if not self.uploader.enabled:
            return None
        if path is None:
            self.logger.warning("upload_skipped_no_file", filename=photo.filename)
            return None
        try:
            return await self.uploader.upload(photo, path)
        except UploadError as e:
            self.logger.error("photo_upload_failed", filename=photo.filename, error=str(e))
            return None

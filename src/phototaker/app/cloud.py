"""Optional upload of snapshots to Firebase Storage."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from phototaker.app.photos import StoredPhoto
from phototaker.common.logging import get_logger
from phototaker.errors import UploadError


class FirebaseUploader:
    """Uploads snapshot files to ``<prefix>/<userId>/images/<filename>``.

    Disabled when no bucket is configured. Credentials come from the
    environment (Application Default Credentials).
    """

    def __init__(
        self,
        bucket_name: str | None,
        prefix: str = "sessions",
        bucket: Any | None = None,
    ) -> None:
        """Initialize the uploader.

        Args:
            bucket_name: Storage bucket, e.g. "my-project.appspot.com".
            prefix: Top-level folder for uploads.
            bucket: Pre-built bucket object (skips firebase initialization).
        """
        self.bucket_name = bucket_name
        self.prefix = prefix.strip("/")
        self._bucket = bucket
        self.logger = get_logger("firebase_uploader", bucket=bucket_name)

    @property
    def enabled(self) -> bool:
        return self._bucket is not None or bool(self.bucket_name)

    def destination_for(self, photo: StoredPhoto) -> str:
        return f"{self.prefix}/{photo.user_id}/images/{photo.filename}"

    def _get_bucket(self) -> Any:
        if self._bucket is not None:
            return self._bucket

        import firebase_admin
        from firebase_admin import credentials, storage

        try:
            app = firebase_admin.get_app()
        except ValueError:
            app = firebase_admin.initialize_app(
                credentials.ApplicationDefault(),
                {"storageBucket": self.bucket_name},
            )
            self.logger.info("firebase_initialized")

        self._bucket = storage.bucket(self.bucket_name, app=app)
        return self._bucket

    def _upload_blocking(self, photo: StoredPhoto, path: Path, destination: str) -> None:
        blob = self._get_bucket().blob(destination)
        blob.metadata = {
            "userId": photo.user_id,
            "requestId": photo.request_id,
            "timestamp": photo.timestamp.isoformat(),
        }
        blob.upload_from_filename(str(path), content_type=photo.mime_type)

    async def upload(self, photo: StoredPhoto, path: Path) -> str:
        """Upload one snapshot file.

        Returns:
            Destination object name.

        Raises:
            UploadError: If the uploader is disabled or the upload failed.
        """
        destination = self.destination_for(photo)
        if not self.enabled:
            raise UploadError("No storage bucket configured", destination=destination)

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._upload_blocking, photo, path, destination)
        except Exception as e:
            raise UploadError(f"Upload of {photo.filename} failed: {e}", destination=destination) from e

        self.logger.info("photo_uploaded", filename=photo.filename, destination=destination)
        return destination

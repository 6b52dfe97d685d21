"""Local snapshot files."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from pathlib import Path

from phototaker.common.logging import get_logger
from phototaker.errors import StorageError
from phototaker.sdk.session import PhotoData

MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
    "image/bmp": ".bmp",
    "image/tiff": ".tiff",
}


def ext_from_mime(mime: str | None) -> str:
    """File extension for an image MIME type, ``.bin`` when unknown."""
    if not mime:
        return ".bin"
    return MIME_EXTENSIONS.get(mime, ".bin")


def safe_timestamp(dt: datetime) -> str:
    """Filename-safe UTC ISO timestamp (no colons), e.g. 2025-01-02T03-04-05.678Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    iso = dt.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return iso.replace("+00:00", "Z").replace(":", "-")


def build_filename(photo: PhotoData) -> str:
    """Snapshot basename: ``photo_<timestamp>_<requestId><ext>``."""
    ts = safe_timestamp(photo.timestamp or datetime.now(timezone.utc))
    return f"photo_{ts}_{photo.request_id or 'unknown'}{ext_from_mime(photo.mime_type)}"


class SnapshotWriter:
    """Writes photo bytes under the snapshots directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self.logger = get_logger("snapshots")

    def ensure_dir(self) -> bool:
        """Create the snapshots directory. Failures are logged, not raised."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.warning(
                "snapshots_dir_unavailable",
                path=str(self.directory),
                error=str(e),
            )
            return False

        self.logger.info("snapshots_dir_ready", path=str(self.directory))
        return True

    def path_for(self, filename: str) -> Path:
        return self.directory / filename

    async def write(self, filename: str, data: bytes) -> Path:
        """Write a snapshot file.

        Raises:
            StorageError: If the file could not be written.
        """
        path = self.path_for(filename)
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, path.write_bytes, data)
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}", path=str(path)) from e
        return path

    def list_files(self, limit: int | None = None) -> list[Path]:
        """Snapshot files, newest first."""
        if not self.directory.is_dir():
            return []
        files = sorted(
            (p for p in self.directory.glob("photo_*") if p.is_file()),
            key=lambda p: p.name,
            reverse=True,
        )
        return files[:limit] if limit else files

"""Exception types for the Photo Taker app."""

from __future__ import annotations


class PhotoTakerError(Exception):
    """Base class for all Photo Taker errors."""


class ConfigError(PhotoTakerError):
    """Configuration is missing or invalid."""


class CaptureError(PhotoTakerError):
    """The session camera failed to deliver a photo."""


class StorageError(PhotoTakerError):
    """A snapshot could not be written to local storage."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class UploadError(PhotoTakerError):
    """A snapshot could not be uploaded to cloud storage."""

    def __init__(self, message: str, destination: str | None = None) -> None:
        super().__init__(message)
        self.destination = destination

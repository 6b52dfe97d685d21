"""Photo Taker application layer."""

from phototaker.app.photos import PhotoStore, StoredPhoto
from phototaker.app.server import PhotoTakerApp

__all__ = ["PhotoStore", "PhotoTakerApp", "StoredPhoto"]

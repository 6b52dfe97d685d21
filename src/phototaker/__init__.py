"""Photo Taker - capture photos from smart glasses and browse them in a webview."""

__version__ = "0.1.0"
__author__ = "AI Glasses Team"

from phototaker.config import Config, load_config

__all__ = ["Config", "load_config", "__version__"]

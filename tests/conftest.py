"""Pytest configuration and fixtures for Photo Taker tests."""

from __future__ import annotations

import os
import time
from datetime import datetime, timezone
from pathlib import Path

import pytest
from aiohttp.test_utils import TestClient, TestServer

from phototaker.app import PhotoTakerApp
from phototaker.app.cloud import FirebaseUploader
from phototaker.config import Config
from phototaker.sdk import MockAppSession
from phototaker.sdk.session import PhotoData

USER_ID = "user@example.com"
AUTH_HEADERS = {"X-Auth-User-Id": USER_ID}


def pytest_configure(config: pytest.Config) -> None:
    """Configure test markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's environment and .env out of the tests."""
    for var in ("PACKAGE_NAME", "MENTRAOS_API_KEY", "PORT", "FIREBASE_BUCKET", "PHOTOTAKER_MOCK_MODE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def non_utc_tz():
    """Run the test with the process local time zone set to New York."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "America/New_York"
    time.tzset()
    yield
    if previous is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = previous
    time.tzset()


@pytest.fixture
def snapshots_dir(tmp_path: Path) -> Path:
    return tmp_path / "snapshots"


@pytest.fixture
def config(snapshots_dir: Path) -> Config:
    """Get test configuration."""
    cfg = Config(package_name="com.example.phototaker", api_key="test-key")
    cfg.device.mode = "development"
    cfg.device.log_level = "DEBUG"
    cfg.storage.snapshots_dir = str(snapshots_dir)
    cfg.capture.auto_capture_interval_seconds = 0.01
    cfg.capture.follow_up_capture = False
    return cfg


class FakeBlob:
    """Records what would have been sent to the bucket."""

    def __init__(self, name: str, fail: bool = False) -> None:
        self.name = name
        self.fail = fail
        self.metadata: dict | None = None
        self.uploaded_from: str | None = None
        self.content_type: str | None = None

    def upload_from_filename(self, filename: str, content_type: str | None = None) -> None:
        if self.fail:
            raise ConnectionError("bucket unreachable")
        self.uploaded_from = filename
        self.content_type = content_type


class FakeBucket:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.blobs: list[FakeBlob] = []

    def blob(self, name: str) -> FakeBlob:
        blob = FakeBlob(name, fail=self.fail)
        self.blobs.append(blob)
        return blob


@pytest.fixture
def fake_bucket() -> FakeBucket:
    return FakeBucket()


@pytest.fixture
def uploader(fake_bucket: FakeBucket) -> FirebaseUploader:
    return FirebaseUploader("test-bucket", bucket=fake_bucket)


@pytest.fixture
async def photo_app(config: Config):
    """PhotoTakerApp without cloud upload."""
    app = PhotoTakerApp(config)
    yield app
    await app.stop()


@pytest.fixture
async def mock_session(photo_app: PhotoTakerApp):
    """Mock glasses attached to photo_app."""
    session = MockAppSession(user_id=USER_ID)
    await photo_app.handle_session(session)
    yield session


@pytest.fixture
async def client(photo_app: PhotoTakerApp):
    """HTTP client for photo_app's routes."""
    async with TestClient(TestServer(photo_app.web_app)) as client:
        yield client


def make_photo(
    request_id: str = "req-1",
    mime_type: str = "image/jpeg",
    data: bytes = b"\xff\xd8fake-jpeg\xff\xd9",
    timestamp: datetime | None = None,
) -> PhotoData:
    """Build a PhotoData without going through a camera."""
    return PhotoData(
        buffer=data,
        mime_type=mime_type,
        request_id=request_id,
        timestamp=timestamp or datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc),
        size=len(data),
    )


@pytest.fixture
def photo_factory():
    """Factory for PhotoData objects."""
    return make_photo


@pytest.fixture
def failing_bucket() -> FakeBucket:
    return FakeBucket(fail=True)

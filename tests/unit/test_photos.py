"""Tests for the in-memory photo cache."""

from datetime import datetime, timedelta, timezone

import pytest

from phototaker.app.photos import PhotoStore, StoredPhoto

BASE_TIME = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def stored(index: int, user_id: str = "alice") -> StoredPhoto:
    return StoredPhoto(
        request_id=f"req-{index}",
        buffer=b"data",
        timestamp=BASE_TIME + timedelta(seconds=index),
        user_id=user_id,
        mime_type="image/jpeg",
        filename=f"photo_{index}.jpg",
        size=4,
    )


class TestStoredPhoto:
    def test_summary(self):
        photo = stored(1)

        assert photo.to_summary() == {
            "requestId": "req-1",
            "timestamp": int((BASE_TIME + timedelta(seconds=1)).timestamp() * 1000),
            "filename": "photo_1.jpg",
            "size": 4,
            "mimeType": "image/jpeg",
        }

    def test_naive_timestamp_is_utc(self, non_utc_tz):
        photo = StoredPhoto(
            request_id="req-1",
            buffer=b"data",
            timestamp=datetime(2025, 1, 2, 3, 4, 5, 678000),
            user_id="alice",
            mime_type="image/jpeg",
            filename="photo_2025-01-02T03-04-05.678Z_req-1.jpg",
            size=4,
        )

        assert photo.timestamp.tzinfo is timezone.utc
        assert photo.timestamp_ms == 1735787045678


class TestPhotoStore:
    def test_newest_first(self):
        store = PhotoStore()
        for i in range(3):
            store.add(stored(i))

        assert [p.request_id for p in store.list("alice")] == ["req-2", "req-1", "req-0"]
        assert store.latest("alice").request_id == "req-2"

    def test_bounded_to_fifty_by_default(self):
        store = PhotoStore()
        for i in range(60):
            store.add(stored(i))

        photos = store.list("alice")
        assert len(photos) == 50
        assert photos[0].request_id == "req-59"
        assert photos[-1].request_id == "req-10"
        assert store.find("alice", "req-9") is None

    def test_custom_limit(self):
        store = PhotoStore(max_per_user=2)
        for i in range(5):
            store.add(stored(i))

        assert store.count("alice") == 2

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            PhotoStore(max_per_user=0)

    def test_users_are_isolated(self):
        store = PhotoStore()
        store.add(stored(1, "alice"))
        store.add(stored(2, "bob"))

        assert store.find("alice", "req-2") is None
        assert store.find("bob", "req-2") is not None
        assert store.count("alice") == store.count("bob") == 1

    def test_empty_user(self):
        store = PhotoStore()

        assert store.list("nobody") == []
        assert store.latest("nobody") is None
        assert store.latest_timestamp("nobody") is None
        assert store.count("nobody") == 0

    def test_latest_timestamp_tracks_last_added(self):
        store = PhotoStore()
        store.add(stored(5))
        store.add(stored(3))

        assert store.latest_timestamp("alice") == stored(3).timestamp_ms

    def test_list_returns_copy(self):
        store = PhotoStore()
        store.add(stored(1))

        store.list("alice").clear()
        assert store.count("alice") == 1

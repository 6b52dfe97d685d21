"""Tests for session event dispatch."""

import pytest

from phototaker.sdk.events import ButtonPress, EventManager


@pytest.fixture
def events() -> EventManager:
    """Create a fresh event manager for each test."""
    return EventManager("session-1")


class TestButtonPress:
    def test_press_creation(self):
        press = ButtonPress(button_id="camera", press_type="long")

        assert press.button_id == "camera"
        assert press.press_type == "long"
        assert press.timestamp > 0


class TestEventManager:
    """Tests for EventManager class."""

    @pytest.mark.asyncio
    async def test_subscribe_and_emit(self, events: EventManager):
        received = []

        async def handler(press: ButtonPress):
            received.append(press)

        events.on_button_press(handler)
        await events.emit_button_press(ButtonPress("camera", "short"))

        assert len(received) == 1
        assert received[0].press_type == "short"

    @pytest.mark.asyncio
    async def test_multiple_handlers(self, events: EventManager):
        calls = []

        async def first(press: ButtonPress):
            calls.append("first")

        async def second(press: ButtonPress):
            calls.append("second")

        events.on_button_press(first)
        events.on_button_press(second)
        await events.emit_button_press(ButtonPress("camera", "short"))

        assert sorted(calls) == ["first", "second"]
        assert events.handler_count == 2

    @pytest.mark.asyncio
    async def test_unsubscribe(self, events: EventManager):
        received = []

        async def handler(press: ButtonPress):
            received.append(press)

        unsubscribe = events.on_button_press(handler)
        await events.emit_button_press(ButtonPress("camera", "short"))
        assert len(received) == 1

        unsubscribe()
        unsubscribe()  # second call is a no-op

        await events.emit_button_press(ButtonPress("camera", "short"))
        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_handler_error_isolation(self, events: EventManager):
        """A failing handler does not stop the others."""
        results = []

        async def failing_handler(press: ButtonPress):
            raise ValueError("Test error")

        async def working_handler(press: ButtonPress):
            results.append(press)

        events.on_button_press(failing_handler)
        events.on_button_press(working_handler)

        await events.emit_button_press(ButtonPress("camera", "long"))

        assert len(results) == 1

    @pytest.mark.asyncio
    async def test_clear(self, events: EventManager):
        received = []

        async def handler(press: ButtonPress):
            received.append(press)

        events.on_button_press(handler)
        events.clear()
        await events.emit_button_press(ButtonPress("camera", "short"))

        assert received == []
        assert events.handler_count == 0

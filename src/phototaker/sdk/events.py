"""Session events - button presses delivered by the glasses."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Literal

from phototaker.common.logging import get_logger

PressType = Literal["short", "long"]


@dataclass
class ButtonPress:
    """A physical button press on the glasses."""

    button_id: str
    press_type: PressType
    timestamp: float = field(default_factory=time.time)


ButtonPressHandler = Callable[[ButtonPress], Awaitable[None]]


class EventManager:
    """Per-session event dispatch.

    Example:
        async def on_press(press: ButtonPress) -> None:
            print(press.press_type)

        unsubscribe = session.events.on_button_press(on_press)
        # Later: unsubscribe()
    """

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        self._button_handlers: list[ButtonPressHandler] = []
        self.logger = get_logger("sdk.events", session_id=session_id)

    def on_button_press(self, handler: ButtonPressHandler) -> Callable[[], None]:
        """Register a button press handler.

        Returns:
            Function that removes the handler again.
        """
        self._button_handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._button_handlers:
                self._button_handlers.remove(handler)

        return unsubscribe

    @property
    def handler_count(self) -> int:
        return len(self._button_handlers)

    async def emit_button_press(self, press: ButtonPress) -> None:
        """Dispatch a button press to every registered handler."""
        self.logger.debug(
            "button_press_received",
            button_id=press.button_id,
            press_type=press.press_type,
        )

        handlers = self._button_handlers.copy()
        if handlers:
            await asyncio.gather(
                *[self._safe_dispatch(h, press) for h in handlers],
                return_exceptions=True,
            )

    async def _safe_dispatch(self, handler: ButtonPressHandler, press: ButtonPress) -> None:
        try:
            await handler(press)
        except Exception as e:
            self.logger.exception(
                "button_handler_error",
                button_id=press.button_id,
                error=str(e),
            )

    def clear(self) -> None:
        """Remove all handlers."""
        self._button_handlers.clear()

"""App server scaffolding: HTTP app, session registry and lifecycle."""

from __future__ import annotations

import asyncio
import signal
from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable

from aiohttp import web

from phototaker import __version__
from phototaker.common.health import HealthChecker, HealthStatus
from phototaker.common.logging import (
    bind_session_context,
    clear_session_context,
    get_logger,
    setup_logging,
)
from phototaker.config import Config, load_config
from phototaker.sdk.auth import create_auth_middleware
from phototaker.sdk.mock import MOCK_SESSIONS, handle_mock_button
from phototaker.sdk.session import AppSession


class ServerState(Enum):
    """Server state enum."""

    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    ERROR = "error"


class AppServer(ABC):
    """Base class for glasses apps.

    Provides common functionality:
    - aiohttp application with authenticated-user middleware
    - Session registry and lifecycle callbacks
    - Health route
    - Graceful shutdown
    """

    def __init__(
        self,
        config: Config | None = None,
        mock_mode: bool = False,
    ) -> None:
        """Initialize the server.

        Args:
            config: Configuration object. Loaded from file if None.
            mock_mode: Run in mock mode for development.
        """
        self.config = config or load_config()
        self.mock_mode = mock_mode or self.config.mock_mode
        self.name = self.config.package_name or self.config.device.name

        setup_logging(
            level=self.config.device.log_level,
            json_output=self.config.device.mode == "production",
            service_name=self.name,
        )
        self.logger = get_logger("app_server", app=self.name)

        self._state = ServerState.STOPPED
        self._sessions: dict[str, AppSession] = {}
        self._runner: web.AppRunner | None = None
        self._shutdown_event = asyncio.Event()
        self.health = HealthChecker(self.name)

        self._app = web.Application(
            middlewares=[create_auth_middleware(self.config.auth, self.mock_mode)]
        )
        self._app.router.add_get("/health", self._handle_health)
        if self.mock_mode:
            self._app[MOCK_SESSIONS] = lambda: list(self._sessions.values())
            self._app.router.add_post("/mock/button", handle_mock_button)

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def web_app(self) -> web.Application:
        """The aiohttp application; subclasses add their routes here."""
        return self._app

    @property
    def sessions(self) -> dict[str, AppSession]:
        return dict(self._sessions)

    @abstractmethod
    async def on_session(self, session: AppSession) -> None:
        """Called when a user's glasses connect to this app."""

    @abstractmethod
    async def on_stop(self, session: AppSession) -> None:
        """Called when a session ends or the server shuts down."""

    async def handle_session(self, session: AppSession) -> None:
        """Register a new session and hand it to on_session."""
        self._sessions[session.session_id] = session
        bind_session_context(session.user_id, session.session_id)
        try:
            await self.on_session(session)
        finally:
            clear_session_context()

    async def end_session(self, session_id: str) -> None:
        """Unregister a session and notify on_stop."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            self.logger.warning("unknown_session_stopped", session_id=session_id)
            return

        session.events.clear()
        try:
            await self.on_stop(session)
        except Exception as e:
            self.logger.exception("session_stop_failed", session_id=session_id, error=str(e))

    async def _handle_health(self, request: web.Request) -> web.Response:
        result = await self.health.check()
        return web.json_response(
            {
                "status": result.status.value,
                "service": self.name,
                "packageName": self.config.package_name,
                "version": __version__,
                "activeSessions": len(self._sessions),
                "checks": [c.to_dict() for c in result.checks],
            },
            status=503 if result.status == HealthStatus.UNHEALTHY else 200,
        )

    async def start(self, initial_sessions: Iterable[AppSession] = ()) -> None:
        """Start serving HTTP and wait for shutdown.

        Args:
            initial_sessions: Sessions to attach once the server is up
                (used for mock glasses in development).
        """
        if not self.mock_mode:
            self.config.require_credentials()

        host, port = self.config.server.host, self.config.server.port
        self.logger.info("starting_server", host=host, port=port, mock_mode=self.mock_mode)
        self._state = ServerState.STARTING

        try:
            self._runner = web.AppRunner(self._app)
            await self._runner.setup()
            site = web.TCPSite(self._runner, host, port)
            await site.start()

            self._state = ServerState.RUNNING
            self.logger.info("server_started", port=port)

            for session in initial_sessions:
                await self.handle_session(session)

            await self._shutdown_event.wait()

        except Exception as e:
            self._state = ServerState.ERROR
            self.logger.exception("server_start_failed", error=str(e))
            raise
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Stop all sessions and the HTTP server."""
        if self._state == ServerState.STOPPING:
            return
        if self._state == ServerState.STOPPED and not self._sessions:
            return

        self.logger.info("stopping_server")
        self._state = ServerState.STOPPING

        for session_id in list(self._sessions):
            await self.end_session(session_id)

        if self._runner:
            await self._runner.cleanup()
            self._runner = None

        self._state = ServerState.STOPPED
        self.logger.info("server_stopped")

    def shutdown(self) -> None:
        """Signal the server to shutdown."""
        self._shutdown_event.set()

    def run(self, initial_sessions: Iterable[AppSession] = ()) -> None:
        """Run the server (blocking).

        Sets up signal handlers and runs the async event loop.
        """
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)

        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self.shutdown)

        try:
            loop.run_until_complete(self.start(initial_sessions))
        finally:
            loop.close()

"""Process lifecycle: bind, serve, drain on SIGTERM.

The listening socket and shutdown flag belong to a ``StaticServer`` handle
rather than to the module, so several servers can run side by side in one
process (the tests do exactly that).

Usage:
    python -m vinovault
    PORT=9000 DOCUMENT_ROOT=dist vinovault-server
"""

import asyncio
import contextlib
import logging
import signal
import socket
from typing import Optional

import uvicorn
from fastapi import FastAPI

from vinovault.config import Settings, settings as default_settings
from vinovault.logging_config import configure_logging
from vinovault.main import create_app

logger = logging.getLogger(__name__)

BIND_HOST = "0.0.0.0"


class BindError(RuntimeError):
    """The listening socket could not be bound."""


class _UvicornServer(uvicorn.Server):
    @contextlib.contextmanager
    def capture_signals(self):
        # Signals are routed through StaticServer.handle_signal instead
        yield


class StaticServer:
    """An explicitly owned HTTP server for one document root."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        app: Optional[FastAPI] = None,
        host: str = BIND_HOST,
    ) -> None:
        self.settings = settings or default_settings
        self.app = app or create_app(self.settings)
        self.host = host
        self._socket: Optional[socket.socket] = None
        self._server: Optional[_UvicornServer] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def port(self) -> int:
        """The bound port, which differs from settings when PORT=0."""
        if self._socket is not None:
            return self._socket.getsockname()[1]
        return self.settings.PORT

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def started(self) -> bool:
        """True once connections are being accepted."""
        return self._server is not None and self._server.started

    def bind(self) -> socket.socket:
        """Create the listening socket. Raises BindError, never retries."""
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self.host, self.settings.PORT))
        except OSError as e:
            sock.close()
            raise BindError(f"Could not bind {self.host}:{self.settings.PORT}: {e}") from e
        sock.set_inheritable(True)
        return sock

    async def start(self) -> None:
        """Bind and begin accepting connections."""
        if self._task is not None:
            raise RuntimeError("Server already started")

        self._socket = self.bind()
        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_config=None,
            access_log=False,
            lifespan="on",
            timeout_graceful_shutdown=self.settings.SHUTDOWN_TIMEOUT,
        )
        self._server = _UvicornServer(config)
        self._task = asyncio.create_task(self._server.serve(sockets=[self._socket]))

        while not self._server.started:
            if self._task.done():
                # serve() returned before listening, e.g. lifespan startup failed
                task, self._task, self._server = self._task, None, None
                self._close_socket()
                task.result()
                raise RuntimeError("Server exited during startup")
            await asyncio.sleep(0.01)

        logger.info("=" * 36)
        logger.info(f"VinoVault starting on port {self.port}")
        logger.info(f"Document root: {self.settings.document_root}")
        logger.info("=" * 36)

    def handle_signal(self, sig: int = signal.SIGTERM) -> None:
        """Request shutdown; a second request skips the drain."""
        if self._server is None:
            return
        if self._server.should_exit:
            logger.warning(f"{signal.Signals(sig).name} received again. Forcing exit...")
            self._server.force_exit = True
            return
        logger.info(f"{signal.Signals(sig).name} received. Shutting down...")
        self._server.should_exit = True

    async def stop(self) -> None:
        """Stop accepting, let in-flight requests finish, close the socket."""
        if self._task is None:
            return
        self._server.should_exit = True
        try:
            await self._task
        finally:
            self._close_socket()
            self._task = None
            self._server = None

    async def serve_forever(self) -> None:
        """Run until SIGTERM or SIGINT, then drain and return."""
        await self.start()
        loop = asyncio.get_running_loop()
        installed = []
        try:
            for sig in (signal.SIGTERM, signal.SIGINT):
                loop.add_signal_handler(sig, self.handle_signal, sig)
                installed.append(sig)
            await self._task
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)
            await self.stop()

    def _close_socket(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None


def main(settings: Optional[Settings] = None) -> int:
    """Console entry point. Returns the process exit code."""
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)
    server = StaticServer(settings)
    try:
        asyncio.run(server.serve_forever())
    except BindError as e:
        logger.error(str(e))
        return 1
    logger.info("Server stopped.")
    return 0

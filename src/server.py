"""Threaded WSGI server with graceful shutdown on SIGINT/SIGTERM."""

from __future__ import annotations

import logging
import signal
import threading
import time

from werkzeug.serving import make_server

logger = logging.getLogger(__name__)


class InFlightTracker:
    """WSGI middleware counting requests that are still being handled."""

    def __init__(self, wsgi_app):
        self.wsgi_app = wsgi_app
        self._active = 0
        self._cond = threading.Condition()

    @property
    def active(self) -> int:
        with self._cond:
            return self._active

    def __call__(self, environ, start_response):
        with self._cond:
            self._active += 1
        try:
            return self.wsgi_app(environ, start_response)
        finally:
            with self._cond:
                self._active -= 1
                self._cond.notify_all()

    def wait_idle(self, timeout: float) -> bool:
        """Block until no request is in flight or ``timeout`` elapses."""
        deadline = time.monotonic() + max(0.0, timeout)
        with self._cond:
            while self._active > 0:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._cond.wait(remaining)
            return True


def serve(app, host: str = "0.0.0.0", port: int = 8080, grace_seconds: float = 5) -> None:
    """Serve ``app`` until a termination signal, then drain in-flight requests.

    Requests still running after ``grace_seconds`` are abandoned.
    """
    tracker = InFlightTracker(app.wsgi_app)
    app.wsgi_app = tracker
    server = make_server(host, port, app, threaded=True)
    stop = threading.Event()

    def _on_signal(signum, _frame):
        logger.info("Received signal %s, shutting down", signum)
        stop.set()

    signal.signal(signal.SIGINT, _on_signal)
    signal.signal(signal.SIGTERM, _on_signal)

    worker = threading.Thread(target=server.serve_forever, name="http-server", daemon=True)
    worker.start()
    logger.info("HTTP server listening", extra={"host": host, "port": port})

    while not stop.wait(0.5):
        pass
    # Stop accepting new connections, then give running requests time to finish
    server.shutdown()
    if tracker.wait_idle(grace_seconds):
        logger.info("All in-flight requests completed")
    else:
        logger.warning(
            "Grace period elapsed with requests still running",
            extra={"in_flight": tracker.active, "grace_seconds": grace_seconds},
        )
    server.server_close()
    logger.info("HTTP server stopped")


__all__ = ["InFlightTracker", "serve"]

"""
Broadcast server - streams door state to local subscribers over TCP.

Each connection receives newline-delimited JSON, {"isClosed": true}, once on
connect (if the state is known) and again on every confirmed change.
Bound to localhost; no authentication. Runs in a daemon thread.
"""

import json
import logging
import socketserver
import threading

from ..core.broadcaster import StateBroadcaster

logger = logging.getLogger(__name__)


def encode_state(is_closed: bool) -> bytes:
    return (json.dumps({"isClosed": is_closed}) + "\n").encode("utf-8")


class _SocketSubscriber:
    """Adapts one client connection to the broadcaster's Subscriber protocol."""

    def __init__(self, wfile, peer: str):
        self._wfile = wfile
        self._write_lock = threading.Lock()
        self.peer = peer

    def send_state(self, is_closed: bool) -> None:
        with self._write_lock:
            self._wfile.write(encode_state(is_closed))
            self._wfile.flush()


class _SubscriberHandler(socketserver.StreamRequestHandler):
    def handle(self) -> None:
        broadcaster: StateBroadcaster = self.server.broadcaster
        peer = f"{self.client_address[0]}:{self.client_address[1]}"
        subscriber = _SocketSubscriber(self.wfile, peer)

        logger.info(f"Subscriber connected: {peer}")
        broadcaster.subscribe(subscriber)
        try:
            # Clients only listen; block until they hang up
            while self.rfile.readline():
                pass
        except OSError:
            pass
        finally:
            broadcaster.unsubscribe(subscriber)
            logger.info(f"Subscriber disconnected: {peer}")


class _ThreadingServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, address, broadcaster: StateBroadcaster):
        self.broadcaster = broadcaster
        super().__init__(address, _SubscriberHandler)


class BroadcastServer:
    """Owns the TCP server and its serving thread."""

    def __init__(self, broadcaster: StateBroadcaster, host: str, port: int):
        self._broadcaster = broadcaster
        self._host = host
        self._port = port
        self._server: _ThreadingServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def address(self) -> tuple[str, int] | None:
        """Bound (host, port); useful when started on port 0."""
        if self._server is None:
            return None
        return self._server.server_address[:2]

    def start(self) -> None:
        self._server = _ThreadingServer((self._host, self._port), self._broadcaster)
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            name="BroadcastServer",
            daemon=True,
        )
        self._thread.start()
        host, port = self.address
        logger.info(f"State broadcast listening on {host}:{port}")

    def stop(self) -> None:
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
        self._server = None
        self._thread = None
        logger.debug("State broadcast server stopped")

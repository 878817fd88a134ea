"""In-memory registry of open Server-Sent Events connections.

Each connection owns a bounded queue. Broadcasting enqueues a framed
message on every queue without blocking; a connection whose queue is
full is considered dead and dropped. Delivery is best effort and local
to the current process.

Broadcasts come from request threads and on-commit hooks, while streams
are async generators served by the ASGI event loop. A push wakes the
stream's loop with ``call_soon_threadsafe``.
"""

import asyncio
import json
import logging
import queue
import threading
import time

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder

logger = logging.getLogger(__name__)


def format_event(payload: dict) -> str:
    """Frame a payload as a single SSE ``data:`` message."""
    return f"data: {json.dumps(payload, cls=DjangoJSONEncoder)}\n\n"


class SSEConnection:
    """One open event stream."""

    def __init__(self, maxsize: int):
        self.queue = queue.Queue(maxsize=maxsize)
        self.closed = False
        self._loop = None
        self._wakeup = None

    def bind(self, loop: asyncio.AbstractEventLoop):
        """Attach the event loop that serves this stream."""
        self._loop = loop
        self._wakeup = asyncio.Event()

    def _notify(self) -> bool:
        if self._loop is None:
            return True
        try:
            self._loop.call_soon_threadsafe(self._wakeup.set)
        except RuntimeError:
            # Loop already closed
            return False
        return True

    def push(self, message: str) -> bool:
        """Enqueue a message; False when the connection can't take it."""
        if self.closed:
            return False
        try:
            self.queue.put_nowait(message)
        except queue.Full:
            return False
        return self._notify()

    def close(self):
        self.closed = True
        self._notify()

    async def next_message(self, timeout: float):
        """Wait up to ``timeout`` seconds for a queued message.

        Returns None on timeout or when the connection was closed.
        """
        while not self.closed:
            try:
                return self.queue.get_nowait()
            except queue.Empty:
                pass
            self._wakeup.clear()
            if not self.queue.empty():
                continue
            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout)
            except asyncio.TimeoutError:
                return None
        return None


class SSERegistry:
    """Thread-safe set of open SSE connections."""

    def __init__(self, queue_size: int | None = None):
        self._queue_size = queue_size
        self._connections: set[SSEConnection] = set()
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._connections)

    def add(self) -> SSEConnection:
        """Register a new connection and return it."""
        maxsize = self._queue_size or settings.SSE_QUEUE_SIZE
        connection = SSEConnection(maxsize=maxsize)
        with self._lock:
            self._connections.add(connection)
            total = len(self._connections)
        logger.info(f"SSE connection added. Total connections: {total}")
        return connection

    def remove(self, connection: SSEConnection):
        """Unregister a connection. Removing twice is harmless."""
        connection.close()
        with self._lock:
            self._connections.discard(connection)
            total = len(self._connections)
        logger.info(f"SSE connection removed. Total connections: {total}")

    def broadcast(self, event: str, data) -> int:
        """Send an event to every open connection.

        Returns:
            Number of connections still registered after the broadcast.
        """
        message = format_event({"type": event, "data": data})

        with self._lock:
            connections = list(self._connections)

        dead = [connection for connection in connections if not connection.push(message)]
        for connection in dead:
            logger.info("SSE connection not draining, removing from registry")
            self.remove(connection)

        remaining = len(self)
        logger.debug(f"SSE broadcast {event} to {remaining} connections")
        return remaining

    def clear(self):
        """Close and drop every connection."""
        with self._lock:
            connections = list(self._connections)
            self._connections.clear()
        for connection in connections:
            connection.close()


async def event_stream(registry: SSERegistry, connection: SSEConnection, heartbeat_seconds: float):
    """Yield SSE frames for one client until it disconnects.

    Sends a ``connected`` frame first, then queued events, and a
    ``heartbeat`` frame whenever the queue stays empty for
    ``heartbeat_seconds``. The connection is unregistered when the
    server closes or cancels the generator.
    """
    connection.bind(asyncio.get_running_loop())
    try:
        yield format_event({"type": "connected", "message": "SSE connection established"})
        while not connection.closed:
            message = await connection.next_message(heartbeat_seconds)
            if message is not None:
                yield message
            elif not connection.closed:
                yield format_event({"type": "heartbeat", "timestamp": int(time.time() * 1000)})
    finally:
        registry.remove(connection)


registry = SSERegistry()

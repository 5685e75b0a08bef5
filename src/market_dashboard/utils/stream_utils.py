"""
Stream Utilities

ProgressChannel connects a background producer to a streaming HTTP
response. The producer emits ordered JSON events; the response generator
drains them as Server-Sent Events. When the client goes away the generator
is closed, which sets the cancel flag. The producer checks the flag between
steps, so a request already sent to an external service still completes.
"""
import json
import queue
import threading
from typing import Callable, Dict, Iterator, Optional

from market_dashboard.config import setup_logger

logger = setup_logger(name="ProgressChannel")

_DONE = object()


class ProgressChannel:
    def __init__(self, keepalive_seconds: float = 30.0):
        self._queue: queue.Queue = queue.Queue()
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.keepalive_seconds = keepalive_seconds

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        if not self._cancelled.is_set():
            logger.info("Progress stream cancelled by consumer")
        self._cancelled.set()

    def emit(self, event: Dict) -> bool:
        """Queue an event. Returns False once the consumer has gone away."""
        if self.cancelled:
            return False
        self._queue.put(event)
        return True

    def close(self) -> None:
        self._queue.put(_DONE)

    def start(self, producer: Callable[["ProgressChannel"], None], app=None) -> "ProgressChannel":
        """
        Run producer(channel) on a daemon thread.

        Parameters:
            producer: Callable receiving this channel
            app: Flask app whose context is pushed for the producer
        """
        def _run():
            try:
                if app is not None:
                    with app.app_context():
                        producer(self)
                else:
                    producer(self)
            except Exception as e:
                logger.error(f"Progress producer failed: {e}", exc_info=True)
                self.emit({"type": "error", "progress": 100, "error": str(e)})
            finally:
                self.close()

        self._thread = threading.Thread(target=_run, daemon=True)
        self._thread.start()
        return self

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def events(self) -> Iterator[Optional[Dict]]:
        """
        Yield events in order until the producer closes the channel.

        Yields None when nothing arrived within keepalive_seconds.
        """
        finished = False
        try:
            while True:
                try:
                    item = self._queue.get(timeout=self.keepalive_seconds)
                except queue.Empty:
                    yield None
                    continue
                if item is _DONE:
                    finished = True
                    break
                yield item
        finally:
            if not finished:
                self.cancel()

    def sse(self) -> Iterator[str]:
        for event in self.events():
            if event is None:
                yield ": keep-alive\n\n"
            else:
                yield f"data: {json.dumps(event, default=str)}\n\n"

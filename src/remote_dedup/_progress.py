"""Progress relay — hands scan counts to a rendering thread."""

from __future__ import annotations

import logging
import queue
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType

    from remote_dedup._types import ProgressSink

log = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 64

_CLOSED = object()


class ProgressRelay:
    """Bounded channel from one producer thread to a consumer thread.

    The producer calls :meth:`publish` with non-decreasing counts. When the
    queue is full the oldest pending count is dropped, so ``publish`` never
    waits on a slow consumer. :meth:`close` delivers everything still queued,
    including the last published count, before it returns.

    Only one thread may publish.

    :param consumer: Called on the relay thread with each delivered count.
    :param maxsize: Maximum number of pending counts.
    """

    def __init__(self, consumer: ProgressSink, *, maxsize: int = DEFAULT_QUEUE_SIZE) -> None:
        if maxsize < 1:
            raise ValueError(f"maxsize must be at least 1, got {maxsize}")
        self._consumer = consumer
        self._queue: queue.Queue[object] = queue.Queue(maxsize=maxsize)
        self._thread = threading.Thread(target=self._run, name="progress-relay", daemon=True)
        self._closed = False

    def __repr__(self) -> str:
        state = "closed" if self._closed else ("running" if self._thread.is_alive() else "idle")
        return f"ProgressRelay({state}, pending={self._queue.qsize()})"

    def start(self) -> ProgressRelay:
        """Start the consumer thread."""
        self._thread.start()
        return self

    def publish(self, count: int) -> None:
        """Queue ``count`` for the consumer without blocking.

        :raises RuntimeError: If the relay has been closed.
        """
        if self._closed:
            raise RuntimeError("Cannot publish to a closed progress relay")
        try:
            self._queue.put_nowait(count)
        except queue.Full:
            # Single producer: after discarding one entry there is room again.
            try:
                self._queue.get_nowait()
            except queue.Empty:
                pass
            self._queue.put_nowait(count)

    def close(self) -> None:
        """Flush pending counts and stop the consumer thread.

        Must only be called once the producer has finished publishing.
        """
        if self._closed:
            return
        self._closed = True
        if not self._thread.is_alive():
            return
        self._queue.put(_CLOSED)
        self._thread.join()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            try:
                self._consumer(item)  # type: ignore[arg-type]
            except Exception:
                log.warning("Progress consumer failed for count %s", item, exc_info=True)

    def __enter__(self) -> ProgressRelay:
        return self.start()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

import logging
import threading
from collections import deque
from typing import Deque, Optional

from linewriter.measurement import Measurement

logger = logging.getLogger("linewriter.buffer")


class DualBuffer:
    """
    Two FIFO queues, one of which accepts new points at any time.

    ``swap`` hands the filled queue to a single consumer and points producers
    at the other one, so producers never wait on the consumer's I/O. The lock
    only guards the active pointer and appends.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._queues = {"A": deque(), "B": deque()}
        self._active = "A"

    @property
    def active(self) -> str:
        with self._lock:
            return self._active

    def push(self, measurement: Measurement) -> int:
        with self._lock:
            queue = self._queues[self._active]
            queue.append(measurement)
            return len(queue)

    def swap(self) -> Optional[Deque[Measurement]]:
        with self._lock:
            current = self._queues[self._active]
            if not current:
                return None
            self._active = "B" if self._active == "A" else "A"
            switched_to = self._active
        logger.debug(f"Switching to buffer {switched_to}")
        return current

    def pending(self) -> int:
        with self._lock:
            return len(self._queues["A"]) + len(self._queues["B"])

"""
Hand-off Queue
==============

Thread-safe FIFO between the acquisition worker and the display consumer.

Design Rules:
    - One producer (worker) pushes, one consumer pops
    - The lock is held only for the container operation itself
    - try_pop never waits: an empty queue returns None immediately
    - Frames pass through unchanged
"""

import logging
import threading
from collections import deque
from typing import Deque, Optional

from festive_frames.frames.frame import FrameImage


logger = logging.getLogger(__name__)


class HandoffQueue:
    """
    Unbounded FIFO of freshly generated frames awaiting first display.

    Example:
        queue = HandoffQueue()

        # Worker thread
        queue.push(frame)

        # Display thread
        frame = queue.try_pop()
    """

    def __init__(self) -> None:
        self._items: Deque[FrameImage] = deque()
        self._lock = threading.Lock()
        self._total_pushed: int = 0
        self._total_popped: int = 0

    @property
    def size(self) -> int:
        """Current number of frames waiting."""
        with self._lock:
            return len(self._items)

    def push(self, frame: FrameImage) -> None:
        """Append a frame at the tail."""
        with self._lock:
            self._items.append(frame)
            self._total_pushed += 1
            depth = len(self._items)
        logger.debug(f"Queued {frame!r} (depth={depth})")

    def try_pop(self) -> Optional[FrameImage]:
        """
        Remove the frame at the head without waiting.

        Returns:
            Oldest queued frame, or None if the queue is empty.
        """
        with self._lock:
            if not self._items:
                return None
            self._total_popped += 1
            return self._items.popleft()

    def metrics(self) -> dict:
        """
        Get queue metrics for observability.

        Returns:
            Dict with size, total_pushed, total_popped
        """
        with self._lock:
            return {
                "size": len(self._items),
                "total_pushed": self._total_pushed,
                "total_popped": self._total_popped,
            }

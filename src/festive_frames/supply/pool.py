"""
Rotation Pool
=============

Growing collection of every frame shown so far, used for random fallback.

Design Rules:
    - Append-only by default: the pool never shrinks
    - Sampling is uniform over the pool size at call time
    - The lock is held only for append/sample, never across I/O
    - With max_size set, the oldest unpinned frames are evicted first;
      pinned (bootstrap) frames are never evicted
"""

import logging
import random
import threading
from typing import List, Optional

from festive_frames.frames.frame import FrameImage


logger = logging.getLogger(__name__)


class RotationPool:
    """
    Thread-safe pool of frames eligible for random re-display.

    Unbounded unless max_size is given, so memory grows with every
    generated image over the process lifetime.

    Attributes:
        max_size: Cap on unpinned frames, or None for no cap
    """

    def __init__(
        self,
        max_size: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize rotation pool.

        Args:
            max_size: Maximum unpinned frames to keep. Must be >= 1 or None.
            rng: Random source for sampling (defaults to a fresh Random)
        """
        if max_size is not None and max_size < 1:
            raise ValueError("max_size must be >= 1")

        self.max_size = max_size
        self._pinned: List[FrameImage] = []
        self._rotating: List[FrameImage] = []
        self._lock = threading.Lock()
        self._rng = rng or random.Random()
        self._total_appended: int = 0
        self._evicted: int = 0

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._pinned) + len(self._rotating)

    def append(self, frame: FrameImage, pinned: bool = False) -> None:
        """
        Add a frame to the pool.

        Args:
            frame: Frame to add
            pinned: Keep the frame forever, regardless of max_size
        """
        with self._lock:
            self._total_appended += 1
            if pinned:
                self._pinned.append(frame)
                return
            self._rotating.append(frame)
            if self.max_size is not None and len(self._rotating) > self.max_size:
                evicted = self._rotating.pop(0)
                self._evicted += 1
            else:
                evicted = None
        if evicted is not None:
            logger.debug(f"Pool cap reached, evicted {evicted!r}")

    def sample_uniform(self) -> Optional[FrameImage]:
        """
        Pick one frame uniformly at random.

        Returns:
            A frame from the pool, or None if the pool is empty.
        """
        with self._lock:
            total = len(self._pinned) + len(self._rotating)
            if total == 0:
                return None
            index = self._rng.randrange(total)
            if index < len(self._pinned):
                return self._pinned[index]
            return self._rotating[index - len(self._pinned)]

    def metrics(self) -> dict:
        """
        Get pool metrics for observability.

        Returns:
            Dict with size, pinned, total_appended, evicted
        """
        with self._lock:
            return {
                "size": len(self._pinned) + len(self._rotating),
                "pinned": len(self._pinned),
                "total_appended": self._total_appended,
                "evicted": self._evicted,
            }

"""
Supply Module
=============

Thread-safe containers shared by the acquisition worker and the display loop.

This module provides:
    - HandoffQueue: Lock-guarded FIFO of freshly generated frames
    - RotationPool: Growing pool for uniform random fallback selection

Example:
    from festive_frames.supply import HandoffQueue, RotationPool

    queue = HandoffQueue()
    pool = RotationPool()
"""

from festive_frames.supply.handoff import HandoffQueue
from festive_frames.supply.pool import RotationPool


__all__ = [
    "HandoffQueue",
    "RotationPool",
]

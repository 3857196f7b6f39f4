"""
Frame Data Model
================

Display-ready pixel frame shared by the pool, the queue and the display.

Design Rules:
    - Pixels are RGB, uint8, shape (height, width, 3)
    - The pixel array is made read-only on construction
    - Equality is identity: two frames with equal pixels are still distinct
"""

import time
from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True, slots=True, eq=False)
class FrameImage:
    """
    Immutable, fixed-size RGB pixel buffer.

    Produced once by the codec and only ever read afterwards.

    Attributes:
        pixels: RGB pixel data, shape (height, width, 3), dtype uint8
        source: Where the image came from (file path or prompt)
        created_at: UNIX timestamp of construction
    """

    pixels: np.ndarray
    source: str = ""
    created_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        """Validate shape and freeze the pixel array."""
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 3:
            raise ValueError(f"pixels must have shape (H, W, 3), got {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"pixels must be uint8, got {self.pixels.dtype}")
        self.pixels.flags.writeable = False

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def to_bytes(self) -> bytes:
        """Raw RGB bytes in row-major order."""
        return self.pixels.tobytes()

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixels."""
        return (
            f"FrameImage(width={self.width}, "
            f"height={self.height}, "
            f"source={self.source!r})"
        )

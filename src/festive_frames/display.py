"""
Display Sinks
=============

Targets that present frames, and the render loop that feeds them.

A sink implements present(frame), wait(shutdown, seconds) and close().
Hardware panels plug in by implementing the same methods.

Sinks:
    - WindowDisplay: OpenCV window, nearest-neighbour upscaled
    - LogDisplay: Headless, logs each presented frame
"""

import logging
import threading
import time
from typing import Optional, Protocol

import cv2

from festive_frames.frames.frame import FrameImage
from festive_frames.pipeline import SupplyPipeline


logger = logging.getLogger(__name__)

# Longest single cv2.waitKey slice while a window is open
EVENT_POLL_MS = 50


class DisplaySink(Protocol):
    """Anything that can show a FrameImage."""

    def present(self, frame: FrameImage) -> None:
        ...

    def wait(self, shutdown: threading.Event, seconds: float) -> bool:
        """Hold the current frame; True if shutdown was requested."""
        ...

    def close(self) -> None:
        ...


class WindowDisplay:
    """
    Desktop preview of the pixel display.

    Attributes:
        scale: Integer upscale factor applied to each frame
        window_name: Title of the OpenCV window
    """

    def __init__(self, scale: int = 16, window_name: str = "Festive Frames") -> None:
        self.scale = max(1, scale)
        self.window_name = window_name
        self._opened = False

    def present(self, frame: FrameImage) -> None:
        if not self._opened:
            cv2.namedWindow(self.window_name, cv2.WINDOW_AUTOSIZE)
            self._opened = True

        bgr = cv2.cvtColor(frame.pixels, cv2.COLOR_RGB2BGR)
        if self.scale > 1:
            bgr = cv2.resize(
                bgr,
                (frame.width * self.scale, frame.height * self.scale),
                interpolation=cv2.INTER_NEAREST,
            )
        cv2.imshow(self.window_name, bgr)
        # Lets HighGUI process the paint event
        cv2.waitKey(1)

    def close(self) -> None:
        if self._opened:
            cv2.destroyWindow(self.window_name)
            self._opened = False

    def wait(self, shutdown: threading.Event, seconds: float) -> bool:
        """
        Keep the window responsive while the frame stays up.

        HighGUI only repaints and handles moves/close from inside waitKey,
        so the interval is spent in short waitKey slices.
        """
        if not self._opened:
            return shutdown.wait(seconds)

        deadline = time.monotonic() + seconds
        while not shutdown.is_set():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            cv2.waitKey(max(1, min(EVENT_POLL_MS, int(remaining * 1000))))
        return True


class LogDisplay:
    """Headless sink that records what would have been shown."""

    def __init__(self) -> None:
        self.presented: int = 0

    def present(self, frame: FrameImage) -> None:
        self.presented += 1
        logger.info(f"Presenting {frame!r}")

    def wait(self, shutdown: threading.Event, seconds: float) -> bool:
        return shutdown.wait(seconds)

    def close(self) -> None:
        logger.info(f"LogDisplay closed after {self.presented} frames")


def create_display(backend: str, scale: int = 16) -> DisplaySink:
    """
    Create display sink based on config.

    Raises:
        ValueError: Unknown backend name
    """
    if backend == "window":
        return WindowDisplay(scale=scale)
    elif backend == "log":
        return LogDisplay()
    else:
        raise ValueError(f"Unknown display backend: {backend}")


def run_display_loop(
    pipeline: SupplyPipeline,
    display: DisplaySink,
    shutdown: threading.Event,
    interval: float,
    max_cycles: int = 0,
) -> int:
    """
    Present one frame per interval until shutdown is set.

    Args:
        pipeline: Source of frames
        display: Where frames are presented
        shutdown: Shared cancellation event
        interval: Seconds each frame stays up
        max_cycles: Stop after this many cycles (0 = unlimited)

    Returns:
        Number of frames presented
    """
    presented = 0
    cycles = 0

    while not shutdown.is_set():
        frame = pipeline.next()
        if frame is None:
            logger.info("No image to display")
        else:
            display.present(frame)
            presented += 1

        cycles += 1
        if max_cycles and cycles >= max_cycles:
            break

        display.wait(shutdown, interval)

    return presented

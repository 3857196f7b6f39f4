"""
Acquisition Worker
==================

Background thread that periodically generates, downloads and decodes new
images and hands them to the display side through a HandoffQueue.

Lifecycle:
    IDLE -> RUNNING -> STOPPED, or DISABLED when no credential or no valid
    rate is configured. A disabled worker never touches the network.

Design Rules:
    - One generation attempt per cadence interval (3600 / images_per_hour)
    - Every failure is logged, counted and absorbed; the loop only ends on
      shutdown
    - The same fixed cadence doubles as the retry delay
    - Sleeping waits on the shutdown event, so a stop request wakes it
      immediately; an in-flight HTTP call is bounded only by its timeout
    - Raw downloads are kept in a per-process temp directory, removed on exit
"""

import logging
import math
import os
import random
import shutil
import tempfile
import threading
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Union

from festive_frames.acquisition.client import ImageGenerationClient
from festive_frames.acquisition.prompts import (
    VOCABULARY,
    build_prompt,
    choose_word,
    slugify,
)
from festive_frames.config import Settings
from festive_frames.errors import (
    ConfigError,
    DecodeError,
    FilesystemError,
    NetworkError,
    PayloadError,
)
from festive_frames.frames.codec import decode_and_scale
from festive_frames.frames.frame import FrameImage
from festive_frames.supply.handoff import HandoffQueue


logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600.0

# Leading bytes -> file suffix for saved downloads
IMAGE_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", ".png"),
    (b"\xff\xd8\xff", ".jpg"),
    (b"GIF87a", ".gif"),
    (b"GIF89a", ".gif"),
    (b"BM", ".bmp"),
)


class WorkerState(str, Enum):
    """Acquisition worker lifecycle states."""

    IDLE = "IDLE"
    DISABLED = "DISABLED"
    RUNNING = "RUNNING"
    STOPPED = "STOPPED"


def cadence_seconds(images_per_hour: Union[float, str, None]) -> float:
    """
    Seconds between generation attempts for an hourly rate.

    Fractional rates are allowed (0.5 -> one request every two hours).

    Raises:
        ConfigError: If images_per_hour is not a finite number > 0
    """
    try:
        rate = float(images_per_hour)
    except (TypeError, ValueError):
        raise ConfigError(f"images_per_hour must be a number, got {images_per_hour!r}")
    if not math.isfinite(rate) or rate <= 0:
        raise ConfigError(f"images_per_hour must be > 0, got {images_per_hour!r}")
    return SECONDS_PER_HOUR / rate


def image_suffix(data: bytes) -> str:
    """File suffix matching the image format, ".img" when unrecognised."""
    for signature, suffix in IMAGE_SIGNATURES:
        if data.startswith(signature):
            return suffix
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return ".webp"
    return ".img"


def default_output_dir(prefix: str = "festive_frames") -> Path:
    """Per-process temporary directory for downloaded images."""
    return Path(tempfile.gettempdir()) / f"{prefix}-{os.getpid()}"


class AcquisitionMetrics:
    """Metrics for AcquisitionWorker observability."""

    __slots__ = (
        "attempts",
        "images_generated",
        "network_errors",
        "payload_errors",
        "decode_errors",
        "filesystem_errors",
        "unexpected_errors",
    )

    def __init__(self) -> None:
        self.attempts: int = 0
        self.images_generated: int = 0
        self.network_errors: int = 0
        self.payload_errors: int = 0
        self.decode_errors: int = 0
        self.filesystem_errors: int = 0
        self.unexpected_errors: int = 0

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {name: getattr(self, name) for name in self.__slots__}


class AcquisitionWorker:
    """
    Rate-limited producer of generated frames.

    Attributes:
        queue: HandoffQueue receiving decoded frames
        width: Target frame width
        height: Target frame height
        output_dir: Where raw downloads are written
        metrics: Operational metrics

    Example:
        shutdown = threading.Event()
        worker = AcquisitionWorker(
            queue=queue,
            client=ImageGenerationClient(api_key="sk-..."),
            images_per_hour=12,
            width=32,
            height=32,
            shutdown=shutdown,
        )
        worker.start()
        ...
        worker.stop()
    """

    def __init__(
        self,
        queue: HandoffQueue,
        client: Optional[ImageGenerationClient],
        images_per_hour: Union[float, str, None],
        width: int,
        height: int,
        shutdown: threading.Event,
        vocabulary: Sequence[str] = VOCABULARY,
        output_dir: Optional[Path] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize acquisition worker.

        Args:
            queue: Queue to push generated frames into
            client: Generation client; None disables the worker
            images_per_hour: Request rate; non-numeric or <= 0 disables the worker
            width: Target frame width
            height: Target frame height
            shutdown: Shared cancellation event
            vocabulary: Theme words for prompts
            output_dir: Temp directory for downloads (default: per-process)
            rng: Random source for word selection
        """
        self.queue = queue
        self.width = width
        self.height = height
        self.vocabulary = tuple(vocabulary) or VOCABULARY
        self.output_dir = output_dir or default_output_dir()
        self.metrics = AcquisitionMetrics()

        self._client = client
        self._shutdown = shutdown
        self._rng = rng or random.Random()
        self._thread: Optional[threading.Thread] = None
        self._saved_count: int = 0
        self._cadence: Optional[float] = None
        self._state = WorkerState.IDLE

        if client is None:
            logger.info("No generation credential configured, acquisition worker disabled")
            self._state = WorkerState.DISABLED
            return

        try:
            self._cadence = cadence_seconds(images_per_hour)
        except ConfigError as e:
            logger.error(f"Acquisition worker disabled: {e}")
            self._state = WorkerState.DISABLED

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        queue: HandoffQueue,
        shutdown: threading.Event,
    ) -> "AcquisitionWorker":
        """Build a worker (and its client) from application settings."""
        gen = settings.generation
        client = None
        if gen.api_key:
            client = ImageGenerationClient(
                api_key=gen.api_key,
                endpoint=gen.endpoint,
                model=gen.model,
                size=gen.size,
                timeout=gen.request_timeout_seconds,
            )
        return cls(
            queue=queue,
            client=client,
            images_per_hour=gen.images_per_hour,
            width=settings.display.width,
            height=settings.display.height,
            shutdown=shutdown,
            vocabulary=gen.vocabulary or VOCABULARY,
            output_dir=default_output_dir(gen.output_prefix),
        )

    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def cadence(self) -> Optional[float]:
        """Sleep between iterations, None when disabled for a bad rate."""
        return self._cadence

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """
        Spawn the background thread.

        Returns:
            True if a thread was started, False if disabled or already running.
        """
        if self._state is WorkerState.DISABLED:
            return False
        if self._thread is not None:
            logger.warning("Acquisition worker already started")
            return False

        self._thread = threading.Thread(
            target=self.run,
            name="acquisition-worker",
            daemon=True,
        )
        self._thread.start()
        return True

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Signal shutdown and wait for the thread to exit.

        Args:
            timeout: Maximum seconds to wait for the thread. None = wait forever.
        """
        self._shutdown.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning(f"Acquisition worker still busy after {timeout}s")

    def run(self) -> None:
        """
        Generation loop; runs until the shutdown event is set.

        Call start() to run it on a background thread.
        """
        if self._state is WorkerState.DISABLED:
            return

        self._state = WorkerState.RUNNING
        logger.info(
            f"Acquisition worker started: one request every {self._cadence:.0f}s, "
            f"output dir {self.output_dir}"
        )

        try:
            while not self._shutdown.is_set():
                try:
                    self.run_once()
                except Exception as e:
                    self.metrics.unexpected_errors += 1
                    logger.exception(f"Unexpected acquisition error: {e}")

                if self._shutdown.wait(self._cadence):
                    break
        finally:
            self._cleanup()
            if self._client is not None:
                self._client.close()
            self._state = WorkerState.STOPPED
            logger.info("Acquisition worker stopped")

    def run_once(self) -> Optional[FrameImage]:
        """
        Perform one generate/download/decode/enqueue attempt.

        Returns:
            The queued frame, or None if any step failed.
        """
        if self._client is None:
            return None

        self.metrics.attempts += 1
        prompt = build_prompt(choose_word(self._rng, self.vocabulary))
        logger.info(f"Requesting image: {prompt!r}")

        try:
            url = self._client.generate(prompt)
            data = self._client.download(url)
        except NetworkError as e:
            self.metrics.network_errors += 1
            logger.warning(f"Network error, skipping iteration: {e}")
            return None
        except PayloadError as e:
            self.metrics.payload_errors += 1
            logger.warning(f"Payload error, skipping iteration: {e}")
            return None

        try:
            path = self._persist(prompt, data)
            logger.debug(f"Saved generated image to {path}")
        except FilesystemError as e:
            # Diagnostics copy only, the image itself is still usable
            self.metrics.filesystem_errors += 1
            logger.warning(f"Could not save generated image: {e}")

        try:
            frame = decode_and_scale(data, self.width, self.height, source=prompt)
        except DecodeError as e:
            self.metrics.decode_errors += 1
            logger.warning(f"Generated image could not be decoded: {e}")
            return None

        self.queue.push(frame)
        self.metrics.images_generated += 1
        logger.info(f"Generated image queued ({self.metrics.images_generated} total)")
        return frame

    def _persist(self, prompt: str, data: bytes) -> Path:
        """Write raw image bytes into the output directory."""
        self._saved_count += 1
        path = self.output_dir / f"{slugify(prompt)}-{self._saved_count:04d}{image_suffix(data)}"
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise FilesystemError(f"Cannot write {path}: {e}")
        return path

    def _cleanup(self) -> None:
        """Best-effort removal of the output directory."""
        if not self.output_dir.exists():
            return
        try:
            shutil.rmtree(self.output_dir)
            logger.info(f"Removed temporary directory {self.output_dir}")
        except OSError as e:
            logger.warning(f"Failed to remove temporary directory {self.output_dir}: {e}")

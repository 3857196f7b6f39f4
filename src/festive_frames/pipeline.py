"""
Supply Pipeline
===============

Facade the display loop talks to: "give me the next image to show".

Selection policy for next():
    1. A freshly generated frame waiting in the hand-off queue is returned
       first, and moved into the rotation pool on the way out.
    2. Otherwise a frame is sampled uniformly from the rotation pool.
    3. Otherwise None: there is nothing to show yet.

next() only touches in-memory containers, so it never waits on the
network. Bootstrap frames are not guaranteed to be shown before
generated ones.
"""

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from festive_frames.acquisition.worker import AcquisitionWorker
from festive_frames.config import Settings
from festive_frames.frames.frame import FrameImage
from festive_frames.frames.loader import load_bootstrap
from festive_frames.supply.handoff import HandoffQueue
from festive_frames.supply.pool import RotationPool


logger = logging.getLogger(__name__)


class SupplyPipeline:
    """
    Composes the bootstrap loader, hand-off queue, rotation pool and
    acquisition worker, and owns the worker's lifecycle.

    Example:
        shutdown = threading.Event()
        with SupplyPipeline.from_settings(settings, shutdown) as pipeline:
            while not shutdown.is_set():
                frame = pipeline.next()
                if frame is not None:
                    display.present(frame)
                shutdown.wait(5.0)
    """

    def __init__(
        self,
        queue: HandoffQueue,
        pool: RotationPool,
        worker: Optional[AcquisitionWorker] = None,
        bootstrap_path: Optional[Union[str, Path]] = None,
        width: int = 32,
        height: int = 32,
    ) -> None:
        """
        Initialize supply pipeline.

        Args:
            queue: Queue the worker pushes into
            pool: Rotation pool for fallback selection
            worker: Background acquisition worker (None = no generation)
            bootstrap_path: Directory loaded into the pool by start()
            width: Frame width for bootstrap decoding
            height: Frame height for bootstrap decoding
        """
        self.queue = queue
        self.pool = pool
        self.worker = worker
        self.bootstrap_path = bootstrap_path
        self.width = width
        self.height = height
        self._started = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        shutdown: Optional[threading.Event] = None,
    ) -> "SupplyPipeline":
        """
        Build a pipeline from application settings.

        Args:
            settings: Loaded settings
            shutdown: Shared cancellation event (created if None)
        """
        shutdown = shutdown or threading.Event()
        queue = HandoffQueue()
        pool = RotationPool(max_size=settings.pool.max_size)
        worker = AcquisitionWorker.from_settings(settings, queue, shutdown)
        return cls(
            queue=queue,
            pool=pool,
            worker=worker,
            bootstrap_path=settings.bootstrap.path,
            width=settings.display.width,
            height=settings.display.height,
        )

    def start(self) -> None:
        """Load bootstrap frames into the pool, then start the worker."""
        if self._started:
            logger.warning("SupplyPipeline already started")
            return
        self._started = True

        if self.bootstrap_path is not None:
            for frame in load_bootstrap(self.bootstrap_path, self.width, self.height):
                self.pool.append(frame, pinned=True)

        if self.worker is not None:
            self.worker.start()

        logger.info(
            f"SupplyPipeline started with {self.pool.size} bootstrap images, "
            f"worker={self.worker.state.value if self.worker else 'none'}"
        )

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the worker to stop and wait for it."""
        if self.worker is not None:
            self.worker.stop(timeout)
        logger.info("SupplyPipeline stopped")

    def next(self) -> Optional[FrameImage]:
        """
        Choose the frame to display now.

        Returns:
            Newest undisplayed generated frame, else a random pool frame,
            else None when nothing is available.
        """
        frame = self.queue.try_pop()
        if frame is not None:
            self.pool.append(frame)
            return frame

        return self.pool.sample_uniform()

    def metrics(self) -> dict:
        """
        Get pipeline metrics for observability.

        Returns:
            Dict with queue, pool and worker sections
        """
        worker_metrics = {}
        if self.worker is not None:
            worker_metrics = {
                "state": self.worker.state.value,
                **self.worker.metrics.to_dict(),
            }
        return {
            "queue": self.queue.metrics(),
            "pool": self.pool.metrics(),
            "worker": worker_metrics,
        }

    def __enter__(self) -> "SupplyPipeline":
        self.start()
        return self

    def __exit__(self, *args) -> None:
        self.stop()

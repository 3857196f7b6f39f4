"""
Acquisition Module
==================

Background generation of new images from a generative image API.

This module provides:
    - ImageGenerationClient: HTTP client (generate + download)
    - AcquisitionWorker: Rate-limited background thread feeding a HandoffQueue
    - Prompt helpers: theme vocabulary, prompt template, filename slugs

Example:
    from festive_frames.acquisition import AcquisitionWorker

    worker = AcquisitionWorker.from_settings(settings, queue, shutdown)
    worker.start()
"""

from festive_frames.acquisition.client import ImageGenerationClient
from festive_frames.acquisition.prompts import (
    VOCABULARY,
    build_prompt,
    choose_word,
    slugify,
)
from festive_frames.acquisition.worker import (
    AcquisitionMetrics,
    AcquisitionWorker,
    WorkerState,
    cadence_seconds,
)


__all__ = [
    "ImageGenerationClient",
    "AcquisitionWorker",
    "AcquisitionMetrics",
    "WorkerState",
    "cadence_seconds",
    "VOCABULARY",
    "build_prompt",
    "choose_word",
    "slugify",
]

"""
Festive Frames
==============

Continuous image supply for small RGB pixel displays.

This package keeps a display consumer fed with fixed-size pixel images.
A local bootstrap set seeds a rotation pool at startup, and a background
worker periodically asks a generative image API for new pictures, which
are shown once as they arrive and then join the rotation.

Components:
    - frames: FrameImage model, decode/scale codec, bootstrap loader
    - supply: Hand-off queue and rotation pool
    - pipeline: SupplyPipeline facade (next image to show)
    - acquisition: Prompt vocabulary, HTTP client, background worker
    - display: Display sinks and the render loop

Example:
    from festive_frames.config import load_config
    from festive_frames.pipeline import SupplyPipeline

    settings = load_config()
    pipeline = SupplyPipeline.from_settings(settings)
    pipeline.start()
    frame = pipeline.next()
"""

__version__ = "0.1.0"
__author__ = "Festive Frames Project"

__all__ = [
    "__version__",
]

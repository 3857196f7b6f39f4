"""
Frames Module
=============

Pixel frame model and the image sources that produce it.

This module provides:
    - FrameImage: Immutable RGB pixel buffer of fixed display size
    - decode / scale / to_frame / decode_and_scale: Image codec
    - load_bootstrap: One-shot directory scan for the filler set

Example:
    from festive_frames.frames import decode_and_scale, load_bootstrap

    frames = load_bootstrap("bootstrap_imgs", width=32, height=32)
    frame = decode_and_scale(png_bytes, 32, 32)
"""

from festive_frames.frames.frame import FrameImage
from festive_frames.frames.codec import (
    decode,
    scale,
    to_frame,
    decode_and_scale,
)
from festive_frames.frames.loader import load_bootstrap


__all__ = [
    "FrameImage",
    "decode",
    "scale",
    "to_frame",
    "decode_and_scale",
    "load_bootstrap",
]

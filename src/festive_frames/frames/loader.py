"""
Bootstrap Loader
================

One-shot scan of a directory of filler images.

Design Rules:
    - Only regular files are read; symlinks, directories and special
      files are skipped with a log line
    - Undecodable files are skipped, never raised
    - A missing or empty directory yields an empty list
    - Order follows directory iteration order
"""

import logging
import os
from pathlib import Path
from typing import List, Union

from festive_frames.errors import DecodeError
from festive_frames.frames.codec import decode_and_scale
from festive_frames.frames.frame import FrameImage


logger = logging.getLogger(__name__)


def load_bootstrap(
    directory: Union[str, Path],
    width: int,
    height: int,
) -> List[FrameImage]:
    """
    Load, decode and scale every regular file in a directory.

    Args:
        directory: Directory holding bootstrap images
        width: Target frame width
        height: Target frame height

    Returns:
        Successfully decoded frames in directory-iteration order
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning(f"Bootstrap directory '{directory}' not found, starting with no images")
        return []

    frames: List[FrameImage] = []
    try:
        entries = list(os.scandir(directory))
    except OSError as e:
        logger.error(f"Cannot list bootstrap directory '{directory}': {e}")
        return []

    for entry in entries:
        if not entry.is_file(follow_symlinks=False):
            logger.info(f"Skipping '{entry.path}' as it is not a regular file")
            continue

        try:
            data = Path(entry.path).read_bytes()
        except OSError as e:
            logger.warning(f"Skipping '{entry.path}': {e}")
            continue

        try:
            frame = decode_and_scale(data, width, height, source=entry.path)
        except DecodeError as e:
            logger.warning(f"Skipping '{entry.path}' as it could not be decoded: {e}")
            continue

        frames.append(frame)

    logger.info(f"Loaded {len(frames)} bootstrap images from '{directory}'")
    return frames

"""
Image Codec
===========

Turns encoded image bytes into display-ready FrameImage objects.

Design Rules:
    - This is the ONLY place in the codebase that decodes images
    - Scaling fills the target box (one uniform factor, cropping allowed)
    - Pixels that are not fully opaque are left unset (black), never blended
    - Fails with DecodeError on empty or corrupt input; callers skip the image
"""

import logging
from typing import Union

import cv2
import numpy as np

from festive_frames.errors import DecodeError
from festive_frames.frames.frame import FrameImage


logger = logging.getLogger(__name__)

OPAQUE = 255


def decode(data: Union[bytes, bytearray, memoryview]) -> np.ndarray:
    """
    Decode encoded image bytes into an RGBA array.

    Args:
        data: Encoded image (PNG, JPEG, WebP, ...)

    Returns:
        RGBA image as np.ndarray (H, W, 4), dtype=uint8. Images without an
        alpha channel come back fully opaque.

    Raises:
        DecodeError: If data is empty or cannot be decoded
    """
    if not data:
        raise DecodeError("Image data is empty")

    nparr = np.frombuffer(data, np.uint8)
    try:
        raw = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
    except cv2.error as e:
        raise DecodeError(f"OpenCV failed to decode image: {e}")

    if raw is None or raw.size == 0:
        raise DecodeError("cv2.imdecode returned no image")

    # 16-bit sources are reduced to 8 bits per channel
    if raw.dtype == np.uint16:
        raw = (raw >> 8).astype(np.uint8)
    elif raw.dtype != np.uint8:
        raise DecodeError(f"Unsupported pixel dtype: {raw.dtype}")

    if raw.ndim == 2:
        return cv2.cvtColor(raw, cv2.COLOR_GRAY2RGBA)
    channels = raw.shape[2]
    if channels == 1:
        return cv2.cvtColor(raw, cv2.COLOR_GRAY2RGBA)
    if channels == 3:
        return cv2.cvtColor(raw, cv2.COLOR_BGR2RGBA)
    if channels == 4:
        return cv2.cvtColor(raw, cv2.COLOR_BGRA2RGBA)
    raise DecodeError(f"Unsupported channel count: {channels}")


def scale(image: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Scale an image so it covers a width x height box.

    A single factor, the larger of width/source_width and
    height/source_height, is applied to both axes. The result is at least
    as large as the box in both dimensions; the overflow is cropped later.

    Args:
        image: Decoded image (H, W, C)
        width: Target box width
        height: Target box height

    Returns:
        Scaled image, shape (>= height, >= width, C)
    """
    src_h, src_w = image.shape[:2]
    factor = max(width / src_w, height / src_h)

    # Rounding must never land one pixel short of the box
    new_w = max(width, int(round(src_w * factor)))
    new_h = max(height, int(round(src_h * factor)))

    if (new_w, new_h) == (src_w, src_h):
        return image

    interpolation = cv2.INTER_AREA if factor < 1.0 else cv2.INTER_LINEAR
    return cv2.resize(image, (new_w, new_h), interpolation=interpolation)


def to_frame(image: np.ndarray, width: int, height: int, source: str = "") -> FrameImage:
    """
    Copy the opaque pixels of an RGBA image onto a blank frame.

    The frame is anchored at the top-left corner; anything beyond
    width x height is cropped. Pixels whose alpha is below 255 stay black.

    Args:
        image: RGBA image (H, W, 4), typically the output of scale()
        width: Frame width
        height: Frame height
        source: Label stored on the frame

    Returns:
        FrameImage of exactly width x height
    """
    canvas = np.zeros((height, width, 3), dtype=np.uint8)

    region = image[:height, :width]
    rows, cols = region.shape[:2]
    opaque = region[:, :, 3] == OPAQUE

    target = canvas[:rows, :cols]
    target[opaque] = region[:, :, :3][opaque]

    return FrameImage(pixels=canvas, source=source)


def decode_and_scale(
    data: Union[bytes, bytearray, memoryview],
    width: int,
    height: int,
    source: str = "",
) -> FrameImage:
    """
    Decode, scale and convert image bytes into a FrameImage.

    Raises:
        DecodeError: If the bytes cannot be decoded
    """
    raw = decode(data)
    return to_frame(scale(raw, width, height), width, height, source=source)

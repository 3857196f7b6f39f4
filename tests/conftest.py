"""
Test Configuration
==================

Pytest fixtures and test configuration for Festive Frames.
"""

import cv2
import numpy as np
import pytest

from festive_frames.frames.codec import decode_and_scale


def encode_png(rgba: np.ndarray) -> bytes:
    """Encode an RGB or RGBA array as PNG bytes."""
    if rgba.shape[2] == 4:
        bgr = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)
    else:
        bgr = cv2.cvtColor(rgba, cv2.COLOR_RGB2BGR)
    ok, buf = cv2.imencode(".png", bgr)
    assert ok
    return buf.tobytes()


@pytest.fixture
def png_bytes():
    """Factory for solid-colour PNG images."""
    def _make(width=64, height=64, color=(200, 30, 40), alpha=None):
        if alpha is None:
            img = np.zeros((height, width, 3), dtype=np.uint8)
            img[:, :] = color
        else:
            img = np.zeros((height, width, 4), dtype=np.uint8)
            img[:, :] = (*color, alpha)
        return encode_png(img)
    return _make


@pytest.fixture
def make_frame(png_bytes):
    """Factory for 32x32 FrameImages with a distinct colour each."""
    def _make(color=(10, 20, 30), source="test"):
        return decode_and_scale(png_bytes(color=color), 32, 32, source=source)
    return _make


@pytest.fixture
def bootstrap_dir(tmp_path, png_bytes):
    """Directory with two valid images, one empty file and a subdirectory."""
    directory = tmp_path / "bootstrap"
    directory.mkdir()
    (directory / "red.png").write_bytes(png_bytes(color=(255, 0, 0)))
    (directory / "green.png").write_bytes(png_bytes(color=(0, 255, 0)))
    (directory / "empty.png").write_bytes(b"")
    (directory / "nested").mkdir()
    return directory

"""
Acquisition Worker Tests
========================

Uses an in-memory fake client; no network access.
"""

import logging
import random
import threading
import time

import cv2
import numpy as np
import pytest

from festive_frames.acquisition.prompts import VOCABULARY
from festive_frames.acquisition.worker import (
    AcquisitionWorker,
    WorkerState,
    cadence_seconds,
    image_suffix,
)
from festive_frames.errors import ConfigError, NetworkError, PayloadError
from festive_frames.supply import HandoffQueue


class FakeClient:
    """Stands in for ImageGenerationClient."""

    def __init__(self, image=b"", generate_error=None, download_error=None):
        self.image = image
        self.generate_error = generate_error
        self.download_error = download_error
        self.prompts = []
        self.downloads = 0
        self.closed = False

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.generate_error is not None:
            raise self.generate_error
        return "https://images.example/generated.png"

    def download(self, url):
        self.downloads += 1
        if self.download_error is not None:
            raise self.download_error
        return self.image

    def close(self):
        self.closed = True


@pytest.fixture
def make_worker(tmp_path):
    def _make(client, images_per_hour=12, shutdown=None):
        return AcquisitionWorker(
            queue=HandoffQueue(),
            client=client,
            images_per_hour=images_per_hour,
            width=32,
            height=32,
            shutdown=shutdown or threading.Event(),
            output_dir=tmp_path / "generated",
            rng=random.Random(7),
        )
    return _make


class TestCadence:
    """Tests for cadence derivation."""

    def test_twelve_per_hour_is_five_minutes(self):
        assert cadence_seconds(12) == 300.0

    def test_fractional_rate(self):
        assert cadence_seconds(0.5) == 7200.0

    def test_numeric_string_rate(self):
        assert cadence_seconds("6") == 600.0

    @pytest.mark.parametrize("rate", [0, -1, "abc", "six", None, float("nan"), float("inf")])
    def test_invalid_rate_rejected(self, rate):
        with pytest.raises(ConfigError):
            cadence_seconds(rate)

    def test_worker_cadence(self, make_worker):
        worker = make_worker(FakeClient(), images_per_hour=12)
        assert worker.cadence == 300.0
        assert worker.state is WorkerState.IDLE

    def test_invalid_rate_disables_worker(self, make_worker):
        client = FakeClient()
        worker = make_worker(client, images_per_hour=0)
        assert worker.state is WorkerState.DISABLED
        assert worker.start() is False
        assert client.prompts == []

    def test_non_numeric_rate_disables_worker(self, make_worker):
        worker = make_worker(FakeClient(), images_per_hour="six")
        assert worker.state is WorkerState.DISABLED
        assert worker.cadence is None


class TestDisabled:
    """A worker without credentials never touches the network."""

    def test_no_client_means_disabled(self, make_worker):
        worker = make_worker(None)
        assert worker.state is WorkerState.DISABLED
        assert worker.start() is False
        assert worker.run_once() is None
        assert not worker.is_alive


class TestRunOnce:
    """Tests for a single acquisition iteration."""

    def test_success_queues_frame_and_saves_bytes(self, make_worker, png_bytes):
        data = png_bytes(width=256, height=256)
        client = FakeClient(image=data)
        worker = make_worker(client)

        frame = worker.run_once()

        assert frame is not None
        assert (frame.width, frame.height) == (32, 32)
        assert worker.queue.try_pop() is frame
        assert worker.metrics.images_generated == 1

        saved = list(worker.output_dir.iterdir())
        assert len(saved) == 1
        assert saved[0].read_bytes() == data
        assert all(c.isalnum() or c in "-." for c in saved[0].name)

    def test_prompt_uses_vocabulary_word(self, make_worker, png_bytes):
        client = FakeClient(image=png_bytes())
        worker = make_worker(client)
        worker.run_once()
        assert any(word in client.prompts[0] for word in VOCABULARY)

    def test_network_error_is_absorbed(self, make_worker):
        client = FakeClient(generate_error=NetworkError("boom"))
        worker = make_worker(client)

        assert worker.run_once() is None
        assert worker.queue.size == 0
        assert worker.metrics.network_errors == 1
        assert client.downloads == 0

    def test_payload_error_is_absorbed(self, make_worker):
        worker = make_worker(FakeClient(generate_error=PayloadError("no url")))
        assert worker.run_once() is None
        assert worker.metrics.payload_errors == 1

    def test_download_error_is_absorbed(self, make_worker):
        worker = make_worker(FakeClient(download_error=NetworkError("404")))
        assert worker.run_once() is None
        assert worker.metrics.network_errors == 1

    def test_decode_error_is_absorbed(self, make_worker):
        worker = make_worker(FakeClient(image=b"not an image"))
        assert worker.run_once() is None
        assert worker.metrics.decode_errors == 1
        assert worker.queue.size == 0

    def test_unwritable_output_dir_still_queues(self, make_worker, png_bytes, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        worker = make_worker(FakeClient(image=png_bytes()))
        worker.output_dir = blocker / "generated"

        assert worker.run_once() is not None
        assert worker.metrics.filesystem_errors == 1


class TestRunLoop:
    """Tests for the background loop and shutdown."""

    def test_stop_mid_sleep_exits_promptly(self, make_worker, png_bytes):
        client = FakeClient(image=png_bytes())
        worker = make_worker(client, images_per_hour=12)

        assert worker.start() is True
        deadline = time.monotonic() + 5
        while worker.metrics.attempts == 0 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert worker.state is WorkerState.RUNNING

        started = time.monotonic()
        worker.stop(timeout=5)
        elapsed = time.monotonic() - started

        assert elapsed < 2.0
        assert not worker.is_alive
        assert worker.state is WorkerState.STOPPED
        assert worker.metrics.attempts == 1
        assert client.closed

    def test_cleanup_removes_output_dir(self, make_worker, png_bytes):
        worker = make_worker(FakeClient(image=png_bytes()))
        worker.start()
        deadline = time.monotonic() + 5
        while worker.metrics.images_generated == 0 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert worker.output_dir.exists()

        worker.stop(timeout=5)

        assert not worker.output_dir.exists()

    def test_failures_never_end_the_loop(self, make_worker):
        shutdown = threading.Event()
        client = FakeClient(generate_error=RuntimeError("unexpected"))
        worker = make_worker(client, images_per_hour=3600 * 20, shutdown=shutdown)

        worker.start()
        deadline = time.monotonic() + 5
        while worker.metrics.attempts < 3 and time.monotonic() < deadline:
            time.sleep(0.01)
        worker.stop(timeout=5)

        assert worker.metrics.attempts >= 3
        assert worker.metrics.unexpected_errors == worker.metrics.attempts

    def test_start_twice_is_refused(self, make_worker, png_bytes):
        worker = make_worker(FakeClient(image=png_bytes()))
        assert worker.start() is True
        try:
            assert worker.start() is False
        finally:
            worker.stop(timeout=5)

    def test_cleanup_failure_still_stops(self, make_worker, png_bytes, monkeypatch, caplog):
        def refuse(path):
            raise OSError("device busy")

        monkeypatch.setattr("festive_frames.acquisition.worker.shutil.rmtree", refuse)
        client = FakeClient(image=png_bytes())
        worker = make_worker(client)
        worker.start()
        deadline = time.monotonic() + 5
        while worker.metrics.images_generated == 0 and time.monotonic() < deadline:
            time.sleep(0.01)

        with caplog.at_level(logging.WARNING, logger="festive_frames.acquisition.worker"):
            worker.stop(timeout=5)

        assert not worker.is_alive
        assert worker.state is WorkerState.STOPPED
        assert client.closed
        assert worker.output_dir.exists()
        assert any(
            "Failed to remove temporary directory" in record.getMessage()
            for record in caplog.records
        )


class TestImageSuffix:
    """Saved downloads are named after their actual format."""

    @pytest.mark.parametrize(
        "data, suffix",
        [
            (b"\x89PNG\r\n\x1a\n....", ".png"),
            (b"\xff\xd8\xff\xe0..JFIF", ".jpg"),
            (b"GIF89a....", ".gif"),
            (b"RIFF\x10\x00\x00\x00WEBPVP8 ", ".webp"),
            (b"not an image", ".img"),
            (b"", ".img"),
        ],
    )
    def test_suffix_from_leading_bytes(self, data, suffix):
        assert image_suffix(data) == suffix

    def test_jpeg_download_saved_as_jpg(self, make_worker):
        ok, encoded = cv2.imencode(".jpg", np.full((64, 64, 3), 200, dtype=np.uint8))
        assert ok
        worker = make_worker(FakeClient(image=encoded.tobytes()))

        assert worker.run_once() is not None

        saved = list(worker.output_dir.iterdir())
        assert len(saved) == 1
        assert saved[0].suffix == ".jpg"

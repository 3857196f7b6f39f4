"""
Configuration Tests
===================
"""

import threading

import pytest

from festive_frames import config as config_module
from festive_frames.acquisition.worker import AcquisitionWorker, WorkerState
from festive_frames.config import Settings, load_config
from festive_frames.supply import HandoffQueue


class TestLoadConfig:
    """Tests for load_config()."""

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        for name in ("FESTIVE_CONFIG", "FESTIVE_API_KEY", "OPENAI_API_KEY", "FESTIVE_IMAGES_PER_HOUR"):
            monkeypatch.delenv(name, raising=False)

        settings = load_config()

        assert settings.display.width == 32
        assert settings.display.height == 32
        assert settings.generation.api_key is None
        assert settings.generation.images_per_hour == 12
        assert settings.generation.request_timeout_seconds == 60
        assert settings.pool.max_size is None

    def test_yaml_file_is_read(self, tmp_path, monkeypatch):
        monkeypatch.delenv("FESTIVE_IMAGES_PER_HOUR", raising=False)
        config = tmp_path / "config.yaml"
        config.write_text(
            "display:\n"
            "  width: 64\n"
            "generation:\n"
            "  images_per_hour: 6\n"
            "bootstrap:\n"
            "  path: /srv/imgs\n"
        )

        settings = load_config(str(config))

        assert settings.display.width == 64
        assert settings.generation.images_per_hour == 6
        assert settings.bootstrap.path == "/srv/imgs"

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        config = tmp_path / "config.yaml"
        config.write_text("generation:\n  images_per_hour: 6\n")
        monkeypatch.setenv("FESTIVE_IMAGES_PER_HOUR", "20")
        monkeypatch.setenv("FESTIVE_API_KEY", "sk-env")

        settings = load_config(str(config))

        assert settings.generation.images_per_hour == 20
        assert settings.generation.api_key == "sk-env"

    def test_openai_key_is_fallback(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("FESTIVE_CONFIG", raising=False)
        monkeypatch.delenv("FESTIVE_API_KEY", raising=False)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")

        assert load_config().generation.api_key == "sk-openai"

    def test_non_positive_rate_is_accepted_by_settings(self):
        settings = Settings.model_validate({"generation": {"images_per_hour": 0}})
        assert settings.generation.images_per_hour == 0

    def test_no_settings_loaded_at_import(self):
        assert not hasattr(config_module, "settings")


class TestRateValues:
    """Odd rate values load fine and are judged by the worker."""

    @pytest.fixture(autouse=True)
    def _clean_env(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        for name in ("FESTIVE_CONFIG", "FESTIVE_IMAGES_PER_HOUR", "OPENAI_API_KEY"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("FESTIVE_API_KEY", "sk-test")

    def _worker(self, settings):
        return AcquisitionWorker.from_settings(settings, HandoffQueue(), threading.Event())

    def test_fractional_yaml_rate(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("generation:\n  images_per_hour: 0.5\n")

        settings = load_config(str(config))
        worker = self._worker(settings)

        assert settings.generation.images_per_hour == 0.5
        assert worker.state is WorkerState.IDLE
        assert worker.cadence == 7200.0

    def test_non_numeric_yaml_rate_disables_worker(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("generation:\n  images_per_hour: abc\n")

        worker = self._worker(load_config(str(config)))

        assert worker.state is WorkerState.DISABLED

    def test_non_numeric_env_rate_disables_worker(self, monkeypatch):
        monkeypatch.setenv("FESTIVE_IMAGES_PER_HOUR", "six")

        settings = load_config()
        worker = self._worker(settings)

        assert settings.generation.images_per_hour == "six"
        assert worker.state is WorkerState.DISABLED

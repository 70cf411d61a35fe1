"""Tests for configuration validation (saveup_pet/config.py)"""
import pytest

from saveup_pet import config
from saveup_pet.exceptions import ConfigurationError


class TestConfigValidation:

    def test_defaults_are_valid(self):
        config.validate_config()

    def test_default_decay_settings(self):
        assert config.DECAY_THRESHOLD_HOURS == 12
        assert config.DECAY_CHECK_INTERVAL_SECONDS == 3600

    def test_unknown_storage_backend(self, monkeypatch):
        monkeypatch.setattr(config, "STORAGE_BACKEND", "mongo")

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "STORAGE_BACKEND"

    def test_postgres_requires_database_url(self, monkeypatch):
        monkeypatch.setattr(config, "STORAGE_BACKEND", "postgres")
        monkeypatch.setattr(config, "DATABASE_URL", "")

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "DATABASE_URL"

    def test_invalid_pool_size(self, monkeypatch):
        monkeypatch.setattr(config, "DB_POOL_MIN_SIZE", 5)
        monkeypatch.setattr(config, "DB_POOL_MAX_SIZE", 2)

        with pytest.raises(ConfigurationError):
            config.validate_config()

    def test_non_positive_decay_interval(self, monkeypatch):
        monkeypatch.setattr(config, "DECAY_CHECK_INTERVAL_SECONDS", 0)

        with pytest.raises(ConfigurationError):
            config.validate_config()

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setattr(config, "LOG_LEVEL", "CHATTY")

        with pytest.raises(ConfigurationError):
            config.validate_config()

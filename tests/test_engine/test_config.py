"""
Tests for engine configuration.

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

from pathlib import Path

import pytest
import yaml

from tm2_terminology.engine.config import (
    EngineConfig,
    LoggingConfig,
    ResolutionConfig,
    StoreConfig,
    load_config,
)


class TestStoreConfig:
    """Tests for StoreConfig."""

    def test_default_values(self):
        """Test default store configuration."""
        config = StoreConfig()

        assert config.backend == "memory"
        assert config.data_file is None
        assert config.timeout_seconds == 30.0

    def test_from_env(self, monkeypatch):
        """Test configuration from environment variables."""
        monkeypatch.setenv("TM2_STORE_BACKEND", "http")
        monkeypatch.setenv("TM2_STORE_URL", "http://records:9000")
        monkeypatch.setenv("TM2_STORE_TIMEOUT", "12")

        config = StoreConfig.from_env()

        assert config.backend == "http"
        assert config.base_url == "http://records:9000"
        assert config.timeout_seconds == 12.0


class TestResolutionConfig:
    """Tests for ResolutionConfig."""

    def test_default_values(self):
        """Test default resolution policy."""
        config = ResolutionConfig()

        assert config.confidence_threshold == 0.6
        assert config.min_query_length == 2
        assert config.max_disease_groups == 20
        assert config.autocomplete_limit == 10
        assert config.strict_input is False


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_default_values(self):
        """Test default engine configuration."""
        config = EngineConfig()

        assert config.name == "tm2-terminology"
        assert isinstance(config.store, StoreConfig)
        assert isinstance(config.logging, LoggingConfig)
        assert config.logging.log_operations is True

    def test_from_dict(self):
        """Test creating config from dictionary."""
        config = EngineConfig.from_dict(
            {
                "name": "test-engine",
                "store": {"backend": "http", "base_url": "http://records:9000"},
                "resolution": {"confidence_threshold": 0.75, "max_disease_groups": 5},
                "logging": {"level": "debug", "log_operations": False},
            }
        )

        assert config.name == "test-engine"
        assert config.store.backend == "http"
        assert config.resolution.confidence_threshold == 0.75
        assert config.resolution.max_disease_groups == 5
        assert config.resolution.min_query_length == 2
        assert config.logging.level == "DEBUG"
        assert config.logging.log_operations is False

    def test_from_empty_dict(self):
        """Test empty documents give defaults."""
        assert EngineConfig.from_dict(None).to_dict() == EngineConfig().to_dict()

    def test_to_dict_from_dict(self):
        """Test dictionary form can be read back."""
        config = EngineConfig.from_dict({"resolution": {"strict_input": True}})

        assert EngineConfig.from_dict(config.to_dict()).resolution.strict_input is True

    def test_to_dict_omits_api_key(self):
        """Test credentials are not serialized."""
        config = EngineConfig.from_dict({"store": {"api_key": "secret"}})

        assert "api_key" not in config.to_dict()["store"]


class TestLoadConfig:
    """Tests for load_config."""

    def test_load_yaml(self, tmp_path: Path):
        """Test loading a YAML config file."""
        path = tmp_path / "engine.yaml"
        path.write_text(yaml.safe_dump({"store": {"backend": "memory", "data_file": "records.yaml"}}))

        config = load_config(path)

        assert config.store.data_file == "records.yaml"

    def test_missing_file(self, tmp_path: Path):
        """Test error when config file doesn't exist."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

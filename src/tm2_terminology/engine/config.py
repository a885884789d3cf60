"""
Engine Configuration

Configuration management for the terminology engine.
"""

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any

import yaml


@dataclass
class StoreConfig:
    """Record store configuration."""

    backend: str = "memory"  # memory, http
    data_file: str | None = None
    base_url: str = "http://localhost:8081"
    api_key: str | None = None
    timeout_seconds: float = 30.0

    @classmethod
    def from_env(cls) -> "StoreConfig":
        """Create configuration from environment variables."""
        return cls(
            backend=os.environ.get("TM2_STORE_BACKEND", "memory"),
            data_file=os.environ.get("TM2_DATA_FILE"),
            base_url=os.environ.get("TM2_STORE_URL", "http://localhost:8081"),
            api_key=os.environ.get("TM2_STORE_TOKEN"),
            timeout_seconds=float(os.environ.get("TM2_STORE_TIMEOUT", "30.0")),
        )


@dataclass
class ResolutionConfig:
    """Resolution and matching policy."""

    confidence_threshold: float = 0.6
    min_query_length: int = 2
    max_disease_groups: int = 20
    autocomplete_limit: int = 10
    strict_input: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    log_operations: bool = True


@dataclass
class EngineConfig:
    """Complete engine configuration."""

    name: str = "tm2-terminology"
    version: str = "0.1.0"

    store: StoreConfig = field(default_factory=StoreConfig)
    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "EngineConfig":
        """Create config from dictionary."""
        config = cls()
        data = data or {}

        if "name" in data:
            config.name = data["name"]
        if "version" in data:
            config.version = data["version"]

        # Store config
        if "store" in data:
            st = data["store"]
            config.store = StoreConfig(
                backend=st.get("backend", "memory"),
                data_file=st.get("data_file"),
                base_url=st.get("base_url", "http://localhost:8081"),
                api_key=st.get("api_key"),
                timeout_seconds=float(st.get("timeout_seconds", 30.0)),
            )

        # Resolution config
        if "resolution" in data:
            res = data["resolution"]
            config.resolution = ResolutionConfig(
                confidence_threshold=float(res.get("confidence_threshold", 0.6)),
                min_query_length=res.get("min_query_length", 2),
                max_disease_groups=res.get("max_disease_groups", 20),
                autocomplete_limit=res.get("autocomplete_limit", 10),
                strict_input=res.get("strict_input", False),
            )

        # Logging config
        if "logging" in data:
            log = data["logging"]
            config.logging = LoggingConfig(
                level=str(log.get("level", "INFO")).upper(),
                log_operations=log.get("log_operations", True),
            )

        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "name": self.name,
            "version": self.version,
            "store": {
                "backend": self.store.backend,
                "data_file": self.store.data_file,
                "base_url": self.store.base_url,
                "timeout_seconds": self.store.timeout_seconds,
            },
            "resolution": {
                "confidence_threshold": self.resolution.confidence_threshold,
                "min_query_length": self.resolution.min_query_length,
                "max_disease_groups": self.resolution.max_disease_groups,
                "autocomplete_limit": self.resolution.autocomplete_limit,
                "strict_input": self.resolution.strict_input,
            },
            "logging": {
                "level": self.logging.level,
                "log_operations": self.logging.log_operations,
            },
        }


def load_config(config_path: str | Path) -> EngineConfig:
    """Load configuration from YAML file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    return EngineConfig.from_dict(data)

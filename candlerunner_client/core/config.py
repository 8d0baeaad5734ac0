"""Configuration loading and validation."""
import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

STORE_NAMES = [
    "accounts",
    "instruments",
    "strategies",
    "position_managers",
    "strategy_instances",
]


class ConfigError(Exception):
    """Raised when configuration is invalid."""

    pass


@dataclass
class ServiceConfig:
    """Candlerunner service connection configuration."""

    host: str = "127.0.0.1"
    port: int = 27001
    scheme: str = "http"
    timeout_seconds: float | None = None
    url: str | None = None  # full service URL, overrides scheme/host/port

    @property
    def base_url(self) -> str:
        if self.url:
            return self.url.rstrip("/")
        return f"{self.scheme}://{self.host}:{self.port}"


@dataclass
class StoresConfig:
    """Which stores the application context creates and loads."""

    enabled: list[str] = field(default_factory=lambda: list(STORE_NAMES))


@dataclass
class Config:
    """Main configuration container."""

    service: ServiceConfig
    stores: StoresConfig = field(default_factory=StoresConfig)

    def get_enabled_stores(self) -> list[str]:
        """Get enabled store names in load order."""
        return [name for name in STORE_NAMES if name in self.stores.enabled]


def load_config(path: str) -> Config:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        Config object with validated configuration

    Raises:
        ConfigError: If file not found, invalid YAML, or invalid fields
    """
    config_path = Path(path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML: {e}") from e

    if raw is None:
        raise ConfigError("Configuration file is empty")

    if "service" not in raw:
        raise ConfigError("Missing required configuration section: service")

    # Parse service config
    service_raw = raw["service"] or {}
    timeout = service_raw.get("timeout_seconds")
    service = ServiceConfig(
        host=service_raw.get("host", "127.0.0.1"),
        port=service_raw.get("port", 27001),
        scheme=service_raw.get("scheme", "http"),
        timeout_seconds=float(timeout) if timeout is not None else None,
        url=service_raw.get("url"),
    )

    # Parse stores config
    stores_raw = raw.get("stores") or {}
    enabled = stores_raw.get("enabled", list(STORE_NAMES))
    unknown = [name for name in enabled if name not in STORE_NAMES]
    if unknown:
        raise ConfigError(f"Unknown store(s) in stores.enabled: {', '.join(unknown)}")

    config = Config(service=service, stores=StoresConfig(enabled=list(enabled)))

    logger.info(f"Loaded configuration from {path}")
    logger.debug(f"Service: {service.base_url}")
    logger.debug(f"Stores: {config.get_enabled_stores()}")

    return config

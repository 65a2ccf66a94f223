"""Configuration for the POP3 client, stored as JSON."""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError, InvalidConfigError
from .logging import LogManager, get_logger, init_logging, log_call
from .paths import CONFIG_PATH

logger = get_logger(__name__)


class ClientOptions(BaseModel):
    """Immutable options passed into every POP3Client."""

    model_config = ConfigDict(frozen=True)

    formatted_size_precision: int = Field(default=2, ge=0, le=10)
    default_timeout: float = Field(default=1.5, gt=0, lt=2_147_483_647)
    credentials_allow_special_chars: bool = False
    max_line_length: int = Field(default=2048, ge=512)  # RFC 1939 caps lines at 512


class LoggingConfig(BaseModel):
    """Pydantic model for logging settings."""

    log_level: str = "INFO"
    log_dir: Optional[str] = None


class AppConfig(BaseModel):
    """Pydantic model for overall configuration."""

    version: str = "0.1.0"
    client: ClientOptions = Field(default_factory=ClientOptions)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Loads and saves the JSON configuration file."""

    def __init__(self, config_path: Optional[Path] = None):
        self.path = Path(config_path) if config_path else CONFIG_PATH
        self.config = self._load_config()

    def _load_config(self) -> AppConfig:
        """Load configuration from file, or defaults if not present."""

        if not self.path.exists():
            logger.debug(f"No config file at {self.path}, using defaults.")
            return AppConfig()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            config = AppConfig(**data)
            logger.debug("Configuration successfully loaded and validated.")
            return config

        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse config file: {e}")
            raise InvalidConfigError(
                f"Configuration file is not valid JSON: {str(e)}",
                details={"path": str(self.path)},
            ) from e
        except ValidationError as e:
            logger.error(f"Failed to validate config file: {e}")
            raise InvalidConfigError(
                f"Configuration data does not match expected schema: {str(e)}",
                details={"path": str(self.path)},
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read configuration: {str(e)}",
                details={"path": str(self.path)},
            ) from e

    @property
    def client_options(self) -> ClientOptions:
        return self.config.client

    def apply_logging(self) -> LogManager:
        """Configure the package logger from the logging section."""
        settings = self.config.logging
        log_dir = Path(settings.log_dir).expanduser() if settings.log_dir else None
        return init_logging(settings.log_level, log_dir)

    @log_call
    def save(self) -> None:
        """Save the current configuration to file."""

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self.config.model_dump(), f, indent=2, ensure_ascii=False)
            logger.debug("Configuration successfully saved.")

        except OSError as e:
            raise ConfigurationError(
                f"Failed to write configuration file: {str(e)}",
                details={"path": str(self.path)},
            ) from e

    @log_call
    def reset_to_defaults(self) -> None:
        """Reset configuration to default values and persist them."""

        logger.info("Resetting configuration to default values.")
        self.config = AppConfig()
        self.save()

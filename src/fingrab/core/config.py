#!/usr/bin/env python3
"""
Configuration Management for fingrab

Handles environment-based configuration with secure defaults and validation.
Values come from the process environment, optionally seeded from a ``.env``
file in the working directory. Bank credentials are only ever read here and
never logged.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import click
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_TIMEOUT = 5.0  # seconds
DEFAULT_TIMEZONE = "UTC"
DEFAULT_FORMAT = "moneydance"

LOGGER_NAME = "fingrab"


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class BankConfig:
    """Per-bank API settings and credentials."""

    name: str
    base_url: str
    token: str | None = None
    client_id: str | None = None
    client_secret: str | None = None

    @classmethod
    def from_environment(cls, name: str, default_base_url: str) -> "BankConfig":
        """Read ``<BANK>_TOKEN``, ``<BANK>_CLIENT_ID`` and friends for one bank."""
        prefix = name.upper()
        return cls(
            name=name,
            base_url=os.getenv(f"FINGRAB_{prefix}_BASE_URL", default_base_url),
            token=os.getenv(f"{prefix}_TOKEN") or None,
            client_id=os.getenv(f"{prefix}_CLIENT_ID") or None,
            client_secret=os.getenv(f"{prefix}_CLIENT_SECRET") or None,
        )


class ColourFormatter(logging.Formatter):
    """Log formatter that colours the level name for terminal output."""

    COLOURS = {
        logging.DEBUG: "blue",
        logging.INFO: "green",
        logging.WARNING: "yellow",
        logging.ERROR: "red",
        logging.CRITICAL: "red",
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        colour = self.COLOURS.get(record.levelno)
        if colour is None:
            return message
        return click.style(message, fg=colour)


@dataclass
class Config:
    """
    Main configuration class for fingrab.

    Loads configuration from environment variables with secure defaults
    and validation for each environment type.
    """

    environment: Environment

    # Bank configurations
    monzo: BankConfig
    starling: BankConfig

    # Export settings
    timeout: float = DEFAULT_TIMEOUT
    timezone: str = DEFAULT_TIMEZONE
    default_format: str = DEFAULT_FORMAT

    # Application settings
    log_level: str = "INFO"
    banks: dict[str, BankConfig] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.banks = {"monzo": self.monzo, "starling": self.starling}

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("FINGRAB_ENV", "development"))

        return cls(
            environment=env,
            monzo=BankConfig.from_environment("monzo", "https://api.monzo.com"),
            starling=BankConfig.from_environment("starling", "https://api.starlingbank.com"),
            timeout=float(os.getenv("FINGRAB_TIMEOUT", str(DEFAULT_TIMEOUT))),
            timezone=os.getenv("FINGRAB_TIMEZONE", DEFAULT_TIMEZONE),
            default_format=os.getenv("FINGRAB_FORMAT", DEFAULT_FORMAT),
            log_level=os.getenv("FINGRAB_LOG_LEVEL", "INFO").upper(),
        )

    def bank(self, name: str) -> BankConfig:
        """
        Get the configuration for a bank by name (case-insensitive).

        Banks without a dedicated section get one built on the fly from the
        environment, with no default base URL.
        """
        key = name.lower()
        if key not in self.banks:
            self.banks[key] = BankConfig.from_environment(key, "")
        return self.banks[key]

    def tzinfo(self) -> ZoneInfo:
        """Output timezone for formatted dates."""
        return ZoneInfo(self.timezone)

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        if self.timeout <= 0:
            errors.append("FINGRAB_TIMEOUT must be positive")

        try:
            self.tzinfo()
        except (ZoneInfoNotFoundError, ValueError) as e:
            errors.append(f"FINGRAB_TIMEZONE is not a known timezone: {self.timezone} ({e})")

        if not isinstance(logging.getLevelName(self.log_level), int):
            errors.append(f"FINGRAB_LOG_LEVEL is not a logging level: {self.log_level}")

        for bank in (self.monzo, self.starling):
            if bank.client_id and not bank.client_secret:
                prefix = bank.name.upper()
                errors.append(f"{prefix}_CLIENT_SECRET is required when {prefix}_CLIENT_ID is provided")

        return errors

    def setup_logging(self, verbose: bool = False, colour: bool = True) -> None:
        """
        Configure the ``fingrab`` logger.

        Installs a single stderr handler so repeated calls (one per CLI
        invocation in tests) never duplicate output.
        """
        level = logging.DEBUG if verbose else getattr(logging, self.log_level, logging.INFO)

        # Configure format based on environment
        if self.environment == Environment.DEVELOPMENT or verbose:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(levelname)s - %(message)s"

        formatter_cls = ColourFormatter if colour else logging.Formatter
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter_cls(format_str, datefmt="%Y-%m-%d %H:%M:%S"))

        logger = logging.getLogger(LOGGER_NAME)
        for existing in list(logger.handlers):
            logger.removeHandler(existing)
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False

        # Reduce noise from the HTTP stack unless asked for everything
        if not verbose:
            logging.getLogger("httpx").setLevel(logging.WARNING)
            logging.getLogger("httpcore").setLevel(logging.WARNING)

    def get_sensitive_fields(self) -> list:
        """Get list of field names that contain sensitive data."""
        return [
            "monzo.token",
            "monzo.client_secret",
            "starling.token",
            "starling.client_secret",
        ]

    def to_dict(self, include_sensitive: bool = False) -> dict[str, Any]:
        """Convert configuration to dictionary, optionally excluding sensitive data."""
        result: dict[str, Any] = {}

        for field_name, field_value in self.__dict__.items():
            if field_name == "banks":
                continue
            if isinstance(field_value, BankConfig):
                nested_dict: dict[str, Any] = {}
                for nested_name, nested_value in field_value.__dict__.items():
                    full_field_name = f"{field_name}.{nested_name}"

                    if (
                        not include_sensitive
                        and nested_value is not None
                        and full_field_name in self.get_sensitive_fields()
                    ):
                        nested_dict[nested_name] = "***REDACTED***"
                    else:
                        nested_dict[nested_name] = nested_value

                result[field_name] = nested_dict
            elif isinstance(field_value, Enum):
                result[field_name] = field_value.value
            else:
                result[field_name] = field_value

        return result


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        config = Config.from_environment()

        # Validate configuration
        errors = config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        _config = config

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()

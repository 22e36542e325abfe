#!/usr/bin/env python3
"""
Configuration Management for the Budget Engine

Environment-based settings for the callers of the engine (CLI, services).
Engine functions never read configuration themselves; callers read it here
and pass the values in as arguments.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from .diagnostics import ConsoleCategoryFilter, parse_debug_categories

# Load environment variables from .env file
load_dotenv()


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class ImportConfig:
    """Bank CSV import settings."""

    source_tag: str = "up-csv"
    timezone: str | None = None  # IANA name; None keeps the timestamp's own offset


@dataclass
class ProjectionConfig:
    """Forecast and matching settings."""

    similarity_window_days: int = 3
    max_projection_months: int = 600


@dataclass
class DiagnosticsConfig:
    """In-memory diagnostics buffer settings."""

    buffer_size: int = 100
    debug_categories: list[str] = field(default_factory=list)


@dataclass
class Config:
    """
    Main configuration class for the budget engine's callers.

    Loads configuration from environment variables with defaults and
    validation for each environment type.
    """

    environment: Environment

    imports: ImportConfig
    projection: ProjectionConfig
    diagnostics: DiagnosticsConfig

    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("BUDGET_ENV", "development"))

        imports = ImportConfig(
            source_tag=os.getenv("BUDGET_IMPORT_SOURCE", "up-csv"),
            timezone=os.getenv("BUDGET_TIMEZONE") or None,
        )

        projection = ProjectionConfig(
            similarity_window_days=int(os.getenv("BUDGET_SIMILARITY_WINDOW_DAYS", "3")),
            max_projection_months=int(os.getenv("BUDGET_PROJECTION_MAX_MONTHS", "600")),
        )

        diagnostics = DiagnosticsConfig(
            buffer_size=int(os.getenv("BUDGET_LOG_BUFFER_SIZE", "100")),
            debug_categories=_parse_list(os.getenv("BUDGET_DEBUG", "")),
        )

        return cls(
            environment=env,
            imports=imports,
            projection=projection,
            diagnostics=diagnostics,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        if self.projection.similarity_window_days < 0:
            errors.append("Similarity window days must be non-negative")
        if self.projection.max_projection_months <= 0:
            errors.append("Projection max months must be positive")
        if self.diagnostics.buffer_size <= 0:
            errors.append("Log buffer size must be positive")
        if not self.imports.source_tag:
            errors.append("Import source tag must not be empty")

        if self.imports.timezone:
            try:
                ZoneInfo(self.imports.timezone)
            except (ZoneInfoNotFoundError, ValueError):
                errors.append(f"Unknown timezone: {self.imports.timezone}")

        return errors

    @property
    def import_timezone(self) -> ZoneInfo | None:
        """Timezone used to convert bank timestamps, if configured."""
        return ZoneInfo(self.imports.timezone) if self.imports.timezone else None

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

        if self.debug:
            logging.getLogger("budget").setLevel(logging.DEBUG)
        elif self.diagnostics.debug_categories:
            # Only the named categories reach the console below the configured level
            categories = parse_debug_categories(",".join(self.diagnostics.debug_categories))
            for handler in logging.getLogger().handlers:
                handler.addFilter(ConsoleCategoryFilter(categories, level))
            logging.getLogger("budget").setLevel(logging.DEBUG)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a plain dictionary for display."""
        result: dict[str, Any] = {}

        for field_name, field_value in self.__dict__.items():
            if hasattr(field_value, "__dict__") and not isinstance(field_value, Enum):
                result[field_name] = dict(field_value.__dict__)
            elif isinstance(field_value, Enum):
                result[field_name] = field_value.value
            else:
                result[field_name] = field_value

        return result


def _parse_list(value: str, delimiter: str = ",") -> list:
    """Parse comma-separated string into list, handling empty values."""
    if not value:
        return []
    return [item.strip() for item in value.split(delimiter) if item.strip()]


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_environment()

        errors = _config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        _config.setup_logging()

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()


def is_test() -> bool:
    """Check if running in test environment."""
    return get_config().environment == Environment.TEST

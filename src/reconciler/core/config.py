#!/usr/bin/env python3
"""
Configuration Management for the Reconciler

Environment-based configuration with defaults and validation. Values are read
from environment variables, optionally seeded from a .env file.
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class MatchingConfig:
    """Scoring and matching parameters."""

    amount_epsilon_cents: int = 1
    amount_tolerance_ratio: float = 0.05
    date_window_days: int = 7
    multi_charge_window_days: int = 14
    max_days_difference: int = 14
    return_grace_days: int = 7
    score_floor: float = 0.0


@dataclass
class ProcessingConfig:
    """Thresholds and safety switches for applying matches."""

    high_confidence: float = 0.8
    medium_confidence: float = 0.6
    dry_run: bool = False


@dataclass
class YnabConfig:
    """Locations of the YNAB transaction cache and the memo edit files."""

    cache_dir: Path
    edits_dir: Path


@dataclass
class Config:
    """
    Main configuration class for the reconciler.

    Loads configuration from environment variables with defaults and
    validation for each environment type.
    """

    environment: Environment

    # Core directories
    data_dir: Path
    cache_dir: Path
    output_dir: Path

    # Component configurations
    ynab: YnabConfig
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)

    # Application settings
    debug: bool = False
    log_level: str = "INFO"

    @property
    def tracker_file(self) -> Path:
        """Path of the processed-transactions file backing the dedup tracker."""
        return self.cache_dir / "processed_transactions.json"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("RECONCILER_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_reconciler"
            base_dir = Path(os.getenv("RECONCILER_DATA_DIR", str(default_test_dir)))
        else:
            base_dir = Path(os.getenv("RECONCILER_DATA_DIR", "./data")).expanduser().resolve()

        data_dir = base_dir
        cache_dir = data_dir / "cache"
        output_dir = data_dir / "matches"

        for directory in [data_dir, cache_dir, output_dir]:
            directory.mkdir(parents=True, exist_ok=True)

        ynab = YnabConfig(
            cache_dir=data_dir / "ynab" / "cache",
            edits_dir=data_dir / "ynab" / "edits",
        )

        matching = MatchingConfig(
            amount_tolerance_ratio=float(os.getenv("MATCH_AMOUNT_TOLERANCE", "0.05")),
            date_window_days=int(os.getenv("MATCH_DATE_WINDOW_DAYS", "7")),
            multi_charge_window_days=int(os.getenv("MATCH_MULTI_CHARGE_WINDOW_DAYS", "14")),
            max_days_difference=int(os.getenv("MATCH_MAX_DAYS", "14")),
        )

        processing = ProcessingConfig(
            high_confidence=float(os.getenv("CONFIDENCE_HIGH", "0.8")),
            medium_confidence=float(os.getenv("CONFIDENCE_MEDIUM", "0.6")),
            dry_run=_parse_bool(os.getenv("RECONCILER_DRY_RUN", "false")),
        )

        return cls(
            environment=env,
            data_dir=data_dir,
            cache_dir=cache_dir,
            output_dir=output_dir,
            ynab=ynab,
            matching=matching,
            processing=processing,
            debug=_parse_bool(os.getenv("DEBUG", "false")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        for name, path in [
            ("data_dir", self.data_dir),
            ("cache_dir", self.cache_dir),
            ("output_dir", self.output_dir),
        ]:
            if not path.exists():
                errors.append(f"{name} does not exist: {path}")

        if not 0.0 < self.matching.amount_tolerance_ratio < 1.0:
            errors.append("Amount tolerance ratio must be between 0 and 1")
        if self.matching.date_window_days <= 0 or self.matching.multi_charge_window_days <= 0:
            errors.append("Date windows must be positive")
        if self.matching.max_days_difference < self.matching.date_window_days:
            errors.append("Maximum days difference must not be smaller than the date window")

        high = self.processing.high_confidence
        medium = self.processing.medium_confidence
        if not 0.0 <= medium <= high <= 1.0:
            errors.append(f"Confidence thresholds must satisfy 0 <= medium <= high <= 1 (got {medium}, {high})")

        return errors

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a JSON-friendly dictionary."""
        result: dict[str, Any] = {}

        for field_name, field_value in self.__dict__.items():
            if isinstance(field_value, Path):
                result[field_name] = str(field_value)
            elif isinstance(field_value, Enum):
                result[field_name] = field_value.value
            elif hasattr(field_value, "__dict__"):
                # Nested dataclass
                result[field_name] = {
                    name: str(value) if isinstance(value, Path) else value
                    for name, value in field_value.__dict__.items()
                }
            else:
                result[field_name] = field_value

        return result


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


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

#!/usr/bin/env python3
"""
Integration tests for configuration module.

Tests configuration loading from the environment, validation and path layout.
"""

from pathlib import Path

import pytest

from reconciler.core.config import Config, Environment, get_config, reload_config


@pytest.mark.integration
class TestConfigLoading:
    """Test configuration loading and structure."""

    def test_config_loads_in_test_environment(self):
        """Test that config loads without errors and picks up the test environment."""
        config = get_config()

        assert config.environment == Environment.TEST
        assert isinstance(config.data_dir, Path)
        assert config.data_dir.is_absolute()
        assert config.validate() == []

    def test_directory_layout(self):
        """Test derived directories hang off the data directory and exist."""
        config = get_config()

        assert config.cache_dir == config.data_dir / "cache"
        assert config.output_dir == config.data_dir / "matches"
        assert config.ynab.cache_dir == config.data_dir / "ynab" / "cache"
        assert config.ynab.edits_dir == config.data_dir / "ynab" / "edits"
        assert config.tracker_file == config.cache_dir / "processed_transactions.json"
        assert config.cache_dir.exists()
        assert config.output_dir.exists()

    def test_defaults(self):
        """Test matching and processing defaults."""
        config = get_config()

        assert config.matching.amount_epsilon_cents == 1
        assert config.matching.amount_tolerance_ratio == 0.05
        assert config.matching.date_window_days == 7
        assert config.matching.max_days_difference == 14
        assert config.processing.high_confidence == 0.8
        assert config.processing.medium_confidence == 0.6
        assert config.processing.dry_run is False

    def test_environment_overrides(self, monkeypatch):
        """Test environment variables override the defaults."""
        monkeypatch.setenv("MATCH_DATE_WINDOW_DAYS", "5")
        monkeypatch.setenv("CONFIDENCE_HIGH", "0.9")
        monkeypatch.setenv("RECONCILER_DRY_RUN", "yes")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = reload_config()

        assert config.matching.date_window_days == 5
        assert config.processing.high_confidence == 0.9
        assert config.processing.dry_run is True
        assert config.log_level == "DEBUG"

    def test_get_config_is_cached(self):
        """Test get_config returns the same instance until reloaded."""
        assert get_config() is get_config()
        assert reload_config() is not None


@pytest.mark.integration
class TestConfigValidation:
    """Test configuration validation."""

    def test_inverted_thresholds_fail_validation(self, monkeypatch):
        """Test medium above high is reported and get_config refuses to start."""
        monkeypatch.setenv("CONFIDENCE_HIGH", "0.5")
        monkeypatch.setenv("CONFIDENCE_MEDIUM", "0.7")

        errors = Config.from_environment().validate()
        assert any("Confidence thresholds" in error for error in errors)

        with pytest.raises(ValueError, match="Configuration validation failed"):
            reload_config()

    def test_tolerance_out_of_range(self, monkeypatch):
        """Test an amount tolerance of 100% or more is rejected."""
        monkeypatch.setenv("MATCH_AMOUNT_TOLERANCE", "1.5")

        errors = Config.from_environment().validate()
        assert any("tolerance" in error for error in errors)

    def test_to_dict_is_json_friendly(self):
        """Test paths and enums are flattened to strings."""
        result = get_config().to_dict()

        assert result["environment"] == "test"
        assert isinstance(result["data_dir"], str)
        assert isinstance(result["ynab"]["cache_dir"], str)
        assert result["matching"]["date_window_days"] == 7

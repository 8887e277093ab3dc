"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import tempfile
from pathlib import Path
from typing import Any

import pytest

from reconciler.core import config as config_module


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def sample_ynab_transaction() -> dict[str, Any]:
    """Sample YNAB transaction as cached from the API (amount in milliunits)."""
    return {
        "id": "test-transaction-123",
        "date": "2024-08-15",
        "amount": -45990,  # -$45.99 in milliunits
        "payee_name": "AMZN Mktp US*TEST123",
        "account_name": "Chase Credit Card",
        "memo": "Test transaction",
        "cleared": "cleared",
        "approved": True,
        "deleted": False,
    }


@pytest.fixture
def sample_walmart_order() -> dict[str, Any]:
    """Sample scraped Walmart order (dollar amounts, positive)."""
    return {
        "orderId": "2000123456789",
        "orderDate": "2024-01-20",
        "orderStatus": "Delivered",
        "totalAmount": "150.00",
        "finalChargeAmounts": ["100.00", "50.00"],
        "items": [
            {"title": "Great Value Whole Milk, 1 gal", "price": "3.50", "quantity": 2},
            {"title": "Mainstays Bath Towel", "price": "143.00", "quantity": 1},
        ],
    }


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables and a fresh configuration."""
    # Ensure tests don't use real data
    monkeypatch.setenv("RECONCILER_ENV", "test")
    monkeypatch.setenv("RECONCILER_DATA_DIR", str(tmp_path / "reconciler_data"))
    monkeypatch.delenv("RECONCILER_DRY_RUN", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    # Drop any configuration cached by an earlier test
    monkeypatch.setattr(config_module, "_config", None)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for currency handling and precision")
    config.addinivalue_line("markers", "amazon: Tests for Amazon orders and matching")
    config.addinivalue_line("markers", "walmart: Tests for Walmart orders and multi-charge matching")
    config.addinivalue_line("markers", "matching: Tests for scoring and transaction matching")
    config.addinivalue_line("markers", "processing: Tests for applying matches and the dedup tracker")
    config.addinivalue_line("markers", "ynab: Tests for YNAB integration")

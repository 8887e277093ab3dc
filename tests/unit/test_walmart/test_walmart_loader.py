#!/usr/bin/env python3
"""Tests for loading Walmart orders from JSON."""

import json

import pytest

from reconciler.walmart.loader import load_orders


@pytest.mark.walmart
class TestLoadWalmartOrders:
    """Test the Walmart JSON loader."""

    def test_load_list(self, temp_dir, sample_walmart_order):
        """Test a bare list of orders loads."""
        orders_file = temp_dir / "walmart_orders.json"
        orders_file.write_text(json.dumps([sample_walmart_order]))

        orders = load_orders(orders_file)

        assert len(orders) == 1
        assert orders[0].has_multiple_charges

    def test_load_wrapped(self, temp_dir, sample_walmart_order):
        """Test the {"orders": [...]} wrapper is accepted."""
        orders_file = temp_dir / "walmart_orders.json"
        orders_file.write_text(json.dumps({"orders": [sample_walmart_order]}))

        assert [o.order_id for o in load_orders(orders_file)] == ["2000123456789"]

    def test_malformed_orders_skipped(self, temp_dir, sample_walmart_order, caplog):
        """Test malformed orders are logged and the rest still load."""
        orders_file = temp_dir / "walmart_orders.json"
        orders_file.write_text(
            json.dumps(
                [
                    {"orderId": "WM-BAD", "orderDate": "2024-01-20"},
                    "not an order",
                    sample_walmart_order,
                ]
            )
        )

        orders = load_orders(orders_file)

        assert [o.order_id for o in orders] == ["2000123456789"]
        assert "Skipping malformed Walmart order" in caplog.text

    def test_missing_file(self, temp_dir):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_orders(temp_dir / "walmart_orders.json")

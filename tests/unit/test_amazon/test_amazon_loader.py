#!/usr/bin/env python3
"""
Unit tests for Amazon order loading.

Uses small synthetic CSV and JSON files written to a temporary directory.
"""

import json

import pytest

from reconciler.amazon.loader import find_order_history_csv, load_orders, load_refunds

CSV_HEADER = "Order ID,Order Date,Title,Price,Quantity\n"


@pytest.mark.amazon
class TestLoadOrders:
    """Test loading order history CSVs."""

    def test_rows_grouped_by_order(self, temp_dir):
        """Test rows sharing an Order ID become one expense-negative order."""
        csv_file = temp_dir / "orders.csv"
        csv_file.write_text(
            CSV_HEADER
            + '112-1,2024-01-15,"USB-C Cable, 6ft",$8.99,2\n'
            + "112-1,2024-01-15,Phone Case,$12.00,1\n"
            + "112-2,2024-01-18,Echo Dot,25.99,1\n"
        )

        orders = load_orders(csv_file)

        assert [o.order_id for o in orders] == ["112-1", "112-2"]
        first = orders[0]
        assert first.total_amount.to_cents() == -(899 * 2 + 1200)
        assert first.item_titles == ["USB-C Cable, 6ft", "Phone Case"]
        assert first.order_date.to_iso_string() == "2024-01-15"
        assert orders[1].total_amount.to_cents() == -2599

    def test_malformed_order_skipped(self, temp_dir, caplog):
        """Test an order with an unreadable price is skipped with a warning."""
        csv_file = temp_dir / "orders.csv"
        csv_file.write_text(CSV_HEADER + "112-1,2024-01-15,Cable,free,1\n" + "112-2,2024-01-18,Echo Dot,25.99,1\n")

        orders = load_orders(csv_file)

        assert [o.order_id for o in orders] == ["112-2"]
        assert "Skipping Amazon order 112-1" in caplog.text

    def test_missing_columns(self, temp_dir):
        """Test a CSV without the expected columns is rejected."""
        csv_file = temp_dir / "orders.csv"
        csv_file.write_text("Order,Date\n112-1,2024-01-15\n")

        with pytest.raises(ValueError, match="missing columns"):
            load_orders(csv_file)

    def test_missing_file(self, temp_dir):
        """Test a missing CSV raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_orders(temp_dir / "nope.csv")

    def test_export_directory(self, temp_dir):
        """Test a nested Retail.OrderHistory export is discovered."""
        nested = temp_dir / "Retail.OrderHistory.1"
        nested.mkdir()
        csv_file = nested / "Retail.OrderHistory.1.csv"
        csv_file.write_text(CSV_HEADER + "112-1,2024-01-15,Cable,8.99,1\n")

        assert find_order_history_csv(temp_dir) == csv_file
        assert len(load_orders(temp_dir)) == 1


@pytest.mark.amazon
class TestLoadRefunds:
    """Test loading refunds JSON."""

    def test_refunds_become_return_orders(self, temp_dir):
        """Test refunds load as positive RETURN- orders; bad entries are skipped."""
        refunds_file = temp_dir / "refunds.json"
        refunds_file.write_text(
            json.dumps(
                {
                    "refunds": [
                        {
                            "order_id": "112-1",
                            "refund_date": "2024-02-01",
                            "amount": "-25.99",
                            "items": [{"title": "Echo Dot", "price": "25.99"}],
                        },
                        {"order_id": "", "refund_date": "2024-02-01", "amount": "5.00"},
                        {"order_id": "112-3", "amount": "5.00"},
                    ]
                }
            )
        )

        refunds = load_refunds(refunds_file)

        assert len(refunds) == 1
        assert refunds[0].order_id == "RETURN-112-1"
        assert refunds[0].is_return
        assert refunds[0].total_amount.to_cents() == 2599

    def test_missing_file(self, temp_dir):
        """Test a missing refunds file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_refunds(temp_dir / "refunds.json")

#!/usr/bin/env python3
"""
Amazon Order Data Loader

Utilities for loading Amazon order history into AmazonOrder domain models.

Functions:
- find_order_history_csv: Locate an order history CSV inside an export directory
- load_orders: Load an order history CSV, one AmazonOrder per order id
- load_refunds: Load refunds from a JSON file as refund orders
"""

import logging
from pathlib import Path
from typing import Any

import pandas as pd

from ..core.currency import parse_dollars_to_cents
from ..core.dates import FinancialDate
from ..core.errors import MalformedRecordError
from ..core.json_utils import read_json
from ..core.models import OrderItem
from ..core.money import Money
from .models import AmazonOrder

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["Order ID", "Order Date", "Title", "Price", "Quantity"]


def find_order_history_csv(export_dir: str | Path) -> Path | None:
    """
    Find an order history CSV inside an export directory.

    Accepts both the simple `*.csv` export and Amazon's nested
    `Retail.OrderHistory.*.csv` layout; the latter wins when both exist.
    """
    export_dir = Path(export_dir)
    if not export_dir.is_dir():
        return None

    candidates = sorted(export_dir.glob("**/Retail.OrderHistory.*.csv")) or sorted(export_dir.glob("*.csv"))
    return candidates[0] if candidates else None


def load_orders(csv_path: str | Path) -> list[AmazonOrder]:
    """
    Load Amazon orders from an order history CSV.

    Each CSV row is one line item; rows sharing an Order ID are grouped into a
    single AmazonOrder whose total is the negated sum of price * quantity
    (expense-negative, like the ledger).

    Args:
        csv_path: CSV file, or an export directory containing one

    Returns:
        List of AmazonOrder in order of first appearance in the file

    Raises:
        FileNotFoundError: If no CSV file can be found
    """
    csv_path = Path(csv_path)
    if csv_path.is_dir():
        found = find_order_history_csv(csv_path)
        if found is None:
            raise FileNotFoundError(f"No Amazon order history CSV found in {csv_path}")
        csv_path = found

    if not csv_path.exists():
        raise FileNotFoundError(f"Amazon order history CSV not found: {csv_path}")

    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    missing = [column for column in CSV_COLUMNS if column not in df.columns]
    if missing:
        raise ValueError(f"{csv_path} is missing columns: {', '.join(missing)}")

    df["Order ID"] = df["Order ID"].str.strip()
    df = df[df["Order ID"] != ""]

    orders: list[AmazonOrder] = []
    for order_id, rows in df.groupby("Order ID", sort=False):
        try:
            orders.append(_order_from_rows(str(order_id), rows))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Skipping Amazon order %s from %s: %s", order_id, csv_path, e)
            continue

    logger.info("Loaded %d Amazon orders from %s", len(orders), csv_path)
    return orders


def _order_from_rows(order_id: str, rows: pd.DataFrame) -> AmazonOrder:
    items = []
    for _, row in rows.iterrows():
        quantity_str = str(row["Quantity"]).strip()
        items.append(
            OrderItem(
                title=str(row["Title"]).strip(),
                unit_price=Money.from_cents(parse_dollars_to_cents(row["Price"])),
                quantity=int(quantity_str) if quantity_str else 1,
            )
        )

    total_cents = sum(item.total_price.to_cents() for item in items)
    return AmazonOrder(
        order_id=order_id,
        order_date=FinancialDate.coerce(str(rows.iloc[0]["Order Date"]).strip()),
        total_amount=Money.from_cents(-total_cents),
        items=tuple(items),
    )


def load_refunds(json_path: str | Path) -> list[AmazonOrder]:
    """
    Load Amazon refunds from a JSON file.

    Expected format: a list (or {"refunds": [...]}) of objects with
    `order_id` (the original order), `refund_date`, `amount` in dollars and an
    optional `items` list. Malformed refunds are logged and skipped.

    Raises:
        FileNotFoundError: If the refunds file does not exist
    """
    json_path = Path(json_path)
    if not json_path.exists():
        raise FileNotFoundError(f"Amazon refunds file not found: {json_path}")

    data: Any = read_json(json_path)
    entries = data.get("refunds", []) if isinstance(data, dict) else data

    refunds: list[AmazonOrder] = []
    for entry in entries:
        try:
            refunds.append(
                AmazonOrder.refund(
                    original_order_id=str(entry.get("order_id", "")).strip(),
                    refund_date=FinancialDate.coerce(entry["refund_date"]),
                    amount=Money.from_dollars(entry["amount"]),
                    items=tuple(OrderItem.from_dict(item) for item in entry.get("items", [])),
                )
            )
        except (MalformedRecordError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Skipping malformed Amazon refund in %s: %s", json_path, e)
            continue

    logger.info("Loaded %d Amazon refunds from %s", len(refunds), json_path)
    return refunds

#!/usr/bin/env python3
"""
Walmart Order Data Loader

Loads Walmart orders exported by the order-history scraper from a JSON file.

Expected format: a list of order objects, or {"orders": [...]}, each with
`orderId`, `orderDate`, `orderStatus`, `totalAmount`, `finalChargeAmounts`
(dollar strings or numbers) and `items` ({title, price, quantity}).
"""

import logging
from pathlib import Path
from typing import Any

from ..core.errors import MalformedRecordError
from ..core.json_utils import read_json
from .models import WalmartOrder

logger = logging.getLogger(__name__)


def load_orders(json_path: str | Path) -> list[WalmartOrder]:
    """
    Load Walmart orders as domain models.

    Malformed orders are logged and skipped; the rest of the file still loads.

    Raises:
        FileNotFoundError: If the orders file does not exist
    """
    json_path = Path(json_path)
    if not json_path.exists():
        raise FileNotFoundError(f"Walmart orders file not found: {json_path}")

    data: Any = read_json(json_path)
    entries = data.get("orders", []) if isinstance(data, dict) else data

    orders: list[WalmartOrder] = []
    for entry in entries:
        try:
            orders.append(WalmartOrder.from_dict(entry))
        except (MalformedRecordError, AttributeError) as e:
            logger.warning("Skipping malformed Walmart order in %s: %s", json_path, e)
            continue

    multi_charge = sum(1 for order in orders if order.has_multiple_charges)
    logger.info("Loaded %d Walmart orders (%d with multiple charges) from %s", len(orders), multi_charge, json_path)
    return orders

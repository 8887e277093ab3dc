#!/usr/bin/env python3
"""
YNAB Data Loader

Loads cached YNAB transactions from local JSON and normalizes them into
TransactionRecord values for matching.

Functions:
- load_transactions: Load transactions from the cache directory
- parse_transactions: Normalize raw YNAB transaction dicts
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..core.config import get_config
from ..core.dates import FinancialDate
from ..core.errors import MalformedRecordError
from ..core.json_utils import read_json
from ..core.models import TransactionRecord

logger = logging.getLogger(__name__)


def load_transactions(
    cache_dir: str | Path | None = None, since: FinancialDate | None = None
) -> list[TransactionRecord]:
    """
    Load YNAB transactions from cache as TransactionRecord values.

    Args:
        cache_dir: Directory containing cached YNAB data.
                   If None, uses the configured YNAB cache directory
        since: Only keep transactions dated on or after this date

    Returns:
        List of TransactionRecord, in cache order

    Raises:
        FileNotFoundError: If cache directory or transactions file not found
    """
    cache_dir = get_config().ynab.cache_dir if cache_dir is None else Path(cache_dir)
    transactions_file = cache_dir / "transactions.json"

    if not transactions_file.exists():
        raise FileNotFoundError(f"YNAB transactions cache not found: {transactions_file}")

    data: Any = read_json(transactions_file)

    # Handle both array format and object format
    if isinstance(data, dict):
        raw_transactions: list[dict[str, Any]] = data.get("transactions", [])
    elif isinstance(data, list):
        raw_transactions = data
    else:
        raw_transactions = []

    transactions = parse_transactions(raw_transactions, since=since)
    logger.info("Loaded %d YNAB transactions from %s", len(transactions), transactions_file)
    return transactions


def parse_transactions(
    raw_transactions: Iterable[dict[str, Any]], since: FinancialDate | None = None
) -> list[TransactionRecord]:
    """
    Normalize raw YNAB transactions (amounts in milliunits).

    Deleted transactions are dropped; malformed ones are logged and skipped.
    """
    transactions = []
    for raw in raw_transactions:
        if raw.get("deleted"):
            continue
        try:
            transaction = TransactionRecord.from_ynab_dict(raw)
        except MalformedRecordError as e:
            logger.warning("Skipping malformed YNAB transaction: %s", e)
            continue

        if since is not None and transaction.date < since:
            continue
        transactions.append(transaction)

    return transactions

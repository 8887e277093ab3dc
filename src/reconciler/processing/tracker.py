#!/usr/bin/env python3
"""
Processed Transaction Tracker

Records which ledger transactions have already been annotated so that no
transaction is updated twice across runs.

File format:
    {
      "transactions": {"<transaction id>": {"order_id": "...", "processed_at": "..."}},
      "last_updated": "2024-01-15T10:30:00"
    }

The older {"processed_transaction_ids": [...]} layout is read as well and is
rewritten in the current layout on the next mark.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from ..core.errors import TrackerUnavailableError
from ..core.json_utils import read_json, write_json

logger = logging.getLogger(__name__)


class DedupTracker(Protocol):
    """
    Protocol for the at-most-once processing record.

    Implementations must be read-your-writes for the duration of a run: once
    mark_processed returns, is_processed reports True for that id.
    """

    def is_processed(self, transaction_id: str) -> bool:
        """
        Check whether a transaction has already been annotated.

        Raises:
            TrackerUnavailableError: If the backing store cannot be consulted
        """
        ...

    def mark_processed(self, transaction_id: str, order_id: str) -> None:
        """
        Record that a transaction was annotated for an order.

        Raises:
            TrackerUnavailableError: If the record cannot be persisted
        """
        ...


class JsonDedupTracker:
    """
    DedupTracker backed by a JSON file, written through on every mark.

    With no path the tracker only lives in memory, which is what tests and
    one-off dry runs want.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else None
        self._entries: dict[str, dict[str, Any]] = self._load()

    def _load(self) -> dict[str, dict[str, Any]]:
        if self.path is None or not self.path.exists():
            return {}

        try:
            data = read_json(self.path)
        except (OSError, ValueError) as e:
            raise TrackerUnavailableError(f"Cannot read processed transactions from {self.path}: {e}") from e

        if isinstance(data, dict) and isinstance(data.get("transactions"), dict):
            malformed = [
                tx_id for tx_id, entry in data["transactions"].items() if entry is not None and not isinstance(entry, dict)
            ]
            if malformed:
                raise TrackerUnavailableError(f"Malformed processed transaction entries in {self.path}: {malformed}")
            entries = {str(tx_id): dict(entry or {}) for tx_id, entry in data["transactions"].items()}
        elif isinstance(data, dict) and isinstance(data.get("processed_transaction_ids"), list):
            entries = {
                str(tx_id): {"order_id": None, "processed_at": None}
                for tx_id in data["processed_transaction_ids"]
            }
        else:
            raise TrackerUnavailableError(f"Unrecognized processed transactions format in {self.path}")

        logger.info("Loaded %d processed transactions from %s", len(entries), self.path)
        return entries

    def is_processed(self, transaction_id: str) -> bool:
        return transaction_id in self._entries

    def mark_processed(self, transaction_id: str, order_id: str) -> None:
        previous = self._entries.get(transaction_id)
        self._entries[transaction_id] = {
            "order_id": order_id,
            "processed_at": datetime.now().isoformat(timespec="seconds"),
        }
        try:
            self._save()
        except TrackerUnavailableError:
            # Keep memory consistent with what is on disk
            if previous is None:
                del self._entries[transaction_id]
            else:
                self._entries[transaction_id] = previous
            raise

    def order_for(self, transaction_id: str) -> str | None:
        """Order id a processed transaction was matched to, if recorded."""
        entry = self._entries.get(transaction_id)
        return entry.get("order_id") if entry else None

    @property
    def processed_ids(self) -> set[str]:
        return set(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, transaction_id: object) -> bool:
        return transaction_id in self._entries

    def _save(self) -> None:
        if self.path is None:
            return
        data = {
            "transactions": self._entries,
            "last_updated": datetime.now().isoformat(timespec="seconds"),
        }
        try:
            write_json(self.path, data)
        except OSError as e:
            raise TrackerUnavailableError(f"Cannot write processed transactions to {self.path}: {e}") from e

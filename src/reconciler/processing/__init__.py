"""
Processing Package

Applies matches to the ledger at most once per transaction.

This package provides:
- DedupTracker protocol and the JSON file backed JsonDedupTracker
- TransactionProcessor with run statistics and dry-run support
- ReconciliationRunner for sequential multi-retailer runs
"""

from .processor import LedgerUpdater, MemoUpdate, ProcessingResult, ProcessingStats, TransactionProcessor
from .runner import ReconciliationRunner, RunReport
from .tracker import DedupTracker, JsonDedupTracker

__all__ = [
    "DedupTracker",
    "JsonDedupTracker",
    "LedgerUpdater",
    "MemoUpdate",
    "ProcessingResult",
    "ProcessingStats",
    "ReconciliationRunner",
    "RunReport",
    "TransactionProcessor",
]

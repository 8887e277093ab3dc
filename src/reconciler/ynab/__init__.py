"""
YNAB Integration Package

Ledger source and ledger updater for YNAB.

This package provides:
- load_transactions / parse_transactions: cached YNAB transactions as TransactionRecord
- EditFileUpdater: memo updates recorded in a reviewable edit file
"""

from .loader import load_transactions, parse_transactions
from .updater import EditFileUpdater

__all__ = ["EditFileUpdater", "load_transactions", "parse_transactions"]

"""
Core Utilities Package

Shared primitives used across all reconciliation domains.

This package provides:
- Money and FinancialDate value types with integer currency arithmetic
- Normalized ledger transaction and order item records
- Error types for malformed input, failed updates and an unavailable tracker
- Configuration management for environment-specific settings
"""

from .config import Config, Environment, MatchingConfig, ProcessingConfig, get_config, reload_config
from .currency import cents_to_dollars_str, format_cents, milliunits_to_cents, parse_dollars_to_cents
from .dates import FinancialDate
from .errors import LedgerUpdateError, MalformedRecordError, ReconcilerError, TrackerUnavailableError
from .models import OrderBase, OrderItem, Retailer, TransactionRecord
from .money import Money, sum_money

__all__ = [
    # Configuration
    "Config",
    "Environment",
    "MatchingConfig",
    "ProcessingConfig",
    "get_config",
    "reload_config",
    # Primitives
    "FinancialDate",
    "Money",
    "sum_money",
    # Records
    "OrderBase",
    "OrderItem",
    "Retailer",
    "TransactionRecord",
    # Errors
    "LedgerUpdateError",
    "MalformedRecordError",
    "ReconcilerError",
    "TrackerUnavailableError",
    # Currency utilities
    "cents_to_dollars_str",
    "format_cents",
    "milliunits_to_cents",
    "parse_dollars_to_cents",
]

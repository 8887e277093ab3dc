"""
Reconciler - Ledger Transaction and Retailer Order Matching

Matches personal-finance ledger transactions (YNAB) with e-commerce orders from
Amazon and Walmart, and annotates each confident match with the order id and a
short product summary.

Domain Packages:
- core: Money and dates, shared records, configuration, errors
- amazon: Amazon orders, refunds and order history loaders
- walmart: Walmart orders with multi-charge billing
- matching: Confidence scoring and transaction/order assignment
- processing: Applying matches at most once, run statistics
- ynab: YNAB transaction cache loader and memo edit writer
- cli: Command-line interface

Example Usage:
    from reconciler.matching import TransactionMatcher
    from reconciler.processing import JsonDedupTracker, TransactionProcessor

    matches = TransactionMatcher().match_walmart(transactions, orders)
    result = TransactionProcessor(JsonDedupTracker(), dry_run=True).process(matches)
"""

__version__ = "0.1.0"

from .core.config import Environment, get_config
from .core.models import Retailer, TransactionRecord
from .core.money import Money
from .matching.matcher import TransactionMatcher
from .matching.models import TransactionMatch
from .processing.processor import ProcessingStats, TransactionProcessor

__all__ = [
    "Environment",
    "Money",
    "ProcessingStats",
    "Retailer",
    "TransactionMatch",
    "TransactionMatcher",
    "TransactionProcessor",
    "TransactionRecord",
    "get_config",
]

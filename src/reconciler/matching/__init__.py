"""
Matching Package

Confidence scoring and assignment of ledger transactions to retailer orders.

This package provides:
- MatchScorer with the per-retailer weighted scoring modes
- TransactionMatcher (best-first assignment of single-charge pairs and charge groups)
- Memo building for the annotations written back to the ledger
- TransactionMatch and the confidence bands used to apply matches
"""

from .matcher import TransactionMatcher
from .memo import build_memo, has_annotation, item_summary, order_fragment
from .models import ConfidenceThresholds, MatchConfidence, Order, TransactionMatch
from .multi_charge import charge_group_matches, find_charge_group
from .scorer import (
    AMAZON_WEIGHTS,
    MULTI_CHARGE_WEIGHTS,
    PAYEE_ALIASES,
    WALMART_WEIGHTS,
    MatchScorer,
    ScoreBreakdown,
    Weights,
    is_candidate_transaction,
    is_retailer_payee,
)

__all__ = [
    # Scoring
    "AMAZON_WEIGHTS",
    "MULTI_CHARGE_WEIGHTS",
    "PAYEE_ALIASES",
    "WALMART_WEIGHTS",
    "MatchScorer",
    "ScoreBreakdown",
    "Weights",
    "is_candidate_transaction",
    "is_retailer_payee",
    # Matching
    "TransactionMatcher",
    "find_charge_group",
    "charge_group_matches",
    # Results
    "ConfidenceThresholds",
    "MatchConfidence",
    "Order",
    "TransactionMatch",
    # Memo
    "build_memo",
    "has_annotation",
    "item_summary",
    "order_fragment",
]

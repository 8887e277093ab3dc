#!/usr/bin/env python3
"""
Matching Domain Models

Match results produced by the matcher and consumed by the processor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

from ..amazon.models import AmazonOrder
from ..core.config import ProcessingConfig
from ..core.models import Retailer, TransactionRecord
from ..walmart.models import WalmartOrder

Order: TypeAlias = AmazonOrder | WalmartOrder


class MatchConfidence(Enum):
    """Confidence bands used when deciding whether to apply a match."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ConfidenceThresholds:
    """Boundaries between the confidence bands (high >= high, medium >= medium)."""

    high: float = 0.8
    medium: float = 0.6

    def __post_init__(self) -> None:
        if not 0.0 <= self.medium <= self.high <= 1.0:
            raise ValueError(f"Invalid confidence thresholds: medium={self.medium}, high={self.high}")

    @classmethod
    def from_config(cls, config: ProcessingConfig) -> "ConfidenceThresholds":
        return cls(high=config.high_confidence, medium=config.medium_confidence)

    def classify(self, confidence: float) -> MatchConfidence:
        if confidence >= self.high:
            return MatchConfidence.HIGH
        if confidence >= self.medium:
            return MatchConfidence.MEDIUM
        return MatchConfidence.LOW

    def meets_threshold(self, confidence: float) -> bool:
        """Whether a match is confident enough to be applied."""
        return confidence >= self.medium


@dataclass(frozen=True)
class TransactionMatch:
    """
    A proposed pairing of one ledger transaction with a retailer order.

    Multi-charge orders produce one TransactionMatch per matched transaction;
    `related_transactions` then holds the whole sibling group (date-ordered),
    so every sibling knows about the others.
    """

    transaction: TransactionRecord
    order: Order
    proposed_memo: str
    confidence_score: float
    match_reason: str = ""
    related_transactions: tuple[TransactionRecord, ...] = ()

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence_score <= 1.0:
            raise ValueError(f"Confidence score out of range: {self.confidence_score}")
        if self.related_transactions and self.transaction not in self.related_transactions:
            raise ValueError(f"Transaction {self.transaction.id} is not part of its own sibling group")

    @property
    def transactions(self) -> tuple[TransactionRecord, ...]:
        return self.related_transactions or (self.transaction,)

    @property
    def is_multi_transaction(self) -> bool:
        return len(self.transactions) > 1

    @property
    def retailer(self) -> Retailer:
        return self.order.retailer

    @property
    def transaction_id(self) -> str:
        return self.transaction.id

    def confidence_level(self, thresholds: ConfidenceThresholds | None = None) -> MatchConfidence:
        return (thresholds or ConfidenceThresholds()).classify(self.confidence_score)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for the match results file."""
        return {
            "retailer": self.retailer.value,
            "transaction_id": self.transaction.id,
            "transaction_date": self.transaction.date.to_iso_string(),
            "transaction_amount": self.transaction.amount.to_cents(),
            "payee": self.transaction.payee,
            "order_id": self.order.order_id,
            "order_date": self.order.order_date.to_iso_string(),
            "current_memo": self.transaction.memo,
            "proposed_memo": self.proposed_memo,
            "confidence_score": self.confidence_score,
            "confidence_level": self.confidence_level().value,
            "match_reason": self.match_reason,
            "is_multi_transaction": self.is_multi_transaction,
            "related_transaction_ids": [tx.id for tx in self.transactions],
        }

#!/usr/bin/env python3
"""
Transaction Processor

Applies matches to the ledger. Matches are visited in descending confidence
order; each one is either skipped (already processed, or not confident enough)
or its proposed memo is written through the ledger updater and the transaction
is marked in the dedup tracker.

A failed update is recorded and the batch carries on; the transaction stays
unmarked so the next run retries it. An unavailable tracker is fatal and
propagates to the caller.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, fields
from typing import Any, Protocol

from ..core.currency import format_cents
from ..core.errors import LedgerUpdateError
from ..matching.models import ConfidenceThresholds, MatchConfidence, TransactionMatch
from .tracker import DedupTracker

logger = logging.getLogger(__name__)


class LedgerUpdater(Protocol):
    """External interface that writes a memo back to the ledger."""

    def update_memo(self, transaction_id: str, memo: str) -> bool:
        """
        Replace a transaction's memo.

        Returns:
            True on success, False if the ledger rejected the update

        Raises:
            LedgerUpdateError: If the update could not be delivered
        """
        ...


@dataclass
class ProcessingStats:
    """Run statistics; every counter is a non-negative integer."""

    updated: int = 0
    skipped_already_processed: int = 0
    skipped_low_confidence: int = 0
    high_confidence: int = 0
    medium_confidence: int = 0
    failed: int = 0

    def merge(self, other: "ProcessingStats") -> "ProcessingStats":
        """Return the sum of two sets of statistics."""
        return ProcessingStats(**{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)})

    def to_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class MemoUpdate:
    """A memo change that was applied (or, in dry-run, would have been)."""

    transaction_id: str
    order_id: str
    retailer: str
    old_memo: str
    new_memo: str
    confidence_score: float
    applied: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "order_id": self.order_id,
            "retailer": self.retailer,
            "old_memo": self.old_memo,
            "new_memo": self.new_memo,
            "confidence_score": self.confidence_score,
            "applied": self.applied,
        }


@dataclass
class ProcessingResult:
    """Statistics plus the memo updates of one processing pass."""

    stats: ProcessingStats = field(default_factory=ProcessingStats)
    updates: list[MemoUpdate] = field(default_factory=list)
    failed_transaction_ids: list[str] = field(default_factory=list)

    def merge(self, other: "ProcessingResult") -> "ProcessingResult":
        return ProcessingResult(
            stats=self.stats.merge(other.stats),
            updates=self.updates + other.updates,
            failed_transaction_ids=self.failed_transaction_ids + other.failed_transaction_ids,
        )


class TransactionProcessor:
    """
    Applies matches above the confidence threshold, at most once per transaction.

    Transactions applied by this processor are remembered for its lifetime, so
    a dry run skips the same repeats a live run would (where the tracker does
    the remembering).
    """

    def __init__(
        self,
        tracker: DedupTracker,
        updater: LedgerUpdater | None = None,
        thresholds: ConfidenceThresholds | None = None,
        dry_run: bool = False,
    ):
        if updater is None and not dry_run:
            raise ValueError("A ledger updater is required unless running in dry-run mode")

        self.tracker = tracker
        self.updater = updater
        self.thresholds = thresholds or ConfidenceThresholds()
        self.dry_run = dry_run
        self._applied: set[str] = set()

    def is_settled(self, transaction_id: str) -> bool:
        """Whether a transaction was processed in an earlier run or earlier in this one."""
        return transaction_id in self._applied or self.tracker.is_processed(transaction_id)

    def process(self, matches: Iterable[TransactionMatch]) -> ProcessingResult:
        """
        Process matches in descending confidence order (stable for equal scores).

        Raises:
            TrackerUnavailableError: If the dedup tracker cannot be read or written
        """
        result = ProcessingResult()
        stats = result.stats

        for match in sorted(matches, key=lambda m: -m.confidence_score):
            tx = match.transaction

            if self.is_settled(tx.id):
                logger.debug("Transaction %s already processed, skipped", tx.id)
                stats.skipped_already_processed += 1
                continue

            level = self.thresholds.classify(match.confidence_score)
            if level == MatchConfidence.LOW:
                logger.info(
                    "Skipping low confidence match %s (%s) -> %s (%.2f)",
                    tx.id,
                    format_cents(tx.amount.to_cents()),
                    match.order.order_id,
                    match.confidence_score,
                )
                stats.skipped_low_confidence += 1
                continue

            if level == MatchConfidence.HIGH:
                stats.high_confidence += 1
            else:
                stats.medium_confidence += 1

            if self.dry_run:
                logger.info("[DRY RUN] Would update %s: '%s' -> '%s'", tx.id, tx.memo, match.proposed_memo)
                self._record(result, match, applied=False)
                continue

            if not self._apply(match):
                stats.failed += 1
                result.failed_transaction_ids.append(tx.id)
                continue

            self.tracker.mark_processed(tx.id, match.order.order_id)
            self._record(result, match, applied=True)

        logger.info(
            "Processed %d matches: %d updated, %d already processed, %d low confidence, %d failed",
            stats.updated + stats.skipped_already_processed + stats.skipped_low_confidence + stats.failed,
            stats.updated,
            stats.skipped_already_processed,
            stats.skipped_low_confidence,
            stats.failed,
        )
        return result

    def _apply(self, match: TransactionMatch) -> bool:
        if self.updater is None:
            raise ValueError("No ledger updater configured")

        tx_id = match.transaction.id
        try:
            success = self.updater.update_memo(tx_id, match.proposed_memo)
        except LedgerUpdateError as e:
            logger.error("Failed to update transaction %s: %s", tx_id, e)
            return False

        if not success:
            logger.error("Ledger rejected memo update for transaction %s", tx_id)
            return False

        logger.info("Updated transaction %s: '%s'", tx_id, match.proposed_memo)
        return True

    def _record(self, result: ProcessingResult, match: TransactionMatch, applied: bool) -> None:
        self._applied.add(match.transaction.id)
        result.stats.updated += 1
        result.updates.append(
            MemoUpdate(
                transaction_id=match.transaction.id,
                order_id=match.order.order_id,
                retailer=match.retailer.value,
                old_memo=match.transaction.memo,
                new_memo=match.proposed_memo,
                confidence_score=match.confidence_score,
                applied=applied,
            )
        )

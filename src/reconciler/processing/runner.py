#!/usr/bin/env python3
"""
Reconciliation Runner

Runs the retailer passes one after another (Amazon, then Walmart). Before each
pass the transactions already settled, in the tracker or earlier in this run,
are filtered out, so one transaction is never annotated for two retailers.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..amazon.models import AmazonOrder
from ..core.models import Retailer, TransactionRecord
from ..matching.matcher import TransactionMatcher
from ..matching.models import Order, TransactionMatch
from ..walmart.models import WalmartOrder
from .processor import ProcessingResult, TransactionProcessor

logger = logging.getLogger(__name__)

RETAILER_ORDER = (Retailer.AMAZON, Retailer.WALMART)


@dataclass
class RunReport:
    """Everything one reconciliation run produced."""

    matches: list[TransactionMatch] = field(default_factory=list)
    result: ProcessingResult = field(default_factory=ProcessingResult)
    dry_run: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "stats": self.result.stats.to_dict(),
            "matches": [match.to_dict() for match in self.matches],
            "updates": [update.to_dict() for update in self.result.updates],
            "failed_transaction_ids": self.result.failed_transaction_ids,
        }


class ReconciliationRunner:
    """Sequential multi-retailer driver around a matcher and a processor."""

    def __init__(self, matcher: TransactionMatcher, processor: TransactionProcessor):
        self.matcher = matcher
        self.processor = processor

    def run(
        self,
        transactions: Sequence[TransactionRecord],
        amazon_orders: Sequence[AmazonOrder] = (),
        walmart_orders: Sequence[WalmartOrder] = (),
    ) -> RunReport:
        """
        Match and process every retailer with orders, summing the statistics.

        Raises:
            TrackerUnavailableError: If the dedup tracker cannot be used
        """
        orders_by_retailer: dict[Retailer, Sequence[Order]] = {
            Retailer.AMAZON: amazon_orders,
            Retailer.WALMART: walmart_orders,
        }
        report = RunReport(dry_run=self.processor.dry_run)

        for retailer in RETAILER_ORDER:
            orders = orders_by_retailer[retailer]
            if not orders:
                logger.debug("No %s orders, skipping pass", retailer.display_name)
                continue

            pending = [tx for tx in transactions if not self.processor.is_settled(tx.id)]
            logger.info(
                "%s pass: %d unprocessed transactions, %d orders",
                retailer.display_name,
                len(pending),
                len(orders),
            )

            matches = self.matcher.match(retailer, pending, orders)
            report.matches.extend(matches)
            report.result = report.result.merge(self.processor.process(matches))

        return report

#!/usr/bin/env python3
"""
Transaction Matcher

Assigns ledger transactions to retailer orders for one retailer at a time:

1. Single charge - every (transaction, order) pair is scored.
2. Multi charge (Walmart) - orders billed as several final charges get their
   best group of transactions, one per charge.

Pairs and groups are then picked greedily from one queue, best score first, so
that no transaction or order is used twice. A group whose transaction was
taken is searched again among the transactions still free.

Greedy selection is not a globally optimal assignment. When two transactions are
near-equidistant from two orders the result depends on the tie-break order
(smaller date gap first, then input order).

The matcher never arbitrates between retailers: each call only sees one
retailer's orders (see ReconciliationRunner for the cross-retailer rule).
"""

import itertools
import logging
from collections.abc import Sequence
from typing import TypeVar

from ..amazon.models import AmazonOrder
from ..core.config import MatchingConfig
from ..core.models import OrderBase, Retailer, TransactionRecord
from ..walmart.models import WalmartOrder
from .memo import build_memo, has_annotation
from .models import Order, TransactionMatch
from .multi_charge import ChargePairs, charge_group_matches, find_charge_group
from .scorer import MatchScorer, ScoreBreakdown, is_candidate_transaction

logger = logging.getLogger(__name__)

_PAIR, _GROUP = 0, 1

OrderT = TypeVar("OrderT", bound=OrderBase)


class TransactionMatcher:
    """Matching engine for one retailer pass at a time."""

    def __init__(self, config: MatchingConfig | None = None, scorer: MatchScorer | None = None):
        self.config = config or MatchingConfig()
        self.scorer = scorer or MatchScorer(self.config)

    def match(
        self, retailer: Retailer, transactions: Sequence[TransactionRecord], orders: Sequence[Order]
    ) -> list[TransactionMatch]:
        """Dispatch to the pass for the given retailer."""
        if retailer == Retailer.AMAZON:
            return self.match_amazon(transactions, [o for o in orders if isinstance(o, AmazonOrder)])
        return self.match_walmart(transactions, [o for o in orders if isinstance(o, WalmartOrder)])

    def match_amazon(
        self, transactions: Sequence[TransactionRecord], orders: Sequence[AmazonOrder]
    ) -> list[TransactionMatch]:
        """
        Match transactions against Amazon orders and refunds.

        Every Amazon order is eligible; refunds match positive ledger entries
        through the signed amount comparison.
        """
        candidates = self.candidate_transactions(transactions, Retailer.AMAZON)
        eligible = _unique_orders(orders)

        matches = self._assign(candidates, eligible)
        logger.info(
            "Amazon: %d matches from %d candidate transactions and %d orders",
            len(matches),
            len(candidates),
            len(eligible),
        )
        return matches

    def match_walmart(
        self, transactions: Sequence[TransactionRecord], orders: Sequence[WalmartOrder]
    ) -> list[TransactionMatch]:
        """
        Match transactions against delivered Walmart orders.

        Orders with a single billed amount are scored pair by pair; orders with
        several final charges compete for the same transactions as whole groups.
        """
        candidates = self.candidate_transactions(transactions, Retailer.WALMART)
        eligible = [order for order in _unique_orders(orders) if order.is_delivered]
        skipped = len(orders) - len(eligible)
        if skipped:
            logger.debug("Walmart: %d orders not delivered or duplicated, skipped", skipped)

        single_charge = [order for order in eligible if not order.has_multiple_charges]
        multi_charge = [order for order in eligible if order.has_multiple_charges]

        matches = self._assign(candidates, single_charge, multi_charge)
        grouped = sum(1 for match in matches if match.is_multi_transaction)
        logger.info(
            "Walmart: %d single-charge and %d multi-charge matches", len(matches) - grouped, grouped
        )

        return matches

    def candidate_transactions(
        self, transactions: Sequence[TransactionRecord], retailer: Retailer
    ) -> list[TransactionRecord]:
        """
        Transactions worth scoring against the retailer's orders.

        Excludes transactions that do not look like the retailer, transfers,
        memos that already carry an order annotation and repeated ids.
        """
        seen: set[str] = set()
        candidates = []
        for tx in transactions:
            if tx.id in seen:
                logger.warning("Duplicate transaction id %s, keeping the first occurrence", tx.id)
                continue
            seen.add(tx.id)
            if has_annotation(tx.memo):
                logger.debug("Transaction %s already annotated, skipped", tx.id)
                continue
            if is_candidate_transaction(tx, retailer):
                candidates.append(tx)
        return candidates

    def _assign(
        self,
        transactions: Sequence[TransactionRecord],
        orders: Sequence[Order],
        multi_charge_orders: Sequence[WalmartOrder] = (),
    ) -> list[TransactionMatch]:
        """
        Pick non-overlapping matches greedily, best score first.

        Single-charge pairs and multi-charge groups share one queue, so a weak
        pair never takes a transaction that a better charge group needs. A group
        that lost a transaction is searched again among the free transactions.
        """
        queue: list[tuple] = []
        for tx_index, transaction in enumerate(transactions):
            for order_index, order in enumerate(orders):
                breakdown = self.scorer.score(transaction, order)
                if breakdown.total <= self.config.score_floor:
                    continue
                queue.append((-breakdown.total, breakdown.day_gap, _PAIR, tx_index, order_index, breakdown))

        attempts = itertools.count()
        for order_index, order in enumerate(multi_charge_orders):
            found = find_charge_group(transactions, order, self.scorer)
            if found is None:
                logger.debug("No charge group found for Walmart order %s", order.order_id)
                continue
            queue.append(_group_entry(order_index, next(attempts), found))

        queue.sort(key=_queue_key)
        used_transactions: set[str] = set()
        used_orders: set[int] = set()
        matches: list[TransactionMatch] = []
        while queue:
            _, _, kind, first, second, payload = queue.pop(0)

            if kind == _GROUP:
                order = multi_charge_orders[first]
                pairs, breakdown = payload
                if any(tx.id in used_transactions for tx, _ in pairs):
                    free = [tx for tx in transactions if tx.id not in used_transactions]
                    found = find_charge_group(free, order, self.scorer)
                    if found is not None:
                        queue.append(_group_entry(first, next(attempts), found))
                        queue.sort(key=_queue_key)
                    continue
                used_transactions.update(tx.id for tx, _ in pairs)
                matches.extend(charge_group_matches(order, pairs, breakdown))
                continue

            transaction = transactions[first]
            if transaction.id in used_transactions or second in used_orders:
                continue
            used_transactions.add(transaction.id)
            used_orders.add(second)

            order = orders[second]
            matches.append(
                TransactionMatch(
                    transaction=transaction,
                    order=order,
                    proposed_memo=build_memo(transaction, order),
                    confidence_score=payload.total,
                    match_reason=_single_reason(payload, order.retailer),
                )
            )
            logger.debug(
                "Matched transaction %s to order %s (confidence %.2f)",
                transaction.id,
                order.order_id,
                payload.total,
            )

        return matches


def _queue_key(entry: tuple) -> tuple:
    return entry[:5]


def _group_entry(order_index: int, attempt: int, found: tuple[ChargePairs, ScoreBreakdown]) -> tuple:
    breakdown = found[1]
    return (-breakdown.total, breakdown.day_gap, _GROUP, order_index, attempt, found)


def _unique_orders(orders: Sequence[OrderT]) -> list[OrderT]:
    seen: set[str] = set()
    unique = []
    for order in orders:
        if order.order_id in seen:
            logger.warning(
                "Duplicate %s order id %s, keeping the first occurrence",
                order.retailer.display_name,
                order.order_id,
            )
            continue
        seen.add(order.order_id)
        unique.append(order)
    return unique


def _single_reason(breakdown: ScoreBreakdown, retailer: Retailer) -> str:
    reasons = []
    if breakdown.amount == 1.0:
        reasons.append("exact amount match")
    else:
        reasons.append("close amount match")

    if breakdown.day_gap == 0:
        reasons.append("same date")
    elif breakdown.day_gap <= 3:
        reasons.append("close date match")

    if breakdown.payee == 1.0:
        reasons.append(f"{retailer.display_name} payee")
    if breakdown.memo > 0.0:
        reasons.append("memo references order")
    return ", ".join(reasons)

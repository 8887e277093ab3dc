#!/usr/bin/env python3
"""
Multi-Charge Matcher

Resolves orders that were billed as several final charges. For each order, the
transactions near the order date are searched for a subset with exactly one
transaction per final charge whose amounts pair up with the charges. No
partial credit: an order either gets all of its charges matched or none.
"""

import itertools
import logging
from collections.abc import Sequence

from ..core.models import TransactionRecord
from ..core.money import Money
from ..walmart.models import WalmartOrder
from .memo import build_memo
from .models import TransactionMatch
from .scorer import MatchScorer, ScoreBreakdown

logger = logging.getLogger(__name__)

# Candidates kept per order (closest to the order date) to bound the subset search
MAX_CANDIDATES = 12

ChargePairs = list[tuple[TransactionRecord, Money]]


def pair_with_charges(transactions: Sequence[TransactionRecord], charges: Sequence[Money]) -> ChargePairs:
    """
    Pair transactions one-to-one with charges by sorted amount.

    Pairing the i-th smallest amount with the i-th smallest charge minimizes
    the largest difference of any pair.
    """
    ordered_tx = sorted(transactions, key=lambda tx: tx.amount.to_cents())
    ordered_charges = sorted(charges, key=lambda charge: charge.to_cents())
    return list(zip(ordered_tx, ordered_charges, strict=True))


def find_charge_group(
    transactions: Sequence[TransactionRecord],
    order: WalmartOrder,
    scorer: MatchScorer,
) -> tuple[ChargePairs, ScoreBreakdown] | None:
    """
    Find the best subset of transactions covering every final charge of an order.

    Returns:
        (pairs, breakdown) for the winning subset, or None when no subset of
        full cardinality fits within tolerance
    """
    charges = order.final_charge_amounts
    window = scorer.config.multi_charge_window_days

    candidates = [tx for tx in transactions if scorer.day_gap(tx, order) <= window]
    if len(candidates) < len(charges):
        return None
    candidates = sorted(candidates, key=lambda tx: scorer.day_gap(tx, order))[:MAX_CANDIDATES]

    best: tuple[ChargePairs, ScoreBreakdown] | None = None
    for subset in itertools.combinations(candidates, len(charges)):
        pairs = pair_with_charges(subset, charges)
        breakdown = scorer.score_charge_group(pairs, order)
        if breakdown.total <= scorer.config.score_floor:
            continue
        if best is None or (breakdown.total, -breakdown.day_gap) > (best[1].total, -best[1].day_gap):
            best = (pairs, breakdown)

    return best


def charge_group_matches(
    order: WalmartOrder, pairs: ChargePairs, breakdown: ScoreBreakdown
) -> list[TransactionMatch]:
    """
    Produce one TransactionMatch per transaction of a resolved charge group.

    Siblings are numbered in date order for the "Charge i of n" memo.
    """
    siblings = tuple(sorted((tx for tx, _ in pairs), key=lambda tx: tx.date))
    reason = _group_reason(siblings, breakdown)

    logger.info(
        "Matched Walmart order %s to %d charges (confidence %.2f)",
        order.order_id,
        len(siblings),
        breakdown.total,
    )
    return [
        TransactionMatch(
            transaction=transaction,
            order=order,
            proposed_memo=build_memo(transaction, order, number, len(siblings)),
            confidence_score=breakdown.total,
            match_reason=reason,
            related_transactions=siblings,
        )
        for number, transaction in enumerate(siblings, start=1)
    ]


def _group_reason(siblings: Sequence[TransactionRecord], breakdown: ScoreBreakdown) -> str:
    reasons = [f"sum matches order total ({len(siblings)} charges)"]
    if breakdown.day_gap <= 3:
        reasons.append("close date match")
    if breakdown.payee == 1.0:
        reasons.append("all Walmart payees")
    reasons.append("transactions: " + ", ".join(tx.id for tx in siblings))
    return ", ".join(reasons)

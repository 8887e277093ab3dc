#!/usr/bin/env python3
"""
Match Scoring System

Weighted multi-factor confidence scoring for (transaction, order) candidates.

Every factor is normalized to [0, 1] before weighting, and the weights of each
mode sum to 1.0, so the final confidence is always within [0, 1]. Amount is
mandatory evidence: a candidate whose amount is out of tolerance scores 0 no
matter how well the other factors line up. The same holds for dates further
apart than the hard cut-off.
"""

import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..core.config import MatchingConfig
from ..core.models import OrderBase, Retailer, TransactionRecord
from ..core.money import Money

logger = logging.getLogger(__name__)

# Known payee spellings per retailer, matched as case-insensitive substrings
PAYEE_ALIASES: dict[Retailer, tuple[str, ...]] = {
    Retailer.AMAZON: (
        "AMAZON.COM",
        "AMAZON",
        "AMZN",
        "AMZN MKTP US",
        "AMAZON MKTPLACE",
        "AMAZON MARKETPLACE",
        "AMAZON RETAIL",
    ),
    Retailer.WALMART: (
        "WALMART",
        "WAL-MART",
        "WALMART.COM",
        "WALMART ONLINE",
    ),
}

# Memo words that make an otherwise anonymous transaction worth scoring
MEMO_KEYWORDS: dict[Retailer, tuple[str, ...]] = {
    Retailer.AMAZON: ("AMAZON", "AMZN"),
    Retailer.WALMART: ("WALMART", "WAL-MART"),
}

PAYEE_BLACKLIST = ("TRANSFER",)

MIN_TITLE_TOKEN_LENGTH = 4

_TOKEN_PATTERN = re.compile(r"[a-z0-9]+")


@dataclass(frozen=True)
class Weights:
    """Factor weights for one scoring mode; must sum to 1.0."""

    amount: float
    date: float
    payee: float
    memo: float = 0.0

    def __post_init__(self) -> None:
        total = self.amount + self.date + self.payee + self.memo
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Scoring weights must sum to 1.0, got {total}")

    def combine(self, amount: float, date: float, payee: float, memo: float = 0.0) -> float:
        return self.amount * amount + self.date * date + self.payee * payee + self.memo * memo


AMAZON_WEIGHTS = Weights(amount=0.4, date=0.3, payee=0.2, memo=0.1)
WALMART_WEIGHTS = Weights(amount=0.7, date=0.2, payee=0.1)
# For charge groups the date factor is proximity and the payee factor is consistency
MULTI_CHARGE_WEIGHTS = Weights(amount=0.5, date=0.3, payee=0.2)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Normalized factor scores behind one confidence value."""

    total: float
    amount: float = 0.0
    date: float = 0.0
    payee: float = 0.0
    memo: float = 0.0
    day_gap: float = 0.0

    @classmethod
    def rejected(cls, day_gap: float = 0.0) -> "ScoreBreakdown":
        return cls(total=0.0, day_gap=day_gap)


def is_retailer_payee(payee: str, retailer: Retailer) -> bool:
    """Check if payee name matches a known alias of the retailer."""
    if not payee:
        return False
    normalized = payee.upper().strip()
    return any(alias in normalized for alias in PAYEE_ALIASES[retailer])


def is_blacklisted_payee(payee: str) -> bool:
    normalized = (payee or "").upper()
    return any(word in normalized for word in PAYEE_BLACKLIST)


def is_candidate_transaction(transaction: TransactionRecord, retailer: Retailer) -> bool:
    """
    Whether a transaction could belong to the retailer at all.

    The payee must be a retailer alias, or the memo must mention the retailer;
    transfers are never candidates.
    """
    if is_blacklisted_payee(transaction.payee):
        return False
    if is_retailer_payee(transaction.payee, retailer):
        return True
    memo = transaction.memo.upper()
    return any(keyword in memo for keyword in MEMO_KEYWORDS[retailer])


def title_tokens(titles: Sequence[str]) -> set[str]:
    """Normalized words of the item titles that are long enough to be telling."""
    tokens: set[str] = set()
    for title in titles:
        tokens.update(t for t in _TOKEN_PATTERN.findall(title.lower()) if len(t) >= MIN_TITLE_TOKEN_LENGTH)
    return tokens


class MatchScorer:
    """
    Pure scoring functions parameterized by the matching configuration.

    Holds no state besides its parameters, so one instance can be shared
    freely between matcher passes.
    """

    def __init__(self, config: MatchingConfig | None = None):
        self.config = config or MatchingConfig()

    # Factor scores

    def amount_score(self, transaction_amount: Money, target: Money) -> float:
        """
        Score how closely a transaction amount matches a billed amount.

        1.0 within epsilon, then linear decay down to 0 at the tolerance
        (a share of the transaction's absolute amount, never below epsilon).
        Amounts are compared signed, so a refund never matches an expense.
        """
        epsilon = self.config.amount_epsilon_cents
        diff = transaction_amount.distance(target)
        if diff <= epsilon:
            return 1.0

        tolerance = max(round(abs(transaction_amount.to_cents()) * self.config.amount_tolerance_ratio), epsilon)
        if diff >= tolerance:
            return 0.0
        return (tolerance - diff) / (tolerance - epsilon)

    @staticmethod
    def date_score(day_gap: float, window_days: int) -> float:
        """1.0 for same-day, linear decay to 0 over the window."""
        if window_days <= 0:
            return 1.0 if day_gap == 0 else 0.0
        return max(0.0, 1.0 - day_gap / window_days)

    def day_gap(self, transaction: TransactionRecord, order: OrderBase) -> int:
        """
        Days between transaction and order, as used for scoring.

        A refund usually posts some days after the return is recorded, so for
        returns the ledger date may trail the order date by up to the grace
        period and still count as same-day.
        """
        if order.is_return:
            signed = order.order_date.days_until(transaction.date)
            if signed > 0:
                return max(0, signed - self.config.return_grace_days)
        return order.order_date.days_between(transaction.date)

    @staticmethod
    def payee_score(payee: str, retailer: Retailer) -> float:
        return 1.0 if is_retailer_payee(payee, retailer) else 0.0

    @staticmethod
    def consistency_score(transactions: Sequence[TransactionRecord], retailer: Retailer) -> float:
        """1.0 iff every transaction in the group carries an alias of the retailer."""
        if not transactions:
            return 0.0
        return 1.0 if all(is_retailer_payee(tx.payee, retailer) for tx in transactions) else 0.0

    @staticmethod
    def memo_score(memo: str, order: OrderBase) -> float:
        """1.0 if the memo names the order id, 0.5 if it shares a title word."""
        if not memo:
            return 0.0
        if order.order_id.lower() in memo.lower():
            return 1.0
        memo_tokens = set(_TOKEN_PATTERN.findall(memo.lower()))
        if memo_tokens & title_tokens(order.item_titles):
            return 0.5
        return 0.0

    # Weighted modes

    def score(self, transaction: TransactionRecord, order: OrderBase) -> ScoreBreakdown:
        """Single-charge score, weighted for the order's retailer."""
        if order.retailer == Retailer.AMAZON:
            return self.score_amazon(transaction, order)
        return self.score_walmart(transaction, order)

    def score_amazon(self, transaction: TransactionRecord, order: OrderBase) -> ScoreBreakdown:
        return self._score_single(transaction, order, AMAZON_WEIGHTS, include_memo=True)

    def score_walmart(self, transaction: TransactionRecord, order: OrderBase) -> ScoreBreakdown:
        return self._score_single(transaction, order, WALMART_WEIGHTS, include_memo=False)

    def _score_single(
        self, transaction: TransactionRecord, order: OrderBase, weights: Weights, include_memo: bool
    ) -> ScoreBreakdown:
        gap = self.day_gap(transaction, order)
        if gap > self.config.max_days_difference:
            logger.debug(
                "Order %s is %d days from transaction %s, beyond the %d day cut-off",
                order.order_id,
                gap,
                transaction.id,
                self.config.max_days_difference,
            )
            return ScoreBreakdown.rejected(gap)

        amount = self.amount_score(transaction.amount, order.billed_total)
        if amount == 0.0:
            return ScoreBreakdown.rejected(gap)

        date = self.date_score(gap, self.config.date_window_days)
        payee = self.payee_score(transaction.payee, order.retailer)
        memo = self.memo_score(transaction.memo, order) if include_memo else 0.0

        total = _finalize(weights.combine(amount, date, payee, memo))
        logger.debug(
            "Scored transaction %s vs order %s: amount=%.2f date=%.2f payee=%.2f memo=%.2f -> %.2f",
            transaction.id,
            order.order_id,
            amount,
            date,
            payee,
            memo,
            total,
        )
        return ScoreBreakdown(total=total, amount=amount, date=date, payee=payee, memo=memo, day_gap=gap)

    def score_charge_group(
        self, pairs: Sequence[tuple[TransactionRecord, Money]], order: OrderBase
    ) -> ScoreBreakdown:
        """
        Score a group of transactions paired one-to-one with an order's final charges.

        Every pair must be within amount tolerance and the group must sum to
        the charges' sum within epsilon; otherwise the group scores 0.
        """
        if not pairs:
            return ScoreBreakdown.rejected()

        transactions = [tx for tx, _ in pairs]
        gaps = [self.day_gap(tx, order) for tx in transactions]
        mean_gap = sum(gaps) / len(gaps)
        if max(gaps) > self.config.max_days_difference:
            return ScoreBreakdown.rejected(mean_gap)

        tx_sum = sum(tx.amount.to_cents() for tx in transactions)
        charge_sum = sum(charge.to_cents() for _, charge in pairs)
        if abs(tx_sum - charge_sum) > self.config.amount_epsilon_cents:
            return ScoreBreakdown.rejected(mean_gap)

        amount_scores = [self.amount_score(tx.amount, charge) for tx, charge in pairs]
        if min(amount_scores) == 0.0:
            return ScoreBreakdown.rejected(mean_gap)

        amount = sum(amount_scores) / len(amount_scores)
        date = sum(self.date_score(gap, self.config.multi_charge_window_days) for gap in gaps) / len(gaps)
        consistency = self.consistency_score(transactions, order.retailer)

        total = _finalize(MULTI_CHARGE_WEIGHTS.combine(amount, date, consistency))
        return ScoreBreakdown(total=total, amount=amount, date=date, payee=consistency, day_gap=mean_gap)


def _finalize(score: float) -> float:
    return round(max(0.0, min(1.0, score)), 2)

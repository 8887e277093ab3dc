#!/usr/bin/env python3
"""Tests for match result models and confidence thresholds."""

import pytest

from reconciler.core.config import ProcessingConfig
from reconciler.core.models import Retailer
from reconciler.matching.models import ConfidenceThresholds, MatchConfidence, TransactionMatch
from tests.fixtures.records import make_transaction, make_walmart_order


class TestConfidenceThresholds:
    """Test confidence bands."""

    @pytest.mark.matching
    @pytest.mark.parametrize(
        "score,level",
        [
            (1.0, MatchConfidence.HIGH),
            (0.8, MatchConfidence.HIGH),
            (0.79, MatchConfidence.MEDIUM),
            (0.6, MatchConfidence.MEDIUM),
            (0.59, MatchConfidence.LOW),
            (0.0, MatchConfidence.LOW),
        ],
    )
    def test_classify(self, score, level):
        """Test band boundaries are inclusive at the lower end."""
        assert ConfidenceThresholds().classify(score) == level

    @pytest.mark.matching
    def test_meets_threshold(self):
        """Test only medium and above may be applied."""
        thresholds = ConfidenceThresholds()
        assert thresholds.meets_threshold(0.6)
        assert not thresholds.meets_threshold(0.59)

    @pytest.mark.matching
    def test_from_config(self):
        """Test thresholds come from the processing configuration."""
        thresholds = ConfidenceThresholds.from_config(ProcessingConfig(high_confidence=0.9, medium_confidence=0.7))
        assert thresholds == ConfidenceThresholds(high=0.9, medium=0.7)

    @pytest.mark.matching
    def test_invalid_thresholds(self):
        """Test medium above high is rejected."""
        with pytest.raises(ValueError):
            ConfidenceThresholds(high=0.5, medium=0.7)


class TestTransactionMatch:
    """Test the match result record."""

    @pytest.mark.matching
    def test_single_transaction_match(self):
        """Test a plain match exposes its transaction and retailer."""
        tx = make_transaction()
        match = TransactionMatch(tx, make_walmart_order(), "memo", 0.95, "exact amount")

        assert match.transactions == (tx,)
        assert not match.is_multi_transaction
        assert match.retailer == Retailer.WALMART
        assert match.transaction_id == "tx-1"
        assert match.confidence_level() == MatchConfidence.HIGH

    @pytest.mark.matching
    def test_multi_transaction_match(self):
        """Test sibling groups are exposed on every member."""
        first = make_transaction("tx-a", -10000)
        second = make_transaction("tx-b", -5000)
        order = make_walmart_order(charges=(-10000, -5000))

        match = TransactionMatch(second, order, "memo", 0.9, related_transactions=(first, second))

        assert match.is_multi_transaction
        assert match.to_dict()["related_transaction_ids"] == ["tx-a", "tx-b"]

    @pytest.mark.matching
    def test_transaction_must_be_in_group(self):
        """Test a match whose transaction is missing from its sibling group is rejected."""
        with pytest.raises(ValueError, match="sibling group"):
            TransactionMatch(
                make_transaction("tx-a"),
                make_walmart_order(),
                "memo",
                0.9,
                related_transactions=(make_transaction("tx-b"),),
            )

    @pytest.mark.matching
    @pytest.mark.parametrize("score", [-0.1, 1.01])
    def test_score_out_of_range(self, score):
        """Test confidence must be within [0, 1]."""
        with pytest.raises(ValueError, match="out of range"):
            TransactionMatch(make_transaction(), make_walmart_order(), "memo", score)

    @pytest.mark.matching
    def test_to_dict(self):
        """Test serialization for the match results file."""
        match = TransactionMatch(make_transaction(memo="old"), make_walmart_order(), "new", 0.7)
        result = match.to_dict()

        assert result["retailer"] == "walmart"
        assert result["transaction_amount"] == -4999
        assert result["current_memo"] == "old"
        assert result["proposed_memo"] == "new"
        assert result["confidence_level"] == "medium"
        assert result["is_multi_transaction"] is False

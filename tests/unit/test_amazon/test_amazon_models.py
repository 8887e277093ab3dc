#!/usr/bin/env python3
"""
Unit tests for the Amazon order variant.

Covers refund invariants, Subscribe & Save detection and dict construction.
"""

import pytest

from reconciler.amazon.models import AmazonOrder
from reconciler.core.dates import FinancialDate
from reconciler.core.errors import MalformedRecordError
from reconciler.core.models import Retailer
from reconciler.core.money import Money
from tests.fixtures.records import make_amazon_order, make_items


class TestAmazonOrder:
    """Test AmazonOrder construction."""

    @pytest.mark.amazon
    def test_retailer_tag(self):
        """Test the variant carries the Amazon tag."""
        order = make_amazon_order()
        assert order.retailer == Retailer.AMAZON

    @pytest.mark.amazon
    def test_billed_amounts_is_total(self):
        """Test Amazon bills the order total as a single charge."""
        order = make_amazon_order(total=-2599)

        assert order.billed_amounts == (Money.from_cents(-2599),)
        assert order.billed_total.to_cents() == -2599

    @pytest.mark.amazon
    def test_order_without_total_is_malformed(self):
        """Test an order with nothing billed is rejected."""
        with pytest.raises(MalformedRecordError):
            AmazonOrder(order_id="112-1", order_date=FinancialDate.from_string("2024-01-15"))

    @pytest.mark.amazon
    def test_order_without_id_is_malformed(self):
        """Test an order id is required."""
        with pytest.raises(MalformedRecordError):
            AmazonOrder(
                order_id="",
                order_date=FinancialDate.from_string("2024-01-15"),
                total_amount=Money.from_cents(-100),
            )

    @pytest.mark.amazon
    def test_subscribe_and_save(self):
        """Test SUB- order ids are Subscribe & Save orders."""
        assert make_amazon_order(order_id="SUB-112-1").is_subscribe_and_save
        assert not make_amazon_order(order_id="112-1").is_subscribe_and_save

    @pytest.mark.amazon
    def test_from_dict(self):
        """Test building from a serialized order."""
        order = AmazonOrder.from_dict(
            {
                "order_id": "112-1",
                "order_date": "2024-01-15",
                "total_amount": -2599,
                "items": [{"title": "Echo Dot", "unit_price": 2599}],
            }
        )

        assert order.total_amount == Money.from_cents(-2599)
        assert order.item_titles == ["Echo Dot"]
        assert order.to_dict()["retailer"] == "amazon"

    @pytest.mark.amazon
    def test_from_dict_bad_date(self):
        """Test unreadable dates are malformed."""
        with pytest.raises(MalformedRecordError):
            AmazonOrder.from_dict({"order_id": "112-1", "order_date": "soon", "total_amount": -100})


class TestAmazonRefund:
    """Test refund orders."""

    @pytest.mark.amazon
    def test_refund_factory(self):
        """Test refunds get the RETURN- prefix, a positive total and is_return."""
        refund = AmazonOrder.refund(
            original_order_id="112-1",
            refund_date=FinancialDate.from_string("2024-02-01"),
            amount=Money.from_cents(-2599),
            items=make_items("Echo Dot"),
        )

        assert refund.order_id == "RETURN-112-1"
        assert refund.original_order_id == "112-1"
        assert refund.is_return is True
        assert refund.total_amount == Money.from_cents(2599)
        assert refund.to_dict()["original_order_id"] == "112-1"

    @pytest.mark.amazon
    def test_refund_requires_prefix(self):
        """Test a refund without the RETURN- prefix is rejected."""
        with pytest.raises(MalformedRecordError):
            AmazonOrder(
                order_id="112-1",
                order_date=FinancialDate.from_string("2024-02-01"),
                total_amount=Money.from_cents(2599),
                is_return=True,
            )

    @pytest.mark.amazon
    def test_refund_requires_positive_total(self):
        """Test a refund with a negative total is rejected."""
        with pytest.raises(MalformedRecordError):
            AmazonOrder(
                order_id="RETURN-112-1",
                order_date=FinancialDate.from_string("2024-02-01"),
                total_amount=Money.from_cents(-2599),
                is_return=True,
            )

    @pytest.mark.amazon
    def test_refund_requires_original_id(self):
        """Test the original order id is required."""
        with pytest.raises(MalformedRecordError):
            AmazonOrder.refund("", FinancialDate.from_string("2024-02-01"), Money.from_cents(100))

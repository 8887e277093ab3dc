#!/usr/bin/env python3
"""
Amazon Domain Models

Amazon variant of the retailer order. Amazon bills an order as a single charge,
so `total_amount` is the only billed amount. Refunds are modelled as their own
orders whose id carries the RETURN- prefix.
"""

from dataclasses import dataclass
from typing import Any, ClassVar

from ..core.dates import FinancialDate
from ..core.errors import MalformedRecordError
from ..core.models import OrderBase, OrderItem, Retailer
from ..core.money import Money

RETURN_PREFIX = "RETURN-"
SUBSCRIBE_AND_SAVE_PREFIX = "SUB-"


@dataclass(frozen=True)
class AmazonOrder(OrderBase):
    """
    Amazon order (or refund) as handed over by an order source.

    Invariants for refunds: order_id starts with RETURN-, total_amount is positive.
    """

    retailer: ClassVar[Retailer] = Retailer.AMAZON

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.is_return:
            if not self.order_id.startswith(RETURN_PREFIX):
                raise MalformedRecordError(f"Refund order id must start with {RETURN_PREFIX}: {self.order_id}")
            if self.total_amount is None or self.total_amount.to_cents() <= 0:
                raise MalformedRecordError(f"Refund {self.order_id} must carry a positive total")

    @classmethod
    def refund(
        cls,
        original_order_id: str,
        refund_date: FinancialDate,
        amount: Money,
        items: tuple[OrderItem, ...] = (),
        status: str = "Refunded",
    ) -> "AmazonOrder":
        """
        Build a refund order for a previously placed order.

        The refund total is stored as a positive amount regardless of how the
        source reported it.
        """
        if not original_order_id:
            raise MalformedRecordError("Refund is missing the original order id")
        return cls(
            order_id=f"{RETURN_PREFIX}{original_order_id}",
            order_date=refund_date,
            total_amount=amount.abs(),
            items=items,
            status=status,
            is_return=True,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AmazonOrder":
        """
        Create AmazonOrder from dict (JSON deserialization).

        total_amount is in cents with the ledger sign convention.

        Raises:
            MalformedRecordError: If required fields are missing or unreadable
        """
        try:
            order_date = FinancialDate.coerce(data.get("order_date", ""))
            total = data.get("total_amount")
            items = tuple(OrderItem.from_dict(item) for item in data.get("items", []))
        except (TypeError, ValueError) as e:
            raise MalformedRecordError(f"Amazon order {data.get('order_id')} is malformed: {e}") from e

        return cls(
            order_id=str(data.get("order_id", "")),
            order_date=order_date,
            total_amount=Money.from_cents(int(total)) if total is not None else None,
            items=items,
            status=str(data.get("status", "")),
            is_return=bool(data.get("is_return", False)),
            order_url=data.get("order_url"),
        )

    @property
    def is_subscribe_and_save(self) -> bool:
        return self.order_id.startswith(SUBSCRIBE_AND_SAVE_PREFIX)

    @property
    def original_order_id(self) -> str:
        """Order id without the refund prefix."""
        if self.is_return:
            return self.order_id[len(RETURN_PREFIX) :]
        return self.order_id

    def to_dict(self) -> dict[str, Any]:
        result = self.base_dict()
        result["original_order_id"] = self.original_order_id
        return result

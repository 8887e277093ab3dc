#!/usr/bin/env python3
"""
Walmart Domain Models

Walmart variant of the retailer order. Walmart may authorize a temporary hold for
the order total and later settle the order as several smaller final charges, so
the billed amounts come from `final_charge_amounts` whenever they are known.
"""

from dataclasses import dataclass
from typing import Any, ClassVar

from ..core.currency import parse_dollars_to_cents
from ..core.dates import FinancialDate
from ..core.errors import MalformedRecordError
from ..core.models import OrderBase, OrderItem, Retailer
from ..core.money import Money

ORDER_DETAILS_URL = "https://www.walmart.com/orders/details?orderId={order_id}"
DELIVERED_STATUS = "delivered"


@dataclass(frozen=True)
class WalmartOrder(OrderBase):
    """
    Walmart order, possibly billed across multiple final charges.

    All amounts follow the ledger sign convention (expenses are negative).
    """

    retailer: ClassVar[Retailer] = Retailer.WALMART

    final_charge_amounts: tuple[Money, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WalmartOrder":
        """
        Create WalmartOrder from a scraped order dict.

        Dollar amounts are reported positive by the order pages and are negated
        here to become expenses. Both snake_case and camelCase keys are read.

        Raises:
            MalformedRecordError: If required fields are missing or unreadable
        """
        order_id = str(data.get("order_id") or data.get("orderId") or "").strip()
        try:
            order_date = FinancialDate.coerce(data.get("order_date") or data.get("orderDate") or "")

            raw_total = data.get("total_amount", data.get("totalAmount"))
            total_amount = _expense(raw_total) if raw_total not in (None, "") else None

            raw_charges = data.get("final_charge_amounts", data.get("finalChargeAmounts")) or []
            charges = tuple(_expense(charge) for charge in raw_charges)

            items = tuple(OrderItem.from_dict(item) for item in data.get("items", []))
        except (TypeError, ValueError) as e:
            raise MalformedRecordError(f"Walmart order {order_id or '?'} is malformed: {e}") from e

        return cls(
            order_id=order_id,
            order_date=order_date,
            total_amount=total_amount,
            items=items,
            status=str(data.get("status") or data.get("orderStatus") or ""),
            order_url=data.get("order_url") or data.get("orderUrl"),
            final_charge_amounts=charges,
        )

    @property
    def billed_amounts(self) -> tuple[Money, ...]:
        """Final charges when known, otherwise the order total as the sole charge."""
        if self.final_charge_amounts:
            return self.final_charge_amounts
        return super().billed_amounts

    @property
    def is_delivered(self) -> bool:
        return self.status.strip().lower() == DELIVERED_STATUS

    @property
    def has_multiple_charges(self) -> bool:
        return len(self.final_charge_amounts) > 1

    @property
    def order_link(self) -> str:
        return self.order_url or ORDER_DETAILS_URL.format(order_id=self.order_id)

    def to_dict(self) -> dict[str, Any]:
        result = self.base_dict()
        result["order_url"] = self.order_link
        result["final_charge_amounts"] = [charge.to_cents() for charge in self.final_charge_amounts]
        return result


def _expense(value: Any) -> Money:
    """Read a positive dollar amount as an expense (negative cents)."""
    return Money.from_cents(-abs(parse_dollars_to_cents(value)))

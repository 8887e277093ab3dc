#!/usr/bin/env python3
"""
Core Data Models

Retailer-agnostic value types shared by every domain package: the normalized
ledger transaction, the order line item and the shape every retailer order
variant shares. All are immutable and validated on construction, so the matching core
never sees a half-built record.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from .dates import FinancialDate
from .errors import MalformedRecordError
from .money import Money, sum_money


class Retailer(Enum):
    """Retailers whose orders can be reconciled against the ledger."""

    AMAZON = "amazon"
    WALMART = "walmart"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class TransactionRecord:
    """
    Normalized ledger entry.

    Owned by the ledger source; read-only to the matching core.

    Note: amount is signed, negative for expenses and positive for refunds.
    """

    id: str
    date: FinancialDate
    amount: Money
    payee: str = ""
    memo: str = ""
    cleared: bool = False
    approved: bool = False

    def __post_init__(self) -> None:
        if not self.id:
            raise MalformedRecordError("Transaction is missing an id")
        if not isinstance(self.date, FinancialDate):
            raise MalformedRecordError(f"Transaction {self.id} is missing a date")
        if not isinstance(self.amount, Money):
            raise MalformedRecordError(f"Transaction {self.id} is missing an amount")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TransactionRecord":
        """
        Create a TransactionRecord from a plain dict with the amount in cents.

        Raises:
            MalformedRecordError: If id, date or amount is missing or unreadable
        """
        return cls._build(data, amount_key="amount", to_money=Money.from_cents)

    @classmethod
    def from_ynab_dict(cls, data: dict[str, Any]) -> "TransactionRecord":
        """
        Create a TransactionRecord from a YNAB API transaction (amount in milliunits).

        Raises:
            MalformedRecordError: If id, date or amount is missing or unreadable
        """
        return cls._build(data, amount_key="amount", to_money=Money.from_milliunits)

    @classmethod
    def _build(cls, data: dict[str, Any], amount_key: str, to_money: Any) -> "TransactionRecord":
        tx_id = data.get("id")
        if not tx_id:
            raise MalformedRecordError("Transaction is missing an id")

        raw_amount = data.get(amount_key)
        if raw_amount is None or isinstance(raw_amount, bool):
            raise MalformedRecordError(f"Transaction {tx_id} is missing an amount")

        raw_date = data.get("date")
        if not raw_date:
            raise MalformedRecordError(f"Transaction {tx_id} is missing a date")

        try:
            amount = to_money(int(raw_amount))
            tx_date = FinancialDate.coerce(raw_date)
        except (TypeError, ValueError) as e:
            raise MalformedRecordError(f"Transaction {tx_id} is malformed: {e}") from e

        cleared = data.get("cleared", False)
        if isinstance(cleared, str):
            cleared = cleared in ("cleared", "reconciled")

        memo = data.get("memo")
        return cls(
            id=str(tx_id),
            date=tx_date,
            amount=amount,
            payee=data.get("payee_name") or data.get("payee") or "",
            memo="" if memo in (None, "null") else str(memo),
            cleared=bool(cleared),
            approved=bool(data.get("approved", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON serialization (amount in cents)."""
        return {
            "id": self.id,
            "date": self.date.to_iso_string(),
            "amount": self.amount.to_cents(),
            "payee": self.payee,
            "memo": self.memo,
            "cleared": self.cleared,
            "approved": self.approved,
        }


@dataclass(frozen=True)
class OrderItem:
    """Single line item within a retailer order."""

    title: str
    unit_price: Money
    quantity: int = 1

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise MalformedRecordError(f"Item '{self.title}' has invalid quantity {self.quantity}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderItem":
        """Create from dict; unit_price may be cents (int) or a dollar string."""
        raw_price = data.get("unit_price", data.get("price", 0))
        try:
            unit_price = (
                Money.from_cents(raw_price) if isinstance(raw_price, int) else Money.from_dollars(raw_price)
            )
            quantity = int(data.get("quantity", 1))
        except (TypeError, ValueError) as e:
            raise MalformedRecordError(f"Order item is malformed: {e}") from e

        return cls(title=str(data.get("title", "")).strip(), unit_price=unit_price, quantity=quantity)

    @property
    def total_price(self) -> Money:
        return Money.from_cents(self.unit_price.to_cents() * self.quantity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "unit_price": self.unit_price.to_cents(),
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class OrderBase:
    """
    Shape shared by every retailer order variant.

    Concrete variants (AmazonOrder, WalmartOrder) set the class-level `retailer`
    tag. Orders are built once by a loader and never mutated afterwards.
    """

    retailer: ClassVar[Retailer]

    order_id: str
    order_date: FinancialDate
    total_amount: Money | None = None
    items: tuple[OrderItem, ...] = ()
    status: str = ""
    is_return: bool = False
    order_url: str | None = None

    def __post_init__(self) -> None:
        if not self.order_id:
            raise MalformedRecordError(f"{self.retailer.display_name} order is missing an order id")
        if not isinstance(self.order_date, FinancialDate):
            raise MalformedRecordError(f"Order {self.order_id} is missing an order date")
        if not self.billed_amounts:
            raise MalformedRecordError(f"Order {self.order_id} has neither a total nor any charges")

    @property
    def billed_amounts(self) -> tuple[Money, ...]:
        """Amounts the ledger is expected to show for this order."""
        return (self.total_amount,) if self.total_amount is not None else ()

    @property
    def billed_total(self) -> Money:
        return sum_money(self.billed_amounts)

    @property
    def item_titles(self) -> list[str]:
        return [item.title for item in self.items if item.title]

    def base_dict(self) -> dict[str, Any]:
        """Fields common to every variant, for JSON serialization."""
        return {
            "retailer": self.retailer.value,
            "order_id": self.order_id,
            "order_date": self.order_date.to_iso_string(),
            "total_amount": self.total_amount.to_cents() if self.total_amount is not None else None,
            "items": [item.to_dict() for item in self.items],
            "status": self.status,
            "is_return": self.is_return,
            "order_url": self.order_url,
        }

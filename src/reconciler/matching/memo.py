#!/usr/bin/env python3
"""
Memo Builder

Builds the annotated memo written back to the ledger for a match: the existing
memo, the " | " delimiter, then a retailer-tagged fragment naming the order and
summarizing its items.

Examples:
    Amazon Order: 112-3456789 - 2 items: USB-C Cable, Phone Case
    groceries | Walmart Order: WM123 (Charge 1 of 2) - 3 items: Milk, Eggs, Bread
"""

import re

from ..amazon.models import AmazonOrder
from ..core.models import OrderBase, Retailer, TransactionRecord

MEMO_DELIMITER = " | "
MAX_MEMO_LENGTH = 500
MAX_SUMMARY_ITEMS = 3
NO_ITEMS_SUMMARY = "Couldn't identify items"
SUBSCRIBE_AND_SAVE_SUFFIX = "(Subscribe & Save)"

# Prefixes of fragments this module writes; a memo carrying one is already annotated
ANNOTATION_MARKERS = ("Amazon Order:", "Amazon Return:", "Walmart Order:")

_DISALLOWED_CHARS = re.compile(r"[^a-zA-Z0-9 _\-\+:'\|\.,&\(\)]")
_EXCESS_SPACES = re.compile(r" {3,}")


def has_annotation(memo: str) -> bool:
    """Check whether a memo already carries an order annotation."""
    return any(marker in memo for marker in ANNOTATION_MARKERS)


def item_summary(order: OrderBase) -> str:
    """
    Short product summary: the single title, or a count with at most three titles.

    Titles are cut at their first comma, which is where retailer titles
    usually switch from product name to specs.
    """
    titles = [_short_title(title, order) for title in order.item_titles]
    if not titles:
        return NO_ITEMS_SUMMARY
    if len(titles) == 1:
        return titles[0]

    summary = f"{len(titles)} items: " + ", ".join(titles[:MAX_SUMMARY_ITEMS])
    if len(titles) > MAX_SUMMARY_ITEMS:
        summary += " ..."
    return summary


def _short_title(title: str, order: OrderBase) -> str:
    if isinstance(order, AmazonOrder) and order.is_subscribe_and_save and title.endswith(SUBSCRIBE_AND_SAVE_SUFFIX):
        title = title[: -len(SUBSCRIBE_AND_SAVE_SUFFIX)]
    return title.split(",")[0].strip()


def order_fragment(order: OrderBase, charge_number: int = 1, total_charges: int = 1) -> str:
    """Retailer-tagged fragment identifying the order and its items."""
    summary = item_summary(order)

    if order.retailer == Retailer.AMAZON:
        if isinstance(order, AmazonOrder) and order.is_subscribe_and_save:
            summary = f"S&S: {summary}"
        label = "Amazon Return" if order.is_return else "Amazon Order"
    else:
        label = f"{order.retailer.display_name} Order"

    if total_charges > 1:
        return f"{label}: {order.order_id} (Charge {charge_number} of {total_charges}) - {summary}"
    return f"{label}: {order.order_id} - {summary}"


def build_memo(
    transaction: TransactionRecord, order: OrderBase, charge_number: int = 1, total_charges: int = 1
) -> str:
    """
    Append the order fragment to the transaction's existing memo.

    The result is restricted to characters the ledger accepts and capped at
    MAX_MEMO_LENGTH. Only the existing memo is shortened to fit, so the order
    fragment always survives.
    """
    fragment = sanitize_memo(order_fragment(order, charge_number, total_charges))
    existing = sanitize_memo(transaction.memo).strip()
    room = MAX_MEMO_LENGTH - len(MEMO_DELIMITER) - len(fragment)
    if not existing or room <= 0:
        return fragment
    return f"{existing[:room].rstrip()}{MEMO_DELIMITER}{fragment}"


def sanitize_memo(memo: str) -> str:
    memo = _DISALLOWED_CHARS.sub(" ", memo)
    memo = _EXCESS_SPACES.sub("  ", memo)
    return memo[:MAX_MEMO_LENGTH]

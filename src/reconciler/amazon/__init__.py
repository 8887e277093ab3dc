"""
Amazon Order Package

Amazon order variant, refund orders and loaders for order history exports.
"""

from .loader import find_order_history_csv, load_orders, load_refunds
from .models import RETURN_PREFIX, SUBSCRIBE_AND_SAVE_PREFIX, AmazonOrder

__all__ = [
    "AmazonOrder",
    "RETURN_PREFIX",
    "SUBSCRIBE_AND_SAVE_PREFIX",
    "find_order_history_csv",
    "load_orders",
    "load_refunds",
]

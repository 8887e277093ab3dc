"""
Walmart Order Package

Walmart order variant with multi-charge billing and its JSON order loader.
"""

from .loader import load_orders
from .models import WalmartOrder

__all__ = ["WalmartOrder", "load_orders"]

"""
Adapters package for the Pricing Service.

Defines the contract the cache expects from an underlying price service and
adapters that fit other service shapes onto it.
"""

from .price_service import PriceService, BlockingPriceService, BlockingPriceServiceAdapter

__all__ = [
    "PriceService",
    "BlockingPriceService",
    "BlockingPriceServiceAdapter",
]

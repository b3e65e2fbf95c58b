"""
Pricing caching package.

The transparent cache keeps the last known price per item code and trusts
all of them until a single shared expiry window elapses.
"""

from .transparent_cache import TransparentCache

__all__ = ["TransparentCache"]

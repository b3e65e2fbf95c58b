"""
Pricing Service package.

Fronts a slow, fallible price lookup with an in-memory cache so callers
needing many item prices do not pay the lookup latency on every call.

Structure:
- app.adapters: The price service contract and adapters for concrete services.
- app.caching: The transparent cache that sits in front of a price service.
"""

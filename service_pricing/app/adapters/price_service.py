"""
Price service contract and adapters.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Protocol
from concurrent.futures import Executor

from shared.logging import get_logger


class PriceService(Protocol):
    """
    Underlying price lookup the cache sits in front of.

    Calls are expensive and may be awaited concurrently from many tasks.
    Failures are raised as exceptions.
    """

    async def get_price_for(self, item_code: str) -> float:
        ...


class BlockingPriceService(Protocol):
    """Synchronous price lookup, e.g. a requests-based HTTP client."""

    def get_price_for(self, item_code: str) -> float:
        ...


class BlockingPriceServiceAdapter:
    """Runs a blocking price service in an executor so it can be awaited."""

    def __init__(self, service: BlockingPriceService, executor: Optional[Executor] = None) -> None:
        self.service = service
        self.executor = executor
        self.logger = get_logger("pricing.adapters.blocking")

    async def get_price_for(self, item_code: str) -> float:
        loop = asyncio.get_running_loop()
        self.logger.debug("Dispatching blocking price lookup", item_code=item_code)
        return await loop.run_in_executor(self.executor, self.service.get_price_for, item_code)

"""
Transparent price cache for the Pricing service.

The cache remembers the last price seen for every item code and trusts all
of them until one shared epoch, started at construction, is older than
``max_age``. There is no per-entry timestamp: the first lookup that finds a
cached entry after the epoch has expired resets the epoch and refetches that
one item, which also renews every other cached entry for another window.
"""

from __future__ import annotations

import asyncio
import time
from contextlib import nullcontext
from datetime import timedelta
from typing import Any, Callable, Dict, List, Optional, Union

from shared.config import BaseConfig
from shared.errors import BatchLookupError, PriceServiceError, ValidationError
from shared.logging import batch_context, get_logger
from shared.metrics import MetricsCollector

from service_pricing.app.adapters.price_service import PriceService


class TransparentCache:
    """Memoizing cache in front of a slow price service with a shared expiry epoch."""

    def __init__(
        self,
        price_service: PriceService,
        max_age: Union[float, int, timedelta],
        *,
        metrics: Optional[MetricsCollector] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        max_age_seconds = max_age.total_seconds() if isinstance(max_age, timedelta) else float(max_age)
        if max_age_seconds < 0:
            raise ValidationError(
                "max_age must not be negative",
                details={"max_age_seconds": max_age_seconds},
            )

        self.price_service = price_service
        self.max_age_seconds = max_age_seconds
        self.metrics = metrics
        self.logger = get_logger("pricing.cache")

        self._clock = clock
        self._lock = asyncio.Lock()
        # Guarded by _lock.
        self._prices: Dict[str, float] = {}
        self._epoch_start = clock()

        self._hits = 0
        self._misses = 0
        self._epoch_resets = 0
        self._service_errors = 0

    @classmethod
    def from_config(
        cls,
        price_service: PriceService,
        config: BaseConfig,
        metrics: Optional[MetricsCollector] = None,
    ) -> "TransparentCache":
        """Build a cache using the configured max age."""
        return cls(price_service, config.cache_max_age_seconds, metrics=metrics)

    async def get_price(self, item_code: str) -> float:
        """
        Return the price for an item, from the cache when the shared epoch is
        still fresh, otherwise from the price service.

        Raises PriceServiceError when the service call fails; nothing is cached
        in that case.
        """
        async with self._lock:
            if item_code in self._prices:
                if self._is_epoch_alive():
                    self._hits += 1
                    self._increment("price_cache_hits_total")
                    self.logger.debug("Cache hit", item_code=item_code)
                    return self._prices[item_code]
                self._reset_epoch(item_code)

        self._misses += 1
        self._increment("price_cache_misses_total")
        self.logger.debug("Cache miss", item_code=item_code)

        price = await self._fetch(item_code)

        async with self._lock:
            self._prices[item_code] = price
            entries = len(self._prices)

        if self.metrics:
            self.metrics.set_gauge("price_cache_entries", entries)
        self.logger.debug("Cached price", item_code=item_code, price=price, entries=entries)
        return price

    async def get_prices(self, *item_codes: str) -> List[float]:
        """
        Look up several items at once, one concurrent lookup per item code.

        Every lookup runs to completion before this returns. If any of them
        fails, BatchLookupError is raised carrying the first failure in
        completion order, which is not deterministic between runs. On success
        the result holds one price per item code in completion order, not in
        the order the codes were given.
        """
        if not item_codes:
            return []

        requested = len(item_codes)
        start_time = time.perf_counter()

        with batch_context() as batch_id:
            self.logger.debug("Dispatching batch price lookup", batch_id=batch_id, size=requested)
            tasks = [asyncio.create_task(self.get_price(item_code)) for item_code in item_codes]

            prices: List[float] = []
            errors: List[PriceServiceError] = []
            try:
                for completed in asyncio.as_completed(tasks):
                    try:
                        prices.append(await completed)
                    except PriceServiceError as exc:
                        errors.append(exc)
            finally:
                # In-flight lookups are never cancelled.
                await asyncio.wait(tasks)

            duration = time.perf_counter() - start_time
            if self.metrics:
                self.metrics.observe_histogram("price_batch_size", requested)
                self.metrics.observe_histogram(
                    "price_batch_duration_seconds",
                    duration,
                    outcome="error" if errors else "success",
                )

            if errors:
                first_error = errors[0]
                self.logger.error(
                    "Batch price lookup failed",
                    size=requested,
                    failed=len(errors),
                    item_code=first_error.item_code,
                    error=first_error.message,
                )
                raise BatchLookupError(first_error, requested=requested, failed=len(errors)) from first_error

            self.logger.debug("Batch price lookup completed", size=requested, duration=duration)
            return prices

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        return {
            "entries": len(self._prices),
            "max_age_seconds": self.max_age_seconds,
            "epoch_age_seconds": self._clock() - self._epoch_start,
            "epoch_alive": self._is_epoch_alive(),
            "hits": self._hits,
            "misses": self._misses,
            "epoch_resets": self._epoch_resets,
            "service_errors": self._service_errors,
        }

    async def _fetch(self, item_code: str) -> float:
        """Call the price service, wrapping any failure as PriceServiceError."""
        timer = self.metrics.time_operation("price_service_call_duration_seconds") if self.metrics else nullcontext()
        try:
            with timer:
                return float(await self.price_service.get_price_for(item_code))
        except Exception as exc:
            self._service_errors += 1
            self._increment("price_service_errors_total")
            if self.metrics:
                self.metrics.record_error("price_service")
            self.logger.warning("Price service lookup failed", item_code=item_code, error=str(exc))
            raise PriceServiceError(item_code, str(exc)) from exc

    def _is_epoch_alive(self) -> bool:
        return self._clock() - self._epoch_start < self.max_age_seconds

    def _reset_epoch(self, item_code: str) -> None:
        """Restart the shared epoch. Caller must hold _lock."""
        now = self._clock()
        expired_for = now - self._epoch_start
        self._epoch_start = now
        self._epoch_resets += 1
        self._increment("price_cache_epoch_resets_total")
        self.logger.info(
            "Cache epoch expired; resetting",
            item_code=item_code,
            epoch_age_seconds=expired_for,
            max_age_seconds=self.max_age_seconds,
        )

    def _increment(self, metric_name: str) -> None:
        if self.metrics:
            self.metrics.increment_counter(metric_name)

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from minion.config import MinionSettings
from minion.models import BatchSummary, Operation, RestaurantConfig, RestaurantOutcome
from minion.processor import RestaurantProcessor
from minion.sources import RestaurantSource, build_source

logger = logging.getLogger(__name__)


class BatchOrchestrator:
    def __init__(
        self,
        source: RestaurantSource,
        extension_years: int = 2,
        processor: RestaurantProcessor | None = None,
        max_workers: int = 1,
    ) -> None:
        if extension_years < 1:
            raise ValueError("extension_years must be at least 1")
        self.source = source
        self.extension_years = extension_years
        self.processor = processor or RestaurantProcessor()
        self.max_workers = max(1, max_workers)

    def extend_keys(self, years: int | None = None) -> BatchSummary:
        return self.run(Operation.EXTEND_KEYS, years=years)

    def refresh_menus(self) -> BatchSummary:
        return self.run(Operation.REFRESH_MENUS)

    def run(self, operation: Operation, years: int | None = None) -> BatchSummary:
        if years is not None and years < 1:
            raise ValueError("years must be at least 1")
        started = time.perf_counter()
        summary = BatchSummary(operation=operation, started_at=datetime.now(timezone.utc))

        restaurants = self.source.load()
        effective_years = years or self.source.extension_years or self.extension_years

        enabled: list[RestaurantConfig] = []
        for restaurant in restaurants:
            if not restaurant.enabled:
                logger.info("Restaurant %s is disabled, skipping", restaurant.name)
                continue
            enabled.append(restaurant)

        logger.info("Starting %s for %d restaurants", operation.value, len(enabled))
        for outcome in self._process_all(operation, enabled, effective_years):
            summary.processed += 1
            if outcome.success:
                summary.succeeded += 1
                summary.total_updated += outcome.updated_count
            else:
                summary.failed += 1
            summary.outcomes.append(outcome)

        summary.duration_seconds = time.perf_counter() - started
        summary.finished_at = datetime.now(timezone.utc)
        logger.info(
            "Finished %s: processed=%d succeeded=%d failed=%d updated=%d in %.2fs",
            operation.value,
            summary.processed,
            summary.succeeded,
            summary.failed,
            summary.total_updated,
            summary.duration_seconds,
        )
        return summary

    def _process_all(
        self,
        operation: Operation,
        restaurants: list[RestaurantConfig],
        years: int,
    ) -> list[RestaurantOutcome]:
        if self.max_workers == 1 or len(restaurants) <= 1:
            return [self._process_one(operation, restaurant, years) for restaurant in restaurants]

        # map() yields in submission order, so outcomes keep the input order.
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="minion") as pool:
            return list(pool.map(lambda restaurant: self._process_one(operation, restaurant, years), restaurants))

    def _process_one(self, operation: Operation, restaurant: RestaurantConfig, years: int) -> RestaurantOutcome:
        logger.info("Processing restaurant %s", restaurant.name)
        try:
            if operation is Operation.EXTEND_KEYS:
                updated = self.processor.extend_keys(restaurant, years)
            else:
                updated = self.processor.refresh_menus(restaurant)
        except Exception as exc:
            logger.error("Restaurant %s failed: %s", restaurant.name, exc)
            return RestaurantOutcome(name=restaurant.name, success=False, error=str(exc))

        logger.info("Restaurant %s: updated %d %s", restaurant.name, updated, operation.item_label)
        return RestaurantOutcome(
            name=restaurant.name,
            success=True,
            updated_count=updated,
            message=f"Updated {updated} {operation.item_label}",
        )


def build_orchestrator(settings: MinionSettings) -> BatchOrchestrator:
    return BatchOrchestrator(
        source=build_source(settings),
        extension_years=settings.extension_years,
        processor=RestaurantProcessor(timeout=settings.request_timeout_seconds),
        max_workers=settings.max_workers,
    )

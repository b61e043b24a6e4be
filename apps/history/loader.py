"""
Concurrent fan-out of the eight category loads with an all-settle join.

Every category runs as its own task; the join waits for all of them and
records each task's outcome explicitly (records or error) instead of
failing fast on the first error.
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import ALL_COMPLETED, ThreadPoolExecutor, wait
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, Field

from apps.history.fetchers import CATEGORY_LOADERS
from apps.history.fetchers.common import require_patient_id
from packages.shared.models import HistoryCategory

logger = logging.getLogger(__name__)

Loader = Callable[[Any, str], list]


class CategoryOutcome(BaseModel):
    category: HistoryCategory
    records: list[Any] = Field(default_factory=list)
    error: Optional[str] = None
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


class HistoryLoad(BaseModel):
    patient_id: str
    outcomes: dict[HistoryCategory, CategoryOutcome] = Field(default_factory=dict)

    def records(self, category: HistoryCategory) -> list:
        outcome = self.outcomes.get(category)
        return list(outcome.records) if outcome else []

    @property
    def failed_categories(self) -> list[HistoryCategory]:
        return [c for c, o in self.outcomes.items() if not o.ok]


def _settle(category: HistoryCategory, load: Loader, client: Any, patient_id: str) -> CategoryOutcome:
    started = time.monotonic()
    try:
        records = load(client, patient_id)
    except Exception as exc:
        logger.warning(
            "Error fetching %s history for patient %s: %s", category.value, patient_id, exc
        )
        return CategoryOutcome(
            category=category,
            error=f"{type(exc).__name__}: {exc}",
            elapsed_ms=int((time.monotonic() - started) * 1000),
        )
    return CategoryOutcome(
        category=category,
        records=list(records or []),
        elapsed_ms=int((time.monotonic() - started) * 1000),
    )


def load_patient_history(
    client: Any,
    patient_id: str,
    *,
    max_workers: int = 8,
    loaders: Optional[Mapping[HistoryCategory, Loader]] = None,
) -> HistoryLoad:
    """Fetch all categories concurrently and wait for every one to settle."""
    patient_id = require_patient_id(patient_id)
    loaders = loaders or CATEGORY_LOADERS

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(loaders)))) as executor:
        future_map = {
            executor.submit(_settle, category, load, client, patient_id): category
            for category, load in loaders.items()
        }
        wait(future_map, return_when=ALL_COMPLETED)

    settled: dict[HistoryCategory, CategoryOutcome] = {}
    for future, category in future_map.items():
        settled[category] = future.result()

    # Stable category order regardless of completion order.
    outcomes = {c: settled[c] for c in HistoryCategory if c in settled}
    failed = [c.value for c, o in outcomes.items() if not o.ok]
    logger.info(
        "Loaded history for patient %s: %s",
        patient_id,
        ", ".join(f"{c.value}={len(o.records)}" for c, o in outcomes.items()),
    )
    if failed:
        logger.warning("Categories unavailable for patient %s: %s", patient_id, ", ".join(failed))
    return HistoryLoad(patient_id=patient_id, outcomes=outcomes)

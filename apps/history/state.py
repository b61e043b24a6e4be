"""
Aggregate history state and its single transition function.

The eight category lists live in one immutable value object and are
replaced together, so no consumer can observe a half-updated snapshot.
Each load cycle carries a generation number; results from a cycle that has
been superseded are discarded when they arrive.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from apps.history.loader import HistoryLoad
from packages.shared.models import (
    AdmissionRecord,
    ClinicalNoteRecord,
    DocumentRecord,
    HistoryCategory,
    LabTestRecord,
    PrescriptionRecord,
    ProcedureRecord,
    VisitRecord,
    VitalSignsRecord,
)

logger = logging.getLogger(__name__)


class HistoryState(BaseModel):
    model_config = ConfigDict(frozen=True)

    patient_id: str
    generation: int = 0
    loading: bool = False
    loaded: bool = False
    loaded_at: Optional[datetime] = None

    admissions: list[AdmissionRecord] = Field(default_factory=list)
    visits: list[VisitRecord] = Field(default_factory=list)
    vitals: list[VitalSignsRecord] = Field(default_factory=list)
    labs: list[LabTestRecord] = Field(default_factory=list)
    prescriptions: list[PrescriptionRecord] = Field(default_factory=list)
    procedures: list[ProcedureRecord] = Field(default_factory=list)
    documents: list[DocumentRecord] = Field(default_factory=list)
    notes: list[ClinicalNoteRecord] = Field(default_factory=list)

    failed: list[HistoryCategory] = Field(default_factory=list)
    errors: dict[str, str] = Field(default_factory=dict)

    def records(self, category: HistoryCategory) -> list:
        return list(getattr(self, category.value))

    @property
    def all_failed(self) -> bool:
        """Every category failed: history is unavailable, not merely empty."""
        return self.loaded and len(self.failed) == len(HistoryCategory)

    @property
    def is_empty(self) -> bool:
        return not any(getattr(self, c.value) for c in HistoryCategory)


class LoadStarted(BaseModel):
    generation: int


class LoadSettled(BaseModel):
    generation: int
    load: HistoryLoad


HistoryAction = Union[LoadStarted, LoadSettled]


def reduce_history(state: HistoryState, action: HistoryAction) -> HistoryState:
    if isinstance(action, LoadStarted):
        if action.generation <= state.generation:
            return state
        return state.model_copy(update={"generation": action.generation, "loading": True})

    if isinstance(action, LoadSettled):
        if action.generation != state.generation:
            logger.info(
                "Discarding stale history load for patient %s (generation %s, current %s)",
                state.patient_id,
                action.generation,
                state.generation,
            )
            return state
        load = action.load
        return HistoryState(
            patient_id=state.patient_id,
            generation=state.generation,
            loading=False,
            loaded=True,
            loaded_at=datetime.now(timezone.utc),
            failed=load.failed_categories,
            errors={c.value: o.error for c, o in load.outcomes.items() if o.error},
            **{c.value: load.records(c) for c in HistoryCategory},
        )

    raise TypeError(f"Unknown history action: {type(action).__name__}")


class HistoryStore:
    """Thread-safe holder of the current `HistoryState`."""

    def __init__(self, patient_id: str):
        self._lock = threading.Lock()
        self._state = HistoryState(patient_id=patient_id)

    @property
    def state(self) -> HistoryState:
        with self._lock:
            return self._state

    def dispatch(self, action: HistoryAction) -> HistoryState:
        with self._lock:
            self._state = reduce_history(self._state, action)
            return self._state

    def begin_load(self) -> int:
        with self._lock:
            generation = self._state.generation + 1
            self._state = reduce_history(self._state, LoadStarted(generation=generation))
            return generation

    def settle(self, generation: int, load: HistoryLoad) -> HistoryState:
        return self.dispatch(LoadSettled(generation=generation, load=load))

"""
Per-patient history session: owns the store and drives reload cycles.
"""
from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Optional

from apps.history.fetchers.common import require_patient_id
from apps.history.loader import load_patient_history
from apps.history.state import HistoryState, HistoryStore

logger = logging.getLogger(__name__)


class PatientHistorySession:
    """Loads run one at a time; callers arriving mid-load wait for its result.

    With `ttl_seconds` set, a loaded state older than that is reloaded on the
    next `ensure_loaded()`.
    """

    def __init__(
        self,
        client: Any,
        patient_id: str,
        *,
        max_workers: int = 8,
        ttl_seconds: Optional[float] = None,
    ):
        self.client = client
        self.patient_id = require_patient_id(patient_id)
        self.max_workers = max_workers
        self.ttl_seconds = ttl_seconds
        self.store = HistoryStore(self.patient_id)
        self._load_lock = threading.Lock()

    @property
    def state(self) -> HistoryState:
        return self.store.state

    def is_fresh(self, state: HistoryState) -> bool:
        if not state.loaded:
            return False
        if self.ttl_seconds is None or state.loaded_at is None:
            return True
        age = (datetime.now(timezone.utc) - state.loaded_at).total_seconds()
        return age < self.ttl_seconds

    def _load(self) -> HistoryState:
        generation = self.store.begin_load()
        logger.info("Loading history for patient %s (generation %s)", self.patient_id, generation)
        load = load_patient_history(self.client, self.patient_id, max_workers=self.max_workers)
        return self.store.settle(generation, load)

    def reload(self) -> HistoryState:
        """Re-issue all eight fetches and return the settled state."""
        with self._load_lock:
            return self._load()

    def ensure_loaded(self) -> HistoryState:
        state = self.store.state
        if self.is_fresh(state):
            return state
        with self._load_lock:
            # Another caller may have finished a load while we waited.
            state = self.store.state
            if self.is_fresh(state):
                return state
            return self._load()


class SessionRegistry:
    """In-process, size-bounded map of patient id to session. Nothing is persisted.

    The least recently used session is dropped once `max_sessions` is exceeded.
    """

    def __init__(
        self,
        client: Any,
        *,
        max_workers: int = 8,
        max_sessions: int = 256,
        ttl_seconds: Optional[float] = None,
    ):
        if max_sessions < 1:
            raise ValueError("max_sessions must be >= 1")
        self.client = client
        self.max_workers = max_workers
        self.max_sessions = max_sessions
        self.ttl_seconds = ttl_seconds
        self._sessions: OrderedDict[str, PatientHistorySession] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def get(self, patient_id: str) -> PatientHistorySession:
        patient_id = require_patient_id(patient_id)
        with self._lock:
            session = self._sessions.get(patient_id)
            if session is not None:
                self._sessions.move_to_end(patient_id)
                return session
            session = PatientHistorySession(
                self.client,
                patient_id,
                max_workers=self.max_workers,
                ttl_seconds=self.ttl_seconds,
            )
            self._sessions[patient_id] = session
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.debug("Evicted history session for patient %s", evicted)
            return session

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

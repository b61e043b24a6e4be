"""
Patient medical-history aggregation: fetch, merge, summarize, export.
"""
from .loader import CategoryOutcome, HistoryLoad, load_patient_history
from .session import PatientHistorySession, SessionRegistry
from .state import HistoryState, HistoryStore, LoadSettled, LoadStarted, reduce_history
from .summary import summarize, vitals_stats, vitals_trend
from .tabs import category_table, paginate
from .timeline import build_timeline, filter_timeline

__all__ = [
    "CategoryOutcome",
    "HistoryLoad",
    "HistoryState",
    "HistoryStore",
    "LoadSettled",
    "LoadStarted",
    "PatientHistorySession",
    "SessionRegistry",
    "build_timeline",
    "category_table",
    "filter_timeline",
    "load_patient_history",
    "paginate",
    "reduce_history",
    "summarize",
    "vitals_stats",
    "vitals_trend",
]

from .common import Page, Record, TableView, TrendPoint
from .domain import (
    AdmissionRecord,
    ClinicalNoteRecord,
    DocumentRecord,
    HistorySummary,
    LabTestRecord,
    PrescriptionItem,
    PrescriptionRecord,
    ProcedureRecord,
    TimelineEntry,
    VisitRecord,
    VitalSignsRecord,
    VitalsStats,
)
from .enums import (
    AdmissionType,
    HistoryCategory,
    TemperatureUnit,
    TimelineKind,
    VisitOutcome,
)

__all__ = [
    "AdmissionRecord",
    "AdmissionType",
    "ClinicalNoteRecord",
    "DocumentRecord",
    "HistoryCategory",
    "HistorySummary",
    "LabTestRecord",
    "Page",
    "PrescriptionItem",
    "PrescriptionRecord",
    "ProcedureRecord",
    "Record",
    "TableView",
    "TemperatureUnit",
    "TimelineEntry",
    "TimelineKind",
    "TrendPoint",
    "VisitOutcome",
    "VisitRecord",
    "VitalSignsRecord",
    "VitalsStats",
]

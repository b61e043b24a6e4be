from packages.shared.models import HistoryCategory

from .admissions import fetch_admissions, load_admissions
from .common import PayloadShapeError, doctor_display_name, unwrap_payload
from .documents import fetch_documents, load_documents
from .labs import fetch_lab_tests, load_lab_tests
from .notes import fetch_clinical_notes, load_clinical_notes
from .prescriptions import fetch_prescriptions, load_prescriptions
from .procedures import fetch_procedures, load_procedures
from .visits import fetch_visits, load_visits
from .vitals import fetch_vitals, load_vitals

# Raising loaders, keyed by category, in display order.
CATEGORY_LOADERS = {
    HistoryCategory.ADMISSIONS: load_admissions,
    HistoryCategory.VISITS: load_visits,
    HistoryCategory.VITALS: load_vitals,
    HistoryCategory.LABS: load_lab_tests,
    HistoryCategory.PRESCRIPTIONS: load_prescriptions,
    HistoryCategory.PROCEDURES: load_procedures,
    HistoryCategory.DOCUMENTS: load_documents,
    HistoryCategory.NOTES: load_clinical_notes,
}

__all__ = [
    "CATEGORY_LOADERS",
    "PayloadShapeError",
    "doctor_display_name",
    "fetch_admissions",
    "fetch_clinical_notes",
    "fetch_documents",
    "fetch_lab_tests",
    "fetch_prescriptions",
    "fetch_procedures",
    "fetch_visits",
    "fetch_vitals",
    "unwrap_payload",
]

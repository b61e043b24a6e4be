from enum import Enum


class HistoryCategory(str, Enum):
    """The eight record kinds fetched for a patient history."""
    ADMISSIONS = "admissions"
    VISITS = "visits"
    VITALS = "vitals"
    LABS = "labs"
    PRESCRIPTIONS = "prescriptions"
    PROCEDURES = "procedures"
    DOCUMENTS = "documents"
    NOTES = "notes"


class TimelineKind(str, Enum):
    """Category tag carried by a timeline entry."""
    ADMISSION = "admission"
    DISCHARGE = "discharge"
    VISIT = "visit"
    VITALS = "vitals"
    LAB = "lab"
    PRESCRIPTION = "prescription"
    PROCEDURE = "procedure"
    DOCUMENT = "document"
    NOTE = "note"


class AdmissionType(str, Enum):
    EMERGENCY = "emergency"
    ELECTIVE = "elective"
    TRANSFER = "transfer"


class VisitOutcome(str, Enum):
    RESOLVED = "resolved"
    ONGOING = "ongoing"
    REFERRED = "referred"
    ADMITTED = "admitted"


class TemperatureUnit(str, Enum):
    FAHRENHEIT = "fahrenheit"
    CELSIUS = "celsius"

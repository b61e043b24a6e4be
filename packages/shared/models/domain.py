from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import Record
from .enums import AdmissionType, TemperatureUnit, TimelineKind, VisitOutcome


class AdmissionRecord(Record):
    patient_id: Optional[str] = None
    admission_date: Optional[datetime] = None
    discharge_date: Optional[datetime] = None
    ward_id: Optional[str] = None
    ward_name: Optional[str] = None
    room_number: Optional[str] = None
    bed_number: Optional[str] = None
    reason: Optional[str] = None
    admission_type: AdmissionType = AdmissionType.ELECTIVE
    primary_diagnosis: Optional[str] = None
    attending_doctor_id: Optional[str] = None
    attending_doctor_name: Optional[str] = None
    total_days: Optional[int] = None
    discharge_status: Optional[str] = None
    status: Optional[str] = None


class VisitRecord(Record):
    patient_id: Optional[str] = None
    visit_date: Optional[datetime] = None
    appointment_id: Optional[str] = None
    department_id: Optional[str] = None
    department_name: Optional[str] = None
    doctor_id: Optional[str] = None
    doctor_name: Optional[str] = None
    visit_type: str = "follow_up"
    chief_complaint: str = ""
    diagnosis: Optional[str] = None
    notes: Optional[str] = None
    outcome: VisitOutcome = VisitOutcome.ONGOING


class VitalSignsRecord(Record):
    patient_id: Optional[str] = None
    recorded_at: Optional[datetime] = None
    recorded_by_name: Optional[str] = None
    temperature: Optional[float] = None
    temperature_unit: Optional[TemperatureUnit] = None
    systolic: Optional[float] = None
    diastolic: Optional[float] = None
    heart_rate: Optional[float] = None
    respiratory_rate: Optional[float] = None
    oxygen_saturation: Optional[float] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    bmi: Optional[float] = None
    blood_glucose: Optional[float] = None
    pain_level: Optional[float] = None
    notes: Optional[str] = None


class LabTestRecord(Record):
    order_id: Optional[str] = None
    order_date: Optional[datetime] = None
    test_name: str = "Unknown Test"
    category: str = "other"
    status: Optional[str] = None
    result_value: Optional[str] = None
    result_units: Optional[str] = None
    reference_range: Optional[str] = None
    flag: Optional[str] = None
    interpretation: Optional[str] = None
    result_date: Optional[datetime] = None
    notes: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.result_value is None


class PrescriptionItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    medication_name: str = "Unknown Medicine"
    generic_name: Optional[str] = None
    brand_name: Optional[str] = None
    strength: Optional[str] = None
    dosage_form: Optional[str] = None
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None
    quantity: Optional[int] = None
    instructions: Optional[str] = None
    status: Optional[str] = None


class PrescriptionRecord(Record):
    prescribed_date: Optional[datetime] = None
    prescriber_name: Optional[str] = None
    items: list[PrescriptionItem] = Field(default_factory=list)
    medications_summary: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class ProcedureRecord(Record):
    procedure_date: Optional[datetime] = None
    procedure_name: Optional[str] = None
    procedure_type: Optional[str] = None
    surgeon_name: Optional[str] = None
    diagnosis: Optional[str] = None
    findings: Optional[str] = None
    outcome: Optional[str] = None


class DocumentRecord(Record):
    uploaded_at: Optional[datetime] = None
    document_name: Optional[str] = None
    document_type: Optional[str] = None
    file_url: Optional[str] = None
    description: Optional[str] = None


class ClinicalNoteRecord(Record):
    note_date: Optional[datetime] = None
    note_type: Optional[str] = None
    author_name: Optional[str] = None
    author_role: Optional[str] = None
    content: Optional[str] = None
    assessment: Optional[str] = None
    plan: Optional[str] = None


class TimelineEntry(BaseModel):
    """One normalized, display-ready projection of any clinical record."""
    model_config = ConfigDict(frozen=True)

    entry_id: str
    date: datetime
    category: TimelineKind
    title: str
    description: str = ""
    color: str
    icon: str
    related_id: str


class VitalsStats(BaseModel):
    latest: Optional[VitalSignsRecord] = None
    avg_systolic: Optional[int] = None
    avg_diastolic: Optional[int] = None
    avg_heart_rate: Optional[int] = None
    avg_temperature: Optional[float] = None
    avg_oxygen_saturation: Optional[int] = None
    avg_weight: Optional[float] = None
    total_readings: int = 0


class HistorySummary(BaseModel):
    patient_id: str
    total_admissions: int = 0
    total_visits: int = 0
    total_vitals: int = 0
    total_lab_tests: int = 0
    total_prescriptions: int = 0
    total_procedures: int = 0
    total_documents: int = 0
    total_notes: int = 0
    last_admission_date: Optional[datetime] = None
    last_visit_date: Optional[datetime] = None
    vitals: VitalsStats = Field(default_factory=VitalsStats)

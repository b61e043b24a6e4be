"""
Outpatient visits, derived from completed appointments.
"""
from __future__ import annotations

from packages.shared.models import HistoryCategory, VisitOutcome, VisitRecord

from .common import (
    as_str,
    doctor_display_name,
    first_present,
    nested,
    normalize_records,
    record_id,
    require_patient_id,
    swallow_errors,
    timestamp,
    unwrap_payload,
)


def normalize_visit(raw: dict, idx: int = 0) -> VisitRecord:
    status = str(raw.get("status") or "").lower()
    return VisitRecord(
        id=record_id(raw, f"visit-{idx}"),
        patient_id=as_str(raw.get("patientId")),
        visit_date=timestamp(raw, "startTime", "appointmentDate", "visitDate"),
        appointment_id=as_str(raw.get("id")),
        department_id=as_str(raw.get("departmentId")),
        department_name=as_str(nested(raw, "department", "name")) or as_str(raw.get("departmentName")),
        doctor_id=as_str(raw.get("doctorId")),
        doctor_name=doctor_display_name(raw.get("doctor"), raw.get("doctorName")),
        visit_type=as_str(first_present(raw, "type", "visitType")) or "follow_up",
        chief_complaint=as_str(first_present(raw, "reason", "chiefComplaint", "notes")) or "",
        diagnosis=as_str(raw.get("diagnosis")),
        notes=as_str(raw.get("notes")),
        outcome=VisitOutcome.RESOLVED if status == "completed" else VisitOutcome.ONGOING,
    )


def load_visits(client, patient_id: str) -> list[VisitRecord]:
    patient_id = require_patient_id(patient_id)
    payload = client.get("/appointments", params={"patientId": patient_id, "status": "completed"})
    items = unwrap_payload(payload, "appointments")
    return normalize_records(HistoryCategory.VISITS, items, normalize_visit)


fetch_visits = swallow_errors(HistoryCategory.VISITS)(load_visits)

"""
Inpatient admissions: `GET /inpatient/admissions?patientId=`.
"""
from __future__ import annotations

from packages.shared.models import AdmissionRecord, AdmissionType, HistoryCategory

from .common import (
    as_int,
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


def normalize_admission(raw: dict, idx: int = 0) -> AdmissionRecord:
    ward = nested(raw, "bed", "room", "ward") or {}
    if raw.get("isEmergency"):
        admission_type = AdmissionType.EMERGENCY
    elif str(raw.get("admissionType") or "").lower() in {t.value for t in AdmissionType}:
        admission_type = AdmissionType(str(raw["admissionType"]).lower())
    else:
        admission_type = AdmissionType.ELECTIVE

    return AdmissionRecord(
        id=record_id(raw, f"admission-{idx}"),
        patient_id=as_str(first_present(raw, "patientId")) or as_str(nested(raw, "patient", "id")),
        admission_date=timestamp(raw, "admissionDateTime", "admissionDate"),
        discharge_date=timestamp(raw, "dischargeDateTime", "dischargeDate"),
        ward_id=as_str(ward.get("id")) or as_str(raw.get("wardId")),
        ward_name=as_str(ward.get("name")) or as_str(raw.get("wardName")),
        room_number=as_str(nested(raw, "bed", "room", "roomNumber")) or as_str(raw.get("roomNumber")),
        bed_number=as_str(nested(raw, "bed", "bedNumber")) or as_str(raw.get("bedNumber")),
        reason=as_str(first_present(raw, "admissionReason", "reason")),
        admission_type=admission_type,
        primary_diagnosis=as_str(raw.get("primaryDiagnosis")),
        attending_doctor_id=as_str(first_present(raw, "admittingDoctorId", "attendingDoctorId")),
        attending_doctor_name=doctor_display_name(
            raw.get("admittingDoctor"), raw.get("attendingDoctorName")
        ),
        total_days=as_int(raw.get("totalDays")),
        discharge_status=as_str(raw.get("dischargeStatus")),
        status=as_str(raw.get("status")),
    )


def load_admissions(client, patient_id: str) -> list[AdmissionRecord]:
    patient_id = require_patient_id(patient_id)
    payload = client.get("/inpatient/admissions", params={"patientId": patient_id})
    items = unwrap_payload(payload, "admissions")
    return normalize_records(HistoryCategory.ADMISSIONS, items, normalize_admission)


fetch_admissions = swallow_errors(HistoryCategory.ADMISSIONS)(load_admissions)

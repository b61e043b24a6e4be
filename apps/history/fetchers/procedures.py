"""
Procedures and surgeries: `GET /patients/{id}/procedures`.
"""
from __future__ import annotations

from packages.shared.models import HistoryCategory, ProcedureRecord

from .common import (
    as_str,
    doctor_display_name,
    first_present,
    normalize_records,
    record_id,
    require_patient_id,
    swallow_errors,
    timestamp,
    unwrap_payload,
)


def normalize_procedure(raw: dict, idx: int = 0) -> ProcedureRecord:
    return ProcedureRecord(
        id=record_id(raw, f"procedure-{idx}"),
        procedure_date=timestamp(raw, "procedureDate", "recordDate"),
        procedure_name=as_str(first_present(raw, "procedureName", "title")),
        procedure_type=as_str(raw.get("procedureType")),
        surgeon_name=doctor_display_name(raw.get("surgeon"), raw.get("surgeonName")),
        diagnosis=as_str(first_present(raw, "preOpDiagnosis", "diagnosis")),
        findings=as_str(raw.get("findings")),
        outcome=as_str(raw.get("outcome")),
    )


def load_procedures(client, patient_id: str) -> list[ProcedureRecord]:
    patient_id = require_patient_id(patient_id)
    payload = client.get(f"/patients/{patient_id}/procedures")
    items = unwrap_payload(payload, "procedures")
    return normalize_records(HistoryCategory.PROCEDURES, items, normalize_procedure)


fetch_procedures = swallow_errors(HistoryCategory.PROCEDURES)(load_procedures)

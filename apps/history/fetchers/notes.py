"""
Clinical notes: `GET /patients/{id}/notes`.
"""
from __future__ import annotations

from packages.shared.models import ClinicalNoteRecord, HistoryCategory

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


def normalize_note(raw: dict, idx: int = 0) -> ClinicalNoteRecord:
    return ClinicalNoteRecord(
        id=record_id(raw, f"note-{idx}"),
        note_date=timestamp(raw, "noteDate", "recordDate", "createdAt"),
        note_type=as_str(raw.get("noteType")),
        author_name=doctor_display_name(raw.get("author"), raw.get("authorName")),
        author_role=as_str(raw.get("authorRole")),
        content=as_str(first_present(raw, "content", "description")),
        assessment=as_str(raw.get("assessment")),
        plan=as_str(raw.get("plan")),
    )


def load_clinical_notes(client, patient_id: str) -> list[ClinicalNoteRecord]:
    patient_id = require_patient_id(patient_id)
    payload = client.get(f"/patients/{patient_id}/notes")
    items = unwrap_payload(payload, "notes")
    return normalize_records(HistoryCategory.NOTES, items, normalize_note)


fetch_clinical_notes = swallow_errors(HistoryCategory.NOTES)(load_clinical_notes)

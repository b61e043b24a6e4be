"""
Uploaded patient documents: `GET /patients/{id}/documents`.
"""
from __future__ import annotations

from packages.shared.models import DocumentRecord, HistoryCategory

from .common import (
    as_str,
    first_present,
    normalize_records,
    record_id,
    require_patient_id,
    swallow_errors,
    timestamp,
    unwrap_payload,
)


def normalize_document(raw: dict, idx: int = 0) -> DocumentRecord:
    return DocumentRecord(
        id=record_id(raw, f"document-{idx}"),
        uploaded_at=timestamp(raw, "uploadedAt", "createdAt"),
        document_name=as_str(first_present(raw, "documentName", "title", "fileName")),
        document_type=as_str(first_present(raw, "documentType", "type")),
        file_url=as_str(raw.get("fileUrl")),
        description=as_str(raw.get("description")),
    )


def load_documents(client, patient_id: str) -> list[DocumentRecord]:
    patient_id = require_patient_id(patient_id)
    payload = client.get(f"/patients/{patient_id}/documents")
    items = unwrap_payload(payload, "documents")
    return normalize_records(HistoryCategory.DOCUMENTS, items, normalize_document)


fetch_documents = swallow_errors(HistoryCategory.DOCUMENTS)(load_documents)

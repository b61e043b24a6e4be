"""
Pharmacy prescriptions with per-item medicine details.
"""
from __future__ import annotations

from typing import Optional

from packages.shared.models import HistoryCategory, PrescriptionItem, PrescriptionRecord

from .common import (
    as_int,
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


def normalize_prescription_item(item: dict) -> PrescriptionItem:
    medicine = item.get("medicine") if isinstance(item.get("medicine"), dict) else {}
    return PrescriptionItem(
        id=as_str(item.get("id")),
        medication_name=(
            as_str(medicine.get("name"))
            or as_str(medicine.get("brandName"))
            or as_str(item.get("medicationName"))
            or "Unknown Medicine"
        ),
        generic_name=as_str(medicine.get("genericName")) or as_str(item.get("genericName")),
        brand_name=as_str(medicine.get("brandName")),
        strength=as_str(medicine.get("strength")),
        dosage_form=as_str(medicine.get("dosageForm")),
        dosage=as_str(item.get("dosage")),
        frequency=as_str(item.get("frequency")),
        duration=as_str(item.get("duration")),
        quantity=as_int(item.get("quantity")),
        instructions=as_str(item.get("instructions")),
        status=as_str(item.get("status")),
    )


def medications_summary(items: list[PrescriptionItem]) -> Optional[str]:
    names = [f"{i.medication_name} {i.strength}" if i.strength else i.medication_name for i in items]
    return ", ".join(names) or None


def normalize_prescription(raw: dict, idx: int = 0) -> PrescriptionRecord:
    items = [normalize_prescription_item(i) for i in (raw.get("items") or []) if isinstance(i, dict)]
    return PrescriptionRecord(
        id=record_id(raw, f"prescription-{idx}"),
        prescribed_date=timestamp(raw, "createdAt", "prescriptionDate", "prescribedDate"),
        prescriber_name=doctor_display_name(
            raw.get("doctor"), first_present(raw, "prescribedByName", "doctorName")
        ),
        items=items,
        medications_summary=medications_summary(items),
        status=as_str(raw.get("status")),
        notes=as_str(raw.get("notes")),
    )


def load_prescriptions(client, patient_id: str) -> list[PrescriptionRecord]:
    patient_id = require_patient_id(patient_id)
    payload = client.get("/pharmacy/prescriptions", params={"patientId": patient_id})
    items = unwrap_payload(payload, "prescriptions")
    return normalize_records(HistoryCategory.PRESCRIPTIONS, items, normalize_prescription)


fetch_prescriptions = swallow_errors(HistoryCategory.PRESCRIPTIONS)(load_prescriptions)

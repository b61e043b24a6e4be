"""
Vital signs: `GET /patients/{id}/vitals`.

The backend merges OPD and inpatient captures, which spell blood pressure
differently (`systolicBp`, `systolicBP`, `bloodPressureSystolic`).
"""
from __future__ import annotations

from typing import Any, Optional

from packages.shared.models import HistoryCategory, TemperatureUnit, VitalSignsRecord

from .common import (
    as_float,
    as_str,
    first_present,
    normalize_records,
    person_name,
    record_id,
    require_patient_id,
    swallow_errors,
    timestamp,
    unwrap_payload,
)

_SYSTOLIC_KEYS = ("bloodPressureSystolic", "systolicBp", "systolicBP", "systolic")
_DIASTOLIC_KEYS = ("bloodPressureDiastolic", "diastolicBp", "diastolicBP", "diastolic")


def _temperature_unit(value: Any) -> Optional[TemperatureUnit]:
    text = str(value or "").strip().lower()
    if text in {"c", "celsius", "°c"}:
        return TemperatureUnit.CELSIUS
    if text in {"f", "fahrenheit", "°f"}:
        return TemperatureUnit.FAHRENHEIT
    return None


def normalize_vitals(raw: dict, idx: int = 0) -> VitalSignsRecord:
    return VitalSignsRecord(
        id=record_id(raw, f"vitals-{idx}"),
        patient_id=as_str(raw.get("patientId")),
        recorded_at=timestamp(raw, "recordedAt", "createdAt"),
        recorded_by_name=person_name(raw.get("recordedBy")) or as_str(raw.get("recordedByName")),
        temperature=as_float(raw.get("temperature")),
        temperature_unit=_temperature_unit(raw.get("temperatureUnit")),
        systolic=as_float(first_present(raw, *_SYSTOLIC_KEYS)),
        diastolic=as_float(first_present(raw, *_DIASTOLIC_KEYS)),
        heart_rate=as_float(first_present(raw, "heartRate", "pulse")),
        respiratory_rate=as_float(raw.get("respiratoryRate")),
        oxygen_saturation=as_float(first_present(raw, "oxygenSaturation", "spo2", "spO2")),
        weight=as_float(raw.get("weight")),
        height=as_float(raw.get("height")),
        bmi=as_float(raw.get("bmi")),
        blood_glucose=as_float(raw.get("bloodGlucose")),
        pain_level=as_float(first_present(raw, "painLevel", "painScore")),
        notes=as_str(raw.get("notes")),
    )


def load_vitals(client, patient_id: str) -> list[VitalSignsRecord]:
    patient_id = require_patient_id(patient_id)
    payload = client.get(f"/patients/{patient_id}/vitals")
    items = unwrap_payload(payload, "vitals")
    return normalize_records(HistoryCategory.VITALS, items, normalize_vitals)


fetch_vitals = swallow_errors(HistoryCategory.VITALS)(load_vitals)

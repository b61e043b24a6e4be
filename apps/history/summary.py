"""
At-a-glance counts and vitals statistics for a loaded history.
"""
from __future__ import annotations

import math
from typing import Iterable, Optional

from apps.history.state import HistoryState
from packages.shared.models import HistorySummary, TrendPoint, VitalSignsRecord, VitalsStats

VITAL_FIELDS = (
    "systolic",
    "diastolic",
    "heart_rate",
    "temperature",
    "oxygen_saturation",
    "weight",
    "respiratory_rate",
)


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def field_mean(vitals: Iterable[VitalSignsRecord], field: str) -> Optional[float]:
    """Mean of `field` over readings where it is present and non-zero; None if there are none."""
    values = [getattr(v, field) for v in vitals]
    valid = [float(x) for x in values if x is not None and x != 0]
    if not valid:
        return None
    return sum(valid) / len(valid)


def _mean_int(vitals: list[VitalSignsRecord], field: str) -> Optional[int]:
    mean = field_mean(vitals, field)
    return None if mean is None else int(_round_half_up(mean))


def _mean_one_decimal(vitals: list[VitalSignsRecord], field: str) -> Optional[float]:
    mean = field_mean(vitals, field)
    return None if mean is None else _round_half_up(mean, 1)


def latest_vitals(vitals: Iterable[VitalSignsRecord]) -> Optional[VitalSignsRecord]:
    dated = [v for v in vitals if v.recorded_at is not None]
    if not dated:
        return None
    return max(dated, key=lambda v: v.recorded_at)


def vitals_stats(vitals: list[VitalSignsRecord]) -> VitalsStats:
    readings = [v for v in vitals if v.recorded_at is not None]
    return VitalsStats(
        latest=latest_vitals(readings),
        avg_systolic=_mean_int(readings, "systolic"),
        avg_diastolic=_mean_int(readings, "diastolic"),
        avg_heart_rate=_mean_int(readings, "heart_rate"),
        avg_temperature=_mean_one_decimal(readings, "temperature"),
        avg_oxygen_saturation=_mean_int(readings, "oxygen_saturation"),
        avg_weight=_mean_one_decimal(readings, "weight"),
        total_readings=len(readings),
    )


def vitals_trend(vitals: Iterable[VitalSignsRecord], field: str) -> list[TrendPoint]:
    """Oldest-first series of one vitals field, for charting."""
    if field not in VITAL_FIELDS:
        raise ValueError(f"Unknown vitals field: {field}")
    dated = sorted((v for v in vitals if v.recorded_at is not None), key=lambda v: v.recorded_at)
    return [TrendPoint(recorded_at=v.recorded_at, value=getattr(v, field)) for v in dated]


def summarize(state: HistoryState) -> HistorySummary:
    admission_dates = [a.admission_date for a in state.admissions if a.admission_date]
    visit_dates = [v.visit_date for v in state.visits if v.visit_date]
    return HistorySummary(
        patient_id=state.patient_id,
        total_admissions=len(state.admissions),
        total_visits=len(state.visits),
        total_vitals=len(state.vitals),
        total_lab_tests=len(state.labs),
        total_prescriptions=len(state.prescriptions),
        total_procedures=len(state.procedures),
        total_documents=len(state.documents),
        total_notes=len(state.notes),
        last_admission_date=max(admission_dates) if admission_dates else None,
        last_visit_date=max(visit_dates) if visit_dates else None,
        vitals=vitals_stats(state.vitals),
    )

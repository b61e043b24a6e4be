"""
Per-category table views with placeholder substitution and pagination.

The same column definitions drive the PDF report tables.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from apps.history.constants import CATEGORY_LABELS, DEFAULT_PAGE_SIZE
from apps.history.state import HistoryState
from packages.shared.models import (
    AdmissionRecord,
    HistoryCategory,
    LabTestRecord,
    Page,
    PrescriptionRecord,
    TableView,
    TemperatureUnit,
    VitalSignsRecord,
)
from packages.shared.utils.dates import days_between, format_display_date

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class Column:
    label: str
    render: Callable[[Any], str]


def _text(value: Optional[Any]) -> str:
    if value is None:
        return "-"
    text = str(value).strip()
    return text or "-"


def _num(value: Optional[float], suffix: str = "") -> str:
    # Zero is a missing-reading sentinel in the backend data.
    if not value:
        return "-"
    shown = str(int(value)) if float(value).is_integer() else f"{value:g}"
    return f"{shown}{suffix}"


def _upper(value: Optional[str]) -> str:
    return value.upper() if value else "-"


def _ward_room(a: AdmissionRecord) -> str:
    if not a.ward_name and not a.room_number:
        return "-"
    return f"{a.ward_name or 'N/A'} / {a.room_number or 'N/A'}"


def _stay_days(a: AdmissionRecord) -> str:
    if a.total_days is not None:
        return str(a.total_days)
    days = days_between(a.admission_date, a.discharge_date)
    return "-" if days is None else str(days)


def _bp(v: VitalSignsRecord) -> str:
    if v.systolic and v.diastolic:
        return f"{_num(v.systolic)}/{_num(v.diastolic)}"
    return "-"


def _temp(v: VitalSignsRecord) -> str:
    unit = "°C" if v.temperature_unit == TemperatureUnit.CELSIUS else "°F"
    return _num(v.temperature, unit)


def _lab_result(lab: LabTestRecord) -> str:
    if lab.is_pending:
        return "Pending"
    return " ".join(p for p in (lab.result_value, lab.result_units) if p)


def _medications(rx: PrescriptionRecord) -> str:
    return rx.medications_summary or f"{len(rx.items)} items"


TABLE_COLUMNS: dict[HistoryCategory, list[Column]] = {
    HistoryCategory.ADMISSIONS: [
        Column("Date", lambda a: format_display_date(a.admission_date)),
        Column("Reason", lambda a: _text(a.reason)),
        Column("Ward/Room", _ward_room),
        Column("Doctor", lambda a: _text(a.attending_doctor_name)),
        Column("Days", _stay_days),
        Column("Status", lambda a: _upper(a.status)),
    ],
    HistoryCategory.VISITS: [
        Column("Date", lambda v: format_display_date(v.visit_date)),
        Column("Department", lambda v: _text(v.department_name)),
        Column("Doctor", lambda v: _text(v.doctor_name)),
        Column("Complaint", lambda v: _text(v.chief_complaint)),
        Column("Outcome", lambda v: v.outcome.value.upper()),
    ],
    HistoryCategory.VITALS: [
        Column("Date", lambda v: format_display_date(v.recorded_at, with_time=True)),
        Column("BP", _bp),
        Column("HR", lambda v: _num(v.heart_rate, " bpm")),
        Column("Temp", _temp),
        Column("SpO2", lambda v: _num(v.oxygen_saturation, "%")),
        Column("Weight", lambda v: _num(v.weight, " kg")),
    ],
    HistoryCategory.LABS: [
        Column("Date", lambda lab: format_display_date(lab.order_date)),
        Column("Test", lambda lab: _text(lab.test_name)),
        Column("Category", lambda lab: _upper(lab.category)),
        Column("Result", _lab_result),
        Column("Reference", lambda lab: _text(lab.reference_range)),
        Column("Status", lambda lab: _upper(lab.flag or lab.status)),
    ],
    HistoryCategory.PRESCRIPTIONS: [
        Column("Date", lambda rx: format_display_date(rx.prescribed_date)),
        Column("Doctor", lambda rx: _text(rx.prescriber_name)),
        Column("Medications", _medications),
        Column("Status", lambda rx: _upper(rx.status)),
    ],
    HistoryCategory.PROCEDURES: [
        Column("Date", lambda p: format_display_date(p.procedure_date)),
        Column("Procedure", lambda p: _text(p.procedure_name)),
        Column("Type", lambda p: _upper(p.procedure_type)),
        Column("Surgeon", lambda p: _text(p.surgeon_name)),
        Column("Diagnosis", lambda p: _text(p.diagnosis)),
    ],
    HistoryCategory.DOCUMENTS: [
        Column("Uploaded", lambda d: format_display_date(d.uploaded_at)),
        Column("Name", lambda d: _text(d.document_name)),
        Column("Type", lambda d: _upper(d.document_type)),
        Column("Link", lambda d: _text(d.file_url)),
    ],
    HistoryCategory.NOTES: [
        Column("Date", lambda n: format_display_date(n.note_date)),
        Column("Type", lambda n: _upper(n.note_type)),
        Column("Author", lambda n: _text(n.author_name)),
        Column("Content", lambda n: _text(n.content)),
    ],
}

_PRIMARY_DATE: dict[HistoryCategory, Callable[[Any], Optional[datetime]]] = {
    HistoryCategory.ADMISSIONS: lambda r: r.admission_date,
    HistoryCategory.VISITS: lambda r: r.visit_date,
    HistoryCategory.VITALS: lambda r: r.recorded_at,
    HistoryCategory.LABS: lambda r: r.order_date,
    HistoryCategory.PRESCRIPTIONS: lambda r: r.prescribed_date,
    HistoryCategory.PROCEDURES: lambda r: r.procedure_date,
    HistoryCategory.DOCUMENTS: lambda r: r.uploaded_at,
    HistoryCategory.NOTES: lambda r: r.note_date,
}


def newest_first(category: HistoryCategory, records: list) -> list:
    primary = _PRIMARY_DATE[category]
    return sorted(records, key=lambda r: primary(r) or _OLDEST, reverse=True)


def category_table(state: HistoryState, category: HistoryCategory, *, limit: Optional[int] = None) -> TableView:
    columns = TABLE_COLUMNS[category]
    records = newest_first(category, state.records(category))
    if limit is not None:
        records = records[:limit]
    return TableView(
        title=CATEGORY_LABELS[category],
        columns=[c.label for c in columns],
        rows=[[c.render(r) for c in columns] for r in records],
    )


def paginate(rows: list, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    if page < 1:
        raise ValueError("page must be >= 1")
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    total = len(rows)
    start = (page - 1) * page_size
    return Page(
        items=rows[start:start + page_size],
        page=page,
        page_size=page_size,
        total=total,
        pages=math.ceil(total / page_size),
    )

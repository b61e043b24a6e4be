"""
Merge the eight category lists into one date-descending timeline, and
filter it by free-text query.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from apps.history.constants import TIMELINE_COLORS, TIMELINE_ICONS, TIMELINE_TIE_RANK
from apps.history.state import HistoryState
from packages.shared.models import (
    AdmissionRecord,
    ClinicalNoteRecord,
    DocumentRecord,
    LabTestRecord,
    PrescriptionRecord,
    ProcedureRecord,
    TimelineEntry,
    TimelineKind,
    VisitRecord,
    VitalSignsRecord,
)
from packages.shared.utils.dates import days_between

logger = logging.getLogger(__name__)


def _fmt_number(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def _entry(
    kind: TimelineKind,
    when: Optional[datetime],
    related_id: str,
    title: str,
    description: str,
) -> Optional[TimelineEntry]:
    if when is None:
        logger.warning("Skipping %s %s on the timeline: no parseable date", kind.value, related_id)
        return None
    return TimelineEntry(
        entry_id=f"{kind.value}-{related_id}",
        date=when,
        category=kind,
        title=title,
        description=description,
        color=TIMELINE_COLORS[kind],
        icon=TIMELINE_ICONS[kind],
        related_id=related_id,
    )


def admission_entries(adm: AdmissionRecord) -> list[TimelineEntry]:
    """One entry for the admission, plus one for the discharge when present."""
    out = [
        _entry(
            TimelineKind.ADMISSION,
            adm.admission_date,
            adm.id,
            f"Admitted - {adm.reason or 'N/A'}",
            f"Ward: {adm.ward_name or 'N/A'}, Room: {adm.room_number or 'N/A'}",
        )
    ]
    if adm.discharge_date is not None:
        days = adm.total_days
        if days is None:
            days = days_between(adm.admission_date, adm.discharge_date) or 0
        out.append(
            _entry(
                TimelineKind.DISCHARGE,
                adm.discharge_date,
                adm.id,
                f"Discharged - {adm.discharge_status or 'Recovered'}",
                f"{days} days stay",
            )
        )
    return [e for e in out if e is not None]


def visit_entry(visit: VisitRecord) -> Optional[TimelineEntry]:
    return _entry(
        TimelineKind.VISIT,
        visit.visit_date,
        visit.id,
        f"OPD Visit - {visit.department_name or 'General'}",
        f"{visit.doctor_name or 'Doctor'} | {visit.chief_complaint or ''}".rstrip(),
    )


def vitals_entry(v: VitalSignsRecord) -> Optional[TimelineEntry]:
    parts = []
    # Zero is a missing-reading sentinel in the backend data.
    if v.systolic and v.diastolic:
        parts.append(f"BP {_fmt_number(v.systolic)}/{_fmt_number(v.diastolic)} mmHg")
    if v.heart_rate:
        parts.append(f"HR {_fmt_number(v.heart_rate)} bpm")
    if v.temperature:
        unit = "C" if v.temperature_unit and v.temperature_unit.value == "celsius" else "F"
        parts.append(f"Temp {_fmt_number(v.temperature)}°{unit}")
    if v.oxygen_saturation:
        parts.append(f"SpO2 {_fmt_number(v.oxygen_saturation)}%")
    return _entry(
        TimelineKind.VITALS,
        v.recorded_at,
        v.id,
        "Vital Signs Recorded",
        ", ".join(parts) or "No readings",
    )


def lab_entry(lab: LabTestRecord) -> Optional[TimelineEntry]:
    if lab.is_pending:
        result = "Pending"
    else:
        result = " ".join(p for p in (lab.result_value, lab.result_units) if p)
    return _entry(
        TimelineKind.LAB,
        lab.order_date,
        lab.id,
        f"Lab Test - {lab.test_name}",
        f"Result: {result} | Status: {lab.status or 'N/A'}",
    )


def prescription_entry(rx: PrescriptionRecord) -> Optional[TimelineEntry]:
    return _entry(
        TimelineKind.PRESCRIPTION,
        rx.prescribed_date,
        rx.id,
        f"Prescription - {len(rx.items)} medications",
        f"By {rx.prescriber_name or 'Doctor'}",
    )


def procedure_entry(proc: ProcedureRecord) -> Optional[TimelineEntry]:
    return _entry(
        TimelineKind.PROCEDURE,
        proc.procedure_date,
        proc.id,
        f"Procedure - {proc.procedure_name or 'N/A'}",
        f"Surgeon: {proc.surgeon_name or 'N/A'}",
    )


def document_entry(doc: DocumentRecord) -> Optional[TimelineEntry]:
    return _entry(
        TimelineKind.DOCUMENT,
        doc.uploaded_at,
        doc.id,
        f"Document - {doc.document_name or 'Untitled'}",
        f"Type: {doc.document_type or 'other'}",
    )


def note_entry(note: ClinicalNoteRecord) -> Optional[TimelineEntry]:
    return _entry(
        TimelineKind.NOTE,
        note.note_date,
        note.id,
        f"Clinical Note - {note.note_type or 'general'}",
        f"By {note.author_name or 'Staff'}",
    )


def timeline_sort_key(entry: TimelineEntry) -> tuple:
    # Newest first; equal timestamps fall back to a fixed category rank, then title, then id.
    return (-entry.date.timestamp(), TIMELINE_TIE_RANK[entry.category], entry.title, entry.entry_id)


def sort_timeline(entries: Iterable[TimelineEntry]) -> list[TimelineEntry]:
    return sorted(entries, key=timeline_sort_key)


def collect_entries(state: HistoryState) -> list[TimelineEntry]:
    entries: list[TimelineEntry] = []
    for adm in state.admissions:
        entries.extend(admission_entries(adm))
    singles = (
        [visit_entry(v) for v in state.visits]
        + [vitals_entry(v) for v in state.vitals]
        + [lab_entry(lab) for lab in state.labs]
        + [prescription_entry(rx) for rx in state.prescriptions]
        + [procedure_entry(p) for p in state.procedures]
        + [document_entry(d) for d in state.documents]
        + [note_entry(n) for n in state.notes]
    )
    entries.extend(e for e in singles if e is not None)
    return entries


def build_timeline(state: HistoryState) -> list[TimelineEntry]:
    """All records of the state as timeline entries, most recent first."""
    return sort_timeline(collect_entries(state))


def filter_timeline(entries: list[TimelineEntry], query: Optional[str]) -> list[TimelineEntry]:
    """Case-insensitive substring match on title, description or category."""
    if not query:
        return entries
    needle = query.lower()
    return [
        e
        for e in entries
        if needle in e.title.lower()
        or needle in e.description.lower()
        or needle in e.category.value.lower()
    ]

"""
API route: Patient history
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from pydantic import BaseModel

from apps.api.deps import get_registry
from apps.history.export_render import (
    content_disposition,
    export_filename,
    generate_history_pdf,
    generate_timeline_csv,
    timeline_csv_filename,
)
from apps.history.session import PatientHistorySession, SessionRegistry
from apps.history.state import HistoryState
from apps.history.summary import VITAL_FIELDS, summarize, vitals_trend
from apps.history.tabs import category_table, paginate
from apps.history.timeline import build_timeline, filter_timeline
from packages.shared.models import HistoryCategory, HistorySummary, Page, TimelineEntry, TrendPoint

router = APIRouter(prefix="/patients/{patient_id}/history", tags=["history"])


class HistoryStatusResponse(BaseModel):
    patient_id: str
    generation: int
    loaded: bool
    loaded_at: Optional[datetime]
    counts: dict[str, int]
    failed: list[str]
    all_failed: bool
    empty: bool


class TimelineResponse(BaseModel):
    entries: list[TimelineEntry]
    total: int
    unavailable: bool


class TabResponse(BaseModel):
    category: str
    title: str
    columns: list[str]
    page: Page


def _session(patient_id: str, registry: SessionRegistry) -> PatientHistorySession:
    try:
        return registry.get(patient_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _status(state: HistoryState) -> HistoryStatusResponse:
    return HistoryStatusResponse(
        patient_id=state.patient_id,
        generation=state.generation,
        loaded=state.loaded,
        loaded_at=state.loaded_at,
        counts={c.value: len(state.records(c)) for c in HistoryCategory},
        failed=[c.value for c in state.failed],
        all_failed=state.all_failed,
        empty=state.is_empty,
    )


@router.post("/reload", response_model=HistoryStatusResponse)
def reload_history(patient_id: str, registry: SessionRegistry = Depends(get_registry)):
    """Re-issue all category fetches for the patient."""
    return _status(_session(patient_id, registry).reload())


@router.get("", response_model=HistoryStatusResponse)
def get_history_status(patient_id: str, registry: SessionRegistry = Depends(get_registry)):
    return _status(_session(patient_id, registry).ensure_loaded())


@router.get("/timeline", response_model=TimelineResponse)
def get_timeline(
    patient_id: str,
    q: Optional[str] = Query(default=None, description="Case-insensitive substring filter"),
    registry: SessionRegistry = Depends(get_registry),
):
    state = _session(patient_id, registry).ensure_loaded()
    entries = filter_timeline(build_timeline(state), q)
    return TimelineResponse(entries=entries, total=len(entries), unavailable=state.all_failed)


@router.get("/summary", response_model=HistorySummary)
def get_summary(patient_id: str, registry: SessionRegistry = Depends(get_registry)):
    return summarize(_session(patient_id, registry).ensure_loaded())


@router.get("/vitals/trend", response_model=list[TrendPoint])
def get_vitals_trend(
    patient_id: str,
    field: str = Query(default="systolic"),
    registry: SessionRegistry = Depends(get_registry),
):
    if field not in VITAL_FIELDS:
        raise HTTPException(status_code=400, detail=f"Unknown vitals field: {field}")
    state = _session(patient_id, registry).ensure_loaded()
    return vitals_trend(state.vitals, field)


@router.get("/tabs/{category}", response_model=TabResponse)
def get_tab(
    patient_id: str,
    category: str,
    page: int = Query(default=1),
    page_size: int = Query(default=5, le=100),
    registry: SessionRegistry = Depends(get_registry),
):
    try:
        cat = HistoryCategory(category)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown history category: {category}") from exc
    state = _session(patient_id, registry).ensure_loaded()
    table = category_table(state, cat)
    try:
        page_view = paginate(table.rows, page, page_size)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return TabResponse(
        category=cat.value,
        title=table.title,
        columns=table.columns,
        page=page_view,
    )


@router.get("/export.pdf")
def export_pdf(
    patient_id: str,
    patient_name: Optional[str] = Query(default=None),
    registry: SessionRegistry = Depends(get_registry),
):
    state = _session(patient_id, registry).ensure_loaded()
    generated_at = datetime.now()
    pdf_bytes = generate_history_pdf(state, patient_name, generated_at=generated_at)
    disposition = content_disposition(
        export_filename(patient_name, generated_at),
        export_filename(patient_name, generated_at, ascii_only=True),
    )
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": disposition},
    )


@router.get("/export.csv")
def export_csv(
    patient_id: str,
    q: Optional[str] = Query(default=None),
    registry: SessionRegistry = Depends(get_registry),
):
    state = _session(patient_id, registry).ensure_loaded()
    entries = filter_timeline(build_timeline(state), q)
    disposition = content_disposition(
        timeline_csv_filename(state.patient_id),
        timeline_csv_filename(state.patient_id, ascii_only=True),
    )
    return Response(
        content=generate_timeline_csv(entries),
        media_type="text/csv",
        headers={"Content-Disposition": disposition},
    )

"""
Report content assembly: which category tables go into an export, in what order.
"""
from __future__ import annotations

from pydantic import BaseModel

from apps.history.constants import CATEGORY_LABELS, EXPORT_RECENT_VITALS
from apps.history.state import HistoryState
from apps.history.tabs import category_table
from packages.shared.models import HistoryCategory, TableView

# Fixed section order of the report.
REPORT_ORDER: tuple[HistoryCategory, ...] = tuple(HistoryCategory)


class ExportOptions(BaseModel):
    include_admissions: bool = True
    include_visits: bool = True
    include_vitals: bool = True
    include_labs: bool = True
    include_prescriptions: bool = True
    include_procedures: bool = True
    include_documents: bool = True
    include_notes: bool = True

    def includes(self, category: HistoryCategory) -> bool:
        return bool(getattr(self, f"include_{category.value}"))


class ReportSection(BaseModel):
    category: HistoryCategory
    table: TableView


def summary_counts(state: HistoryState) -> list[tuple[str, int]]:
    return [(CATEGORY_LABELS[c], len(state.records(c))) for c in REPORT_ORDER]


def build_report_sections(state: HistoryState, options: ExportOptions | None = None) -> list[ReportSection]:
    """One section per enabled, non-empty category. Empty categories are omitted."""
    options = options or ExportOptions()
    sections: list[ReportSection] = []
    for category in REPORT_ORDER:
        if not options.includes(category) or not state.records(category):
            continue
        if category == HistoryCategory.VITALS:
            table = category_table(state, category, limit=EXPORT_RECENT_VITALS)
            table = table.model_copy(update={"title": "Recent Vitals"})
        else:
            table = category_table(state, category)
        sections.append(ReportSection(category=category, table=table))
    return sections

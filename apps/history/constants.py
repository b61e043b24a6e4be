"""
Display constants for timeline entries and report sections.
"""
from __future__ import annotations

from packages.shared.models import HistoryCategory, TimelineKind

TIMELINE_COLORS: dict[TimelineKind, str] = {
    TimelineKind.ADMISSION: "red",
    TimelineKind.DISCHARGE: "green",
    TimelineKind.VISIT: "blue",
    TimelineKind.VITALS: "magenta",
    TimelineKind.LAB: "purple",
    TimelineKind.PRESCRIPTION: "cyan",
    TimelineKind.PROCEDURE: "red",
    TimelineKind.DOCUMENT: "geekblue",
    TimelineKind.NOTE: "gold",
}

TIMELINE_ICONS: dict[TimelineKind, str] = {
    TimelineKind.ADMISSION: "home",
    TimelineKind.DISCHARGE: "home",
    TimelineKind.VISIT: "user",
    TimelineKind.VITALS: "heart",
    TimelineKind.LAB: "experiment",
    TimelineKind.PRESCRIPTION: "medicine-box",
    TimelineKind.PROCEDURE: "scissor",
    TimelineKind.DOCUMENT: "file-text",
    TimelineKind.NOTE: "file-text",
}

# Secondary sort key for entries sharing a timestamp (lower sorts first).
# A discharge closes the stay, so it precedes anything recorded at the same instant.
TIMELINE_TIE_RANK: dict[TimelineKind, int] = {
    TimelineKind.DISCHARGE: 0,
    TimelineKind.ADMISSION: 1,
    TimelineKind.PROCEDURE: 2,
    TimelineKind.VISIT: 3,
    TimelineKind.VITALS: 4,
    TimelineKind.LAB: 5,
    TimelineKind.PRESCRIPTION: 6,
    TimelineKind.NOTE: 7,
    TimelineKind.DOCUMENT: 8,
}

CATEGORY_LABELS: dict[HistoryCategory, str] = {
    HistoryCategory.ADMISSIONS: "Admissions",
    HistoryCategory.VISITS: "Visits",
    HistoryCategory.VITALS: "Vitals Records",
    HistoryCategory.LABS: "Lab Tests",
    HistoryCategory.PRESCRIPTIONS: "Prescriptions",
    HistoryCategory.PROCEDURES: "Procedures",
    HistoryCategory.DOCUMENTS: "Documents",
    HistoryCategory.NOTES: "Clinical Notes",
}

DEFAULT_PAGE_SIZE = 5
EXPORT_RECENT_VITALS = 10

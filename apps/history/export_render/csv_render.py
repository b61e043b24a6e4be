"""
CSV rendering of the unified timeline.
"""
from __future__ import annotations

import csv
import io

from packages.shared.models import TimelineEntry


def generate_timeline_csv(entries: list[TimelineEntry]) -> bytes:
    """One row per timeline entry, in the order given."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(["date", "category", "title", "description", "related_id"])
    for entry in entries:
        writer.writerow(
            [
                entry.date.isoformat(),
                entry.category.value,
                entry.title,
                entry.description,
                entry.related_id,
            ]
        )
    return buf.getvalue().encode("utf-8")

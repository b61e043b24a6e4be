"""
Download filenames for exports and the Content-Disposition header that carries them.

Patient names are routinely non-Latin, so headers always pair an ASCII
`filename=` with an RFC 5987 `filename*=` holding the UTF-8 name.
"""
from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime
from typing import Optional
from urllib.parse import quote

_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|;\x00-\x1f\x7f]+')


def safe_filename_part(text: Optional[str], fallback: str, *, ascii_only: bool = False) -> str:
    """Strip path-unsafe characters and collapse whitespace runs to `_`."""
    value = (text or "").strip()
    if ascii_only:
        value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = _UNSAFE_FILENAME_RE.sub("", value)
    value = re.sub(r"\s+", "_", value).strip("_")
    return value or fallback


def export_filename(
    patient_name: Optional[str],
    generated_on: date | datetime,
    *,
    ascii_only: bool = False,
) -> str:
    """`medical_history_<Name_With_Underscores>_<YYYYMMDD>.pdf`."""
    name = safe_filename_part(patient_name, "patient", ascii_only=ascii_only)
    return f"medical_history_{name}_{generated_on.strftime('%Y%m%d')}.pdf"


def timeline_csv_filename(patient_id: Optional[str], *, ascii_only: bool = False) -> str:
    return f"timeline_{safe_filename_part(patient_id, 'patient', ascii_only=ascii_only)}.csv"


def content_disposition(filename: str, ascii_fallback: str) -> str:
    return f"attachment; filename=\"{ascii_fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"

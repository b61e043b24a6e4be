"""
Shared payload-unwrapping and field-normalization helpers for the fetchers.
"""
from __future__ import annotations

import functools
import logging
import re
from typing import Any, Callable, Iterable, Optional, TypeVar

from packages.shared.models import HistoryCategory
from packages.shared.utils.dates import parse_timestamp

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DOCTOR_PREFIX_RE = re.compile(r"^dr(\.|\s)", re.IGNORECASE)


class PayloadShapeError(ValueError):
    """Backend answered with something that is not a record list."""


def require_patient_id(patient_id: str) -> str:
    if not isinstance(patient_id, str) or not patient_id.strip():
        raise ValueError("patient_id must be a non-empty string")
    return patient_id.strip()


def unwrap_payload(payload: Any, key: Optional[str] = None) -> list[dict]:
    """Return the record list from a bare list, `{data: [...]}` or `{key: [...]}`.

    `{data: {key: [...]}}` is accepted as well. `None` means an empty list.
    Non-dict members are dropped.
    """
    if payload is None:
        return []
    items: Any = payload
    if isinstance(items, dict):
        if isinstance(items.get("data"), (list, dict)):
            items = items["data"]
        if isinstance(items, dict):
            if key and isinstance(items.get(key), list):
                items = items[key]
            else:
                raise PayloadShapeError(
                    f"expected a list, {{'data': [...]}} or {{'{key}': [...]}}; got keys {sorted(items)}"
                )
    if not isinstance(items, list):
        raise PayloadShapeError(f"expected a record list, got {type(items).__name__}")
    return [item for item in items if isinstance(item, dict)]


def first_present(raw: dict, *keys: str) -> Any:
    """First value under `keys` that is neither None nor an empty string."""
    for key in keys:
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def nested(raw: Any, *path: str) -> Any:
    cur = raw
    for part in path:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(part)
    return cur


def as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def as_int(value: Any) -> Optional[int]:
    number = as_float(value)
    return int(number) if number is not None else None


def timestamp(raw: dict, *keys: str):
    return parse_timestamp(first_present(raw, *keys))


def record_id(raw: dict, fallback: str) -> str:
    return as_str(raw.get("id")) or fallback


def person_name(person: Any) -> Optional[str]:
    """`firstName lastName` (or `name`) of a nested person object."""
    if person is None:
        return None
    if isinstance(person, str):
        return as_str(person)
    if not isinstance(person, dict):
        return None
    parts = [as_str(person.get("firstName")), as_str(person.get("lastName"))]
    joined = " ".join(p for p in parts if p)
    return joined or as_str(person.get("name"))


def doctor_display_name(doctor: Any, flat_name: Any = None) -> Optional[str]:
    """Flatten a doctor object to a display name, prefixing `Dr.` exactly once.

    A flat name string supplied by the backend is taken as is.
    """
    if isinstance(doctor, dict):
        name = person_name(doctor)
        if name:
            if _DOCTOR_PREFIX_RE.match(name):
                return name
            return f"Dr. {name}"
    return as_str(flat_name)


def normalize_records(
    category: HistoryCategory,
    items: Iterable[dict],
    normalize: Callable[[dict, int], T],
) -> list[T]:
    out: list[T] = []
    for idx, raw in enumerate(items):
        out.append(normalize(raw, idx))
    logger.debug("Normalized %d %s record(s)", len(out), category.value)
    return out


def swallow_errors(category: HistoryCategory) -> Callable[[Callable[..., list[T]]], Callable[..., list[T]]]:
    """Turn a raising category loader into one that logs and returns `[]`."""

    def decorate(load: Callable[..., list[T]]) -> Callable[..., list[T]]:
        @functools.wraps(load)
        def wrapper(client, patient_id: str) -> list[T]:
            require_patient_id(patient_id)
            try:
                return load(client, patient_id)
            except Exception:
                logger.exception("Error fetching %s history for patient %s", category.value, patient_id)
                return []

        return wrapper

    return decorate

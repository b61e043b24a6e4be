"""
Lab tests: `GET /lab/orders?patientId=`, flattened to one record per test item.
"""
from __future__ import annotations

from packages.shared.models import HistoryCategory, LabTestRecord

from .common import (
    as_str,
    first_present,
    logger,
    nested,
    require_patient_id,
    swallow_errors,
    timestamp,
    unwrap_payload,
)


def flatten_lab_order(order: dict, idx: int = 0) -> list[LabTestRecord]:
    order_id = as_str(order.get("id")) or f"order-{idx}"
    order_date = timestamp(order, "orderDate", "createdAt")
    items = order.get("items")
    if not isinstance(items, list):
        return []

    tests: list[LabTestRecord] = []
    for pos, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        result = item.get("result") if isinstance(item.get("result"), dict) else {}
        tests.append(
            LabTestRecord(
                id=as_str(item.get("id")) or f"{order_id}-{pos}",
                order_id=order_id,
                order_date=order_date,
                test_name=as_str(nested(item, "labTest", "name")) or "Unknown Test",
                category=as_str(nested(item, "labTest", "category")) or "other",
                status=as_str(item.get("status")),
                result_value=as_str(result.get("resultValue")),
                result_units=as_str(result.get("units")),
                reference_range=as_str(result.get("referenceRange")),
                flag=as_str(result.get("flag")),
                interpretation=as_str(result.get("interpretation")),
                result_date=timestamp(result, "resultTime"),
                notes=as_str(first_present(item, "notes")) or as_str(result.get("comments")),
            )
        )
    return tests


def load_lab_tests(client, patient_id: str) -> list[LabTestRecord]:
    patient_id = require_patient_id(patient_id)
    payload = client.get("/lab/orders", params={"patientId": patient_id})
    tests: list[LabTestRecord] = []
    for idx, order in enumerate(unwrap_payload(payload, "orders")):
        tests.extend(flatten_lab_order(order, idx))
    logger.debug("Normalized %d lab test(s)", len(tests))
    return tests


fetch_lab_tests = swallow_errors(HistoryCategory.LABS)(load_lab_tests)

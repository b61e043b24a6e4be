"""
Unit tests for the category fetchers: payload unwrapping, normalization and
error swallowing.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

import pytest

from apps.history.fetchers import (
    PayloadShapeError,
    doctor_display_name,
    fetch_admissions,
    fetch_clinical_notes,
    fetch_documents,
    fetch_lab_tests,
    fetch_prescriptions,
    fetch_procedures,
    fetch_visits,
    fetch_vitals,
    unwrap_payload,
)
from apps.history.fetchers.labs import flatten_lab_order
from apps.history.fetchers.vitals import normalize_vitals
from packages.client import ApiTransportError
from packages.shared.models import AdmissionType, TemperatureUnit, VisitOutcome


# ── unwrap_payload ────────────────────────────────────────────────────────

RECORDS = [{"id": "a"}, {"id": "b"}]


@pytest.mark.parametrize(
    "payload",
    [
        RECORDS,
        {"data": RECORDS},
        {"admissions": RECORDS},
        {"data": {"admissions": RECORDS}},
    ],
    ids=["bare", "data", "keyed", "data-keyed"],
)
def test_unwrap_accepts_every_wrapper_shape(payload):
    assert unwrap_payload(payload, "admissions") == RECORDS


def test_unwrap_none_is_empty():
    assert unwrap_payload(None, "admissions") == []


def test_unwrap_drops_non_dict_members():
    assert unwrap_payload([{"id": "a"}, "junk", 3, None], "x") == [{"id": "a"}]


@pytest.mark.parametrize("payload", [{"unexpected": []}, "text", 42, {"data": "nope"}])
def test_unwrap_rejects_unknown_shapes(payload):
    with pytest.raises(PayloadShapeError):
        unwrap_payload(payload, "admissions")


def test_same_records_for_each_wrapper(make_client, patient_id):
    raw = [{"id": "adm-9", "admissionDate": "2024-05-01", "admissionReason": "Fracture"}]
    results = []
    for payload in (raw, {"data": raw}, {"admissions": raw}):
        client = make_client({"/inpatient/admissions": payload})
        results.append(fetch_admissions(client, patient_id))
    assert results[0] == results[1] == results[2]
    assert len(results[0]) == 1


# ── doctor names ──────────────────────────────────────────────────────────

def test_doctor_prefix_added_once():
    assert doctor_display_name({"firstName": "John", "lastName": "Smith"}) == "Dr. John Smith"
    assert doctor_display_name({"firstName": "Dr. John", "lastName": "Smith"}) == "Dr. John Smith"
    assert doctor_display_name({"firstName": "dr Jane", "lastName": "Doe"}) == "dr Jane Doe"


def test_doctor_flat_name_taken_as_is():
    assert doctor_display_name(None, "Dr. Kim") == "Dr. Kim"
    assert doctor_display_name(None, "Kim") == "Kim"
    assert doctor_display_name(None, None) is None


def test_doctor_prefix_needs_separator():
    # "Drake" is a name, not a title.
    assert doctor_display_name({"firstName": "Drake", "lastName": "Bell"}) == "Dr. Drake Bell"


# ── per-category normalization ────────────────────────────────────────────

def test_admissions_normalized(fake_client, patient_id):
    admissions = fetch_admissions(fake_client, patient_id)
    assert [a.id for a in admissions] == ["adm-1", "adm-2"]
    first, second = admissions
    assert first.admission_date == datetime(2024, 1, 10, 8, tzinfo=timezone.utc)
    assert first.discharge_date == datetime(2024, 1, 15, 10, tzinfo=timezone.utc)
    assert first.ward_name == "Ward A"
    assert first.room_number == "101"
    assert first.attending_doctor_name == "Dr. Sarah Lee"
    assert first.admission_type == AdmissionType.ELECTIVE
    assert second.discharge_date is None
    assert second.admission_type == AdmissionType.EMERGENCY
    assert second.attending_doctor_name == "Dr. Amit Rao"
    assert fake_client.calls[0] == ("/inpatient/admissions", {"patientId": patient_id})


def test_visits_request_completed_appointments(fake_client, patient_id):
    visits = fetch_visits(fake_client, patient_id)
    assert fake_client.calls == [("/appointments", {"patientId": patient_id, "status": "completed"})]
    assert len(visits) == 1
    visit = visits[0]
    assert visit.department_name == "Cardiology"
    assert visit.doctor_name == "Dr. John Smith"
    assert visit.chief_complaint == "Chest pain"
    assert visit.outcome == VisitOutcome.RESOLVED


def test_vitals_accept_all_blood_pressure_spellings(fake_client, patient_id):
    vitals = fetch_vitals(fake_client, patient_id)
    assert [(v.systolic, v.diastolic) for v in vitals] == [(120, 80), (130, 85), (125, 82)]


def test_vitals_temperature_unit():
    record = normalize_vitals({"id": "v", "temperature": "37.2", "temperatureUnit": "C"})
    assert record.temperature == pytest.approx(37.2)
    assert record.temperature_unit == TemperatureUnit.CELSIUS
    assert normalize_vitals({"id": "v"}).temperature_unit is None


def test_lab_orders_flatten_to_one_record_per_item(fake_client, patient_id):
    tests = fetch_lab_tests(fake_client, patient_id)
    assert [t.id for t in tests] == ["item-1", "item-2"]
    cbc, lipid = tests
    assert cbc.order_id == "lab-1"
    assert cbc.result_value == "13.5"
    assert cbc.result_units == "g/dL"
    assert not cbc.is_pending
    assert lipid.is_pending
    assert lipid.order_date == cbc.order_date


def test_lab_order_without_items_is_skipped():
    assert flatten_lab_order({"id": "lab-2", "orderDate": "2024-01-01"}) == []


def test_lab_item_defaults():
    tests = flatten_lab_order({"id": "lab-3", "items": [{}, "junk"]})
    assert len(tests) == 1
    assert tests[0].id == "lab-3-0"
    assert tests[0].test_name == "Unknown Test"
    assert tests[0].category == "other"


def test_prescriptions_summary(fake_client, patient_id):
    prescriptions = fetch_prescriptions(fake_client, patient_id)
    assert len(prescriptions) == 1
    rx = prescriptions[0]
    assert rx.prescriber_name == "Dr. Sarah Lee"
    assert [i.medication_name for i in rx.items] == ["Amoxicillin", "Paracetamol"]
    assert rx.medications_summary == "Amoxicillin 500mg, Paracetamol"


def test_procedures_documents_notes(fake_client, patient_id):
    procedures = fetch_procedures(fake_client, patient_id)
    documents = fetch_documents(fake_client, patient_id)
    notes = fetch_clinical_notes(fake_client, patient_id)
    assert procedures[0].procedure_name == "Bronchoscopy"
    assert procedures[0].surgeon_name == "Dr. Kim"
    assert documents[0].document_name == "Chest X-ray"
    assert documents[0].document_type == "imaging"
    assert notes[0].author_name == "Dr. Sarah Lee"
    assert notes[0].note_type == "progress"


def test_missing_id_gets_positional_fallback(make_client, patient_id):
    client = make_client({f"/patients/{patient_id}/documents": [{"documentName": "a"}, {"documentName": "b"}]})
    docs = fetch_documents(client, patient_id)
    assert [d.id for d in docs] == ["document-0", "document-1"]


# ── error handling ────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "fetch",
    [
        fetch_admissions,
        fetch_visits,
        fetch_vitals,
        fetch_lab_tests,
        fetch_prescriptions,
        fetch_procedures,
        fetch_documents,
        fetch_clinical_notes,
    ],
)
def test_backend_failure_yields_empty_list(fetch, make_client, patient_id, caplog):
    client = make_client({})
    with caplog.at_level(logging.ERROR, logger="apps.history.fetchers.common"):
        assert fetch(client, patient_id) == []
    assert "Error fetching" in caplog.text


def test_transport_error_swallowed(make_client, patient_id):
    client = make_client({"/inpatient/admissions": ApiTransportError("connection refused")})
    assert fetch_admissions(client, patient_id) == []


def test_malformed_payload_swallowed(make_client, patient_id):
    client = make_client({"/pharmacy/prescriptions": {"unexpected": True}})
    assert fetch_prescriptions(client, patient_id) == []


@pytest.mark.parametrize("bad_id", ["", "   "])
def test_empty_patient_id_rejected(fake_client, bad_id):
    with pytest.raises(ValueError):
        fetch_admissions(fake_client, bad_id)
    assert fake_client.calls == []

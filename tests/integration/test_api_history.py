"""
API tests for the patient history routes, backed by an in-memory backend.
"""
from __future__ import annotations

import io
import re
from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient
from pypdf import PdfReader

from apps.api.deps import get_registry
from apps.api.main import app
from apps.history.session import SessionRegistry
from packages.client import ApiTransportError


@pytest.fixture
def api(fake_client):
    registry = SessionRegistry(fake_client)
    app.dependency_overrides[get_registry] = lambda: registry
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health(api):
    response = api.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["X-Request-Id"]


def test_history_status(api, patient_id):
    response = api.get(f"/patients/{patient_id}/history")
    assert response.status_code == 200
    body = response.json()
    assert body["loaded"] is True
    assert body["generation"] == 1
    assert body["counts"]["admissions"] == 2
    assert body["counts"]["labs"] == 2
    assert body["failed"] == []
    assert body["all_failed"] is False


def test_reload_bumps_generation(api, fake_client, patient_id):
    api.get(f"/patients/{patient_id}/history")
    response = api.post(f"/patients/{patient_id}/history/reload")
    assert response.status_code == 200
    assert response.json()["generation"] == 2
    assert len(fake_client.calls) == 16


def test_partial_failure_reported(api, backend_routes, patient_id):
    backend_routes["/pharmacy/prescriptions"] = ApiTransportError("timeout")
    body = api.get(f"/patients/{patient_id}/history").json()
    assert body["failed"] == ["prescriptions"]
    assert body["counts"]["prescriptions"] == 0
    assert body["counts"]["visits"] == 1


def test_timeline_and_filter(api, patient_id):
    body = api.get(f"/patients/{patient_id}/history/timeline").json()
    assert body["total"] == 13
    assert body["unavailable"] is False
    assert body["entries"][0]["related_id"] == "adm-2"

    filtered = api.get(f"/patients/{patient_id}/history/timeline", params={"q": "CBC"}).json()
    assert filtered["total"] == 1
    assert filtered["entries"][0]["title"] == "Lab Test - CBC"


def test_timeline_unavailable_when_everything_fails(make_client, patient_id):
    registry = SessionRegistry(make_client({}))
    app.dependency_overrides[get_registry] = lambda: registry
    try:
        body = TestClient(app).get(f"/patients/{patient_id}/history/timeline").json()
    finally:
        app.dependency_overrides.clear()
    assert body["total"] == 0
    assert body["unavailable"] is True


def test_summary(api, patient_id):
    body = api.get(f"/patients/{patient_id}/history/summary").json()
    assert body["total_admissions"] == 2
    assert body["vitals"]["avg_systolic"] == 125
    assert body["vitals"]["avg_heart_rate"] == 76


def test_vitals_trend(api, patient_id):
    points = api.get(f"/patients/{patient_id}/history/vitals/trend", params={"field": "heart_rate"}).json()
    assert [p["value"] for p in points] == [72, 0, 80]
    bad = api.get(f"/patients/{patient_id}/history/vitals/trend", params={"field": "mood"})
    assert bad.status_code == 400


def test_tabs_paginated(api, patient_id):
    body = api.get(f"/patients/{patient_id}/history/tabs/vitals", params={"page": 1, "page_size": 2}).json()
    assert body["title"] == "Vitals Records"
    assert body["page"]["total"] == 3
    assert body["page"]["pages"] == 2
    assert len(body["page"]["items"]) == 2


def test_unknown_tab_is_404(api, patient_id):
    assert api.get(f"/patients/{patient_id}/history/tabs/billing").status_code == 404


def test_blank_patient_is_400(api):
    assert api.get("/patients/%20/history").status_code == 400


def test_export_pdf(api, patient_id):
    response = api.get(f"/patients/{patient_id}/history/export.pdf", params={"patient_name": "John Smith"})
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    disposition = response.headers["content-disposition"]
    assert re.search(r'filename="medical_history_John_Smith_\d{8}\.pdf"', disposition)
    reader = PdfReader(io.BytesIO(response.content))
    assert "Page 1 of" in reader.pages[0].extract_text()


def test_export_csv(api, patient_id):
    response = api.get(f"/patients/{patient_id}/history/export.csv", params={"q": "lab"})
    assert response.status_code == 200
    lines = response.text.strip().splitlines()
    assert lines[0] == "date,category,title,description,related_id"
    assert len(lines) == 3


def test_export_pdf_with_non_latin_name(api, patient_id):
    name = "राम शर्मा"
    response = api.get(f"/patients/{patient_id}/history/export.pdf", params={"patient_name": name})
    assert response.status_code == 200
    disposition = response.headers["content-disposition"]
    assert re.search(r'filename="medical_history_patient_\d{8}\.pdf"', disposition)
    assert f"filename*=UTF-8''medical_history_{quote('राम_शर्मा')}_" in disposition


def test_export_csv_with_non_latin_patient_id(api):
    response = api.get("/patients/患者/history/export.csv")
    assert response.status_code == 200
    disposition = response.headers["content-disposition"]
    assert 'filename="timeline_patient.csv"' in disposition
    assert f"filename*=UTF-8''timeline_{quote('患者')}.csv" in disposition


@pytest.mark.parametrize("params", [{"page": 0}, {"page_size": 0}])
def test_bad_pagination_is_400(api, patient_id, params):
    response = api.get(f"/patients/{patient_id}/history/tabs/visits", params=params)
    assert response.status_code == 400

"""
Shared fixtures: canned backend payloads and an in-memory stand-in for ApiClient.

The payloads deliberately use every wrapper shape the backend produces
(bare list, `{data: [...]}`, `{key: [...]}` and `{data: {key: [...]}}`).
"""
from __future__ import annotations

import copy
import threading

import pytest

from apps.history.session import PatientHistorySession
from packages.client import ApiStatusError

PATIENT_ID = "p-100"

ADMISSIONS = {
    "data": [
        {
            "id": "adm-1",
            "patientId": PATIENT_ID,
            "admissionDate": "2024-01-10T08:00:00Z",
            "dischargeDate": "2024-01-15T10:00:00Z",
            "admissionReason": "Pneumonia",
            "bed": {"bedNumber": "B2", "room": {"roomNumber": "101", "ward": {"id": "w-1", "name": "Ward A"}}},
            "admittingDoctor": {"firstName": "Sarah", "lastName": "Lee"},
            "totalDays": 5,
            "dischargeStatus": "Recovered",
            "status": "discharged",
        },
        {
            "id": "adm-2",
            "patientId": PATIENT_ID,
            "admissionDate": "2024-03-02T09:00:00Z",
            "admissionReason": "Observation",
            "isEmergency": True,
            "admittingDoctor": {"firstName": "Dr. Amit", "lastName": "Rao"},
            "status": "admitted",
        },
    ]
}

APPOINTMENTS = [
    {
        "id": "apt-1",
        "patientId": PATIENT_ID,
        "startTime": "2024-02-01T09:30:00Z",
        "department": {"name": "Cardiology"},
        "doctor": {"firstName": "John", "lastName": "Smith"},
        "reason": "Chest pain",
        "status": "completed",
    }
]

VITALS = {
    "vitals": [
        {
            "id": "vit-1",
            "recordedAt": "2024-01-11T06:00:00Z",
            "bloodPressureSystolic": 120,
            "bloodPressureDiastolic": 80,
            "heartRate": 72,
            "temperature": 98.6,
            "oxygenSaturation": 98,
            "weight": 70,
        },
        {
            "id": "vit-2",
            "recordedAt": "2024-01-12T06:00:00Z",
            "systolicBp": 130,
            "diastolicBp": 85,
            "heartRate": 0,
            "temperature": None,
            "oxygenSaturation": 96,
            "weight": 71,
        },
        {
            "id": "vit-3",
            "recordedAt": "2024-01-13T06:00:00Z",
            "systolicBP": 125,
            "diastolicBP": 82,
            "heartRate": 80,
        },
    ]
}

LAB_ORDERS = {
    "data": {
        "orders": [
            {
                "id": "lab-1",
                "orderDate": "2024-01-12T10:00:00Z",
                "items": [
                    {
                        "id": "item-1",
                        "labTest": {"name": "CBC", "category": "hematology"},
                        "status": "completed",
                        "result": {
                            "resultValue": "13.5",
                            "units": "g/dL",
                            "referenceRange": "12-16",
                            "flag": "normal",
                        },
                    },
                    {
                        "id": "item-2",
                        "labTest": {"name": "Lipid Panel", "category": "biochemistry"},
                        "status": "pending",
                    },
                ],
            }
        ]
    }
}

PRESCRIPTIONS = {
    "data": [
        {
            "id": "rx-1",
            "createdAt": "2024-01-15T11:00:00Z",
            "doctor": {"firstName": "Sarah", "lastName": "Lee"},
            "items": [
                {"medicine": {"name": "Amoxicillin", "strength": "500mg"}, "dosage": "1 tab", "frequency": "TID"},
                {"medicine": {"name": "Paracetamol"}},
            ],
            "status": "active",
        }
    ]
}

PROCEDURES = [
    {
        "id": "proc-1",
        "procedureDate": "2024-01-11T14:00:00Z",
        "procedureName": "Bronchoscopy",
        "procedureType": "diagnostic",
        "surgeonName": "Dr. Kim",
    }
]

DOCUMENTS = {
    "documents": [
        {
            "id": "doc-1",
            "uploadedAt": "2024-01-16T09:00:00Z",
            "documentName": "Chest X-ray",
            "documentType": "imaging",
        }
    ]
}

NOTES = {
    "data": [
        {
            "id": "note-1",
            "noteDate": "2024-01-12T18:00:00Z",
            "noteType": "progress",
            "author": {"firstName": "Sarah", "lastName": "Lee"},
            "content": "Improving, afebrile",
        }
    ]
}


def default_routes(patient_id: str = PATIENT_ID) -> dict:
    return copy.deepcopy(
        {
            "/inpatient/admissions": ADMISSIONS,
            "/appointments": APPOINTMENTS,
            f"/patients/{patient_id}/vitals": VITALS,
            "/lab/orders": LAB_ORDERS,
            "/pharmacy/prescriptions": PRESCRIPTIONS,
            f"/patients/{patient_id}/procedures": PROCEDURES,
            f"/patients/{patient_id}/documents": DOCUMENTS,
            f"/patients/{patient_id}/notes": NOTES,
        }
    )


class FakeClient:
    """Answers `get(path, params)` from a path -> payload map.

    A route whose value is an exception instance raises it; a missing route
    behaves like a backend 404.
    """

    def __init__(self, routes: dict):
        self.routes = routes
        self.calls: list[tuple[str, dict | None]] = []
        self._lock = threading.Lock()

    def get(self, path: str, params: dict | None = None):
        with self._lock:
            self.calls.append((path, params))
        if path not in self.routes:
            raise ApiStatusError(f"GET {path} returned 404", status_code=404, method="GET", url=path)
        value = self.routes[path]
        if isinstance(value, Exception):
            raise value
        return copy.deepcopy(value)


@pytest.fixture
def patient_id() -> str:
    return PATIENT_ID


@pytest.fixture
def backend_routes() -> dict:
    return default_routes()


@pytest.fixture
def fake_client(backend_routes) -> FakeClient:
    return FakeClient(backend_routes)


@pytest.fixture
def make_client():
    return FakeClient


@pytest.fixture
def loaded_state(fake_client, patient_id):
    return PatientHistorySession(fake_client, patient_id).reload()

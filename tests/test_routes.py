"""HTTP surface: status codes and payloads of the record endpoints."""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from gyneco.database.memory_db_service import MemoryDatabaseService
from gyneco.database.schema import SchemaManager
from gyneco.database.sql_db_service import SqlDatabaseService
from gyneco.helpers.time import current_year
from gyneco.main import create_app

PATIENT = {
    "first_name": "Giulia",
    "last_name": "Rossi",
    "birth_date": "1988-03-14",
    "fiscal_code": "RSSGLI88C54H501X",
}


@pytest.fixture
def memory_client(app_settings):
    with TestClient(create_app(MemoryDatabaseService(app_settings))) as client:
        yield client


@pytest.fixture
def sql_client(app_settings):
    with TestClient(create_app(SqlDatabaseService(SchemaManager(app_settings)))) as client:
        yield client


def report_payload(patient):
    return {
        "patient_id": patient["id"],
        "report_date": "2025-02-10T10:00:00+00:00",
        "visit_type": "Visita ginecologica",
        "patient_snapshot": {
            "first_name": patient["first_name"],
            "last_name": patient["last_name"],
            "birth_date": patient["birth_date"],
        },
        "examination": "Obiettività nella norma",
    }


# ============================================================================
# Patients
# ============================================================================

def test_patient_lifecycle(memory_client):
    created = memory_client.post("/api/patients", json=PATIENT)
    assert created.status_code == 201
    patient = created.json()
    assert patient["country"] == "Italia"

    assert memory_client.get(f"/api/patients/{patient['id']}").json() == patient
    assert [p["id"] for p in memory_client.get("/api/patients", params={"q": "ross"}).json()] == [patient["id"]]

    patched = memory_client.patch(f"/api/patients/{patient['id']}", json={"phone": "0612345678"})
    assert patched.status_code == 200
    assert patched.json()["phone"] == "0612345678"
    assert patched.json()["last_name"] == "Rossi"

    assert memory_client.delete(f"/api/patients/{patient['id']}").status_code == 204
    assert memory_client.get(f"/api/patients/{patient['id']}").status_code == 404


def test_error_statuses(memory_client):
    assert memory_client.post("/api/patients", json=PATIENT).status_code == 201
    assert memory_client.post("/api/patients", json=PATIENT).status_code == 409
    assert memory_client.patch("/api/patients/missing", json={"phone": "1"}).status_code == 404
    assert memory_client.delete("/api/deliveries/missing").status_code == 404
    assert memory_client.get("/api/reports/missing").status_code == 404
    assert memory_client.post("/api/patients", json={"first_name": ""}).status_code == 422


def test_appointments_unsupported_on_memory_store(memory_client):
    response = memory_client.get("/api/appointments")

    assert response.status_code == 501
    assert "appointments" in response.json()["detail"]


# ============================================================================
# Reports, invoices, organization
# ============================================================================

def test_report_numbering_over_http(memory_client):
    year = current_year()
    patient = memory_client.post("/api/patients", json=PATIENT).json()

    assert memory_client.get("/api/reports/next-number").json() == {"number": f"REF-{year}-0001"}
    report = memory_client.post("/api/reports", json=report_payload(patient)).json()
    assert report["report_number"] == f"REF-{year}-0001"
    assert [r["id"] for r in memory_client.get(f"/api/patients/{patient['id']}/reports").json()] == [report["id"]]

    invoice = memory_client.post(
        "/api/invoices",
        json={"patient_id": patient["id"], "invoice_date": "2025-02-10", "amount": 100, "total_amount": 122},
    ).json()
    assert invoice["invoice_number"] == f"INV-{year}-0001"
    assert memory_client.get("/api/invoices/next-number").json() == {"number": f"INV-{year}-0002"}


def test_organization_settings(memory_client):
    assert memory_client.get("/api/organization").json()["name"] == "Studio Ginecologico"

    updated = memory_client.patch("/api/organization", json={"phone": "06 5550000"})

    assert updated.status_code == 200
    assert updated.json()["phone"] == "06 5550000"


# ============================================================================
# SQLite store
# ============================================================================

def test_appointments_over_sqlite(sql_client):
    patient = sql_client.post("/api/patients", json=PATIENT).json()
    when = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()

    created = sql_client.post(
        "/api/appointments",
        json={"patient_id": patient["id"], "appointment_date": when, "appointment_type": "Ecografia"},
    )
    assert created.status_code == 201
    appointment = created.json()

    assert [a["id"] for a in sql_client.get("/api/appointments", params={"status": "scheduled"}).json()] == [
        appointment["id"]
    ]
    assert sql_client.get("/api/appointments", params={"status": "cancelled"}).json() == []
    assert sql_client.get("/api/appointments/today/count").json() == {"count": 0}

    [activity] = sql_client.get(f"/api/patients/{patient['id']}/activities").json()
    assert activity["reference_id"] == appointment["id"]


def test_unavailable_store_maps_to_503(tmp_path):
    broken = SqlDatabaseService(SchemaManager(database_url=f"sqlite+aiosqlite:///{tmp_path}"))

    with TestClient(create_app(broken)) as client:
        assert client.get("/api/patients").status_code == 503

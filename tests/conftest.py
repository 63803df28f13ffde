"""
Shared fixtures for the record store tests.

- ``app_settings``: configuration pointing at a fresh SQLite file in tmp_path
- ``sql_db`` / ``memory_db``: one concrete backing store each
- ``db``: parametrized over both stores, for behaviour they must share
- ``new_patient`` and friends: factories for valid records
"""
from datetime import date, datetime, timezone

import pytest

from gyneco.config.appconfig import Settings
from gyneco.database.memory_db_service import MemoryDatabaseService
from gyneco.database.schema import SchemaManager
from gyneco.database.sql_db_service import SqlDatabaseService
from gyneco.system_models.delivery_model.delivery_schemas import DeliveryCreate
from gyneco.system_models.invoice_model.invoice_schemas import InvoiceCreate, InvoiceItem
from gyneco.system_models.patient_model.patient_schemas import PatientCreate
from gyneco.system_models.report_model.report_schemas import PatientSnapshot, ReportCreate


# ============================================================================
# Configuration and stores
# ============================================================================

@pytest.fixture
def app_settings(tmp_path):
    """Settings isolated from the developer's .env and data directory."""
    return Settings(
        _env_file=None,
        DATABASE_BACKEND="sqlite",
        DATABASE_PATH=str(tmp_path / "data" / "gyneco.db"),
        MEMORY_SNAPSHOT_PATH=None,
    )


@pytest.fixture
async def sql_db(app_settings):
    db = SqlDatabaseService(SchemaManager(app_settings))
    yield db
    await db.close()


@pytest.fixture
async def memory_db(app_settings):
    db = MemoryDatabaseService(app_settings)
    yield db
    await db.close()


@pytest.fixture(params=["sqlite", "memory"])
async def db(request, app_settings):
    """Every test using this fixture runs once per backing store."""
    if request.param == "sqlite":
        service = SqlDatabaseService(SchemaManager(app_settings))
    else:
        service = MemoryDatabaseService(app_settings)
    yield service
    await service.close()


# ============================================================================
# Record factories
# ============================================================================

def at(year, month, day, hour=10):
    return datetime(year, month, day, hour, 0, tzinfo=timezone.utc)


def patient_payload(**overrides) -> PatientCreate:
    data = {
        "first_name": "Giulia",
        "last_name": "Rossi",
        "birth_date": date(1988, 3, 14),
        "phone": "0612345678",
        "blood_type": "A+",
    }
    data.update(overrides)
    return PatientCreate(**data)


@pytest.fixture
def new_patient():
    async def factory(db, **overrides):
        return await db.create_patient(patient_payload(**overrides))

    return factory


@pytest.fixture
def new_delivery():
    async def factory(db, patient_id, **overrides):
        data = {
            "patient_id": patient_id,
            "delivery_date": at(2020, 6, 1),
            "delivery_type": "natural",
            "pregnancy_weeks": 39,
            "baby_weight": 3250,
            "baby_gender": "female",
        }
        data.update(overrides)
        return await db.create_delivery(DeliveryCreate(**data))

    return factory


@pytest.fixture
def new_report():
    async def factory(db, patient, **overrides):
        deliveries = await db.get_deliveries_by_patient(patient.id)
        data = {
            "patient_id": patient.id,
            "report_date": at(2025, 2, 10),
            "visit_type": "Visita ginecologica",
            "patient_snapshot": PatientSnapshot.capture(patient, deliveries),
            "examination": "Obiettività nella norma",
        }
        data.update(overrides)
        return await db.create_report(ReportCreate(**data))

    return factory


@pytest.fixture
def new_invoice():
    async def factory(db, patient_id, **overrides):
        data = {
            "patient_id": patient_id,
            "invoice_date": date(2025, 2, 10),
            "amount": 100.0,
            "vat_rate": 22.0,
            "vat_amount": 22.0,
            "total_amount": 122.0,
            "items": [InvoiceItem(description="Visita", quantity=1, unit_price=100.0, total=100.0)],
        }
        data.update(overrides)
        return await db.create_invoice(InvoiceCreate(**data))

    return factory

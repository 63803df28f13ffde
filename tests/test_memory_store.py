import shutil

import pytest

from gyneco.config.appconfig import Settings
from gyneco.database.errors import ConstraintViolationError, OperationFailedError, StoreUnavailableError
from gyneco.database.factory import build_database_service
from gyneco.database.memory_db_service import MemoryDatabaseService
from gyneco.database.sql_db_service import SqlDatabaseService
from gyneco.system_models.organization_model.organization_schemas import OrganizationUpdate
from gyneco.system_models.patient_model.patient_schemas import PatientUpdate


async def test_snapshot_survives_restart(app_settings, tmp_path, new_patient, new_report):
    snapshot = tmp_path / "snapshot" / "gyneco.json"
    first = MemoryDatabaseService(app_settings, snapshot)
    patient = await new_patient(first, fiscal_code="RSSGLI88C54H501X")
    report = await new_report(first, patient)

    assert snapshot.exists()

    second = MemoryDatabaseService(app_settings, snapshot)
    assert await second.get_patients() == [patient]
    assert await second.get_report_by_id(report.id) == report
    # Numbering and uniqueness keep working on reloaded data
    assert (await new_report(second, patient)).report_number.endswith("-0002")
    with pytest.raises(ConstraintViolationError):
        await new_patient(second, fiscal_code="RSSGLI88C54H501X")


async def test_failed_mutation_is_not_persisted(app_settings, tmp_path, new_patient):
    snapshot = tmp_path / "gyneco.json"
    store = MemoryDatabaseService(app_settings, snapshot)
    patient = await new_patient(store)

    with pytest.raises(ConstraintViolationError):
        await store.update_patient(patient.id, PatientUpdate(last_name=None))

    reloaded = MemoryDatabaseService(app_settings, snapshot)
    assert (await reloaded.get_patient_by_id(patient.id)).last_name == patient.last_name


async def test_mutation_is_undone_when_snapshot_write_fails(app_settings, tmp_path, new_patient, new_report):
    snapshot_dir = tmp_path / "snapshot"
    store = MemoryDatabaseService(app_settings, snapshot_dir / "gyneco.json")
    patient = await new_patient(store)
    report = await new_report(store, patient)

    # A plain file where the snapshot directory should be makes every write fail
    shutil.rmtree(snapshot_dir)
    snapshot_dir.write_text("", encoding="utf-8")

    with pytest.raises(OperationFailedError):
        await new_patient(store, first_name="Sara", last_name="Bianchi")
    with pytest.raises(OperationFailedError):
        await store.update_organization_settings(OrganizationUpdate(name="Altro studio"))
    with pytest.raises(OperationFailedError):
        await store.delete_patient(patient.id)

    assert await store.get_patients() == [patient]
    assert await store.get_reports_by_patient(patient.id) == [report]
    assert (await store.get_organization_settings()).name == app_settings.DEFAULT_ORGANIZATION_NAME


async def test_unreadable_snapshot_raises_store_unavailable(app_settings, tmp_path):
    snapshot = tmp_path / "gyneco.json"
    snapshot.write_text("{not json", encoding="utf-8")

    with pytest.raises(StoreUnavailableError):
        await MemoryDatabaseService(app_settings, snapshot).get_patients()


async def test_returned_records_are_copies(memory_db, new_patient):
    patient = await new_patient(memory_db)
    patient.first_name = "Modificato"

    assert (await memory_db.get_patient_by_id(patient.id)).first_name == "Giulia"


def test_factory_selects_backend_from_settings(tmp_path):
    sqlite_settings = Settings(_env_file=None, DATABASE_BACKEND="sqlite", DATABASE_PATH=str(tmp_path / "a.db"))
    memory_settings = Settings(
        _env_file=None, DATABASE_BACKEND="memory", MEMORY_SNAPSHOT_PATH=str(tmp_path / "m.json")
    )

    sql_store = build_database_service(sqlite_settings)
    memory_store = build_database_service(memory_settings)

    assert isinstance(sql_store, SqlDatabaseService)
    assert sql_store.schema.database_url.endswith("a.db")
    assert isinstance(memory_store, MemoryDatabaseService)
    assert memory_store.snapshot_path == tmp_path / "m.json"

import asyncio

import pytest
from sqlalchemy import inspect, select, text
from sqlalchemy.exc import SQLAlchemyError

from gyneco.database.errors import OperationFailedError, StoreUnavailableError
from gyneco.database.schema import SchemaManager
from gyneco.database.sql_db_service import SqlDatabaseService
from gyneco.model_registry import Organization


# ============================================================================
# Initialization
# ============================================================================

async def test_first_use_creates_file_tables_and_default_organization(app_settings):
    schema = SchemaManager(app_settings)
    assert not schema.is_ready

    handle = await schema.ensure_ready()

    assert schema.is_ready
    assert app_settings.resolved_database_path.exists()
    async with handle.engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
        indexes = await conn.run_sync(
            lambda sync_conn: {i["name"] for i in inspect(sync_conn).get_indexes("patients")}
        )
    assert {
        "organizations",
        "patients",
        "deliveries",
        "reports",
        "invoices",
        "appointments",
        "activities",
    } <= tables
    assert {"idx_patients_names", "idx_patients_fiscal"} <= indexes

    async with handle.session() as session:
        orgs = (await session.execute(select(Organization))).scalars().all()
    assert [o.id for o in orgs] == [app_settings.DEFAULT_ORGANIZATION_ID]
    assert orgs[0].name == app_settings.DEFAULT_ORGANIZATION_NAME
    await schema.dispose()


async def test_reopening_existing_store_keeps_single_organization(app_settings, new_patient):
    first = SqlDatabaseService(SchemaManager(app_settings))
    patient = await new_patient(first)
    await first.close()

    second = SqlDatabaseService(SchemaManager(app_settings))
    try:
        assert await second.get_patient_by_id(patient.id) == patient
        handle = await second.schema.ensure_ready()
        async with handle.session() as session:
            orgs = (await session.execute(select(Organization))).scalars().all()
        assert len(orgs) == 1
    finally:
        await second.close()


async def test_concurrent_first_callers_initialize_once(app_settings, monkeypatch):
    schema = SchemaManager(app_settings)
    calls = []
    original = schema._initialize

    async def counting_initialize():
        calls.append(1)
        await asyncio.sleep(0.01)
        return await original()

    monkeypatch.setattr(schema, "_initialize", counting_initialize)

    handles = await asyncio.gather(*(schema.ensure_ready() for _ in range(10)))

    assert len(calls) == 1
    assert all(h is handles[0] for h in handles)
    await schema.dispose()


async def test_ensure_ready_returns_same_handle(app_settings):
    schema = SchemaManager(app_settings)
    assert await schema.ensure_ready() is await schema.ensure_ready()
    await schema.dispose()
    assert not schema.is_ready


# ============================================================================
# Failures
# ============================================================================

async def test_unopenable_file_raises_store_unavailable(tmp_path):
    # A directory cannot be opened as a database file
    schema = SchemaManager(database_url=f"sqlite+aiosqlite:///{tmp_path}")

    with pytest.raises(StoreUnavailableError) as exc_info:
        await schema.ensure_ready()

    assert exc_info.value.cause is not None
    assert not schema.is_ready


async def test_repository_call_on_unavailable_store_surfaces_store_unavailable(tmp_path):
    db = SqlDatabaseService(SchemaManager(database_url=f"sqlite+aiosqlite:///{tmp_path}"))

    with pytest.raises(StoreUnavailableError):
        await db.get_patients()


# ============================================================================
# Error translation
# ============================================================================

async def test_store_errors_are_translated_and_chained(sql_db):
    handle = await sql_db.schema.ensure_ready()
    async with handle.engine.begin() as conn:
        await conn.execute(text("DROP TABLE deliveries"))

    with pytest.raises(OperationFailedError) as exc_info:
        await sql_db.get_deliveries_by_patient("any")

    assert isinstance(exc_info.value.cause, SQLAlchemyError)
    assert exc_info.value.__cause__ is exc_info.value.cause

from datetime import timedelta

import pytest

from gyneco.database.errors import (
    ConstraintViolationError,
    FeatureNotSupportedError,
    RecordNotFoundError,
)
from gyneco.helpers.time import local_day_bounds, utcnow
from gyneco.system_models.appointment_model.appointment_schemas import (
    AppointmentCreate,
    AppointmentFilters,
    AppointmentUpdate,
)


def in_days(days, hours=0):
    start, _ = local_day_bounds()
    return start + timedelta(days=days, hours=12 + hours)


# ============================================================================
# SQLite store
# ============================================================================

async def test_create_applies_defaults_and_logs_timeline_entry(sql_db, new_patient):
    patient = await new_patient(sql_db)

    appointment = await sql_db.create_appointment(
        AppointmentCreate(patient_id=patient.id, appointment_date=in_days(1), appointment_type="Controllo")
    )

    assert appointment.duration == 30
    assert appointment.status == "scheduled"
    assert appointment.reminder_sent is False
    assert await sql_db.get_appointment_by_id(appointment.id) == appointment

    [activity] = await sql_db.get_activities_by_patient(patient.id)
    assert activity.activity_type == "appointment_created"
    assert activity.reference_id == appointment.id
    assert activity.reference_type == "appointment"
    assert activity.activity_date == appointment.appointment_date
    assert activity.description == "Appuntamento programmato: Controllo"


async def test_appointment_for_unknown_patient_leaves_no_timeline_entry(sql_db):
    with pytest.raises(ConstraintViolationError):
        await sql_db.create_appointment(AppointmentCreate(patient_id="ghost", appointment_date=in_days(1)))

    assert await sql_db.get_activities_by_patient("ghost") == []
    assert await sql_db.get_appointments() == []


async def test_calendar_filters_and_ascending_order(sql_db, new_patient):
    giulia = await new_patient(sql_db)
    sara = await new_patient(sql_db, first_name="Sara")
    late = await sql_db.create_appointment(AppointmentCreate(patient_id=giulia.id, appointment_date=in_days(3)))
    early = await sql_db.create_appointment(AppointmentCreate(patient_id=sara.id, appointment_date=in_days(1)))
    middle = await sql_db.create_appointment(
        AppointmentCreate(patient_id=giulia.id, appointment_date=in_days(2), status="confirmed")
    )

    assert [a.id for a in await sql_db.get_appointments()] == [early.id, middle.id, late.id]

    window = AppointmentFilters(start_date=in_days(2, -1), end_date=in_days(3, 1))
    assert [a.id for a in await sql_db.get_appointments(window)] == [middle.id, late.id]

    assert [a.id for a in await sql_db.get_appointments(AppointmentFilters(status="confirmed"))] == [middle.id]
    assert [a.id for a in await sql_db.get_appointments(AppointmentFilters(patient_id=sara.id))] == [early.id]

    by_patient = await sql_db.get_appointments_by_patient(giulia.id)
    assert [a.id for a in by_patient] == [late.id, middle.id]


async def test_count_today_counts_only_active_appointments_of_today(sql_db, new_patient):
    patient = await new_patient(sql_db)
    now = utcnow()
    await sql_db.create_appointment(AppointmentCreate(patient_id=patient.id, appointment_date=now))
    await sql_db.create_appointment(
        AppointmentCreate(patient_id=patient.id, appointment_date=now, status="confirmed")
    )
    await sql_db.create_appointment(
        AppointmentCreate(patient_id=patient.id, appointment_date=now, status="cancelled")
    )
    await sql_db.create_appointment(AppointmentCreate(patient_id=patient.id, appointment_date=in_days(2)))

    assert await sql_db.count_today_appointments() == 2


async def test_update_and_delete_appointment(sql_db, new_patient):
    patient = await new_patient(sql_db)
    appointment = await sql_db.create_appointment(
        AppointmentCreate(patient_id=patient.id, appointment_date=in_days(1), notes="Portare esami")
    )

    updated = await sql_db.update_appointment(
        appointment.id, AppointmentUpdate(status="completed", reminder_sent=True)
    )
    assert updated.status == "completed"
    assert updated.reminder_sent is True
    assert updated.notes == "Portare esami"

    await sql_db.delete_appointment(appointment.id)
    assert await sql_db.get_appointment_by_id(appointment.id) is None
    with pytest.raises(RecordNotFoundError):
        await sql_db.update_appointment(appointment.id, AppointmentUpdate(status="cancelled"))


async def test_deleting_patient_removes_appointments_and_timeline(sql_db, new_patient):
    patient = await new_patient(sql_db)
    appointment = await sql_db.create_appointment(
        AppointmentCreate(patient_id=patient.id, appointment_date=in_days(1))
    )

    await sql_db.delete_patient(patient.id)

    assert await sql_db.get_appointment_by_id(appointment.id) is None
    assert await sql_db.get_activities_by_patient(patient.id) == []


# ============================================================================
# Memory store
# ============================================================================

@pytest.mark.parametrize(
    "call",
    [
        lambda db: db.get_appointments(),
        lambda db: db.get_appointment_by_id("any"),
        lambda db: db.get_appointments_by_patient("any"),
        lambda db: db.create_appointment(AppointmentCreate(patient_id="any", appointment_date=utcnow())),
        lambda db: db.update_appointment("any", AppointmentUpdate(status="cancelled")),
        lambda db: db.delete_appointment("any"),
        lambda db: db.count_today_appointments(),
    ],
)
async def test_memory_store_does_not_support_appointments(memory_db, call):
    with pytest.raises(FeatureNotSupportedError) as exc_info:
        await call(memory_db)

    assert exc_info.value.backend == "memory"

# gyneco/system_services/appointment_services.py
import logging
from typing import Optional

from sqlalchemy import func, select

from gyneco.system_models.activity_model.activity_model import Activity
from gyneco.system_models.appointment_model.appointment_model import Appointment
from gyneco.system_models.appointment_model.appointment_schemas import (
    ACTIVE_STATUSES,
    DEFAULT_DURATION_MINUTES,
    DEFAULT_STATUS,
    AppointmentCreate,
    AppointmentFilters,
    AppointmentResponse,
    AppointmentUpdate,
)
from gyneco.system_services.repository import BaseRepository, new_id
from gyneco.helpers.time import local_day_bounds, utcnow

logger = logging.getLogger(__name__)


def appointment_description(appointment_type: Optional[str]) -> str:
    if appointment_type:
        return f"Appuntamento programmato: {appointment_type}"
    return "Appuntamento programmato"


class AppointmentRepository(BaseRepository):
    entity_name = "Appointment"
    model = Appointment

    # ============================================================
    # ✅ QUERIES
    # ============================================================
    async def list_all(self, filters: Optional[AppointmentFilters] = None) -> list[AppointmentResponse]:
        """Calendar view: every appointment matching the filters, earliest first."""
        stmt = select(Appointment)
        if filters is not None:
            if filters.start_date is not None:
                stmt = stmt.where(Appointment.appointment_date >= filters.start_date)
            if filters.end_date is not None:
                stmt = stmt.where(Appointment.appointment_date <= filters.end_date)
            if filters.status is not None:
                stmt = stmt.where(Appointment.status == filters.status)
            if filters.patient_id is not None:
                stmt = stmt.where(Appointment.patient_id == filters.patient_id)
        stmt = stmt.order_by(Appointment.appointment_date.asc())

        async with self.transaction("list") as session:
            result = await session.execute(stmt)
            return [AppointmentResponse.model_validate(row) for row in result.scalars()]

    async def list_by_patient(self, patient_id: str) -> list[AppointmentResponse]:
        stmt = (
            select(Appointment)
            .where(Appointment.patient_id == patient_id)
            .order_by(Appointment.appointment_date.desc())
        )
        async with self.transaction("list") as session:
            result = await session.execute(stmt)
            return [AppointmentResponse.model_validate(row) for row in result.scalars()]

    async def get_by_id(self, appointment_id: str) -> Optional[AppointmentResponse]:
        async with self.transaction("lookup") as session:
            row = await session.get(Appointment, appointment_id)
            return AppointmentResponse.model_validate(row) if row else None

    async def count_today(self) -> int:
        """Scheduled or confirmed appointments in the current local day."""
        start, end = local_day_bounds()
        stmt = select(func.count()).where(
            Appointment.appointment_date >= start,
            Appointment.appointment_date < end,
            Appointment.status.in_(ACTIVE_STATUSES),
        )
        async with self.transaction("count") as session:
            return (await session.execute(stmt)).scalar_one()

    # ============================================================
    # ✅ MUTATIONS
    # ============================================================
    async def create(self, data: AppointmentCreate) -> AppointmentResponse:
        now = utcnow()
        appointment_id = new_id()
        row = Appointment(
            id=appointment_id,
            patient_id=data.patient_id,
            org_id=self._org_id(data.org_id),
            appointment_date=data.appointment_date,
            duration=data.duration or DEFAULT_DURATION_MINUTES,
            appointment_type=data.appointment_type,
            status=data.status or DEFAULT_STATUS,
            notes=data.notes,
            reminder_sent=False,
            created_by=data.created_by,
            created_at=now,
            updated_at=now,
        )
        # The timeline entry is written in the same transaction as the appointment
        timeline = Activity(
            id=new_id(),
            patient_id=data.patient_id,
            activity_type="appointment_created",
            activity_date=data.appointment_date,
            description=appointment_description(data.appointment_type),
            reference_id=appointment_id,
            reference_type="appointment",
            created_by=data.created_by,
            created_at=now,
        )
        async with self.transaction("create") as session:
            session.add(row)
            await session.flush()
            session.add(timeline)
            await session.flush()
            appointment = AppointmentResponse.model_validate(
                await self._reread(session, appointment_id)
            )
        logger.info(f"✅ Appointment created: {appointment.id} at {appointment.appointment_date}")
        return appointment

    async def update(self, appointment_id: str, data: AppointmentUpdate) -> AppointmentResponse:
        changes = data.model_dump(exclude_unset=True)
        async with self.transaction("update") as session:
            return AppointmentResponse.model_validate(
                await self._update(session, appointment_id, changes)
            )

    async def delete(self, appointment_id: str) -> None:
        async with self.transaction("delete") as session:
            await self._delete(session, appointment_id)

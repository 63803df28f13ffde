# gyneco/system_services/patient_services.py
import logging
from typing import Optional

from sqlalchemy import func, or_, select

from gyneco.system_models.patient_model.patient_model import Patient
from gyneco.system_models.patient_model.patient_schemas import (
    PatientCreate,
    PatientResponse,
    PatientUpdate,
)
from gyneco.system_services.repository import BaseRepository, like_pattern, new_id
from gyneco.helpers.time import utcnow

logger = logging.getLogger(__name__)


class PatientRepository(BaseRepository):
    entity_name = "Patient"
    model = Patient

    _ordering = (func.lower(Patient.last_name), func.lower(Patient.first_name), Patient.id)

    # ============================================================
    # ✅ QUERIES
    # ============================================================
    async def list_all(self) -> list[PatientResponse]:
        async with self.transaction("list") as session:
            result = await session.execute(select(Patient).order_by(*self._ordering))
            return [PatientResponse.model_validate(row) for row in result.scalars()]

    async def get_by_id(self, patient_id: str) -> Optional[PatientResponse]:
        async with self.transaction("lookup") as session:
            row = await session.get(Patient, patient_id)
            return PatientResponse.model_validate(row) if row else None

    async def search(self, term: str) -> list[PatientResponse]:
        """Case-insensitive substring match on first name, last name and fiscal code."""
        pattern = like_pattern(term)
        stmt = (
            select(Patient)
            .where(
                or_(
                    func.lower(Patient.first_name).like(pattern, escape="\\"),
                    func.lower(Patient.last_name).like(pattern, escape="\\"),
                    func.lower(Patient.fiscal_code).like(pattern, escape="\\"),
                )
            )
            .order_by(*self._ordering)
        )
        async with self.transaction("search") as session:
            result = await session.execute(stmt)
            return [PatientResponse.model_validate(row) for row in result.scalars()]

    # ============================================================
    # ✅ MUTATIONS
    # ============================================================
    async def create(self, data: PatientCreate) -> PatientResponse:
        now = utcnow()
        values = data.model_dump(exclude={"org_id"})
        if values.get("country") is None:
            values["country"] = "Italia"
        row = Patient(
            id=new_id(),
            org_id=self._org_id(data.org_id),
            **values,
            created_at=now,
            updated_at=now,
        )
        async with self.transaction("create") as session:
            patient = PatientResponse.model_validate(await self._insert(session, row))
        logger.info(f"✅ Patient created: {patient.id}")
        return patient

    async def update(self, patient_id: str, data: PatientUpdate) -> PatientResponse:
        changes = data.model_dump(exclude_unset=True)
        async with self.transaction("update") as session:
            return PatientResponse.model_validate(await self._update(session, patient_id, changes))

    async def delete(self, patient_id: str) -> None:
        # Deliveries, reports, invoices, appointments and activities go with
        # the patient through ON DELETE CASCADE
        async with self.transaction("delete") as session:
            await self._delete(session, patient_id)
        logger.info(f"🗑️ Patient deleted with dependent records: {patient_id}")

# gyneco/system_services/report_services.py
import logging
from typing import Optional

from sqlalchemy import select

from gyneco.system_models.report_model.report_model import Report
from gyneco.system_models.report_model.report_schemas import (
    ReportCreate,
    ReportResponse,
    ReportUpdate,
)
from gyneco.system_services.numbering import SequentialNumberer
from gyneco.system_services.repository import BaseRepository, new_id
from gyneco.helpers.time import current_year, utcnow

logger = logging.getLogger(__name__)


class ReportRepository(BaseRepository):
    entity_name = "Report"
    model = Report

    def __init__(self, schema):
        super().__init__(schema)
        self.numberer = SequentialNumberer(
            "report", schema.settings.REPORT_NUMBER_PREFIX, Report.report_number
        )

    async def list_by_patient(self, patient_id: str) -> list[ReportResponse]:
        stmt = (
            select(Report)
            .where(Report.patient_id == patient_id)
            .order_by(Report.report_date.desc(), Report.created_at.desc())
        )
        async with self.transaction("list") as session:
            result = await session.execute(stmt)
            return [ReportResponse.model_validate(row) for row in result.scalars()]

    async def get_by_id(self, report_id: str) -> Optional[ReportResponse]:
        async with self.transaction("lookup") as session:
            row = await session.get(Report, report_id)
            return ReportResponse.model_validate(row) if row else None

    async def next_number(self) -> str:
        """Number the next created report would receive."""
        async with self.transaction("numbering") as session:
            return await self.numberer.next_number(session, current_year())

    # ============================================================
    # ✅ CREATE (number assigned inside the insert transaction)
    # ============================================================
    async def create(self, data: ReportCreate) -> ReportResponse:
        year = current_year()
        values = data.model_dump(exclude={"org_id", "patient_snapshot"})
        snapshot = data.patient_snapshot.model_dump(mode="json")

        async with self.numberer.lock_for(year):
            async with self.transaction("create") as session:
                now = utcnow()
                number = await self.numberer.next_number(session, year)
                row = Report(
                    id=new_id(),
                    org_id=self._org_id(data.org_id),
                    report_number=number,
                    patient_snapshot=snapshot,
                    signed=False,
                    **values,
                    created_at=now,
                    updated_at=now,
                )
                report = ReportResponse.model_validate(await self._insert(session, row))

        logger.info(f"✅ Report {report.report_number} created (patient {report.patient_id})")
        return report

    async def update(self, report_id: str, data: ReportUpdate) -> ReportResponse:
        changes = data.model_dump(exclude_unset=True, exclude={"patient_snapshot"})
        if "patient_snapshot" in data.model_fields_set:
            changes["patient_snapshot"] = (
                data.patient_snapshot.model_dump(mode="json") if data.patient_snapshot else None
            )
        async with self.transaction("update") as session:
            return ReportResponse.model_validate(await self._update(session, report_id, changes))

    async def delete(self, report_id: str) -> None:
        async with self.transaction("delete") as session:
            await self._delete(session, report_id)

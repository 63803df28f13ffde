# gyneco/system_services/activity_services.py
from sqlalchemy import select

from gyneco.system_models.activity_model.activity_model import Activity
from gyneco.system_models.activity_model.activity_schemas import ActivityCreate, ActivityResponse
from gyneco.system_services.repository import BaseRepository, new_id
from gyneco.helpers.time import utcnow


class ActivityRepository(BaseRepository):
    """Patient timeline. Entries are appended and never updated."""

    entity_name = "Activity"
    model = Activity

    async def list_by_patient(self, patient_id: str) -> list[ActivityResponse]:
        stmt = (
            select(Activity)
            .where(Activity.patient_id == patient_id)
            .order_by(Activity.activity_date.desc(), Activity.created_at.desc())
        )
        async with self.transaction("list") as session:
            result = await session.execute(stmt)
            return [ActivityResponse.model_validate(row) for row in result.scalars()]

    async def create(self, data: ActivityCreate) -> ActivityResponse:
        row = Activity(id=new_id(), **data.model_dump(), created_at=utcnow())
        async with self.transaction("create") as session:
            return ActivityResponse.model_validate(await self._insert(session, row))

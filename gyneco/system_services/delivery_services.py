# gyneco/system_services/delivery_services.py
import logging
from typing import Optional

from sqlalchemy import select

from gyneco.system_models.delivery_model.delivery_model import Delivery
from gyneco.system_models.delivery_model.delivery_schemas import (
    DeliveryCreate,
    DeliveryResponse,
    DeliveryUpdate,
)
from gyneco.system_services.repository import BaseRepository, new_id
from gyneco.helpers.time import utcnow

logger = logging.getLogger(__name__)


class DeliveryRepository(BaseRepository):
    entity_name = "Delivery"
    model = Delivery

    async def list_by_patient(self, patient_id: str) -> list[DeliveryResponse]:
        stmt = (
            select(Delivery)
            .where(Delivery.patient_id == patient_id)
            .order_by(Delivery.delivery_date.desc(), Delivery.created_at.desc())
        )
        async with self.transaction("list") as session:
            result = await session.execute(stmt)
            return [DeliveryResponse.model_validate(row) for row in result.scalars()]

    async def get_by_id(self, delivery_id: str) -> Optional[DeliveryResponse]:
        async with self.transaction("lookup") as session:
            row = await session.get(Delivery, delivery_id)
            return DeliveryResponse.model_validate(row) if row else None

    async def create(self, data: DeliveryCreate) -> DeliveryResponse:
        now = utcnow()
        row = Delivery(
            id=new_id(),
            org_id=self._org_id(data.org_id),
            **data.model_dump(exclude={"org_id"}),
            created_at=now,
            updated_at=now,
        )
        async with self.transaction("create") as session:
            delivery = DeliveryResponse.model_validate(await self._insert(session, row))
        logger.info(f"✅ Delivery created: {delivery.id} (patient {delivery.patient_id})")
        return delivery

    async def update(self, delivery_id: str, data: DeliveryUpdate) -> DeliveryResponse:
        changes = data.model_dump(exclude_unset=True)
        async with self.transaction("update") as session:
            return DeliveryResponse.model_validate(await self._update(session, delivery_id, changes))

    async def delete(self, delivery_id: str) -> None:
        async with self.transaction("delete") as session:
            await self._delete(session, delivery_id)

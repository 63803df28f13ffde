# gyneco/system_services/organization_services.py
import logging

from gyneco.database.errors import OperationFailedError
from gyneco.system_models.organization_model.organization_model import Organization
from gyneco.system_models.organization_model.organization_schemas import (
    OrganizationResponse,
    OrganizationUpdate,
)
from gyneco.system_services.repository import BaseRepository

logger = logging.getLogger(__name__)


class OrganizationRepository(BaseRepository):
    """Settings of the single organization created by the schema manager."""

    entity_name = "Organization"
    model = Organization

    async def get(self) -> OrganizationResponse:
        async with self.transaction("lookup") as session:
            row = await session.get(Organization, self.default_org_id)
            if row is None:
                raise OperationFailedError("Organization settings not found")
            return OrganizationResponse.model_validate(row)

    async def update(self, data: OrganizationUpdate) -> OrganizationResponse:
        changes = data.model_dump(exclude_unset=True)
        async with self.transaction("update") as session:
            row = await self._update(session, self.default_org_id, changes)
            organization = OrganizationResponse.model_validate(row)
        logger.info(f"✅ Organization settings updated: {sorted(changes)}")
        return organization

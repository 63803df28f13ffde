# gyneco/system_services/invoice_services.py
import logging
from typing import Optional

from sqlalchemy import select

from gyneco.system_models.invoice_model.invoice_model import Invoice
from gyneco.system_models.invoice_model.invoice_schemas import (
    InvoiceCreate,
    InvoiceResponse,
    InvoiceUpdate,
)
from gyneco.system_services.numbering import SequentialNumberer
from gyneco.system_services.repository import BaseRepository, new_id
from gyneco.helpers.time import current_year, utcnow

logger = logging.getLogger(__name__)


class InvoiceRepository(BaseRepository):
    entity_name = "Invoice"
    model = Invoice

    def __init__(self, schema):
        super().__init__(schema)
        self.numberer = SequentialNumberer(
            "invoice", schema.settings.INVOICE_NUMBER_PREFIX, Invoice.invoice_number
        )

    async def list_by_patient(self, patient_id: str) -> list[InvoiceResponse]:
        stmt = (
            select(Invoice)
            .where(Invoice.patient_id == patient_id)
            .order_by(Invoice.invoice_date.desc(), Invoice.created_at.desc())
        )
        async with self.transaction("list") as session:
            result = await session.execute(stmt)
            return [InvoiceResponse.model_validate(row) for row in result.scalars()]

    async def get_by_id(self, invoice_id: str) -> Optional[InvoiceResponse]:
        async with self.transaction("lookup") as session:
            row = await session.get(Invoice, invoice_id)
            return InvoiceResponse.model_validate(row) if row else None

    async def next_number(self) -> str:
        async with self.transaction("numbering") as session:
            return await self.numberer.next_number(session, current_year())

    async def create(self, data: InvoiceCreate) -> InvoiceResponse:
        year = current_year()
        # Amounts are stored exactly as given; totals are the caller's job
        values = data.model_dump(exclude={"org_id"})

        async with self.numberer.lock_for(year):
            async with self.transaction("create") as session:
                now = utcnow()
                number = await self.numberer.next_number(session, year)
                row = Invoice(
                    id=new_id(),
                    org_id=self._org_id(data.org_id),
                    invoice_number=number,
                    **values,
                    created_at=now,
                    updated_at=now,
                )
                invoice = InvoiceResponse.model_validate(await self._insert(session, row))

        logger.info(f"✅ Invoice {invoice.invoice_number} created (patient {invoice.patient_id})")
        return invoice

    async def update(self, invoice_id: str, data: InvoiceUpdate) -> InvoiceResponse:
        changes = data.model_dump(exclude_unset=True)
        async with self.transaction("update") as session:
            return InvoiceResponse.model_validate(await self._update(session, invoice_id, changes))

    async def delete(self, invoice_id: str) -> None:
        async with self.transaction("delete") as session:
            await self._delete(session, invoice_id)

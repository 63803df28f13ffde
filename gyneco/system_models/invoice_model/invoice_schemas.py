# gyneco/system_models/invoice_model/invoice_schemas.py
from typing import Optional, Literal
from datetime import date
from gyneco.helpers.time import UtcDateTime
from pydantic import BaseModel, ConfigDict, Field

PAYMENT_STATUS = Literal["paid", "pending", "cancelled", "overdue"]


class InvoiceItem(BaseModel):
    description: str
    quantity: float = Field(..., gt=0)
    unit_price: float
    total: float


class InvoiceCreate(BaseModel):
    """
    totals are computed by the caller (total_amount = amount + vat_amount)
    and stored verbatim.
    """

    patient_id: str
    org_id: Optional[str] = None
    invoice_date: date
    due_date: Optional[date] = None
    amount: float
    vat_rate: Optional[float] = None
    vat_amount: Optional[float] = None
    total_amount: float
    payment_method: Optional[str] = None
    payment_status: PAYMENT_STATUS = "pending"
    payment_date: Optional[date] = None
    notes: Optional[str] = None
    items: Optional[list[InvoiceItem]] = None


class InvoiceUpdate(BaseModel):
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None
    amount: Optional[float] = None
    vat_rate: Optional[float] = None
    vat_amount: Optional[float] = None
    total_amount: Optional[float] = None
    payment_method: Optional[str] = None
    payment_status: Optional[PAYMENT_STATUS] = None
    payment_date: Optional[date] = None
    notes: Optional[str] = None
    items: Optional[list[InvoiceItem]] = None


class InvoiceResponse(BaseModel):
    id: str
    patient_id: str
    org_id: str
    invoice_number: str
    invoice_date: date
    due_date: Optional[date] = None
    amount: float
    vat_rate: Optional[float] = None
    vat_amount: Optional[float] = None
    total_amount: float
    payment_method: Optional[str] = None
    payment_status: PAYMENT_STATUS
    payment_date: Optional[date] = None
    notes: Optional[str] = None
    items: Optional[list[InvoiceItem]] = None
    created_at: UtcDateTime
    updated_at: UtcDateTime

    model_config = ConfigDict(from_attributes=True)

# gyneco/system_models/organization_model/organization_schemas.py
from typing import Optional
from gyneco.helpers.time import UtcDateTime
from pydantic import BaseModel, ConfigDict

class OrganizationBase(BaseModel):
    name: str
    vat_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    province: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    logo_url: Optional[str] = None
    doctor_name: Optional[str] = None
    doctor_title: Optional[str] = None
    doctor_signature_path: Optional[str] = None

class OrganizationUpdate(BaseModel):
    name: Optional[str] = None
    vat_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    province: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    logo_url: Optional[str] = None
    doctor_name: Optional[str] = None
    doctor_title: Optional[str] = None
    doctor_signature_path: Optional[str] = None

class OrganizationResponse(OrganizationBase):
    id: str
    created_at: UtcDateTime
    updated_at: UtcDateTime

    model_config = ConfigDict(from_attributes=True)

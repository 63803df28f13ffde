# gyneco/system_models/patient_model/patient_schemas.py
from typing import Optional
from datetime import date
from gyneco.helpers.time import UtcDateTime
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class PatientBase(BaseModel):
    # Personal data
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    birth_date: date
    birth_place: Optional[str] = None
    fiscal_code: Optional[str] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    province: Optional[str] = None
    country: Optional[str] = "Italia"

    # Medical history
    blood_type: Optional[str] = None
    allergies: Optional[str] = None
    current_medications: Optional[str] = None
    medical_notes: Optional[str] = None
    family_medical_history: Optional[str] = None

    # Gynecological history
    first_menstruation_age: Optional[int] = Field(None, ge=0)
    menstrual_cycle_days: Optional[int] = Field(None, ge=0)
    last_menstruation_date: Optional[date] = None
    contraception_method: Optional[str] = None
    pap_test_last_date: Optional[date] = None
    mammography_last_date: Optional[date] = None

    # Consents
    privacy_consent: bool = False
    marketing_consent: bool = False

    # A blank fiscal code means "none"; storing "" would trip the unique index
    @field_validator("fiscal_code", mode="before")
    @classmethod
    def normalize_fiscal_code(cls, v):
        v = _blank_to_none(v)
        return v.strip() if isinstance(v, str) else v


class PatientCreate(PatientBase):
    org_id: Optional[str] = None


class PatientUpdate(BaseModel):
    """Sparse update: only the fields explicitly set are written."""

    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    birth_date: Optional[date] = None
    birth_place: Optional[str] = None
    fiscal_code: Optional[str] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    province: Optional[str] = None
    country: Optional[str] = None
    blood_type: Optional[str] = None
    allergies: Optional[str] = None
    current_medications: Optional[str] = None
    medical_notes: Optional[str] = None
    family_medical_history: Optional[str] = None
    first_menstruation_age: Optional[int] = Field(None, ge=0)
    menstrual_cycle_days: Optional[int] = Field(None, ge=0)
    last_menstruation_date: Optional[date] = None
    contraception_method: Optional[str] = None
    pap_test_last_date: Optional[date] = None
    mammography_last_date: Optional[date] = None
    privacy_consent: Optional[bool] = None
    marketing_consent: Optional[bool] = None

    @field_validator("fiscal_code", mode="before")
    @classmethod
    def normalize_fiscal_code(cls, v):
        v = _blank_to_none(v)
        return v.strip() if isinstance(v, str) else v


class PatientResponse(PatientBase):
    id: str
    org_id: str
    created_at: UtcDateTime
    updated_at: UtcDateTime

    model_config = ConfigDict(from_attributes=True)

# gyneco/system_models/delivery_model/delivery_schemas.py
from typing import Optional, Literal
from gyneco.helpers.time import UtcDateTime
from pydantic import BaseModel, ConfigDict, Field

DELIVERY_TYPE = Literal["natural", "cesarean", "assisted"]
BABY_GENDER = Literal["male", "female"]

# Clinically plausible ranges, checked on input only
PREGNANCY_WEEKS_RANGE = (20, 45)
BABY_WEIGHT_RANGE_GRAMS = (500, 6000)


class DeliveryCreate(BaseModel):
    patient_id: str
    org_id: Optional[str] = None
    delivery_date: UtcDateTime
    delivery_type: DELIVERY_TYPE
    pregnancy_weeks: Optional[int] = Field(
        None, ge=PREGNANCY_WEEKS_RANGE[0], le=PREGNANCY_WEEKS_RANGE[1]
    )
    baby_weight: Optional[float] = Field(
        None, ge=BABY_WEIGHT_RANGE_GRAMS[0], le=BABY_WEIGHT_RANGE_GRAMS[1]
    )
    baby_gender: Optional[BABY_GENDER] = None
    complications: Optional[str] = None
    notes: Optional[str] = None


class DeliveryUpdate(BaseModel):
    delivery_date: Optional[UtcDateTime] = None
    delivery_type: Optional[DELIVERY_TYPE] = None
    pregnancy_weeks: Optional[int] = Field(
        None, ge=PREGNANCY_WEEKS_RANGE[0], le=PREGNANCY_WEEKS_RANGE[1]
    )
    baby_weight: Optional[float] = Field(
        None, ge=BABY_WEIGHT_RANGE_GRAMS[0], le=BABY_WEIGHT_RANGE_GRAMS[1]
    )
    baby_gender: Optional[BABY_GENDER] = None
    complications: Optional[str] = None
    notes: Optional[str] = None


class DeliveryResponse(BaseModel):
    id: str
    patient_id: str
    org_id: str
    delivery_date: UtcDateTime
    delivery_type: DELIVERY_TYPE
    pregnancy_weeks: Optional[int] = None
    baby_weight: Optional[float] = None
    baby_gender: Optional[BABY_GENDER] = None
    complications: Optional[str] = None
    notes: Optional[str] = None
    created_at: UtcDateTime
    updated_at: UtcDateTime

    model_config = ConfigDict(from_attributes=True)

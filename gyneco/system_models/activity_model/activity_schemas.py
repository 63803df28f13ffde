# gyneco/system_models/activity_model/activity_schemas.py
from typing import Optional, Literal
from gyneco.helpers.time import UtcDateTime
from pydantic import BaseModel, ConfigDict, Field

REFERENCE_TYPE = Literal["delivery", "report", "invoice", "appointment"]


class ActivityCreate(BaseModel):
    patient_id: str
    activity_type: str = Field(..., min_length=1)
    activity_date: UtcDateTime
    description: str
    reference_id: Optional[str] = None
    reference_type: Optional[REFERENCE_TYPE] = None
    created_by: Optional[str] = None


class ActivityResponse(BaseModel):
    id: str
    patient_id: str
    activity_type: str
    activity_date: UtcDateTime
    description: str
    reference_id: Optional[str] = None
    reference_type: Optional[str] = None
    created_by: Optional[str] = None
    created_at: UtcDateTime

    model_config = ConfigDict(from_attributes=True)

# gyneco/system_models/appointment_model/appointment_schemas.py
from typing import Optional, Literal
from gyneco.helpers.time import UtcDateTime
from pydantic import BaseModel, ConfigDict, Field

APPOINTMENT_STATUS = Literal["scheduled", "confirmed", "completed", "cancelled", "no_show"]

DEFAULT_DURATION_MINUTES = 30
DEFAULT_STATUS = "scheduled"

# Statuses that still occupy a slot in the day's agenda
ACTIVE_STATUSES = ("scheduled", "confirmed")


class AppointmentCreate(BaseModel):
    patient_id: str
    org_id: Optional[str] = None
    appointment_date: UtcDateTime
    duration: Optional[int] = Field(DEFAULT_DURATION_MINUTES, gt=0)
    appointment_type: Optional[str] = None
    status: Optional[APPOINTMENT_STATUS] = DEFAULT_STATUS
    notes: Optional[str] = None
    created_by: Optional[str] = None


class AppointmentUpdate(BaseModel):
    appointment_date: Optional[UtcDateTime] = None
    duration: Optional[int] = Field(None, gt=0)
    appointment_type: Optional[str] = None
    status: Optional[APPOINTMENT_STATUS] = None
    notes: Optional[str] = None
    reminder_sent: Optional[bool] = None


class AppointmentFilters(BaseModel):
    start_date: Optional[UtcDateTime] = None
    end_date: Optional[UtcDateTime] = None
    status: Optional[APPOINTMENT_STATUS] = None
    patient_id: Optional[str] = None


class AppointmentResponse(BaseModel):
    id: str
    patient_id: str
    org_id: str
    appointment_date: UtcDateTime
    duration: int = DEFAULT_DURATION_MINUTES
    appointment_type: Optional[str] = None
    status: APPOINTMENT_STATUS = DEFAULT_STATUS
    notes: Optional[str] = None
    reminder_sent: bool = False
    created_by: Optional[str] = None
    created_at: UtcDateTime
    updated_at: UtcDateTime

    model_config = ConfigDict(from_attributes=True)

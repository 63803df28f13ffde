# gyneco/system_models/report_model/report_schemas.py
from typing import Optional, Sequence
from datetime import date
from gyneco.helpers.time import UtcDateTime
from pydantic import BaseModel, ConfigDict, Field


class DeliverySummary(BaseModel):
    """One past delivery as it appears inside a patient snapshot."""

    date: UtcDateTime
    type: str
    weeks: Optional[int] = None
    weight: Optional[float] = None

    model_config = ConfigDict(frozen=True)


class PatientSnapshot(BaseModel):
    """
    Point-in-time copy of the patient embedded into a report.

    A report is a clinical/legal record: later edits to the patient must not
    change what the report says, so this is a frozen value and never a
    reference to the live patient row.
    """

    first_name: str
    last_name: str
    birth_date: date
    fiscal_code: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    blood_type: Optional[str] = None
    allergies: Optional[str] = None
    current_medications: Optional[str] = None
    last_menstruation_date: Optional[date] = None
    deliveries: tuple[DeliverySummary, ...] = ()

    model_config = ConfigDict(frozen=True)

    @classmethod
    def capture(cls, patient, deliveries: Sequence = ()) -> "PatientSnapshot":
        """Freeze the relevant fields of ``patient`` and its ``deliveries``."""
        return cls(
            first_name=patient.first_name,
            last_name=patient.last_name,
            birth_date=patient.birth_date,
            fiscal_code=patient.fiscal_code,
            address=patient.address,
            phone=patient.phone or patient.mobile,
            blood_type=patient.blood_type,
            allergies=patient.allergies,
            current_medications=patient.current_medications,
            last_menstruation_date=patient.last_menstruation_date,
            deliveries=tuple(
                DeliverySummary(
                    date=d.delivery_date,
                    type=d.delivery_type,
                    weeks=d.pregnancy_weeks,
                    weight=d.baby_weight,
                )
                for d in deliveries
            ),
        )


class ReportCreate(BaseModel):
    patient_id: str
    org_id: Optional[str] = None
    report_date: UtcDateTime
    visit_type: str = Field(..., min_length=1)
    patient_snapshot: PatientSnapshot
    examination: str = Field(..., min_length=1)
    ultrasound_result: Optional[str] = None
    therapy: Optional[str] = None
    attachments: Optional[list[str]] = None
    internal_notes: Optional[str] = None
    doctor_name: Optional[str] = None
    doctor_title: Optional[str] = None
    created_by: Optional[str] = None


class ReportUpdate(BaseModel):
    report_date: Optional[UtcDateTime] = None
    visit_type: Optional[str] = Field(None, min_length=1)
    patient_snapshot: Optional[PatientSnapshot] = None
    examination: Optional[str] = Field(None, min_length=1)
    ultrasound_result: Optional[str] = None
    therapy: Optional[str] = None
    attachments: Optional[list[str]] = None
    internal_notes: Optional[str] = None
    doctor_name: Optional[str] = None
    doctor_title: Optional[str] = None
    signed: Optional[bool] = None


class ReportResponse(BaseModel):
    id: str
    patient_id: str
    org_id: str
    report_date: UtcDateTime
    visit_type: str
    report_number: str
    patient_snapshot: PatientSnapshot
    examination: str
    ultrasound_result: Optional[str] = None
    therapy: Optional[str] = None
    attachments: Optional[list[str]] = None
    internal_notes: Optional[str] = None
    doctor_name: Optional[str] = None
    doctor_title: Optional[str] = None
    signed: bool = False
    created_by: Optional[str] = None
    created_at: UtcDateTime
    updated_at: UtcDateTime

    model_config = ConfigDict(from_attributes=True)

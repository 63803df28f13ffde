# gyneco/system_services/system_routes.py
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status

from gyneco.database.database_service import DatabaseService
from gyneco.database.errors import (
    ConstraintViolationError,
    FeatureNotSupportedError,
    RecordNotFoundError,
    RecordStoreError,
    StoreUnavailableError,
)
from gyneco.system_models.activity_model.activity_schemas import ActivityCreate, ActivityResponse
from gyneco.system_models.appointment_model.appointment_schemas import (
    APPOINTMENT_STATUS,
    AppointmentCreate,
    AppointmentFilters,
    AppointmentResponse,
    AppointmentUpdate,
)
from gyneco.system_models.delivery_model.delivery_schemas import (
    DeliveryCreate,
    DeliveryResponse,
    DeliveryUpdate,
)
from gyneco.system_models.invoice_model.invoice_schemas import (
    InvoiceCreate,
    InvoiceResponse,
    InvoiceUpdate,
)
from gyneco.system_models.organization_model.organization_schemas import (
    OrganizationResponse,
    OrganizationUpdate,
)
from gyneco.system_models.patient_model.patient_schemas import (
    PatientCreate,
    PatientResponse,
    PatientUpdate,
)
from gyneco.system_models.report_model.report_schemas import (
    ReportCreate,
    ReportResponse,
    ReportUpdate,
)

router = APIRouter()


def get_database(request: Request) -> DatabaseService:
    return request.app.state.database


def http_error(e: RecordStoreError) -> HTTPException:
    if isinstance(e, RecordNotFoundError):
        return HTTPException(status_code=404, detail=e.message)
    if isinstance(e, ConstraintViolationError):
        return HTTPException(status_code=409, detail=e.message)
    if isinstance(e, FeatureNotSupportedError):
        return HTTPException(status_code=501, detail=e.message)
    if isinstance(e, StoreUnavailableError):
        return HTTPException(status_code=503, detail=e.message)
    return HTTPException(status_code=500, detail=e.message)


def found(record, entity: str, record_id: str):
    if record is None:
        raise HTTPException(status_code=404, detail=f"{entity} not found: {record_id}")
    return record


# ==================== PATIENTS ====================

@router.get("/patients", response_model=list[PatientResponse])
async def list_patients_endpoint(q: Optional[str] = None, db: DatabaseService = Depends(get_database)):
    """List all patients, or search them when ``q`` is given."""
    try:
        if q:
            return await db.search_patients(q)
        return await db.get_patients()
    except RecordStoreError as e:
        raise http_error(e) from e


@router.post("/patients", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def create_patient_endpoint(patient: PatientCreate, db: DatabaseService = Depends(get_database)):
    """Create a new patient."""
    try:
        return await db.create_patient(patient)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.get("/patients/{patient_id}", response_model=PatientResponse)
async def get_patient_endpoint(patient_id: str, db: DatabaseService = Depends(get_database)):
    try:
        patient = await db.get_patient_by_id(patient_id)
    except RecordStoreError as e:
        raise http_error(e) from e
    return found(patient, "Patient", patient_id)


@router.patch("/patients/{patient_id}", response_model=PatientResponse)
async def update_patient_endpoint(
    patient_id: str, patient: PatientUpdate, db: DatabaseService = Depends(get_database)
):
    try:
        return await db.update_patient(patient_id, patient)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.delete("/patients/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_patient_endpoint(patient_id: str, db: DatabaseService = Depends(get_database)):
    """Delete a patient together with all of her records."""
    try:
        await db.delete_patient(patient_id)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.get("/patients/{patient_id}/deliveries", response_model=list[DeliveryResponse])
async def patient_deliveries_endpoint(patient_id: str, db: DatabaseService = Depends(get_database)):
    try:
        return await db.get_deliveries_by_patient(patient_id)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.get("/patients/{patient_id}/reports", response_model=list[ReportResponse])
async def patient_reports_endpoint(patient_id: str, db: DatabaseService = Depends(get_database)):
    try:
        return await db.get_reports_by_patient(patient_id)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.get("/patients/{patient_id}/invoices", response_model=list[InvoiceResponse])
async def patient_invoices_endpoint(patient_id: str, db: DatabaseService = Depends(get_database)):
    try:
        return await db.get_invoices_by_patient(patient_id)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.get("/patients/{patient_id}/appointments", response_model=list[AppointmentResponse])
async def patient_appointments_endpoint(patient_id: str, db: DatabaseService = Depends(get_database)):
    try:
        return await db.get_appointments_by_patient(patient_id)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.get("/patients/{patient_id}/activities", response_model=list[ActivityResponse])
async def patient_activities_endpoint(patient_id: str, db: DatabaseService = Depends(get_database)):
    """Timeline of the patient, most recent first."""
    try:
        return await db.get_activities_by_patient(patient_id)
    except RecordStoreError as e:
        raise http_error(e) from e


# ==================== DELIVERIES ====================

@router.post("/deliveries", response_model=DeliveryResponse, status_code=status.HTTP_201_CREATED)
async def create_delivery_endpoint(delivery: DeliveryCreate, db: DatabaseService = Depends(get_database)):
    """Record a delivery."""
    try:
        return await db.create_delivery(delivery)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.get("/deliveries/{delivery_id}", response_model=DeliveryResponse)
async def get_delivery_endpoint(delivery_id: str, db: DatabaseService = Depends(get_database)):
    try:
        delivery = await db.get_delivery_by_id(delivery_id)
    except RecordStoreError as e:
        raise http_error(e) from e
    return found(delivery, "Delivery", delivery_id)


@router.patch("/deliveries/{delivery_id}", response_model=DeliveryResponse)
async def update_delivery_endpoint(
    delivery_id: str, delivery: DeliveryUpdate, db: DatabaseService = Depends(get_database)
):
    try:
        return await db.update_delivery(delivery_id, delivery)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.delete("/deliveries/{delivery_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_delivery_endpoint(delivery_id: str, db: DatabaseService = Depends(get_database)):
    try:
        await db.delete_delivery(delivery_id)
    except RecordStoreError as e:
        raise http_error(e) from e


# ==================== REPORTS ====================

@router.get("/reports/next-number")
async def next_report_number_endpoint(db: DatabaseService = Depends(get_database)):
    """Preview of the number the next report will receive."""
    try:
        return {"number": await db.get_next_report_number()}
    except RecordStoreError as e:
        raise http_error(e) from e


@router.post("/reports", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report_endpoint(report: ReportCreate, db: DatabaseService = Depends(get_database)):
    """Create a report; the number is assigned by the store."""
    try:
        return await db.create_report(report)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.get("/reports/{report_id}", response_model=ReportResponse)
async def get_report_endpoint(report_id: str, db: DatabaseService = Depends(get_database)):
    try:
        report = await db.get_report_by_id(report_id)
    except RecordStoreError as e:
        raise http_error(e) from e
    return found(report, "Report", report_id)


@router.patch("/reports/{report_id}", response_model=ReportResponse)
async def update_report_endpoint(
    report_id: str, report: ReportUpdate, db: DatabaseService = Depends(get_database)
):
    try:
        return await db.update_report(report_id, report)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.delete("/reports/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report_endpoint(report_id: str, db: DatabaseService = Depends(get_database)):
    try:
        await db.delete_report(report_id)
    except RecordStoreError as e:
        raise http_error(e) from e


# ==================== INVOICES ====================

@router.get("/invoices/next-number")
async def next_invoice_number_endpoint(db: DatabaseService = Depends(get_database)):
    try:
        return {"number": await db.get_next_invoice_number()}
    except RecordStoreError as e:
        raise http_error(e) from e


@router.post("/invoices", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice_endpoint(invoice: InvoiceCreate, db: DatabaseService = Depends(get_database)):
    """Create an invoice; the number is assigned by the store."""
    try:
        return await db.create_invoice(invoice)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.get("/invoices/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice_endpoint(invoice_id: str, db: DatabaseService = Depends(get_database)):
    try:
        invoice = await db.get_invoice_by_id(invoice_id)
    except RecordStoreError as e:
        raise http_error(e) from e
    return found(invoice, "Invoice", invoice_id)


@router.patch("/invoices/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice_endpoint(
    invoice_id: str, invoice: InvoiceUpdate, db: DatabaseService = Depends(get_database)
):
    try:
        return await db.update_invoice(invoice_id, invoice)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.delete("/invoices/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice_endpoint(invoice_id: str, db: DatabaseService = Depends(get_database)):
    try:
        await db.delete_invoice(invoice_id)
    except RecordStoreError as e:
        raise http_error(e) from e


# ==================== APPOINTMENTS ====================

@router.get("/appointments", response_model=list[AppointmentResponse])
async def list_appointments_endpoint(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    status: Optional[APPOINTMENT_STATUS] = None,
    patient_id: Optional[str] = None,
    db: DatabaseService = Depends(get_database),
):
    """Calendar view, earliest first."""
    filters = AppointmentFilters(
        start_date=start_date, end_date=end_date, status=status, patient_id=patient_id
    )
    try:
        return await db.get_appointments(filters)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.get("/appointments/today/count")
async def count_today_appointments_endpoint(db: DatabaseService = Depends(get_database)):
    try:
        return {"count": await db.count_today_appointments()}
    except RecordStoreError as e:
        raise http_error(e) from e


@router.post("/appointments", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment_endpoint(
    appointment: AppointmentCreate, db: DatabaseService = Depends(get_database)
):
    """Schedule an appointment."""
    try:
        return await db.create_appointment(appointment)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment_endpoint(appointment_id: str, db: DatabaseService = Depends(get_database)):
    try:
        appointment = await db.get_appointment_by_id(appointment_id)
    except RecordStoreError as e:
        raise http_error(e) from e
    return found(appointment, "Appointment", appointment_id)


@router.patch("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment_endpoint(
    appointment_id: str, appointment: AppointmentUpdate, db: DatabaseService = Depends(get_database)
):
    try:
        return await db.update_appointment(appointment_id, appointment)
    except RecordStoreError as e:
        raise http_error(e) from e


@router.delete("/appointments/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment_endpoint(appointment_id: str, db: DatabaseService = Depends(get_database)):
    try:
        await db.delete_appointment(appointment_id)
    except RecordStoreError as e:
        raise http_error(e) from e


# ==================== ACTIVITIES ====================

@router.post("/activities", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
async def create_activity_endpoint(activity: ActivityCreate, db: DatabaseService = Depends(get_database)):
    """Append an entry to a patient's timeline."""
    try:
        return await db.create_activity(activity)
    except RecordStoreError as e:
        raise http_error(e) from e


# ==================== ORGANIZATION ====================

@router.get("/organization", response_model=OrganizationResponse)
async def get_organization_endpoint(db: DatabaseService = Depends(get_database)):
    try:
        return await db.get_organization_settings()
    except RecordStoreError as e:
        raise http_error(e) from e


@router.patch("/organization", response_model=OrganizationResponse)
async def update_organization_endpoint(
    organization: OrganizationUpdate, db: DatabaseService = Depends(get_database)
):
    try:
        return await db.update_organization_settings(organization)
    except RecordStoreError as e:
        raise http_error(e) from e

# gyneco/database/sql_db_service.py
from typing import Optional

from gyneco.database.database_service import DatabaseService
from gyneco.database.schema import SchemaManager
from gyneco.system_models.activity_model.activity_schemas import ActivityCreate, ActivityResponse
from gyneco.system_models.appointment_model.appointment_schemas import (
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
from gyneco.system_services.activity_services import ActivityRepository
from gyneco.system_services.appointment_services import AppointmentRepository
from gyneco.system_services.delivery_services import DeliveryRepository
from gyneco.system_services.invoice_services import InvoiceRepository
from gyneco.system_services.organization_services import OrganizationRepository
from gyneco.system_services.patient_services import PatientRepository
from gyneco.system_services.report_services import ReportRepository


class SqlDatabaseService(DatabaseService):
    """Persistent SQLite store. Delegates every call to a repository."""

    backend_name = "sqlite"

    def __init__(self, schema: SchemaManager):
        self.schema = schema
        self.patients = PatientRepository(schema)
        self.deliveries = DeliveryRepository(schema)
        self.reports = ReportRepository(schema)
        self.invoices = InvoiceRepository(schema)
        self.appointments = AppointmentRepository(schema)
        self.activities = ActivityRepository(schema)
        self.organization = OrganizationRepository(schema)

    async def close(self) -> None:
        await self.schema.dispose()

    # ==================== PATIENTS ====================
    async def search_patients(self, query: str) -> list[PatientResponse]:
        return await self.patients.search(query)

    async def get_patients(self) -> list[PatientResponse]:
        return await self.patients.list_all()

    async def get_patient_by_id(self, patient_id: str) -> Optional[PatientResponse]:
        return await self.patients.get_by_id(patient_id)

    async def create_patient(self, data: PatientCreate) -> PatientResponse:
        return await self.patients.create(data)

    async def update_patient(self, patient_id: str, data: PatientUpdate) -> PatientResponse:
        return await self.patients.update(patient_id, data)

    async def delete_patient(self, patient_id: str) -> None:
        await self.patients.delete(patient_id)

    # ==================== DELIVERIES ====================
    async def get_deliveries_by_patient(self, patient_id: str) -> list[DeliveryResponse]:
        return await self.deliveries.list_by_patient(patient_id)

    async def get_delivery_by_id(self, delivery_id: str) -> Optional[DeliveryResponse]:
        return await self.deliveries.get_by_id(delivery_id)

    async def create_delivery(self, data: DeliveryCreate) -> DeliveryResponse:
        return await self.deliveries.create(data)

    async def update_delivery(self, delivery_id: str, data: DeliveryUpdate) -> DeliveryResponse:
        return await self.deliveries.update(delivery_id, data)

    async def delete_delivery(self, delivery_id: str) -> None:
        await self.deliveries.delete(delivery_id)

    # ==================== REPORTS ====================
    async def get_reports_by_patient(self, patient_id: str) -> list[ReportResponse]:
        return await self.reports.list_by_patient(patient_id)

    async def get_report_by_id(self, report_id: str) -> Optional[ReportResponse]:
        return await self.reports.get_by_id(report_id)

    async def create_report(self, data: ReportCreate) -> ReportResponse:
        return await self.reports.create(data)

    async def update_report(self, report_id: str, data: ReportUpdate) -> ReportResponse:
        return await self.reports.update(report_id, data)

    async def delete_report(self, report_id: str) -> None:
        await self.reports.delete(report_id)

    async def get_next_report_number(self) -> str:
        return await self.reports.next_number()

    # ==================== INVOICES ====================
    async def get_invoices_by_patient(self, patient_id: str) -> list[InvoiceResponse]:
        return await self.invoices.list_by_patient(patient_id)

    async def get_invoice_by_id(self, invoice_id: str) -> Optional[InvoiceResponse]:
        return await self.invoices.get_by_id(invoice_id)

    async def create_invoice(self, data: InvoiceCreate) -> InvoiceResponse:
        return await self.invoices.create(data)

    async def update_invoice(self, invoice_id: str, data: InvoiceUpdate) -> InvoiceResponse:
        return await self.invoices.update(invoice_id, data)

    async def delete_invoice(self, invoice_id: str) -> None:
        await self.invoices.delete(invoice_id)

    async def get_next_invoice_number(self) -> str:
        return await self.invoices.next_number()

    # ==================== APPOINTMENTS ====================
    async def get_appointments(
        self, filters: Optional[AppointmentFilters] = None
    ) -> list[AppointmentResponse]:
        return await self.appointments.list_all(filters)

    async def get_appointment_by_id(self, appointment_id: str) -> Optional[AppointmentResponse]:
        return await self.appointments.get_by_id(appointment_id)

    async def get_appointments_by_patient(self, patient_id: str) -> list[AppointmentResponse]:
        return await self.appointments.list_by_patient(patient_id)

    async def create_appointment(self, data: AppointmentCreate) -> AppointmentResponse:
        return await self.appointments.create(data)

    async def update_appointment(
        self, appointment_id: str, data: AppointmentUpdate
    ) -> AppointmentResponse:
        return await self.appointments.update(appointment_id, data)

    async def delete_appointment(self, appointment_id: str) -> None:
        await self.appointments.delete(appointment_id)

    async def count_today_appointments(self) -> int:
        return await self.appointments.count_today()

    # ==================== ACTIVITIES ====================
    async def get_activities_by_patient(self, patient_id: str) -> list[ActivityResponse]:
        return await self.activities.list_by_patient(patient_id)

    async def create_activity(self, data: ActivityCreate) -> ActivityResponse:
        return await self.activities.create(data)

    # ==================== ORGANIZATION ====================
    async def get_organization_settings(self) -> OrganizationResponse:
        return await self.organization.get()

    async def update_organization_settings(self, data: OrganizationUpdate) -> OrganizationResponse:
        return await self.organization.update(data)

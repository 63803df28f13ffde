# gyneco/database/database_service.py
"""
Data-access facade.

Application features depend on this contract only, never on a concrete store
or repository, so the backing store can be swapped without touching them.
Exactly one implementation is active per process (see ``factory``).

Appointment operations have a default implementation raising
``FeatureNotSupportedError``: a backend that does not offer them simply does
not override them.
"""
from abc import ABC, abstractmethod
from typing import Optional

from gyneco.database.errors import FeatureNotSupportedError
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


class DatabaseService(ABC):
    """Every record-store operation, grouped by entity family."""

    backend_name = "abstract"

    async def close(self) -> None:
        """Release the backing store. Nothing to do by default."""

    # ==================== PATIENTS ====================

    @abstractmethod
    async def search_patients(self, query: str) -> list[PatientResponse]:
        """Patients whose first name, last name or fiscal code contains ``query``."""

    @abstractmethod
    async def get_patients(self) -> list[PatientResponse]:
        """All patients ordered by last name, then first name."""

    @abstractmethod
    async def get_patient_by_id(self, patient_id: str) -> Optional[PatientResponse]: ...

    @abstractmethod
    async def create_patient(self, data: PatientCreate) -> PatientResponse: ...

    @abstractmethod
    async def update_patient(self, patient_id: str, data: PatientUpdate) -> PatientResponse: ...

    @abstractmethod
    async def delete_patient(self, patient_id: str) -> None:
        """Delete the patient and every record depending on it."""

    # ==================== DELIVERIES ====================

    @abstractmethod
    async def get_deliveries_by_patient(self, patient_id: str) -> list[DeliveryResponse]: ...

    @abstractmethod
    async def get_delivery_by_id(self, delivery_id: str) -> Optional[DeliveryResponse]: ...

    @abstractmethod
    async def create_delivery(self, data: DeliveryCreate) -> DeliveryResponse: ...

    @abstractmethod
    async def update_delivery(self, delivery_id: str, data: DeliveryUpdate) -> DeliveryResponse: ...

    @abstractmethod
    async def delete_delivery(self, delivery_id: str) -> None: ...

    # ==================== REPORTS ====================

    @abstractmethod
    async def get_reports_by_patient(self, patient_id: str) -> list[ReportResponse]: ...

    @abstractmethod
    async def get_report_by_id(self, report_id: str) -> Optional[ReportResponse]: ...

    @abstractmethod
    async def create_report(self, data: ReportCreate) -> ReportResponse:
        """Create a report; its number is assigned here and never changes."""

    @abstractmethod
    async def update_report(self, report_id: str, data: ReportUpdate) -> ReportResponse: ...

    @abstractmethod
    async def delete_report(self, report_id: str) -> None: ...

    @abstractmethod
    async def get_next_report_number(self) -> str:
        """Number the next report would receive, without reserving it."""

    # ==================== INVOICES ====================

    @abstractmethod
    async def get_invoices_by_patient(self, patient_id: str) -> list[InvoiceResponse]: ...

    @abstractmethod
    async def get_invoice_by_id(self, invoice_id: str) -> Optional[InvoiceResponse]: ...

    @abstractmethod
    async def create_invoice(self, data: InvoiceCreate) -> InvoiceResponse: ...

    @abstractmethod
    async def update_invoice(self, invoice_id: str, data: InvoiceUpdate) -> InvoiceResponse: ...

    @abstractmethod
    async def delete_invoice(self, invoice_id: str) -> None: ...

    @abstractmethod
    async def get_next_invoice_number(self) -> str: ...

    # ==================== APPOINTMENTS ====================

    async def get_appointments(
        self, filters: Optional[AppointmentFilters] = None
    ) -> list[AppointmentResponse]:
        raise FeatureNotSupportedError("appointments", self.backend_name)

    async def get_appointment_by_id(self, appointment_id: str) -> Optional[AppointmentResponse]:
        raise FeatureNotSupportedError("appointments", self.backend_name)

    async def get_appointments_by_patient(self, patient_id: str) -> list[AppointmentResponse]:
        raise FeatureNotSupportedError("appointments", self.backend_name)

    async def create_appointment(self, data: AppointmentCreate) -> AppointmentResponse:
        raise FeatureNotSupportedError("appointments", self.backend_name)

    async def update_appointment(
        self, appointment_id: str, data: AppointmentUpdate
    ) -> AppointmentResponse:
        raise FeatureNotSupportedError("appointments", self.backend_name)

    async def delete_appointment(self, appointment_id: str) -> None:
        raise FeatureNotSupportedError("appointments", self.backend_name)

    async def count_today_appointments(self) -> int:
        raise FeatureNotSupportedError("appointments", self.backend_name)

    # ==================== ACTIVITIES ====================

    @abstractmethod
    async def get_activities_by_patient(self, patient_id: str) -> list[ActivityResponse]: ...

    @abstractmethod
    async def create_activity(self, data: ActivityCreate) -> ActivityResponse: ...

    # ==================== ORGANIZATION ====================

    @abstractmethod
    async def get_organization_settings(self) -> OrganizationResponse: ...

    @abstractmethod
    async def update_organization_settings(self, data: OrganizationUpdate) -> OrganizationResponse: ...

# gyneco/database/memory_db_service.py
"""
In-process development stand-in for the record store.

Entities live in dictionaries keyed by id. When a snapshot path is given, the
whole state is loaded from that JSON file on first use and written back after
every mutation, which plays the role local storage had for the browser build.

Rules that SQLite enforces for the persistent store (unique fiscal codes and
numbers, NOT NULL columns, existing owners, cascades) are checked here in
code, under one lock, so both backends answer the same way. Appointments are
not available in this variant.
"""
import asyncio
import logging
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, ValidationError

from gyneco.config.appconfig import Settings, settings as default_settings
from gyneco.database.database_service import DatabaseService
from gyneco.database.errors import (
    ConstraintViolationError,
    OperationFailedError,
    RecordNotFoundError,
    StoreUnavailableError,
)
from gyneco.helpers.time import current_year, utcnow
from gyneco.system_models.activity_model.activity_schemas import ActivityCreate, ActivityResponse
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
from gyneco.system_services.numbering import next_number_from
from gyneco.system_services.repository import new_id

logger = logging.getLogger(__name__)

# Columns declared NOT NULL in the SQL schema
REQUIRED_FIELDS = {
    "Patient": ("first_name", "last_name", "birth_date", "privacy_consent", "marketing_consent"),
    "Delivery": ("delivery_date", "delivery_type"),
    "Report": ("report_date", "visit_type", "patient_snapshot", "examination", "signed"),
    "Invoice": ("invoice_date", "amount", "total_amount", "payment_status"),
    "Organization": ("name",),
}


class MemorySnapshot(BaseModel):
    """Serialized form of the whole memory store."""

    organization: Optional[OrganizationResponse] = None
    patients: list[PatientResponse] = []
    deliveries: list[DeliveryResponse] = []
    reports: list[ReportResponse] = []
    invoices: list[InvoiceResponse] = []
    activities: list[ActivityResponse] = []


def _by_date_desc(records: Iterable, field: str) -> list:
    return sorted(records, key=lambda r: (getattr(r, field), r.created_at), reverse=True)


class MemoryDatabaseService(DatabaseService):
    backend_name = "memory"

    def __init__(self, app_settings: Optional[Settings] = None, snapshot_path: Optional[Path] = None):
        self.settings = app_settings or default_settings
        self.snapshot_path = Path(snapshot_path) if snapshot_path else None
        self._lock = asyncio.Lock()
        self._loaded = False

        self.organization: Optional[OrganizationResponse] = None
        self.patients: dict[str, PatientResponse] = {}
        self.deliveries: dict[str, DeliveryResponse] = {}
        self.reports: dict[str, ReportResponse] = {}
        self.invoices: dict[str, InvoiceResponse] = {}
        self.activities: dict[str, ActivityResponse] = {}

    # ============================================================
    # ✅ STATE HANDLING
    # ============================================================
    @asynccontextmanager
    async def _state(self, mutating: bool = False):
        async with self._lock:
            if not self._loaded:
                await asyncio.to_thread(self._load)
                self._loaded = True
            if not mutating:
                yield
                return

            # Records are replaced, never edited in place, so shallow copies restore the state
            saved = self._tables()
            try:
                yield
                await asyncio.to_thread(self._persist)
            except BaseException:
                self._restore(saved)
                raise

    def _tables(self) -> dict:
        return {
            "organization": self.organization,
            "patients": dict(self.patients),
            "deliveries": dict(self.deliveries),
            "reports": dict(self.reports),
            "invoices": dict(self.invoices),
            "activities": dict(self.activities),
        }

    def _restore(self, saved: dict) -> None:
        for name, value in saved.items():
            setattr(self, name, value)

    def _load(self) -> None:
        if self.snapshot_path and self.snapshot_path.exists():
            try:
                snapshot = MemorySnapshot.model_validate_json(self.snapshot_path.read_text(encoding="utf-8"))
            except (OSError, ValidationError) as e:
                logger.error(f"❌ Cannot read memory snapshot {self.snapshot_path}: {e}")
                raise StoreUnavailableError("Memory snapshot unreadable", cause=e) from e

            self.organization = snapshot.organization
            self.patients = {p.id: p for p in snapshot.patients}
            self.deliveries = {d.id: d for d in snapshot.deliveries}
            self.reports = {r.id: r for r in snapshot.reports}
            self.invoices = {i.id: i for i in snapshot.invoices}
            self.activities = {a.id: a for a in snapshot.activities}
            logger.info(f"✅ Memory store loaded from {self.snapshot_path} ({len(self.patients)} patients)")

        if self.organization is None:
            now = utcnow()
            self.organization = OrganizationResponse(
                id=self.settings.DEFAULT_ORGANIZATION_ID,
                name=self.settings.DEFAULT_ORGANIZATION_NAME,
                doctor_name=self.settings.DEFAULT_DOCTOR_NAME,
                doctor_title=self.settings.DEFAULT_DOCTOR_TITLE,
                created_at=now,
                updated_at=now,
            )
            logger.info("✅ Default organization created (memory store)")

    def _persist(self) -> None:
        # Runs in a worker thread while the lock is held
        if self.snapshot_path is None:
            return
        snapshot = MemorySnapshot(
            organization=self.organization,
            patients=list(self.patients.values()),
            deliveries=list(self.deliveries.values()),
            reports=list(self.reports.values()),
            invoices=list(self.invoices.values()),
            activities=list(self.activities.values()),
        )
        try:
            self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.snapshot_path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(snapshot.model_dump_json(indent=2))
            os.replace(tmp, self.snapshot_path)
        except OSError as e:
            logger.error(f"❌ Cannot write memory snapshot {self.snapshot_path}: {e}", exc_info=True)
            raise OperationFailedError("Memory snapshot write failed", cause=e) from e

    # ============================================================
    # ✅ RULE CHECKS
    # ============================================================
    @staticmethod
    def _check_required(entity: str, values: dict) -> None:
        for field in REQUIRED_FIELDS.get(entity, ()):
            if field in values and values[field] is None:
                raise ConstraintViolationError(f"{entity}.{field} cannot be null")

    def _check_patient_exists(self, patient_id: str) -> None:
        if patient_id not in self.patients:
            raise ConstraintViolationError(f"Unknown patient: {patient_id}")

    def _check_fiscal_code(self, fiscal_code: Optional[str], patient_id: Optional[str] = None) -> None:
        if fiscal_code is None:
            return
        for other in self.patients.values():
            if other.fiscal_code == fiscal_code and other.id != patient_id:
                raise ConstraintViolationError(f"Fiscal code already registered: {fiscal_code}")

    @staticmethod
    def _apply(record, changes: dict):
        return record.model_copy(update={**changes, "updated_at": utcnow()})

    @staticmethod
    def _copy(record):
        return record.model_copy(deep=True) if record is not None else None

    def _org_id(self, org_id: Optional[str]) -> str:
        return org_id or self.settings.DEFAULT_ORGANIZATION_ID

    # ==================== PATIENTS ====================
    async def search_patients(self, query: str) -> list[PatientResponse]:
        term = query.lower()
        async with self._state():
            matches = [
                p for p in self.patients.values()
                if term in p.first_name.lower()
                or term in p.last_name.lower()
                or (p.fiscal_code and term in p.fiscal_code.lower())
            ]
            return [self._copy(p) for p in self._sorted_patients(matches)]

    async def get_patients(self) -> list[PatientResponse]:
        async with self._state():
            return [self._copy(p) for p in self._sorted_patients(self.patients.values())]

    @staticmethod
    def _sorted_patients(patients: Iterable[PatientResponse]) -> list[PatientResponse]:
        return sorted(patients, key=lambda p: (p.last_name.lower(), p.first_name.lower(), p.id))

    async def get_patient_by_id(self, patient_id: str) -> Optional[PatientResponse]:
        async with self._state():
            return self._copy(self.patients.get(patient_id))

    async def create_patient(self, data: PatientCreate) -> PatientResponse:
        values = data.model_dump(exclude={"org_id"})
        if values.get("country") is None:
            values["country"] = "Italia"
        async with self._state(mutating=True):
            self._check_fiscal_code(data.fiscal_code)
            now = utcnow()
            patient = PatientResponse(
                id=new_id(), org_id=self._org_id(data.org_id), **values, created_at=now, updated_at=now
            )
            self.patients[patient.id] = patient
        logger.info(f"✅ Patient created: {patient.id}")
        return self._copy(patient)

    async def update_patient(self, patient_id: str, data: PatientUpdate) -> PatientResponse:
        changes = data.model_dump(exclude_unset=True)
        async with self._state(mutating=True):
            current = self.patients.get(patient_id)
            if current is None:
                raise RecordNotFoundError("Patient", patient_id)
            self._check_required("Patient", changes)
            if "fiscal_code" in changes:
                self._check_fiscal_code(changes["fiscal_code"], patient_id)
            self.patients[patient_id] = self._apply(current, changes)
            return self._copy(self.patients[patient_id])

    async def delete_patient(self, patient_id: str) -> None:
        async with self._state(mutating=True):
            if self.patients.pop(patient_id, None) is None:
                raise RecordNotFoundError("Patient", patient_id)
            # No foreign keys here: cascade by hand
            for table in (self.deliveries, self.reports, self.invoices, self.activities):
                for record_id in [k for k, v in table.items() if v.patient_id == patient_id]:
                    del table[record_id]
        logger.info(f"🗑️ Patient deleted with dependent records: {patient_id}")

    # ==================== DELIVERIES ====================
    async def get_deliveries_by_patient(self, patient_id: str) -> list[DeliveryResponse]:
        async with self._state():
            rows = [d for d in self.deliveries.values() if d.patient_id == patient_id]
            return [self._copy(d) for d in _by_date_desc(rows, "delivery_date")]

    async def get_delivery_by_id(self, delivery_id: str) -> Optional[DeliveryResponse]:
        async with self._state():
            return self._copy(self.deliveries.get(delivery_id))

    async def create_delivery(self, data: DeliveryCreate) -> DeliveryResponse:
        async with self._state(mutating=True):
            self._check_patient_exists(data.patient_id)
            now = utcnow()
            delivery = DeliveryResponse(
                id=new_id(),
                org_id=self._org_id(data.org_id),
                **data.model_dump(exclude={"org_id"}),
                created_at=now,
                updated_at=now,
            )
            self.deliveries[delivery.id] = delivery
        return self._copy(delivery)

    async def update_delivery(self, delivery_id: str, data: DeliveryUpdate) -> DeliveryResponse:
        changes = data.model_dump(exclude_unset=True)
        async with self._state(mutating=True):
            current = self.deliveries.get(delivery_id)
            if current is None:
                raise RecordNotFoundError("Delivery", delivery_id)
            self._check_required("Delivery", changes)
            self.deliveries[delivery_id] = self._apply(current, changes)
            return self._copy(self.deliveries[delivery_id])

    async def delete_delivery(self, delivery_id: str) -> None:
        async with self._state(mutating=True):
            if self.deliveries.pop(delivery_id, None) is None:
                raise RecordNotFoundError("Delivery", delivery_id)

    # ==================== REPORTS ====================
    async def get_reports_by_patient(self, patient_id: str) -> list[ReportResponse]:
        async with self._state():
            rows = [r for r in self.reports.values() if r.patient_id == patient_id]
            return [self._copy(r) for r in _by_date_desc(rows, "report_date")]

    async def get_report_by_id(self, report_id: str) -> Optional[ReportResponse]:
        async with self._state():
            return self._copy(self.reports.get(report_id))

    def _next_report_number(self) -> str:
        return next_number_from(
            self.settings.REPORT_NUMBER_PREFIX,
            current_year(),
            (r.report_number for r in self.reports.values()),
        )

    async def get_next_report_number(self) -> str:
        async with self._state():
            return self._next_report_number()

    async def create_report(self, data: ReportCreate) -> ReportResponse:
        async with self._state(mutating=True):
            self._check_patient_exists(data.patient_id)
            number = self._next_report_number()
            if any(r.report_number == number for r in self.reports.values()):
                raise ConstraintViolationError(f"Report number already issued: {number}")
            now = utcnow()
            report = ReportResponse(
                id=new_id(),
                org_id=self._org_id(data.org_id),
                report_number=number,
                signed=False,
                **data.model_dump(exclude={"org_id", "patient_snapshot"}),
                patient_snapshot=data.patient_snapshot,
                created_at=now,
                updated_at=now,
            )
            self.reports[report.id] = report
        logger.info(f"✅ Report {number} created (patient {report.patient_id})")
        return self._copy(report)

    async def update_report(self, report_id: str, data: ReportUpdate) -> ReportResponse:
        changes = {field: getattr(data, field) for field in data.model_fields_set}
        async with self._state(mutating=True):
            current = self.reports.get(report_id)
            if current is None:
                raise RecordNotFoundError("Report", report_id)
            self._check_required("Report", changes)
            self.reports[report_id] = self._apply(current, changes)
            return self._copy(self.reports[report_id])

    async def delete_report(self, report_id: str) -> None:
        async with self._state(mutating=True):
            if self.reports.pop(report_id, None) is None:
                raise RecordNotFoundError("Report", report_id)

    # ==================== INVOICES ====================
    async def get_invoices_by_patient(self, patient_id: str) -> list[InvoiceResponse]:
        async with self._state():
            rows = [i for i in self.invoices.values() if i.patient_id == patient_id]
            return [self._copy(i) for i in _by_date_desc(rows, "invoice_date")]

    async def get_invoice_by_id(self, invoice_id: str) -> Optional[InvoiceResponse]:
        async with self._state():
            return self._copy(self.invoices.get(invoice_id))

    def _next_invoice_number(self) -> str:
        return next_number_from(
            self.settings.INVOICE_NUMBER_PREFIX,
            current_year(),
            (i.invoice_number for i in self.invoices.values()),
        )

    async def get_next_invoice_number(self) -> str:
        async with self._state():
            return self._next_invoice_number()

    async def create_invoice(self, data: InvoiceCreate) -> InvoiceResponse:
        async with self._state(mutating=True):
            self._check_patient_exists(data.patient_id)
            number = self._next_invoice_number()
            if any(i.invoice_number == number for i in self.invoices.values()):
                raise ConstraintViolationError(f"Invoice number already issued: {number}")
            now = utcnow()
            invoice = InvoiceResponse(
                id=new_id(),
                org_id=self._org_id(data.org_id),
                invoice_number=number,
                **data.model_dump(exclude={"org_id", "items"}),
                items=data.items,
                created_at=now,
                updated_at=now,
            )
            self.invoices[invoice.id] = invoice
        logger.info(f"✅ Invoice {number} created (patient {invoice.patient_id})")
        return self._copy(invoice)

    async def update_invoice(self, invoice_id: str, data: InvoiceUpdate) -> InvoiceResponse:
        changes = {field: getattr(data, field) for field in data.model_fields_set}
        async with self._state(mutating=True):
            current = self.invoices.get(invoice_id)
            if current is None:
                raise RecordNotFoundError("Invoice", invoice_id)
            self._check_required("Invoice", changes)
            self.invoices[invoice_id] = self._apply(current, changes)
            return self._copy(self.invoices[invoice_id])

    async def delete_invoice(self, invoice_id: str) -> None:
        async with self._state(mutating=True):
            if self.invoices.pop(invoice_id, None) is None:
                raise RecordNotFoundError("Invoice", invoice_id)

    # ==================== ACTIVITIES ====================
    async def get_activities_by_patient(self, patient_id: str) -> list[ActivityResponse]:
        async with self._state():
            rows = [a for a in self.activities.values() if a.patient_id == patient_id]
            return [self._copy(a) for a in _by_date_desc(rows, "activity_date")]

    async def create_activity(self, data: ActivityCreate) -> ActivityResponse:
        async with self._state(mutating=True):
            self._check_patient_exists(data.patient_id)
            activity = ActivityResponse(id=new_id(), **data.model_dump(), created_at=utcnow())
            self.activities[activity.id] = activity
        return self._copy(activity)

    # ==================== ORGANIZATION ====================
    async def get_organization_settings(self) -> OrganizationResponse:
        async with self._state():
            return self._copy(self.organization)

    async def update_organization_settings(self, data: OrganizationUpdate) -> OrganizationResponse:
        changes = data.model_dump(exclude_unset=True)
        async with self._state(mutating=True):
            self._check_required("Organization", changes)
            self.organization = self._apply(self.organization, changes)
            return self._copy(self.organization)

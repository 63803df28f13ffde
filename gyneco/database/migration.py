# gyneco/database/migration.py
"""
One-shot copy of every patient record from one store to another.

Used to move the data kept by the memory store (and its JSON snapshot) into
the SQLite store. The target assigns new ids and new report/invoice numbers;
patient ids are remapped so deliveries, reports and invoices follow their
owner. A patient that cannot be copied is logged and skipped together with
everything depending on it; the run continues with the next one.

Patients go first, then each dependent kind across all patients. Reports and
invoices are created oldest first, so the numbers the target issues follow
the order of their dates.
"""
import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from gyneco.database.database_service import DatabaseService
from gyneco.database.errors import RecordStoreError
from gyneco.system_models.delivery_model.delivery_schemas import DeliveryCreate
from gyneco.system_models.invoice_model.invoice_schemas import InvoiceCreate
from gyneco.system_models.patient_model.patient_schemas import PatientCreate
from gyneco.system_models.report_model.report_schemas import ReportCreate, ReportUpdate

logger = logging.getLogger(__name__)

# Fields owned by the store that must not be copied verbatim
STORE_FIELDS = {"id", "org_id", "created_at", "updated_at"}


@dataclass
class MigrationSummary:
    patients: int = 0
    deliveries: int = 0
    reports: int = 0
    invoices: int = 0
    failures: list[str] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)


def _payload(record, exclude: set = frozenset()) -> dict:
    return record.model_dump(exclude=STORE_FIELDS | set(exclude))


async def migrate(source: DatabaseService, target: DatabaseService) -> MigrationSummary:
    summary = MigrationSummary()
    patients = await source.get_patients()
    logger.info(f"🔄 Migrating {len(patients)} patients from {source.backend_name} to {target.backend_name}")

    # old patient id -> new patient id
    patient_ids: dict[str, str] = {}
    for patient in patients:
        try:
            created = await target.create_patient(PatientCreate(**_payload(patient)))
        except (RecordStoreError, ValidationError) as e:
            logger.error(f"❌ Patient {patient.id} not migrated, dependents skipped: {e}")
            summary.failures.append(f"patient:{patient.id}")
            continue
        patient_ids[patient.id] = created.id
        summary.patients += 1

    await _migrate_deliveries(source, target, patient_ids, summary)
    await _migrate_reports(source, target, patient_ids, summary)
    await _migrate_invoices(source, target, patient_ids, summary)

    logger.info(
        f"✅ Migration done: {summary.patients} patients, {summary.deliveries} deliveries, "
        f"{summary.reports} reports, {summary.invoices} invoices, {summary.failed} failures"
    )
    return summary


async def _migrate_deliveries(source, target, patient_ids: dict[str, str], summary: MigrationSummary) -> None:
    for old_id, new_id in patient_ids.items():
        for delivery in await source.get_deliveries_by_patient(old_id):
            try:
                await target.create_delivery(
                    DeliveryCreate(**_payload(delivery, {"patient_id"}), patient_id=new_id)
                )
                summary.deliveries += 1
            except (RecordStoreError, ValidationError) as e:
                logger.error(f"❌ Delivery {delivery.id} not migrated: {e}")
                summary.failures.append(f"delivery:{delivery.id}")


async def _migrate_reports(source, target, patient_ids: dict[str, str], summary: MigrationSummary) -> None:
    reports = [r for old_id in patient_ids for r in await source.get_reports_by_patient(old_id)]
    reports.sort(key=lambda r: (r.report_date, r.created_at))

    for report in reports:
        try:
            created = await target.create_report(
                ReportCreate(
                    **_payload(report, {"patient_id", "report_number", "signed"}),
                    patient_id=patient_ids[report.patient_id],
                )
            )
            if report.signed:
                await target.update_report(created.id, ReportUpdate(signed=True))
            summary.reports += 1
        except (RecordStoreError, ValidationError) as e:
            logger.error(f"❌ Report {report.report_number} not migrated: {e}")
            summary.failures.append(f"report:{report.id}")


async def _migrate_invoices(source, target, patient_ids: dict[str, str], summary: MigrationSummary) -> None:
    invoices = [i for old_id in patient_ids for i in await source.get_invoices_by_patient(old_id)]
    invoices.sort(key=lambda i: (i.invoice_date, i.created_at))

    for invoice in invoices:
        try:
            await target.create_invoice(
                InvoiceCreate(
                    **_payload(invoice, {"patient_id", "invoice_number"}),
                    patient_id=patient_ids[invoice.patient_id],
                )
            )
            summary.invoices += 1
        except (RecordStoreError, ValidationError) as e:
            logger.error(f"❌ Invoice {invoice.invoice_number} not migrated: {e}")
            summary.failures.append(f"invoice:{invoice.id}")

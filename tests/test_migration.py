from datetime import date, datetime, timezone

from gyneco.database.migration import migrate
from gyneco.helpers.time import current_year
from gyneco.system_models.report_model.report_schemas import ReportUpdate


def at(year, month, day):
    return datetime(year, month, day, 10, 0, tzinfo=timezone.utc)


async def test_migrate_memory_store_into_sqlite(
    memory_db, sql_db, new_patient, new_delivery, new_report, new_invoice
):
    year = current_year()
    giulia = await new_patient(memory_db, fiscal_code="RSSGLI88C54H501X")
    sara = await new_patient(memory_db, first_name="Sara", last_name="Bianchi")
    await new_delivery(memory_db, giulia.id)
    report = await new_report(memory_db, giulia)
    await memory_db.update_report(report.id, ReportUpdate(signed=True))
    await new_invoice(memory_db, giulia.id, total_amount=150.0)

    summary = await migrate(memory_db, sql_db)

    assert (summary.patients, summary.deliveries, summary.reports, summary.invoices) == (2, 1, 1, 1)
    assert summary.failed == 0

    migrated = {p.last_name: p for p in await sql_db.get_patients()}
    assert set(migrated) == {"Rossi", "Bianchi"}
    target = migrated["Rossi"]
    assert target.id != giulia.id
    assert target.fiscal_code == giulia.fiscal_code
    assert migrated["Bianchi"].first_name == sara.first_name

    [delivery] = await sql_db.get_deliveries_by_patient(target.id)
    assert delivery.pregnancy_weeks == 39
    [migrated_report] = await sql_db.get_reports_by_patient(target.id)
    assert migrated_report.signed is True
    assert migrated_report.report_number == f"REF-{year}-0001"
    assert migrated_report.patient_snapshot == report.patient_snapshot
    [invoice] = await sql_db.get_invoices_by_patient(target.id)
    assert invoice.total_amount == 150.0


async def test_patient_that_fails_is_skipped_with_dependents(
    memory_db, sql_db, new_patient, new_delivery
):
    await new_patient(sql_db, fiscal_code="RSSGLI88C54H501X")
    clash = await new_patient(memory_db, fiscal_code="RSSGLI88C54H501X")
    await new_delivery(memory_db, clash.id)
    await new_patient(memory_db, first_name="Sara", last_name="Bianchi")

    summary = await migrate(memory_db, sql_db)

    assert summary.patients == 1
    assert summary.deliveries == 0
    assert summary.failures == [f"patient:{clash.id}"]
    assert len(await sql_db.get_patients()) == 2


async def test_numbers_follow_record_dates_across_patients(
    memory_db, sql_db, new_patient, new_report, new_invoice
):
    year = current_year()
    giulia = await new_patient(memory_db, fiscal_code="RSSGLI88C54H501X")
    sara = await new_patient(memory_db, first_name="Sara", last_name="Bianchi")
    # Issued out of date order in the source store
    await new_report(memory_db, giulia, report_date=at(2025, 3, 5), visit_type="Controllo")
    await new_report(memory_db, sara, report_date=at(2025, 2, 5), visit_type="Ecografia")
    await new_report(memory_db, giulia, report_date=at(2025, 1, 5))
    await new_invoice(memory_db, giulia.id, invoice_date=date(2025, 3, 5), total_amount=300.0)
    await new_invoice(memory_db, sara.id, invoice_date=date(2025, 1, 5), total_amount=100.0)

    summary = await migrate(memory_db, sql_db)

    assert (summary.reports, summary.invoices, summary.failed) == (3, 2, 0)
    migrated = {p.last_name: p.id for p in await sql_db.get_patients()}
    reports = [
        r for patient_id in migrated.values() for r in await sql_db.get_reports_by_patient(patient_id)
    ]
    by_number = sorted(reports, key=lambda r: r.report_number)
    assert [r.report_number for r in by_number] == [f"REF-{year}-000{n}" for n in (1, 2, 3)]
    assert [r.report_date.month for r in by_number] == [1, 2, 3]
    assert [r.visit_type for r in await sql_db.get_reports_by_patient(migrated["Rossi"])] == [
        "Controllo",
        "Visita ginecologica",
    ]

    [late_invoice] = await sql_db.get_invoices_by_patient(migrated["Rossi"])
    [early_invoice] = await sql_db.get_invoices_by_patient(migrated["Bianchi"])
    assert early_invoice.invoice_number == f"INV-{year}-0001"
    assert late_invoice.invoice_number == f"INV-{year}-0002"
    assert late_invoice.total_amount == 300.0

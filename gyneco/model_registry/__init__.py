# gyneco/model_registry/__init__.py


# Register all models here so Base.metadata knows every table

from gyneco.system_models.organization_model.organization_model import Organization
from gyneco.system_models.patient_model.patient_model import Patient
from gyneco.system_models.delivery_model.delivery_model import Delivery
from gyneco.system_models.report_model.report_model import Report
from gyneco.system_models.invoice_model.invoice_model import Invoice
from gyneco.system_models.appointment_model.appointment_model import Appointment
from gyneco.system_models.activity_model.activity_model import Activity

__all__ = [
    "Organization",
    "Patient",
    "Delivery",
    "Report",
    "Invoice",
    "Appointment",
    "Activity",
]

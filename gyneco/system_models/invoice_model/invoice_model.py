# gyneco/system_models/invoice_model/invoice_model.py
from sqlalchemy import JSON, Column, Date, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship
from gyneco.database.connection import Base, IsoDateTime
from gyneco.helpers.time import utcnow

class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(String, primary_key=True)
    patient_id = Column(String, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False)
    org_id = Column(String, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)

    invoice_number = Column(String, nullable=False, unique=True)
    invoice_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)

    amount = Column(Float, nullable=False)
    vat_rate = Column(Float, nullable=True)
    vat_amount = Column(Float, nullable=True)
    total_amount = Column(Float, nullable=False)

    payment_method = Column(String, nullable=True)
    payment_status = Column(String, nullable=False)
    payment_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    items = Column(JSON, nullable=True)

    created_at = Column(IsoDateTime, nullable=False, default=utcnow)
    updated_at = Column(IsoDateTime, nullable=False, default=utcnow)

    patient = relationship("Patient", back_populates="invoices")

    def __repr__(self):
        return f"<Invoice {self.invoice_number}>"


Index("idx_invoices_patient", Invoice.patient_id, Invoice.invoice_date.desc())

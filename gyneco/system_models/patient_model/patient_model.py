# gyneco/system_models/patient_model/patient_model.py
from sqlalchemy import Boolean, Column, Date, ForeignKey, Index, Integer, String, Text, false
from sqlalchemy.orm import relationship
from gyneco.database.connection import Base, IsoDateTime
from gyneco.helpers.time import utcnow

class Patient(Base):
    __tablename__ = "patients"

    id = Column(String, primary_key=True)
    org_id = Column(String, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)

    # Personal data
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    birth_date = Column(Date, nullable=False)
    birth_place = Column(String, nullable=True)
    fiscal_code = Column(String, nullable=True, unique=True)
    phone = Column(String, nullable=True)
    mobile = Column(String, nullable=True)
    email = Column(String, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
    province = Column(String, nullable=True)
    country = Column(String, nullable=True, default="Italia", server_default="Italia")

    # Medical history
    blood_type = Column(String, nullable=True)
    allergies = Column(Text, nullable=True)
    current_medications = Column(Text, nullable=True)
    medical_notes = Column(Text, nullable=True)
    family_medical_history = Column(Text, nullable=True)

    # Gynecological history
    first_menstruation_age = Column(Integer, nullable=True)
    menstrual_cycle_days = Column(Integer, nullable=True)
    last_menstruation_date = Column(Date, nullable=True)
    contraception_method = Column(String, nullable=True)
    pap_test_last_date = Column(Date, nullable=True)
    mammography_last_date = Column(Date, nullable=True)

    # Consents
    privacy_consent = Column(Boolean, nullable=False, default=False, server_default=false())
    marketing_consent = Column(Boolean, nullable=False, default=False, server_default=false())

    created_at = Column(IsoDateTime, nullable=False, default=utcnow)
    updated_at = Column(IsoDateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_patients_names", "last_name", "first_name"),
        Index("idx_patients_fiscal", "fiscal_code"),
    )

    organization = relationship("Organization", back_populates="patients")
    deliveries = relationship("Delivery", back_populates="patient", passive_deletes=True)
    reports = relationship("Report", back_populates="patient", passive_deletes=True)
    invoices = relationship("Invoice", back_populates="patient", passive_deletes=True)
    appointments = relationship("Appointment", back_populates="patient", passive_deletes=True)
    activities = relationship("Activity", back_populates="patient", passive_deletes=True)

    def __repr__(self):
        return f"<Patient {self.id}: {self.first_name} {self.last_name}>"

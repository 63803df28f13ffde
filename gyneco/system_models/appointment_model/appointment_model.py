# gyneco/system_models/appointment_model/appointment_model.py
from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, Text, false
from sqlalchemy.orm import relationship
from gyneco.database.connection import Base, IsoDateTime
from gyneco.helpers.time import utcnow

class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String, primary_key=True)
    patient_id = Column(String, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False)
    org_id = Column(String, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)

    appointment_date = Column(IsoDateTime, nullable=False, index=True)
    duration = Column(Integer, nullable=False, default=30, server_default="30")
    appointment_type = Column(String, nullable=True)
    status = Column(String, nullable=False, default="scheduled", index=True)
    notes = Column(Text, nullable=True)
    reminder_sent = Column(Boolean, nullable=False, default=False, server_default=false())
    created_by = Column(String, nullable=True)

    created_at = Column(IsoDateTime, nullable=False, default=utcnow)
    updated_at = Column(IsoDateTime, nullable=False, default=utcnow)

    patient = relationship("Patient", back_populates="appointments")


Index("idx_appointments_patient", Appointment.patient_id, Appointment.appointment_date.desc())

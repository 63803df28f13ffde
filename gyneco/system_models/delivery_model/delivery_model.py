# gyneco/system_models/delivery_model/delivery_model.py
from sqlalchemy import Column, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from gyneco.database.connection import Base, IsoDateTime
from gyneco.helpers.time import utcnow

class Delivery(Base):
    __tablename__ = "deliveries"

    id = Column(String, primary_key=True)
    patient_id = Column(String, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False)
    org_id = Column(String, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)

    delivery_date = Column(IsoDateTime, nullable=False)
    delivery_type = Column(String, nullable=False)
    pregnancy_weeks = Column(Integer, nullable=True)
    baby_weight = Column(Float, nullable=True)
    baby_gender = Column(String, nullable=True)
    complications = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(IsoDateTime, nullable=False, default=utcnow)
    updated_at = Column(IsoDateTime, nullable=False, default=utcnow)

    patient = relationship("Patient", back_populates="deliveries")


Index("idx_deliveries_patient", Delivery.patient_id, Delivery.delivery_date.desc())

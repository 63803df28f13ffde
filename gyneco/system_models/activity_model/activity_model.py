# gyneco/system_models/activity_model/activity_model.py
from sqlalchemy import Column, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship
from gyneco.database.connection import Base, IsoDateTime
from gyneco.helpers.time import utcnow

class Activity(Base):
    """Append-only timeline entry; there is no updated_at."""

    __tablename__ = "activities"

    id = Column(String, primary_key=True)
    patient_id = Column(String, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False)

    activity_type = Column(String, nullable=False)
    activity_date = Column(IsoDateTime, nullable=False)
    description = Column(Text, nullable=False)
    reference_id = Column(String, nullable=True)
    reference_type = Column(String, nullable=True)
    created_by = Column(String, nullable=True)

    created_at = Column(IsoDateTime, nullable=False, default=utcnow)

    patient = relationship("Patient", back_populates="activities")


Index("idx_activities_patient", Activity.patient_id, Activity.activity_date.desc())

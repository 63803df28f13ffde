# gyneco/system_models/report_model/report_model.py
from sqlalchemy import JSON, Boolean, Column, ForeignKey, Index, String, Text, false
from sqlalchemy.orm import relationship
from gyneco.database.connection import Base, IsoDateTime
from gyneco.helpers.time import utcnow

class Report(Base):
    __tablename__ = "reports"

    id = Column(String, primary_key=True)
    patient_id = Column(String, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False)
    org_id = Column(String, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)

    report_date = Column(IsoDateTime, nullable=False)
    visit_type = Column(String, nullable=False)
    report_number = Column(String, nullable=False, unique=True)

    # Frozen copy of the patient at the time of the visit
    patient_snapshot = Column(JSON(none_as_null=True), nullable=False)

    examination = Column(Text, nullable=False)
    ultrasound_result = Column(Text, nullable=True)
    therapy = Column(Text, nullable=True)
    attachments = Column(JSON, nullable=True)
    internal_notes = Column(Text, nullable=True)
    doctor_name = Column(String, nullable=True)
    doctor_title = Column(String, nullable=True)
    signed = Column(Boolean, nullable=False, default=False, server_default=false())
    created_by = Column(String, nullable=True)

    created_at = Column(IsoDateTime, nullable=False, default=utcnow)
    updated_at = Column(IsoDateTime, nullable=False, default=utcnow)

    patient = relationship("Patient", back_populates="reports")

    def __repr__(self):
        return f"<Report {self.report_number}>"


Index("idx_reports_patient", Report.patient_id, Report.report_date.desc())

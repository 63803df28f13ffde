# gyneco/system_models/organization_model/organization_model.py
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from gyneco.database.connection import Base, IsoDateTime
from gyneco.helpers.time import utcnow

class Organization(Base):
    __tablename__ = "organizations"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    vat_number = Column(String, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
    province = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)

    doctor_name = Column(String, nullable=True)
    doctor_title = Column(String, nullable=True)
    doctor_signature_path = Column(String, nullable=True)

    created_at = Column(IsoDateTime, nullable=False, default=utcnow)
    updated_at = Column(IsoDateTime, nullable=False, default=utcnow)

    patients = relationship("Patient", back_populates="organization", passive_deletes=True)

    def __repr__(self):
        return f"<Organization(id={self.id}, name='{self.name}')>"

# eteeap/models/application.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from eteeap.database import Base

class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)

    # SECTION A: Applicant Information
    program_name = Column(String(255), nullable=True)
    full_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    marital_status = Column(String(50), nullable=True)
    is_business_owner = Column(Boolean, nullable=True, default=False)
    business_name = Column(String(255), nullable=True)

    # SECTION B: Documents (stored file paths)
    letter_of_intent = Column(String(500), nullable=True)
    resume = Column(String(500), nullable=True)
    picture = Column(String(500), nullable=True)
    application_form = Column(String(500), nullable=True)
    recommendation_letter = Column(String(500), nullable=True)
    school_credentials = Column(String(500), nullable=True)
    high_school_diploma = Column(String(500), nullable=True)
    transcript = Column(String(500), nullable=True)
    birth_certificate = Column(String(500), nullable=True)
    employment_certificate = Column(String(500), nullable=True)
    nbi_clearance = Column(String(500), nullable=True)
    marriage_certificate = Column(String(500), nullable=True)
    business_registration = Column(String(500), nullable=True)
    certificates = Column(String(500), nullable=True)

    # SECTION C: Per-document review (only some deployments carry these)
    resume_status = Column(String(20), nullable=True)
    resume_remark = Column(Text, nullable=True)

    # SECTION D: Meta Information
    status = Column(String(20), nullable=False, default="Pending")
    is_draft = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="applications")

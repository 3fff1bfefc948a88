from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from datetime import datetime

from eteeap.database import Base

class VerifiedFile(Base):
    __tablename__ = "verified_files"
    __table_args__ = (
        UniqueConstraint("application_id", "file_key", name="uq_verified_application_file"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    file_key = Column(String(100), nullable=False)
    verified_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    verified_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<VerifiedFile application={self.application_id} key={self.file_key}>"

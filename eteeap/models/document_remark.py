from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from datetime import datetime

from eteeap.database import Base

class DocumentRemark(Base):
    __tablename__ = "document_remarks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    document_name = Column(String(100), nullable=False)
    remark = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint
from datetime import datetime

from eteeap.database import Base

class NotificationRead(Base):
    __tablename__ = "notification_reads"
    __table_args__ = (
        UniqueConstraint("user_id", "notification_key", name="uq_user_notification"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False)
    notification_key = Column(String(255), nullable=False)
    read_at = Column(DateTime, default=datetime.utcnow, nullable=False)

# eteeap/models/user.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime

from eteeap.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    fullname = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=True)  # NULL for federated-only accounts
    role = Column(String(20), nullable=False, default="user")
    google_id = Column(String(255), nullable=True, unique=True)
    profile_picture = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    applications = relationship("Application", back_populates="user", passive_deletes=True)

    def __repr__(self):
        return f"<User id={self.id} email={self.email} role={self.role}>"

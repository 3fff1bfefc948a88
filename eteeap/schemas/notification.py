from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class NotificationOut(BaseModel):
    id: int
    application_id: int
    document_name: Optional[str] = None
    title: str
    message: Optional[str] = None
    date: datetime
    ts: int
    type: str
    notification_key: str
    read: bool = False


class MarkReadRequest(BaseModel):
    notification_key: Optional[str] = None

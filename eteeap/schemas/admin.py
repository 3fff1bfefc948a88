from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional, List


class ApplicationStatusUpdate(BaseModel):
    status: Optional[str] = None

    model_config = ConfigDict(title="ApplicationStatusUpdate")


class DocumentStatusUpdate(BaseModel):
    status: Optional[str] = None
    remark: Optional[str] = None

    model_config = ConfigDict(title="DocumentStatusUpdate")


class VerifyFileRequest(BaseModel):
    # None means the caller sent no flag at all
    verified: Optional[int] = None


class RemarkCreate(BaseModel):
    remark: str


class RemarkOut(BaseModel):
    remark: str = ""
    created_at: Optional[datetime] = None


class ActivityLogOut(BaseModel):
    id: int
    date: str
    user: str
    role: Optional[str] = None
    action: str
    details: Optional[str] = None


class SupportedStatusKeys(BaseModel):
    supported: List[str]

# eteeap/utils/live_schema.py
"""
Access to the `applications` table as it exists in the connected database.

Deployments differ in which `<document>_status` / `<document>_remark`
columns they carry, so anything that reads or writes those goes through a
reflected table instead of the ORM model.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import MetaData, Table, select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from eteeap.utils.documents import DOCUMENT_KEYS

APPLICATIONS_TABLE = "applications"
MYSQL_BAD_FIELD_ERROR = 1054


def live_applications_table(db: Session) -> Table:
    return Table(APPLICATIONS_TABLE, MetaData(), autoload_with=db.connection())


def status_column(document_name: str) -> str:
    return f"{document_name}_status"


def remark_column(document_name: str) -> str:
    return f"{document_name}_remark"


def supported_status_keys(table: Table) -> List[str]:
    """Known document keys whose status column exists in `table`."""
    return [key for key in DOCUMENT_KEYS if status_column(key) in table.c]


def fetch_application_row(db: Session, application_id: int, table: Optional[Table] = None) -> Optional[Dict[str, Any]]:
    table = table if table is not None else live_applications_table(db)
    row = db.execute(select(table).where(table.c.id == application_id)).mappings().first()
    return dict(row) if row else None


def fetch_application_rows(db: Session, include_drafts: bool = False) -> List[Dict[str, Any]]:
    table = live_applications_table(db)
    query = select(table).order_by(table.c.created_at.desc(), table.c.id.desc())
    if not include_drafts and "is_draft" in table.c:
        query = query.where(table.c.is_draft.is_(False))
    return [dict(row) for row in db.execute(query).mappings().all()]


def is_unknown_column_error(exc: DBAPIError) -> bool:
    orig = getattr(exc, "orig", None)
    args = getattr(orig, "args", ())
    if args and args[0] == MYSQL_BAD_FIELD_ERROR:
        return True
    message = str(orig if orig is not None else exc).lower()
    return "unknown column" in message or "no such column" in message

#!/usr/bin/env python3
"""
Create the built-in administrator account if it does not exist yet.
Credentials come from ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_FULLNAME.

Run with: python scripts/create_admin.py
"""
import logging
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from eteeap.config import settings
from eteeap.database import Base, SessionLocal, engine
from eteeap import models  # noqa: F401
from eteeap.services.auth_service import ensure_builtin_admin


def main() -> int:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if ensure_builtin_admin(db):
            print(f"Admin account created: {settings.ADMIN_EMAIL}")
        else:
            print("Admin already exists.")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())

#!/usr/bin/env python3
"""
Delete every non-admin account together with its applications, remarks,
verified files, notification read markers and activity logs.

Run with: python scripts/delete_non_admin_users.py

Lists the accounts and related row counts first and only proceeds after
YES is typed at the prompt. All deletes run in one transaction.
"""
import logging
import os
import sys
from typing import Callable, Optional

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eteeap.database import SessionLocal
from eteeap.models.user import User
from eteeap.services.account_service import delete_users_cascade, related_row_counts

logger = logging.getLogger(__name__)

CONFIRMATION = "YES"


def main(ask: Callable[[str], str] = input, db: Optional[Session] = None) -> int:
    owns_session = db is None
    db = db or SessionLocal()
    try:
        users = db.query(User).filter(User.role != "admin").order_by(User.id).all()
        if not users:
            print("No non-admin users found. Nothing to do.")
            return 0

        print("Non-admin users to be removed:")
        for user in users:
            print(f" - {user.id}: {user.fullname} <{user.email}> (role={user.role})")

        user_ids = [user.id for user in users]
        counts = related_row_counts(db, user_ids)
        print(f"\nRelated rows: applications={counts['applications']}, activity_logs={counts['activity_logs']}")
        print("This will also remove related document remarks, verified files and notification reads.")

        answer = ask(f"Type {CONFIRMATION} to confirm deletion of these accounts and related data: ")
        if answer.strip() != CONFIRMATION:
            print("Aborted by user. No changes made.")
            return 0

        print("Proceeding with deletion...")
        try:
            deleted = delete_users_cascade(db, user_ids)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error during deletion, rolled back: {e}")
            print("Error during deletion. All changes were rolled back.")
            return 1

        print(f"Deletion complete: {deleted}")
        return 0
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())

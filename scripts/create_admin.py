"""Create an admin account; registration over HTTP only creates students.

Usage: python scripts/create_admin.py <username> <password> [full name]
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fastapi import HTTPException
from pydantic import ValidationError

from app.core.database import SessionLocal
from app.schemas.user import UserCreate
from app.services.auth import auth_service
from app.utils.logger import setup_logger

logger = setup_logger("create_admin", "create_admin.log")


def main(argv) -> int:
    if len(argv) < 3:
        logger.error("Usage: python scripts/create_admin.py <username> <password> [full name]")
        return 2

    username, password = argv[1], argv[2]
    full_name = " ".join(argv[3:]) or None

    try:
        user_in = UserCreate(username=username, password=password, full_name=full_name)
    except ValidationError as e:
        logger.error(f"Invalid admin details: {e}")
        return 2

    db = SessionLocal()
    try:
        admin = auth_service.create_admin(db, user_in=user_in)
    except HTTPException as e:
        logger.error(f"Could not create admin '{username}': {e.detail}")
        return 1
    finally:
        db.close()

    logger.info(f"Admin '{admin.username}' created with id {admin.id}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))

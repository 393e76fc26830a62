"""Create or update the users table, then exit.

Usage:
    python -m backend.init_db
"""
import sys

from sqlalchemy.exc import SQLAlchemyError

from backend.database import Base, check_database_connection, engine, ensure_users_schema
from backend.models.user import User


def main() -> None:
    try:
        check_database_connection()
        Base.metadata.create_all(bind=engine, tables=[User.__table__])
        ensure_users_schema()
    except SQLAlchemyError as exc:
        print("Database initialization failed:", exc, file=sys.stderr)
        sys.exit(1)
    print("Users table created/verified successfully.")


if __name__ == "__main__":
    main()

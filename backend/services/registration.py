"""Server-side account creation.

``RegistrationService`` is the only code path that inserts ``users`` rows. It
re-validates everything the form sends, checks the email is free, hashes the
password with bcrypt and inserts the row, all on one session that is closed
again whatever happens.
"""

import logging
import re
from datetime import datetime, timezone

from pydantic import BaseModel, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from backend.auth.passwords import hash_password
from backend.core import config
from backend.core.errors import ConflictError, StorageError, ValidationError
from backend.core.password_policy import PasswordIssue, check_password, is_utf8_encodable
from backend.models.user import User

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')

MISSING_FIELDS_MESSAGE = 'Email and password are required'
INVALID_EMAIL_MESSAGE = 'Please enter a valid email address'
INVALID_NAME_MESSAGE = 'Please enter a valid name'
DUPLICATE_EMAIL_MESSAGE = 'An account with this email already exists'
PASSWORD_MESSAGES = {
    PasswordIssue.TOO_SHORT: 'Password must be at least 8 characters long',
    PasswordIssue.MISSING_DIGIT: 'Password must include at least one number',
    PasswordIssue.UNSUPPORTED_CHARACTERS: 'Password contains unsupported characters',
}


class RegisteredUser(BaseModel):
    id: int
    email: str
    name: str | None = None
    created_at: datetime

    @field_validator('created_at')
    @classmethod
    def mark_created_at_utc(cls, value: datetime) -> datetime:
        # Stored timestamps are naive UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    class Config:
        from_attributes = True


def validate_registration(email: str | None, password: str | None, name: str | None = None) -> str:
    """Check the submitted credentials and return the normalized email.

    Raises ``ValidationError`` with the first rule that fails.
    """
    normalized_email = (email or '').strip()
    if not normalized_email or not password:
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    if not is_utf8_encodable(normalized_email) or not EMAIL_PATTERN.fullmatch(normalized_email):
        raise ValidationError(INVALID_EMAIL_MESSAGE)

    issue = check_password(password)
    if issue is not None:
        raise ValidationError(PASSWORD_MESSAGES[issue])

    if name and not is_utf8_encodable(name):
        raise ValidationError(INVALID_NAME_MESSAGE)

    return normalized_email


class RegistrationService:
    def __init__(self, session_factory: sessionmaker, bcrypt_rounds: int | None = None):
        self.session_factory = session_factory
        self.bcrypt_rounds = bcrypt_rounds or config.BCRYPT_ROUNDS

    def _find_user_id(self, db: Session, email: str) -> int | None:
        return db.query(User.id).filter(User.email == email).scalar()

    def register(self, email: str | None, password: str | None, name: str | None = None) -> RegisteredUser:
        normalized_email = validate_registration(email, password, name)
        display_name = name.strip() if name and name.strip() else None

        db = self.session_factory()
        try:
            if self._find_user_id(db, normalized_email) is not None:
                raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

            user = User(
                email=normalized_email,
                password_hash=hash_password(password, rounds=self.bcrypt_rounds),
                name=display_name,
            )
            db.add(user)
            db.commit()
            db.refresh(user)
        except IntegrityError as exc:
            # Another request inserted the same email between lookup and insert.
            db.rollback()
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception('Registration failed while talking to the user store')
            raise StorageError() from exc
        finally:
            db.close()

        logger.info('New user registered: %s', user.email)
        return RegisteredUser.model_validate(user)

    def email_exists(self, email: str) -> bool:
        normalized_email = email.strip()
        if not is_utf8_encodable(normalized_email):
            return False

        db = self.session_factory()
        try:
            return self._find_user_id(db, normalized_email) is not None
        except SQLAlchemyError as exc:
            logger.exception('Email lookup failed')
            raise StorageError('Unable to check email') from exc
        finally:
            db.close()

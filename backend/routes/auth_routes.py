import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from backend.core.errors import RegistrationError, StorageError
from backend.database import SessionLocal
from backend.services.registration import (
    INVALID_EMAIL_MESSAGE,
    INVALID_NAME_MESSAGE,
    MISSING_FIELDS_MESSAGE,
    RegistrationService,
)

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = 'Account created successfully!'


class RegisterRequest(BaseModel):
    # Optional so the service reports missing fields as a 400, not a 422.
    email: str | None = None
    password: str | None = None
    name: str | None = None


def get_registration_service() -> RegistrationService:
    return RegistrationService(SessionLocal)


def register_body_error_message(errors: list[dict]) -> str:
    """Pick the message for a register body that failed schema validation."""
    for error in errors:
        location = error.get('loc', ())
        if 'email' in location:
            return INVALID_EMAIL_MESSAGE
        if 'name' in location:
            return INVALID_NAME_MESSAGE
    return MISSING_FIELDS_MESSAGE


def _failure_response(error: RegistrationError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content={'success': False, 'message': error.message},
    )


@router.post('/register', status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, service: RegistrationService = Depends(get_registration_service)):
    try:
        user = service.register(data.email, data.password, data.name)
    except RegistrationError as exc:
        return _failure_response(exc)

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={
            'success': True,
            'message': SUCCESS_MESSAGE,
            'user': user.model_dump(mode='json'),
        },
    )


@router.get('/check-email/{email}')
def check_email(email: str, service: RegistrationService = Depends(get_registration_service)):
    try:
        exists = service.email_exists(email)
    except StorageError as exc:
        logger.warning('Email check for %s could not reach the user store', email)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={'exists': False, 'error': exc.message},
        )
    return {'exists': exists}

import logging

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.database import Base, check_database_connection, engine, ensure_users_schema
from backend.models import user
from backend.routes import auth_routes

logging.basicConfig(level=config.LOG_LEVEL)

app = FastAPI(title='CRM Backend API', version='1.0.0')

app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)

AUTH_PREFIX = '/api/auth'
REGISTER_PATH = f'{AUTH_PREFIX}/register'


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        check_database_connection()
        Base.metadata.create_all(bind=engine, tables=[user.User.__table__])
        ensure_users_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and MySQL credentials.')
        return
    logger.info('Users table created/verified successfully')


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    if request.url.path != REGISTER_PATH:
        return await request_validation_exception_handler(request, exc)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'success': False, 'message': auth_routes.register_body_error_message(exc.errors())},
    )


@app.get('/')
def root():
    return {
        'message': 'CRM Backend API is running!',
        'version': '1.0.0',
        'status': 'active',
    }


app.include_router(auth_routes.router, prefix=AUTH_PREFIX)

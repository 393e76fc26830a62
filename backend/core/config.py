import os
from urllib.parse import quote_plus

from dotenv import load_dotenv


load_dotenv()


def _get_int(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    return int(value)

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = _get_int(os.getenv("DB_PORT"), 3306)
DB_USER = os.getenv("DB_USER", "root")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_NAME = os.getenv("DB_NAME", "crm_database")

DATABASE_URL = os.getenv("DATABASE_URL") or (
    f"mysql+pymysql://{quote_plus(DB_USER)}:{quote_plus(DB_PASSWORD)}"
    f"@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

DB_POOL_SIZE = _get_int(os.getenv("DB_POOL_SIZE"), 10)
DB_POOL_TIMEOUT = _get_int(os.getenv("DB_POOL_TIMEOUT"), 10)

BCRYPT_ROUNDS = _get_int(os.getenv("BCRYPT_ROUNDS"), 10)

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

def validate_runtime_config() -> None:
    if not 4 <= BCRYPT_ROUNDS <= 31:
        raise RuntimeError("BCRYPT_ROUNDS must be between 4 and 31.")
    if APP_ENV.lower() == "production" and not os.getenv("DATABASE_URL") and not DB_PASSWORD:
        raise RuntimeError("DB_PASSWORD or DATABASE_URL must be set in production.")

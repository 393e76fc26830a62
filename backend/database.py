from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from backend.core import config


def engine_options(url: str) -> dict:
    # SQLite URLs get the dialect's own pool; everything else a bounded QueuePool.
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": config.DB_POOL_SIZE,
        "max_overflow": 0,
        "pool_timeout": config.DB_POOL_TIMEOUT,
        "pool_pre_ping": True,
    }


engine = create_engine(config.DATABASE_URL, **engine_options(config.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_users_schema_checked = False


def check_database_connection(bind=None) -> bool:
    bind = bind or engine
    with bind.connect() as connection:
        connection.execute(text("SELECT 1"))
    return True


def ensure_users_schema(bind=None) -> None:
    """Bring an existing ``users`` table up to the current column set."""
    global _users_schema_checked

    if _users_schema_checked:
        return

    bind = bind or engine

    with _schema_lock:
        if _users_schema_checked:
            return

        inspector = inspect(bind)

        if 'users' not in inspector.get_table_names():
            _users_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('users')}
        migration_steps = []
        # Tables created before the rename keep the hash in `password`.
        if 'password_hash' not in existing_columns and 'password' in existing_columns:
            migration_steps.append(('password_hash', 'ALTER TABLE users RENAME COLUMN password TO password_hash'))
        migration_steps += [
            ('name', 'ALTER TABLE users ADD COLUMN name VARCHAR(255)'),
            ('role', "ALTER TABLE users ADD COLUMN role VARCHAR(8) NOT NULL DEFAULT 'employee'"),
            ('is_active', 'ALTER TABLE users ADD COLUMN is_active BOOLEAN NOT NULL DEFAULT TRUE'),
            ('updated_at', 'ALTER TABLE users ADD COLUMN updated_at TIMESTAMP NULL'),
        ]
        has_role_index = any(
            index['column_names'] == ['role'] for index in inspector.get_indexes('users')
        )

        with bind.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            if not has_role_index:
                connection.execute(text('CREATE INDEX idx_users_role ON users(role)'))

        _users_schema_checked = True


def reset_schema_check() -> None:
    global _users_schema_checked
    _users_schema_checked = False

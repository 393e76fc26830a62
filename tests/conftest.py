import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from backend.database import Base  # noqa: E402
from backend.models.user import User  # noqa: E402


@pytest.fixture
def users_engine(tmp_path):
    engine = create_engine(
        f'sqlite:///{tmp_path / "users.db"}',
        connect_args={'check_same_thread': False},
    )
    Base.metadata.create_all(bind=engine, tables=[User.__table__])
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine, tables=[User.__table__])
        engine.dispose()


@pytest.fixture
def session_factory(users_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=users_engine)


@pytest.fixture
def users_db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()

import logging
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from backend import main
from backend.models.user import User
from backend.routes import auth_routes
from backend.services.registration import RegistrationService


@pytest.fixture
def client(session_factory):
    main.app.dependency_overrides[auth_routes.get_registration_service] = (
        lambda: RegistrationService(session_factory, bcrypt_rounds=4)
    )
    try:
        yield TestClient(main.app)
    finally:
        main.app.dependency_overrides.clear()


def test_root_reports_api_status() -> None:
    assert main.root() == {
        'message': 'CRM Backend API is running!',
        'version': '1.0.0',
        'status': 'active',
    }


def test_registration_routes_are_mounted_under_api_auth(client) -> None:
    created = client.post('/api/auth/register', json={'email': 'a@b.com', 'password': 'abcd1234'})
    checked = client.get('/api/auth/check-email/a@b.com')

    assert created.status_code == 201
    assert checked.status_code == 200
    assert checked.json() == {'exists': True}


def test_register_reports_created_at_in_utc(client) -> None:
    response = client.post('/api/auth/register', json={'email': 'utc@b.com', 'password': 'abcd1234'})

    created_at = response.json()['user']['created_at']
    parsed = datetime.fromisoformat(created_at.replace('Z', '+00:00'))
    assert parsed.utcoffset() == timedelta(0)


def test_register_rejects_non_string_email_with_400(client, users_db) -> None:
    response = client.post('/api/auth/register', json={'email': 12345, 'password': 'abcd1234'})

    assert response.status_code == 400
    assert response.json() == {'success': False, 'message': 'Please enter a valid email address'}
    assert users_db.query(User).count() == 0


def test_register_rejects_non_string_password_with_400(client) -> None:
    response = client.post('/api/auth/register', json={'email': 'a@b.com', 'password': 12345678})

    assert response.status_code == 400
    assert response.json() == {'success': False, 'message': 'Email and password are required'}


def test_register_rejects_unparseable_body_with_400(client) -> None:
    response = client.post(
        '/api/auth/register',
        content=b'email=a@b.com&password=abcd1234',
        headers={'content-type': 'application/json'},
    )

    assert response.status_code == 400
    assert response.json() == {'success': False, 'message': 'Email and password are required'}


def test_register_rejects_lone_surrogate_password_with_400(client, users_db) -> None:
    response = client.post(
        '/api/auth/register',
        content=b'{"email": "s@x.com", "password": "abcdefg1\\ud800"}',
        headers={'content-type': 'application/json'},
    )

    assert response.status_code == 400
    assert response.json() == {'success': False, 'message': 'Password contains unsupported characters'}
    assert users_db.query(User).count() == 0


def test_check_email_ignores_surrounding_whitespace(client) -> None:
    client.post('/api/auth/register', json={'email': 'a@b.com', 'password': 'abcd1234'})

    response = client.get('/api/auth/check-email/%20a@b.com%20')

    assert response.json() == {'exists': True}


def test_initialize_database_creates_users_table(users_engine, monkeypatch) -> None:
    main.Base.metadata.drop_all(bind=users_engine)
    monkeypatch.setattr(main, 'engine', users_engine)
    monkeypatch.setattr(main, 'check_database_connection', lambda: True)
    monkeypatch.setattr(main, 'ensure_users_schema', lambda: None)

    main.initialize_database()

    assert 'users' in inspect(users_engine).get_table_names()


def test_initialize_database_logs_connection_failure(monkeypatch, caplog) -> None:
    def _unreachable():
        raise OperationalError('SELECT 1', {}, Exception("Can't connect to MySQL server"))

    monkeypatch.setattr(main, 'check_database_connection', _unreachable)

    with caplog.at_level(logging.ERROR):
        main.initialize_database()

    assert 'Database initialization failed' in caplog.text

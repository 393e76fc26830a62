import pytest

from backend.core import config


def test_validate_runtime_config_accepts_defaults(monkeypatch) -> None:
    monkeypatch.setattr(config, 'BCRYPT_ROUNDS', 10)
    monkeypatch.setattr(config, 'APP_ENV', 'development')

    config.validate_runtime_config()


@pytest.mark.parametrize('rounds', [3, 32])
def test_validate_runtime_config_rejects_out_of_range_rounds(monkeypatch, rounds) -> None:
    monkeypatch.setattr(config, 'BCRYPT_ROUNDS', rounds)

    with pytest.raises(RuntimeError):
        config.validate_runtime_config()


def test_validate_runtime_config_requires_database_credentials_in_production(monkeypatch) -> None:
    monkeypatch.setattr(config, 'BCRYPT_ROUNDS', 10)
    monkeypatch.setattr(config, 'APP_ENV', 'production')
    monkeypatch.setattr(config, 'DB_PASSWORD', '')
    monkeypatch.delenv('DATABASE_URL', raising=False)

    with pytest.raises(RuntimeError):
        config.validate_runtime_config()

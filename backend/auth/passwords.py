import bcrypt

from backend.core import config

# bcrypt only reads the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int | None = None) -> str:
    '''Hash a password using bcrypt with a fresh salt'''
    return bcrypt.hashpw(
        _password_bytes(password),
        bcrypt.gensalt(rounds=rounds or config.BCRYPT_ROUNDS),
    ).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    '''verify a password against its hash'''
    return bcrypt.checkpw(
        _password_bytes(password),
        password_hash.encode("utf-8"),
    )

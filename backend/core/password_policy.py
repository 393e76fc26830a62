import enum
import re

MIN_PASSWORD_LENGTH = 8

_DIGIT_PATTERN = re.compile(r'\d', re.ASCII)


class PasswordIssue(enum.Enum):
    TOO_SHORT = 'too_short'
    MISSING_DIGIT = 'missing_digit'
    UNSUPPORTED_CHARACTERS = 'unsupported_characters'


def is_utf8_encodable(value: str) -> bool:
    # Lone surrogates survive JSON decoding but cannot be stored or hashed.
    try:
        value.encode('utf-8')
    except UnicodeEncodeError:
        return False
    return True


def check_password(candidate: str | None) -> PasswordIssue | None:
    """Return the first rule ``candidate`` breaks, or ``None`` when it passes.

    Length is checked before the digit rule and only one issue is reported.
    """
    if not candidate or len(candidate) < MIN_PASSWORD_LENGTH:
        return PasswordIssue.TOO_SHORT
    if not _DIGIT_PATTERN.search(candidate):
        return PasswordIssue.MISSING_DIGIT
    if not is_utf8_encodable(candidate):
        return PasswordIssue.UNSUPPORTED_CHARACTERS
    return None

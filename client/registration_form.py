"""Registration form logic, kept free of any rendering or network code.

Every event goes through a reducer that takes the current ``FormState`` and
returns a new one. In ``FormState.errors`` a missing key means the field has
not been validated yet, ``None`` means it was validated and passed, and a
string is the message to show beside the field.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

from backend.core.password_policy import PasswordIssue, check_password

PASSWORD_FIELD = 'password'
CONFIRM_PASSWORD_FIELD = 'confirmPassword'

SUCCESS_MESSAGE = 'Account created successfully!'
PASSWORDS_DO_NOT_MATCH = 'Passwords do not match.'
PASSWORD_MESSAGES = {
    PasswordIssue.TOO_SHORT: 'Password must be at least 8 characters.',
    PasswordIssue.MISSING_DIGIT: 'Password must include at least one number.',
    PasswordIssue.UNSUPPORTED_CHARACTERS: 'Password contains unsupported characters.',
}


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    label: str
    type: str = 'text'
    required: bool = False


REGISTER_FIELDS = (
    FieldDescriptor('name', 'Full Name', 'text', required=False),
    FieldDescriptor('email', 'Email', 'email', required=True),
    FieldDescriptor(PASSWORD_FIELD, 'Password', 'password', required=True),
    FieldDescriptor(CONFIRM_PASSWORD_FIELD, 'Confirm Password', 'password', required=True),
)


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class FormState:
    fields: tuple[FieldDescriptor, ...]
    values: Mapping[str, str]
    errors: Mapping[str, str | None] = field(default_factory=lambda: _frozen({}))
    success: str | None = None

    def has_field(self, name: str) -> bool:
        return name in self.values


def validate_password(candidate: str | None) -> str | None:
    issue = check_password(candidate)
    if issue is None:
        return None
    return PASSWORD_MESSAGES[issue]


def _confirm_error(password: str, confirm_password: str) -> str | None:
    return PASSWORDS_DO_NOT_MATCH if password != confirm_password else None


def initial_state(fields: Iterable[FieldDescriptor] = REGISTER_FIELDS) -> FormState:
    fields = tuple(fields)
    return FormState(fields=fields, values=_frozen({f.name: '' for f in fields}))


def on_field_change(state: FormState, field_name: str, value: str) -> FormState:
    if not state.has_field(field_name):
        return state

    values = {**state.values, field_name: value}
    errors = dict(state.errors)

    if field_name == PASSWORD_FIELD:
        errors[PASSWORD_FIELD] = validate_password(value)
        # Don't complain about confirmation until the user has typed something there.
        confirm_password = values.get(CONFIRM_PASSWORD_FIELD)
        if confirm_password:
            errors[CONFIRM_PASSWORD_FIELD] = _confirm_error(value, confirm_password)
        else:
            errors.pop(CONFIRM_PASSWORD_FIELD, None)
    elif field_name == CONFIRM_PASSWORD_FIELD:
        errors[CONFIRM_PASSWORD_FIELD] = _confirm_error(values.get(PASSWORD_FIELD, ''), value)

    return replace(state, values=_frozen(values), errors=_frozen(errors))


def on_submit(
    state: FormState,
    on_register: Callable[[dict[str, str]], None] | None = None,
) -> FormState:
    """Validate the whole form.

    On success the success message is set and ``on_register`` receives a copy
    of the values. On failure the success message is cleared. Every checked
    field is recorded, ``None`` for the ones that passed.
    """
    errors: dict[str, str | None] = {}

    if state.has_field(PASSWORD_FIELD):
        errors[PASSWORD_FIELD] = validate_password(state.values[PASSWORD_FIELD])

    if state.has_field(PASSWORD_FIELD) and state.has_field(CONFIRM_PASSWORD_FIELD):
        errors[CONFIRM_PASSWORD_FIELD] = _confirm_error(
            state.values[PASSWORD_FIELD], state.values[CONFIRM_PASSWORD_FIELD]
        )

    if any(errors.values()):
        return replace(state, errors=_frozen(errors), success=None)

    new_state = replace(state, errors=_frozen(errors), success=SUCCESS_MESSAGE)
    if on_register is not None:
        on_register(dict(state.values))
    return new_state


def error_for(state: FormState, field_name: str) -> str | None:
    return state.errors.get(field_name)


def has_errors(state: FormState) -> bool:
    return any(message for message in state.errors.values())


class RegistrationForm:
    """Holds the current state and feeds events through the reducer."""

    def __init__(
        self,
        fields: Iterable[FieldDescriptor] = REGISTER_FIELDS,
        on_register: Callable[[dict[str, str]], None] | None = None,
    ):
        self.state = initial_state(fields)
        self.on_register = on_register

    def change(self, field_name: str, value: str) -> FormState:
        self.state = on_field_change(self.state, field_name, value)
        return self.state

    def submit(self) -> FormState:
        self.state = on_submit(self.state, self.on_register)
        return self.state

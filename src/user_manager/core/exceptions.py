"""Error taxonomy for user management.

Every failure the service can signal is a subclass of ``UserManagerError``
carrying a stable ``kind`` and a user-facing ``message``. The HTTP layer maps
kinds onto status codes; nothing below it knows about transport.
"""

import traceback
from enum import StrEnum


class ErrorKind(StrEnum):
    """Stable identifiers for each failure category."""

    REQUIRED_FIELD_MISSING = "required_field_missing"
    INVALID_FORMAT = "invalid_format"
    INVALID_BIRTH_DATE = "invalid_birth_date"
    UNDER_MINIMUM_AGE = "under_minimum_age"
    INVALID_RANGE_ORDER = "invalid_range_order"
    DUPLICATE_EMAIL = "duplicate_email"
    NOT_FOUND = "not_found"
    UNEXPECTED = "unexpected"


class UserManagerError(Exception):
    """Base class for all user management errors."""

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def origin(self) -> str:
        """Location where the error was raised, for log context only."""
        if self.__traceback__ is None:
            return "unknown"
        frame = traceback.extract_tb(self.__traceback__)[-1]
        return f"{frame.filename}:{frame.name}:{frame.lineno}"


class RequiredFieldMissingError(UserManagerError):
    kind = ErrorKind.REQUIRED_FIELD_MISSING


class InvalidFormatError(UserManagerError):
    kind = ErrorKind.INVALID_FORMAT


class InvalidBirthDateError(UserManagerError):
    kind = ErrorKind.INVALID_BIRTH_DATE


class UnderMinimumAgeError(UserManagerError):
    kind = ErrorKind.UNDER_MINIMUM_AGE


class InvalidRangeOrderError(UserManagerError):
    kind = ErrorKind.INVALID_RANGE_ORDER


class InvalidCandidateError(UserManagerError):
    """Several fields of one candidate broke their rules.

    Takes the kind of the first violation; the message joins every
    violation's message with ", ".
    """

    def __init__(self, violations: list[UserManagerError]) -> None:
        if not violations:
            raise ValueError("InvalidCandidateError needs at least one violation")
        super().__init__(", ".join(v.message for v in violations))
        self.kind = violations[0].kind
        self.violations = violations


class DuplicateEmailError(UserManagerError):
    """Another user already owns the email address."""

    kind = ErrorKind.DUPLICATE_EMAIL

    def __init__(self, email: str) -> None:
        super().__init__(f"User with 'Email: {email}' already exists!")
        self.email = email


class UserNotFoundError(UserManagerError):
    """No user is stored under the given id."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User with `ID: {user_id}` was not found!")
        self.user_id = user_id


class UnexpectedError(UserManagerError):
    """Any failure the domain did not anticipate, such as a storage outage."""

    kind = ErrorKind.UNEXPECTED


CLIENT_ERROR_KINDS = frozenset(
    {
        ErrorKind.REQUIRED_FIELD_MISSING,
        ErrorKind.INVALID_FORMAT,
        ErrorKind.INVALID_BIRTH_DATE,
        ErrorKind.UNDER_MINIMUM_AGE,
        ErrorKind.INVALID_RANGE_ORDER,
        ErrorKind.DUPLICATE_EMAIL,
    }
)

"""Validation rules for user records.

Each rule is a plain function that either returns ``None`` or raises the
matching ``UserManagerError`` subclass. ``UserValidator`` binds the minimum
age and clock once and composes the rules for each code path of the
service: full candidates get every rule, single-field updates only the
rules that concern that field.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from functools import partial
from typing import TypeVar

from src.user_manager.core.exceptions import (
    InvalidBirthDateError,
    InvalidFormatError,
    InvalidRangeOrderError,
    RequiredFieldMissingError,
    UnderMinimumAgeError,
    UserManagerError,
)
from src.user_manager.entities.core.date_range import DateRange
from src.user_manager.entities.core.user.entity import User

T = TypeVar("T")

DEFAULT_MINIMUM_AGE = 18

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s.]+(\.[^@\s.]+)+$")

FIELD_LABELS = {
    "first_name": "First name",
    "last_name": "Last name",
    "email": "Email",
    "birth_date": "Birth date",
}

INVALID_EMAIL_FORMAT = "Invalid email format"
BIRTH_DATE_PAST = "Birth date must be in the past"
RANGE_ORDER = "The 'from' date must be before the 'to' date."


def field_label(field_name: str) -> str:
    """Human readable name for a user field."""
    return FIELD_LABELS.get(field_name, field_name.replace("_", " ").capitalize())


def required_message(field_name: str) -> str:
    return f"{field_label(field_name)} is required"


def validate_required_field(value: T | None, field_name: str) -> T:
    """Fail when the value is absent or, for text, blank; return it otherwise."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise RequiredFieldMissingError(required_message(field_name))
    return value


def validate_email_format(value: str) -> None:
    if not EMAIL_PATTERN.fullmatch(value):
        raise InvalidFormatError(INVALID_EMAIL_FORMAT)


def validate_birth_date_in_past(birth_date: date, today: date) -> None:
    if not birth_date < today:
        raise InvalidBirthDateError(BIRTH_DATE_PAST)


def calculate_age(birth_date: date, today: date) -> int:
    """Number of complete years between ``birth_date`` and ``today``.

    A person reaches age N on the Nth anniversary of their month and day.
    Someone born on February 29th turns a year older on March 1st in
    non-leap years.
    """
    had_birthday = (today.month, today.day) >= (birth_date.month, birth_date.day)
    return today.year - birth_date.year - (0 if had_birthday else 1)


def validate_minimum_age(birth_date: date, minimum_age: int, today: date) -> None:
    if calculate_age(birth_date, today) < minimum_age:
        raise UnderMinimumAgeError(f"User must be at least {minimum_age} years old.")


def validate_date_range_order(date_range: DateRange) -> None:
    """Pass when either bound is open; otherwise ``from`` must not follow ``to``."""
    if date_range.from_ is None or date_range.to is None:
        return
    if date_range.from_ > date_range.to:
        raise InvalidRangeOrderError(RANGE_ORDER)


@dataclass(frozen=True)
class UserValidator:
    """Rule set bound to a minimum age and a clock.

    Both are fixed for the lifetime of the validator, which is built once
    when the application starts.
    """

    minimum_age: int = DEFAULT_MINIMUM_AGE
    today: Callable[[], date] = field(default=date.today)

    def validate_candidate(self, candidate: User) -> None:
        """Run every rule against a full candidate, stopping at the first failure."""
        for check in self._candidate_checks(candidate):
            check()

    def collect_candidate_violations(self, candidate: User) -> list[UserManagerError]:
        """Run every field's rules and return one violation per failing field."""
        violations = []
        for check in self._candidate_checks(candidate):
            try:
                check()
            except UserManagerError as e:
                violations.append(e)
        return violations

    def _candidate_checks(self, candidate: User) -> list[Callable[[], None]]:
        return [
            partial(self.validate_name, candidate.first_name, "first_name"),
            partial(self.validate_name, candidate.last_name, "last_name"),
            partial(self.validate_email, candidate.email),
            partial(self.validate_birth_date, candidate.birth_date),
        ]

    def validate_name(self, value: str | None, field_name: str) -> None:
        validate_required_field(value, field_name)

    def validate_email(self, value: str | None) -> None:
        validate_email_format(validate_required_field(value, "email"))

    def validate_birth_date(self, value: date | None) -> None:
        birth_date = validate_required_field(value, "birth_date")
        # Evaluated once so both rules see the same day.
        today = self.today()
        validate_birth_date_in_past(birth_date, today)
        validate_minimum_age(birth_date, self.minimum_age, today)

    def validate_date_range(self, date_range: DateRange) -> None:
        validate_date_range_order(date_range)

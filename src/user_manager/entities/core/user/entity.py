"""User domain entity."""

from datetime import date
from typing import Any

from pydantic import Field

from src.user_manager.entities.core._base import Entity


class User(Entity):
    """User entity representing a person in the system.

    Required fields are typed as optional so that an unvalidated candidate
    can be represented; presence and format are enforced by the validation
    rules in ``core.services.user.validation``, not at construction time.
    """

    first_name: str | None = Field(default=None, description="User's first name")
    last_name: str | None = Field(default=None, description="User's last name")
    email: str | None = Field(default=None, description="User's email address")
    birth_date: date | None = Field(default=None, description="User's birth date")
    address: str | None = Field(default=None, description="User's address")
    phone: str | None = Field(default=None, description="User's phone number")

    def __eq__(self, other: Any) -> bool:
        """Compare users by identity; unsaved users are never equal."""
        if not isinstance(other, User):
            return False

        return self.id is not None and self.id == other.id

    def __hash__(self) -> int:
        """Hash on the class so that unsaved users remain hashable."""
        return hash(User)

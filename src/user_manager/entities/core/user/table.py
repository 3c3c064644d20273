"""User database table model."""

from datetime import date

from sqlmodel import Field

from src.user_manager.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    The unique index on ``email`` backs up the application-level
    uniqueness check when two writers race on the same address.
    """

    __tablename__ = "users"

    first_name: str
    last_name: str
    email: str = Field(unique=True, index=True)
    birth_date: date = Field(index=True)
    address: str | None = None
    phone: str | None = None

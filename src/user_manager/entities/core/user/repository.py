"""User repository for data access operations."""

from datetime import date

from sqlmodel import Session, col, select

from src.user_manager.entities.core.user.entity import User
from src.user_manager.entities.core.user.table import UserTable

_MUTABLE_FIELDS = {"first_name", "last_name", "email", "birth_date", "address", "phone"}


class UserRepository:
    """Data-access layer for users.

    The repository flushes pending changes so that storage-assigned values
    are visible, but never commits; transaction boundaries belong to the
    caller.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: int) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def find_by_birth_date_range(
        self, from_: date | None = None, to: date | None = None
    ) -> list[User]:
        """Return users born within ``[from_, to]``; a missing bound is open."""
        statement = select(UserTable)
        if from_ is not None:
            statement = statement.where(UserTable.birth_date >= from_)
        if to is not None:
            statement = statement.where(UserTable.birth_date <= to)
        statement = statement.order_by(col(UserTable.id))

        rows = self._session.exec(statement).all()
        return [User.model_validate(row, from_attributes=True) for row in rows]

    def exists_by_email(self, email: str) -> bool:
        statement = select(UserTable.id).where(UserTable.email == email)
        return self._session.exec(statement).first() is not None

    def exists_by_id(self, user_id: int) -> bool:
        return self._session.get(UserTable, user_id) is not None

    def save(self, user: User) -> User:
        """Insert a new user or overwrite the mutable fields of an existing one."""
        values = user.model_dump(include=_MUTABLE_FIELDS)

        if user.id is None:
            row = UserTable(**values)
            self._session.add(row)
        else:
            row = self._session.get(UserTable, user.id)
            if row is None:
                raise ValueError(f"User with ID {user.id} not found")
            row.sqlmodel_update(values)
            self._session.add(row)

        self._session.flush()
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def delete(self, user_id: int) -> bool:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

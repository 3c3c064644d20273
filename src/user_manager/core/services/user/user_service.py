from contextlib import contextmanager
from datetime import date

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from src.user_manager.core.exceptions import (
    DuplicateEmailError,
    InvalidRangeOrderError,
    UnexpectedError,
    UserManagerError,
    UserNotFoundError,
)
from src.user_manager.core.services.user.uniqueness import EmailUniquenessGuard
from src.user_manager.core.services.user.validation import UserValidator
from src.user_manager.entities.core.date_range import DateRange
from src.user_manager.entities.core.user.entity import User
from src.user_manager.entities.core.user.repository import UserRepository


class UserService:
    """Single entry point for reading and mutating users.

    Every mutating operation validates, checks email uniqueness where the
    email may change, writes, and commits inside one transaction. Any failure
    rolls the session back, so callers observe either exactly one write or
    none.
    """

    def __init__(self, db_session: Session, validator: UserValidator):
        self._db_session = db_session
        self._validator = validator
        self._user_repo = UserRepository(db_session)
        self._email_guard = EmailUniquenessGuard(self._user_repo)

    @contextmanager
    def _transaction(self, user_id: int | None = None, email: str | None = None):
        """Commit on success, roll back on any failure.

        Yields a logger bound to ``user_id``. Rejected input is logged as a
        warning. A unique-constraint violation raised by storage is reported
        as a duplicate of ``email``; other storage errors become
        ``UnexpectedError``.
        """
        log = logger.bind(user_id=user_id)
        try:
            yield log
            self._db_session.commit()
        except IntegrityError as e:
            self._db_session.rollback()
            if email is not None:
                log.warning("Storage rejected duplicate email {}", email)
                raise DuplicateEmailError(email) from e
            raise UnexpectedError(f"Storage constraint violated: {e.orig}") from e
        except SQLAlchemyError as e:
            self._db_session.rollback()
            log.error(f"Storage failure: {e}")
            raise UnexpectedError("Storage operation failed") from e
        except UserManagerError as e:
            self._db_session.rollback()
            log.warning("Rejected: {}", e.message)
            raise
        except Exception:
            self._db_session.rollback()
            raise

    def _require(self, user_id: int) -> User:
        user = self._user_repo.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def get_by_id(self, user_id: int) -> User:
        try:
            return self._require(user_id)
        except UserNotFoundError as e:
            logger.bind(user_id=user_id).warning("Rejected: {}", e.message)
            raise

    def find_by_birth_date_range(self, date_range: DateRange) -> list[User]:
        """Users born within the inclusive range, in id order."""
        try:
            self._validator.validate_date_range(date_range)
        except InvalidRangeOrderError as e:
            logger.bind(date_from=date_range.from_, date_to=date_range.to).warning(
                "Rejected: {}", e.message
            )
            raise
        return self._user_repo.find_by_birth_date_range(date_range.from_, date_range.to)

    def create(self, candidate: User) -> User:
        with self._transaction(email=candidate.email) as log:
            self._validator.validate_candidate(candidate)
            self._email_guard.check_email_available(candidate.email)
            created = self._user_repo.save(candidate.model_copy(update={"id": None}))

        log.bind(user_id=created.id).info("Created user {}", created.id)
        return created

    def replace(self, user_id: int, candidate: User) -> User:
        """Overwrite every mutable field of an existing user; the id is kept."""
        with self._transaction(user_id, candidate.email) as log:
            existing = self._require(user_id)
            self._validator.validate_candidate(candidate)
            self._email_guard.check_email_available(candidate.email, existing.email)

            updated = existing.model_copy(
                update={
                    "first_name": candidate.first_name,
                    "last_name": candidate.last_name,
                    "email": candidate.email,
                    "birth_date": candidate.birth_date,
                    "address": candidate.address,
                    "phone": candidate.phone,
                }
            )
            saved = self._user_repo.save(updated)

        log.info("Replaced user {}", user_id)
        return saved

    def update_first_name(self, user_id: int, first_name: str) -> User:
        with self._transaction(user_id) as log:
            user = self._require(user_id)
            self._validator.validate_name(first_name, "first_name")
            saved = self._user_repo.save(user.model_copy(update={"first_name": first_name}))

        log.info("Updated first name of user {}", user_id)
        return saved

    def update_last_name(self, user_id: int, last_name: str) -> User:
        with self._transaction(user_id) as log:
            user = self._require(user_id)
            self._validator.validate_name(last_name, "last_name")
            saved = self._user_repo.save(user.model_copy(update={"last_name": last_name}))

        log.info("Updated last name of user {}", user_id)
        return saved

    def update_email(self, user_id: int, email: str) -> User:
        with self._transaction(user_id, email) as log:
            user = self._require(user_id)
            self._validator.validate_email(email)
            self._email_guard.check_email_available(email, user.email)
            saved = self._user_repo.save(user.model_copy(update={"email": email}))

        log.info("Updated email of user {}", user_id)
        return saved

    def update_birth_date(self, user_id: int, birth_date: date) -> User:
        with self._transaction(user_id) as log:
            user = self._require(user_id)
            self._validator.validate_birth_date(birth_date)
            saved = self._user_repo.save(user.model_copy(update={"birth_date": birth_date}))

        log.info("Updated birth date of user {}", user_id)
        return saved

    def update_address(self, user_id: int, address: str | None) -> User:
        with self._transaction(user_id) as log:
            user = self._require(user_id)
            saved = self._user_repo.save(user.model_copy(update={"address": address}))

        log.info("Updated address of user {}", user_id)
        return saved

    def update_phone(self, user_id: int, phone: str | None) -> User:
        with self._transaction(user_id) as log:
            user = self._require(user_id)
            saved = self._user_repo.save(user.model_copy(update={"phone": phone}))

        log.info("Updated phone of user {}", user_id)
        return saved

    def delete_by_id(self, user_id: int) -> None:
        with self._transaction(user_id) as log:
            if not self._user_repo.exists_by_id(user_id):
                raise UserNotFoundError(user_id)
            self._user_repo.delete(user_id)

        log.info("Deleted user {}", user_id)

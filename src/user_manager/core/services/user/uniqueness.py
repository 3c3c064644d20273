"""Email uniqueness guard."""

from src.user_manager.core.exceptions import DuplicateEmailError
from src.user_manager.entities.core.user.repository import UserRepository


class EmailUniquenessGuard:
    """Rejects an email address that another user already owns."""

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def check_email_available(
        self, candidate_email: str, current_owner_email: str | None = None
    ) -> None:
        """Fail with ``DuplicateEmailError`` if the address is taken.

        Keeping one's own address is always allowed, so the storage lookup is
        skipped when the candidate equals ``current_owner_email``.
        """
        if candidate_email == current_owner_email:
            return
        if self._user_repo.exists_by_email(candidate_email):
            raise DuplicateEmailError(candidate_email)

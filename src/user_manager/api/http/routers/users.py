"""User API router with CRUD and single-field update operations."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response
from pydantic import BaseModel, Field

from src.user_manager.api.http.deps import get_user_service, get_user_validator
from src.user_manager.core.exceptions import InvalidCandidateError
from src.user_manager.core.services import UserService, UserValidator
from src.user_manager.entities.core.date_range import DateRange
from src.user_manager.entities.core.user import User

router = APIRouter(prefix="/api/users", tags=["users"])

DEFAULT_FROM_DATE = date(1900, 1, 1)
DEFAULT_TO_DATE = date(2200, 1, 1)

UserId = Annotated[int, Path(ge=1, description="User identifier")]


class UserPayload(BaseModel):
    """Request body for creating or replacing a user."""

    first_name: str = Field(description="User's first name")
    last_name: str = Field(description="User's last name")
    email: str = Field(description="User's email address")
    birth_date: date = Field(description="User's birth date")
    address: str | None = Field(default=None, description="User's address")
    phone: str | None = Field(default=None, description="User's phone number")

    def to_candidate(self) -> User:
        return User(**self.model_dump())


def checked_candidate(payload: UserPayload, validator: UserValidator) -> User:
    """Build the candidate, reporting every failing field in one error."""
    candidate = payload.to_candidate()
    violations = validator.collect_candidate_violations(candidate)
    if violations:
        raise InvalidCandidateError(violations)
    return candidate


@router.get("", response_model=list[User])
def get_users_by_birth_date_range(
    from_: date = Query(default=DEFAULT_FROM_DATE, alias="from"),
    to: date = Query(default=DEFAULT_TO_DATE),
    service: UserService = Depends(get_user_service),
) -> list[User]:
    """List users born within the inclusive range."""
    return service.find_by_birth_date_range(DateRange(from_=from_, to=to))


@router.get("/{user_id}", response_model=User)
def get_user(
    user_id: UserId,
    service: UserService = Depends(get_user_service),
) -> User:
    """Get a user by ID."""
    return service.get_by_id(user_id)


@router.post("", response_model=User, status_code=201)
def create_user(
    payload: UserPayload,
    service: UserService = Depends(get_user_service),
    validator: UserValidator = Depends(get_user_validator),
) -> User:
    """Create a new user."""
    return service.create(checked_candidate(payload, validator))


@router.put("/{user_id}", response_model=User)
def replace_user(
    user_id: UserId,
    payload: UserPayload,
    service: UserService = Depends(get_user_service),
    validator: UserValidator = Depends(get_user_validator),
) -> User:
    """Replace every field of a user."""
    return service.replace(user_id, checked_candidate(payload, validator))


@router.delete("/{user_id}", status_code=204)
def delete_user(
    user_id: UserId,
    service: UserService = Depends(get_user_service),
) -> Response:
    """Delete a user."""
    service.delete_by_id(user_id)
    return Response(status_code=204)


@router.patch("/{user_id}/first-name", response_model=User)
def update_first_name(
    user_id: UserId,
    first_name: str,
    service: UserService = Depends(get_user_service),
) -> User:
    return service.update_first_name(user_id, first_name)


@router.patch("/{user_id}/last-name", response_model=User)
def update_last_name(
    user_id: UserId,
    last_name: str,
    service: UserService = Depends(get_user_service),
) -> User:
    return service.update_last_name(user_id, last_name)


@router.patch("/{user_id}/email", response_model=User)
def update_email(
    user_id: UserId,
    email: str,
    service: UserService = Depends(get_user_service),
) -> User:
    return service.update_email(user_id, email)


@router.patch("/{user_id}/birth-date", response_model=User)
def update_birth_date(
    user_id: UserId,
    birth_date: date,
    service: UserService = Depends(get_user_service),
) -> User:
    return service.update_birth_date(user_id, birth_date)


@router.patch("/{user_id}/address", response_model=User)
def update_address(
    user_id: UserId,
    address: str,
    service: UserService = Depends(get_user_service),
) -> User:
    return service.update_address(user_id, address)


@router.patch("/{user_id}/phone", response_model=User)
def update_phone(
    user_id: UserId,
    phone: str,
    service: UserService = Depends(get_user_service),
) -> User:
    return service.update_phone(user_id, phone)

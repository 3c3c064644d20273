"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.user_manager.api.http.app_data import ApplicationDependencies
from src.user_manager.core.services import UserService, UserValidator


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a database session scoped to the request."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_user_validator(request: Request) -> UserValidator:
    """Get the validator built from configuration at startup."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.user_validator


def get_user_service(
    session: Session = Depends(get_db_session),
    validator: UserValidator = Depends(get_user_validator),
) -> UserService:
    """Get a user service bound to the request's session."""
    return UserService(session, validator)

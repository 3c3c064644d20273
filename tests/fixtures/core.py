from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import date
from typing import Any

import pytest
from fastapi.testclient import TestClient
from loguru import logger
from sqlalchemy import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from src.user_manager.core.services import UserService, UserValidator
from src.user_manager.entities.core.user import User, UserRepository

# Fixed "today" so age arithmetic is deterministic
TODAY = date(2024, 6, 15)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def session() -> Generator[Session]:
    """Create a fresh database session for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Import models to register them with the metadata
    from src.user_manager.entities.core.user import UserTable  # noqa: F401

    SQLModel.metadata.create_all(engine)

    with Session(engine, expire_on_commit=False) as session:
        try:
            yield session
        finally:
            session.rollback()
            session.close()
            engine.dispose()


@pytest.fixture
def validator(today: date) -> UserValidator:
    return UserValidator(minimum_age=18, today=lambda: today)


@pytest.fixture
def user_repo(session: Session) -> UserRepository:
    return UserRepository(session)


@pytest.fixture
def user_service(session: Session, validator: UserValidator) -> UserService:
    return UserService(session, validator)


@pytest.fixture
def make_user() -> Callable[..., User]:
    """Build a valid candidate; keyword arguments override single fields."""
    counter = {"n": 0}

    def _make_user(**overrides: Any) -> User:
        counter["n"] += 1
        values: dict[str, Any] = {
            "first_name": "Jane",
            "last_name": "Doe",
            "email": f"jane.doe{counter['n']}@example.com",
            "birth_date": date(1990, 5, 1),
            "address": "1 Main St",
            "phone": "+1-555-0100",
        }
        values.update(overrides)
        return User(**values)

    return _make_user


@pytest.fixture
def client(
    user_service: UserService, validator: UserValidator
) -> Generator[TestClient]:
    """Test client whose requests go through the per-test service and validator."""
    from src.user_manager.api.http.app import app
    from src.user_manager.api.http.deps import get_user_service, get_user_validator

    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_user_validator] = lambda: validator
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def log_records() -> Generator[list[dict[str, Any]]]:
    """Collect the loguru records emitted while the test runs."""
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    try:
        yield records
    finally:
        logger.remove(handler_id)

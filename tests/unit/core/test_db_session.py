"""Unit tests for the database session service."""

from datetime import date

import pytest
from sqlmodel import select

from src.user_manager.core.services import DbSessionService, UserService, UserValidator
from src.user_manager.entities.core.user import User, UserTable
from src.user_manager.runtime.config.config_data import ConfigData, DatabaseConfig


@pytest.fixture
def db_service():
    service = DbSessionService(ConfigData(database=DatabaseConfig(url="sqlite:///:memory:")))
    service.create_all()
    try:
        yield service
    finally:
        service.dispose()


def test_health_check(db_service: DbSessionService):
    assert db_service.health_check() is True


def test_health_check_fails_when_database_cannot_open(tmp_path):
    service = DbSessionService(
        ConfigData(database=DatabaseConfig(url=f"sqlite:///{tmp_path}/missing/users.db"))
    )

    assert service.health_check() is False


def test_sessions_share_committed_users(db_service: DbSessionService):
    writer = db_service.get_session()
    try:
        UserService(writer, UserValidator()).create(
            User(
                first_name="Jane",
                last_name="Doe",
                email="jane@example.com",
                birth_date=date(1990, 5, 1),
            )
        )
    finally:
        writer.close()

    reader = db_service.get_session()
    try:
        emails = reader.exec(select(UserTable.email)).all()
    finally:
        reader.close()

    assert emails == ["jane@example.com"]

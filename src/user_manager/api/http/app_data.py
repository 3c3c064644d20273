from dataclasses import dataclass

from src.user_manager.core.services import DbSessionService, UserValidator


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    user_validator: UserValidator

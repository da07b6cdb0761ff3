from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .holidays.calculator import HolidayCalculator, load_holiday_table
from .patterns.mysql_pattern_repository import MySQLPatternRepository
from .patterns.repository import PatternRepository
from .patterns.service import PatternService
from .resolution.engine import ResolutionEngine
from .resolution.service import CalendarService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    patterns_repo: PatternRepository
    users_repo: UserRepository

    holidays: HolidayCalculator
    resolution_engine: ResolutionEngine

    pattern_service: PatternService
    calendar_service: CalendarService
    user_service: UserService


def wire(
    *,
    patterns_repo: PatternRepository,
    users_repo: UserRepository,
    holidays: Optional[HolidayCalculator] = None,
) -> Container:
    """Assemble services over the given repositories (MySQL or in-memory)."""

    holidays = holidays or HolidayCalculator()
    resolution_engine = ResolutionEngine(patterns_repo, holidays)
    user_service = UserService(users_repo)

    return Container(
        patterns_repo=patterns_repo,
        users_repo=users_repo,
        holidays=holidays,
        resolution_engine=resolution_engine,
        pattern_service=PatternService(patterns_repo, holidays),
        calendar_service=CalendarService(resolution_engine, user_service, holidays),
        user_service=user_service,
    )


def build_container(*, db_config: dict, holidays_file: Optional[str] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    table = load_holiday_table(holidays_file) if holidays_file else None
    return wire(
        patterns_repo=MySQLPatternRepository(conn),
        users_repo=MySQLUserRepository(conn),
        holidays=HolidayCalculator(table),
    )

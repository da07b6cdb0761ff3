from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    USER = "user"
    ADMIN = "admin"


class LocationKind(str, Enum):
    """Where someone is on a given day. Closed set; resolution switches on it."""

    HOME = "home"
    OFFICE = "office"
    ANNUAL_LEAVE = "annual_leave"
    PERSONAL_LEAVE = "personal_leave"
    PUBLIC_HOLIDAY = "public_holiday"
    OTHER = "other"


class SourceKind(str, Enum):
    """Which source produced a resolved day entry."""

    ONE_TIME = "one_time"
    RECURRING = "recurring"
    HOLIDAY = "holiday"


class ViewMode(str, Enum):
    PERSONAL = "personal"
    TEAM = "team"


class CalendarView(str, Enum):
    MONTH = "month"
    WEEK = "week"
    DAY = "day"

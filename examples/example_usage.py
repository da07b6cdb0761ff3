"""Example: use the service layer directly, without Flask.

Controllers are thin; scheduling rules live in the services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.team_calendar.team_calendar.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    result = container.pattern_service.upsert_range(
        owner_id=2, start=date(2025, 6, 2), end=date(2025, 6, 6), location="office", notes="Sprint week"
    )
    print(f"stored={len(result.entries)} skipped={[d.isoformat() for d in result.skipped]}")

    for t in container.calendar_service.team(start=date(2025, 6, 2), end=date(2025, 6, 8)):
        print(t.entry.work_date, t.display_name, t.entry.location.value, t.entry.source_kind.value)


if __name__ == "__main__":
    main()

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, Iterable, List, Tuple

from ..common.datetime_utils import iter_days
from ..core.constants import MONTH_GRID_DAYS
from ..core.enums import CalendarView
from .model import CalendarDay, ResolvedDayEntry


def visible_range(view: CalendarView | str, anchor: date) -> Tuple[date, date]:
    """Inclusive [start, end] shown by a calendar view around ``anchor``.

    month: fixed 6-week grid starting on the Sunday on/before the 1st.
    week: Monday..Sunday containing the anchor.
    day: the anchor itself.
    """

    view = CalendarView(view)
    if view == CalendarView.DAY:
        return anchor, anchor

    if view == CalendarView.WEEK:
        start = anchor - timedelta(days=anchor.weekday())
        return start, start + timedelta(days=6)

    first = anchor.replace(day=1)
    # weekday(): Monday=0 .. Sunday=6
    start = first - timedelta(days=(first.weekday() + 1) % 7)
    return start, start + timedelta(days=MONTH_GRID_DAYS - 1)


def build_calendar_days(
    entries: Iterable[ResolvedDayEntry],
    start: date,
    end: date,
    *,
    anchor: date,
    today: date,
) -> List[CalendarDay]:
    by_day: Dict[date, List[ResolvedDayEntry]] = {}
    for e in entries:
        by_day.setdefault(e.work_date, []).append(e)

    return [
        CalendarDay(
            work_date=day,
            is_today=day == today,
            is_current_month=(day.year, day.month) == (anchor.year, anchor.month),
            entries=by_day.get(day, []),
        )
        for day in iter_days(start, end)
    ]

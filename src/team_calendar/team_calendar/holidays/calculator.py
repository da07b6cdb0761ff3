from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import ValidationError
from .model import Holiday
from .table import QUEENSLAND_PUBLIC_HOLIDAYS, HolidayTable

logger = logging.getLogger(__name__)


class HolidayCalculator:
    """Maps a calendar day to an optional named public holiday.

    Pure lookup over a year-keyed table; unknown years simply have no
    holidays.
    """

    def __init__(self, table: HolidayTable | None = None):
        self._by_year: Dict[int, Dict[date, Holiday]] = {}
        source = QUEENSLAND_PUBLIC_HOLIDAYS if table is None else table
        for year, rows in source.items():
            by_day: Dict[date, Holiday] = {}
            for iso, name in rows:
                day = parse_iso_date(iso)
                if day.year != int(year):
                    raise ValidationError(f"Holiday {iso} listed under year {year}")
                by_day[day] = Holiday(work_date=day, name=str(name))
            self._by_year[int(year)] = dict(sorted(by_day.items()))

    @property
    def years(self) -> List[int]:
        return sorted(self._by_year)

    def holiday_for(self, day: date) -> Optional[Holiday]:
        return self._by_year.get(day.year, {}).get(day)

    def holidays_in_range(self, start: date, end: date) -> List[Holiday]:
        if end < start:
            return []

        out: List[Holiday] = []
        for year in range(start.year, end.year + 1):
            for day, holiday in self._by_year.get(year, {}).items():
                if start <= day <= end:
                    out.append(holiday)
        return out


def load_holiday_table(path: str | Path, *, base: HolidayTable | None = None) -> HolidayTable:
    """Read a JSON holiday table and lay it over ``base``.

    File format: ``{"2027": [["2027-01-01", "New Year's Day"], ...]}``.
    Years present in the file replace the same years in ``base``.
    """

    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ValidationError(f"Cannot read holiday table {path}: {e}")

    if not isinstance(raw, dict):
        raise ValidationError(f"Holiday table {path} must be a JSON object keyed by year")

    merged: Dict[int, List[tuple[str, str]]] = {
        int(y): list(rows) for y, rows in (QUEENSLAND_PUBLIC_HOLIDAYS if base is None else base).items()
    }
    for year_s, rows in raw.items():
        try:
            year = int(year_s)
        except ValueError:
            raise ValidationError(f"Invalid year {year_s!r} in {path}")
        if not isinstance(rows, list) or not all(isinstance(r, (list, tuple)) and len(r) == 2 for r in rows):
            raise ValidationError(f"Year {year} in {path} must list [date, name] pairs")
        merged[year] = [(str(iso), str(name)) for iso, name in rows]

    logger.info("Loaded holiday table from %s (years=%s)", path, sorted(merged))
    return merged

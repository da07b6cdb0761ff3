"""Queensland (Australia) public holidays, keyed by year.

Each year maps to an ordered list of (ISO date, name). Add a year here or
supply it through the HOLIDAYS_FILE setting; no code change is needed.
"""

from __future__ import annotations

from typing import Mapping, Sequence, Tuple

HolidayTable = Mapping[int, Sequence[Tuple[str, str]]]

QUEENSLAND_PUBLIC_HOLIDAYS: HolidayTable = {
    2024: [
        ("2024-01-01", "New Year's Day"),
        ("2024-01-26", "Australia Day"),
        ("2024-03-29", "Good Friday"),
        ("2024-03-30", "Easter Saturday"),
        ("2024-03-31", "Easter Sunday"),
        ("2024-04-01", "Easter Monday"),
        ("2024-04-25", "Anzac Day"),
        ("2024-05-06", "Labour Day"),
        ("2024-10-07", "King's Birthday"),
        ("2024-12-25", "Christmas Day"),
        ("2024-12-26", "Boxing Day"),
    ],
    2025: [
        ("2025-01-01", "New Year's Day"),
        ("2025-01-27", "Australia Day"),  # observed Monday
        ("2025-04-18", "Good Friday"),
        ("2025-04-19", "Easter Saturday"),
        ("2025-04-20", "Easter Sunday"),
        ("2025-04-21", "Easter Monday"),
        ("2025-04-25", "Anzac Day"),
        ("2025-05-05", "Labour Day"),
        ("2025-10-06", "King's Birthday"),
        ("2025-12-25", "Christmas Day"),
        ("2025-12-26", "Boxing Day"),
    ],
    2026: [
        ("2026-01-01", "New Year's Day"),
        ("2026-01-26", "Australia Day"),
        ("2026-04-03", "Good Friday"),
        ("2026-04-04", "Easter Saturday"),
        ("2026-04-05", "Easter Sunday"),
        ("2026-04-06", "Easter Monday"),
        ("2026-04-25", "Anzac Day"),
        ("2026-05-04", "Labour Day"),
        ("2026-10-05", "King's Birthday"),
        ("2026-12-25", "Christmas Day"),
        ("2026-12-26", "Boxing Day"),
        ("2026-12-28", "Boxing Day (additional day)"),
    ],
}

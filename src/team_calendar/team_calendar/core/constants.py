"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Reserved owner id for system-wide entries (public holidays in team view).
SYSTEM_OWNER_ID = 0
SYSTEM_OWNER_NAME = "Public Holiday"

# Longest inclusive span accepted by a multi-day upsert.
MAX_RANGE_DAYS = 366

# Cells in a month grid (6 weeks).
MONTH_GRID_DAYS = 42

# How far ahead refresh_holidays stamps explicit holiday entries.
HOLIDAY_REFRESH_DAYS = 365

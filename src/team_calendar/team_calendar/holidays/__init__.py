from .calculator import HolidayCalculator, load_holiday_table
from .model import Holiday
from .table import QUEENSLAND_PUBLIC_HOLIDAYS

__all__ = ["Holiday", "HolidayCalculator", "QUEENSLAND_PUBLIC_HOLIDAYS", "load_holiday_table"]

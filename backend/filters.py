from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from aggregation import group_by_day
from schemas import DAY_KEY_FORMAT, DailySummary, MoodEntry

# Minimum-average threshold meaning "show every day". Any float, including
# zero and negatives, is a real threshold.
NO_MIN_AVERAGE = None


class DatePreset(str, Enum):
    ALL = "all"
    TODAY = "today"
    LAST_7_DAYS = "last_7_days"


def preset_range(preset: DatePreset, today: Optional[date] = None) -> Tuple[Optional[date], Optional[date]]:
    today = today or date.today()
    if preset == DatePreset.TODAY:
        return today, today
    if preset == DatePreset.LAST_7_DAYS:
        return today - timedelta(days=6), today
    return None, None


def filter_by_keyword(entries: Iterable[MoodEntry], query: Optional[str]) -> List[MoodEntry]:
    """Case-insensitive substring match on the note only."""
    q = (query or "").strip().lower()
    if not q:
        return list(entries)
    return [e for e in entries if q in (e.note or "").lower()]


def _parse_day(day_key: str) -> Optional[date]:
    try:
        return datetime.strptime(day_key, DAY_KEY_FORMAT).date()
    except ValueError:
        return None


def filter_by_date_range(
    days: Iterable[DailySummary],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> List[DailySummary]:
    """Keep days inside [date_from, date_to]; either bound may be open.

    A day key that does not parse is kept so the entries stay visible.
    """
    kept = []
    for day in days:
        parsed = _parse_day(day.date)
        if parsed is not None:
            if date_from is not None and parsed < date_from:
                continue
            if date_to is not None and parsed > date_to:
                continue
        kept.append(day)
    return kept


def filter_by_min_average(days: Iterable[DailySummary], min_average: Optional[float] = NO_MIN_AVERAGE) -> List[DailySummary]:
    if min_average is NO_MIN_AVERAGE:
        return list(days)
    return [d for d in days if d.average_score >= min_average]


def with_location(entries: Iterable[MoodEntry]) -> List[MoodEntry]:
    return [e for e in entries if e.location is not None]


def apply_filters(
    entries: Iterable[MoodEntry],
    query: str = "",
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    min_average: Optional[float] = NO_MIN_AVERAGE,
) -> List[DailySummary]:
    """keyword -> group_by_day -> date range -> minimum average."""
    days = group_by_day(filter_by_keyword(entries, query))
    days = filter_by_date_range(days, date_from, date_to)
    return filter_by_min_average(days, min_average)


@dataclass
class FilterState:
    query: str = ""
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    min_average: Optional[float] = NO_MIN_AVERAGE

    def use_preset(self, preset: DatePreset, today: Optional[date] = None) -> None:
        self.date_from, self.date_to = preset_range(preset, today)

    def reset_query(self) -> None:
        self.query = ""

    def reset_dates(self) -> None:
        self.date_from = None
        self.date_to = None

    def reset_min_average(self) -> None:
        self.min_average = NO_MIN_AVERAGE

    def reset(self) -> None:
        self.reset_query()
        self.reset_dates()
        self.reset_min_average()

    def apply(self, entries: Iterable[MoodEntry]) -> List[DailySummary]:
        return apply_filters(entries, self.query, self.date_from, self.date_to, self.min_average)

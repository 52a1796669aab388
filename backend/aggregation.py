from typing import Dict, Iterable, List, Sequence

from schemas import DailySummary, DayInsight, MoodEntry, MoodType


def average_score(entries: Sequence[MoodEntry]) -> float:
    if not entries:
        return 0.0
    return sum(e.score for e in entries) / len(entries)


def group_by_day(entries: Iterable[MoodEntry]) -> List[DailySummary]:
    """Bucket entries by day key, newest day first and newest entry first within a day.

    Timestamps share one fixed-width format, so plain string order is
    chronological order for both the entries and the day keys.
    """
    buckets: Dict[str, List[MoodEntry]] = {}
    for entry in entries:
        buckets.setdefault(entry.day_key, []).append(entry)

    summaries = []
    for day, moods in buckets.items():
        ordered = sorted(moods, key=lambda m: m.timestamp, reverse=True)
        summaries.append(DailySummary(date=day, entries=ordered, average_score=average_score(ordered)))

    summaries.sort(key=lambda s: s.date, reverse=True)
    return summaries


def average_label(score: float) -> str:
    if score >= 1.5:
        return MoodType.HAPPY.label
    if score >= 0.5:
        return MoodType.RELAXED.label
    if score >= -0.5:
        return MoodType.NEUTRAL.label
    if score >= -1.5:
        return MoodType.SAD.label
    return MoodType.ANGRY.label


def mood_counts(entries: Iterable[MoodEntry]) -> Dict[MoodType, int]:
    counts = {mood: 0 for mood in MoodType}
    for entry in entries:
        counts[entry.mood_type] += 1
    return counts


def build_insights(summaries: Iterable[DailySummary]) -> List[DayInsight]:
    return [
        DayInsight(
            date=day.date,
            average_score=day.average_score,
            average_label=average_label(day.average_score),
            counts=mood_counts(day.entries),
            total=len(day.entries),
        )
        for day in summaries
    ]

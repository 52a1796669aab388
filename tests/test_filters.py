"""
Filter pipeline tests: keyword, date range, minimum average and their
composition in apply_filters / FilterState.
"""
from datetime import date

from aggregation import group_by_day
from filters import (
    NO_MIN_AVERAGE,
    DatePreset,
    FilterState,
    apply_filters,
    filter_by_date_range,
    filter_by_keyword,
    filter_by_min_average,
    preset_range,
    with_location,
)
from schemas import DailySummary, Location, MoodType


def _days(make_entry, *day_keys):
    return group_by_day([make_entry(timestamp=f"{d} 12:00:00") for d in day_keys])


class TestKeyword:

    def test_case_insensitive_note_match(self, make_entry):
        entries = [make_entry(note="Great day"), make_entry(note="bad DAY"), make_entry(note="neutral")]
        assert [e.note for e in filter_by_keyword(entries, "DAY")] == ["Great day", "bad DAY"]

    def test_blank_query_is_identity(self, make_entry):
        entries = [make_entry(note="a"), make_entry(note="")]
        assert filter_by_keyword(entries, "   ") == entries
        assert filter_by_keyword(entries, None) == entries

    def test_only_note_is_searched(self, make_entry):
        entries = [make_entry(MoodType.HAPPY, note="walk", timestamp="2025-10-19 12:00:00")]
        assert filter_by_keyword(entries, "happy") == []
        assert filter_by_keyword(entries, "2025") == []


class TestDateRange:

    def test_bounds_are_inclusive(self, make_entry):
        days = _days(make_entry, "2025-10-09", "2025-10-10", "2025-10-15", "2025-10-20", "2025-10-21")

        kept = filter_by_date_range(days, date(2025, 10, 10), date(2025, 10, 20))

        assert [d.date for d in kept] == ["2025-10-20", "2025-10-15", "2025-10-10"]

    def test_open_bounds(self, make_entry):
        days = _days(make_entry, "2025-10-01", "2025-10-31")

        assert len(filter_by_date_range(days)) == 2
        assert [d.date for d in filter_by_date_range(days, date_from=date(2025, 10, 15))] == ["2025-10-31"]
        assert [d.date for d in filter_by_date_range(days, date_to=date(2025, 10, 15))] == ["2025-10-01"]

    def test_unparseable_day_key_passes(self):
        odd = DailySummary(date="19/10/2025", entries=[], average_score=0.0)

        kept = filter_by_date_range([odd], date(2030, 1, 1), date(2030, 1, 2))

        assert kept == [odd]


class TestMinAverage:

    def test_sentinel_disables_filter(self, make_entry):
        days = group_by_day([make_entry(MoodType.ANGRY)])
        assert filter_by_min_average(days, NO_MIN_AVERAGE) == days

    def test_zero_and_negative_are_real_thresholds(self, make_entry):
        days = group_by_day([
            make_entry(MoodType.ANGRY, timestamp="2025-10-01 08:00:00"),
            make_entry(MoodType.SAD, timestamp="2025-10-02 08:00:00"),
            make_entry(MoodType.NEUTRAL, timestamp="2025-10-03 08:00:00"),
        ])

        assert [d.date for d in filter_by_min_average(days, 0)] == ["2025-10-03"]
        assert [d.date for d in filter_by_min_average(days, -1)] == ["2025-10-03", "2025-10-02"]


class TestComposition:

    def test_keyword_then_min_average(self, make_entry):
        entries = [
            make_entry(MoodType.HAPPY, "great day", "2025-10-19 08:00:00"),
            make_entry(MoodType.SAD, "bad day", "2025-10-19 09:00:00"),
            make_entry(MoodType.NEUTRAL, "neutral", "2025-10-19 10:00:00"),
        ]

        days = apply_filters(entries, query="bad")
        assert len(days) == 1
        assert [e.note for e in days[0].entries] == ["bad day"]

        assert apply_filters(entries, query="bad", min_average=0) == []

    def test_keyword_runs_before_averaging(self, make_entry):
        entries = [
            make_entry(MoodType.HAPPY, "gym", "2025-10-19 08:00:00"),
            make_entry(MoodType.ANGRY, "traffic", "2025-10-19 09:00:00"),
        ]

        days = apply_filters(entries, query="gym", min_average=1.5)

        assert days[0].average_score == 2

    def test_empty_entries(self):
        assert apply_filters([], "x", date(2025, 1, 1), date(2025, 1, 2), 1.0) == []


class TestFilterState:

    def test_resets_are_independent(self):
        state = FilterState(query="rain", date_from=date(2025, 1, 1), date_to=date(2025, 1, 31), min_average=1.0)

        state.reset_query()
        assert state.query == "" and state.min_average == 1.0

        state.reset_dates()
        assert state.date_from is None and state.date_to is None and state.min_average == 1.0

        state.reset_min_average()
        assert state.min_average is NO_MIN_AVERAGE

    def test_apply_uses_current_state(self, make_entry):
        entries = [
            make_entry(MoodType.HAPPY, "rain walk", "2025-10-19 08:00:00"),
            make_entry(MoodType.HAPPY, "sunny", "2025-10-12 08:00:00"),
        ]
        state = FilterState(query="rain")
        assert [d.date for d in state.apply(entries)] == ["2025-10-19"]

        state.reset()
        state.use_preset(DatePreset.LAST_7_DAYS, today=date(2025, 10, 18))
        assert [d.date for d in state.apply(entries)] == ["2025-10-12"]


class TestPresets:

    def test_preset_ranges(self):
        today = date(2025, 10, 19)
        assert preset_range(DatePreset.ALL, today) == (None, None)
        assert preset_range(DatePreset.TODAY, today) == (today, today)
        assert preset_range(DatePreset.LAST_7_DAYS, today) == (date(2025, 10, 13), today)


def test_with_location(make_entry):
    placed = make_entry(note="park", location=Location(lat=52.26, lng=-7.11))
    assert with_location([make_entry(note="home"), placed]) == [placed]

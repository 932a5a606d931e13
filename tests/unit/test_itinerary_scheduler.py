"""
Unit tests for time-of-day itinerary generation
"""
from datetime import datetime, timezone

import pytest

from tripnav.models.trip import ActivityType
from tripnav.services.itinerary_scheduler import (
    ItineraryScheduler,
    format_time_label,
    group_by_activity,
)


def at(hour, minute=0):
    return datetime(2024, 5, 1, hour, minute)


def test_morning_gets_full_day():
    items = ItineraryScheduler().generate(at(9))
    assert [i.activity for i in items] == [
        "Breakfast at Local Cafe",
        "Visit Historical Sites",
        "Lunch at Popular Restaurant",
        "Local Market Tour",
        "Evening City Tour",
    ]
    assert [i.time_label for i in items] == ["08:00 AM", "10:00 AM", "12:30 PM", "03:00 PM", "06:00 PM"]
    assert [i.activity_type for i in items] == [
        ActivityType.DINING,
        ActivityType.SIGHTSEEING,
        ActivityType.DINING,
        ActivityType.SHOPPING,
        ActivityType.TOUR,
    ]
    assert items[2].duration_label == "1.5 hours"


@pytest.mark.parametrize("hour,count", [(0, 5), (10, 5), (11, 4), (12, 4), (13, 3), (15, 3), (16, 2), (18, 2), (19, 1), (21, 1)])
def test_thresholds_are_inclusive(hour, count):
    items = ItineraryScheduler().generate(at(hour, 59))
    assert len(items) == count


def test_afternoon_drops_morning_slots():
    items = ItineraryScheduler().generate(at(16))
    assert [i.activity for i in items] == ["Local Market Tour", "Evening City Tour"]


@pytest.mark.parametrize("hour", [22, 23])
def test_late_night_switches_to_tomorrow(hour):
    now = at(hour)
    items = ItineraryScheduler().generate(now)
    assert len(items) == 5
    assert all(i.time_label.startswith("Tomorrow ") for i in items)
    assert items[0].time_label == "Tomorrow 08:00 AM"
    assert items[0].activity == "Breakfast at Local Cafe"
    assert items[0].starts_at == datetime(2024, 5, 2, 8, 0)
    assert items[-1].starts_at == datetime(2024, 5, 2, 18, 0)
    assert not any(i.is_past(now) for i in items)


def test_breakfast_only_next_day():
    items = ItineraryScheduler(extended_next_day=False).generate(at(23))
    assert [i.time_label for i in items] == ["Tomorrow 08:00 AM"]


def test_same_hour_gives_same_plan():
    scheduler = ItineraryScheduler()
    assert scheduler.generate(at(14, 1)) == scheduler.generate(at(14, 45))


def test_starts_at_keeps_timezone():
    now = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
    items = ItineraryScheduler().generate(now)
    assert items[0].starts_at.tzinfo is timezone.utc
    assert items[0].is_past(now)
    assert not items[1].is_past(now)


def test_matching_place_is_attached(make_place):
    cafe = make_place("cafe", 0, 0, category="Dining", display_name="Blue Bottle")
    market = make_place("market", 0, 0, category="shopping_mall", display_name="Ameyoko")
    items = ItineraryScheduler().generate(at(8), group_by_activity([cafe, market]))

    assert items[0].activity == "Breakfast at Local Cafe at Blue Bottle"
    assert items[0].matched_place == cafe
    # Lunch is also dining and reuses the first candidate
    assert items[2].matched_place == cafe
    assert items[3].activity == "Local Market Tour at Ameyoko"
    assert items[1].matched_place is None
    assert items[1].activity == "Visit Historical Sites"


def test_first_matching_candidate_wins(make_place):
    first = make_place("first", 0, 0, category="tour_operator", display_name="Night Bus")
    second = make_place("second", 0, 0, category="walking tour", display_name="Old Town Walk")
    items = ItineraryScheduler().generate(at(20), group_by_activity([first, second]))
    assert items[0].matched_place == first


def test_unmatched_candidates_leave_items_unchanged(make_place):
    park = make_place("park", 0, 0, category="park")
    grouped = group_by_activity([park])
    assert all(not places for places in grouped.values())
    items = ItineraryScheduler().generate(at(9), grouped)
    assert all(i.matched_place is None for i in items)


def test_format_time_label():
    assert format_time_label(datetime(2024, 1, 1, 12, 30).time()) == "12:30 PM"
    assert format_time_label(datetime(2024, 1, 1, 18, 0).time()) == "06:00 PM"

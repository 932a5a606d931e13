"""
Time-of-day itinerary generation.

The plan depends only on the hour of ``now``: each template slot is kept
while the hour is at or below its threshold. From 22:00 on the plan switches
to the next day.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, time, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from tripnav.models.trip import ActivityType, ItineraryItem, Place

logger = logging.getLogger(__name__)

# Hour 22 itself already belongs to the next-day plan
NEXT_DAY_FROM_HOUR = 22
TOMORROW_PREFIX = "Tomorrow"


@dataclass(frozen=True)
class ActivitySlot:
    until_hour: int  # inclusive
    starts: time
    activity: str
    activity_type: ActivityType
    duration_label: str


DAY_TEMPLATE: tuple[ActivitySlot, ...] = (
    ActivitySlot(10, time(8, 0), "Breakfast at Local Cafe", ActivityType.DINING, "1 hour"),
    ActivitySlot(12, time(10, 0), "Visit Historical Sites", ActivityType.SIGHTSEEING, "2 hours"),
    ActivitySlot(15, time(12, 30), "Lunch at Popular Restaurant", ActivityType.DINING, "1.5 hours"),
    ActivitySlot(18, time(15, 0), "Local Market Tour", ActivityType.SHOPPING, "2 hours"),
    ActivitySlot(22, time(18, 0), "Evening City Tour", ActivityType.TOUR, "2 hours"),
)


def format_time_label(t: time) -> str:
    """``time(8, 0)`` -> ``"08:00 AM"``."""
    return t.strftime("%I:%M %p")


def group_by_activity(places: Iterable[Place]) -> Dict[ActivityType, List[Place]]:
    """Candidate places per activity type, keyed on a category substring match."""
    grouped: Dict[ActivityType, List[Place]] = {t: [] for t in ActivityType}
    for place in places:
        category = place.category.lower()
        for activity_type in ActivityType:
            if activity_type.value in category:
                grouped[activity_type].append(place)
    return grouped


class ItineraryScheduler:

    def __init__(self, extended_next_day: bool = True):
        self.extended_next_day = extended_next_day

    def generate(
        self,
        now: datetime,
        nearby_by_category: Optional[Mapping[ActivityType, Sequence[Place]]] = None,
    ) -> List[ItineraryItem]:
        """
        Build the activity plan for ``now``.

        Args:
            now: Current local time; only the hour selects slots, the date
                anchors ``starts_at``
            nearby_by_category: Optional candidate places per activity type.
                The first candidate whose category contains the activity type
                (case-insensitive) is attached to the item.

        Returns:
            Ordered itinerary items
        """
        hour = now.hour
        today = now.date()

        if hour >= NEXT_DAY_FROM_HOUR:
            tomorrow = today + timedelta(days=1)
            slots = DAY_TEMPLATE if self.extended_next_day else DAY_TEMPLATE[:1]
            items = [self._item(slot, tomorrow, now, prefix=TOMORROW_PREFIX) for slot in slots]
        else:
            items = [
                self._item(slot, today, now)
                for slot in DAY_TEMPLATE
                if hour <= slot.until_hour
            ]

        if nearby_by_category:
            items = [self._annotate(item, nearby_by_category) for item in items]
        return items

    def _item(self, slot: ActivitySlot, day, now: datetime, prefix: Optional[str] = None) -> ItineraryItem:
        label = format_time_label(slot.starts)
        if prefix:
            label = f"{prefix} {label}"
        return ItineraryItem(
            time_label=label,
            activity=slot.activity,
            activity_type=slot.activity_type,
            duration_label=slot.duration_label,
            starts_at=datetime.combine(day, slot.starts, tzinfo=now.tzinfo),
        )

    @staticmethod
    def _annotate(
        item: ItineraryItem,
        nearby_by_category: Mapping[ActivityType, Sequence[Place]],
    ) -> ItineraryItem:
        needle = item.activity_type.value.lower()
        for place in nearby_by_category.get(item.activity_type) or ():
            if needle in place.category.lower():
                return replace(
                    item,
                    activity=f"{item.activity} at {place.display_name}",
                    matched_place=place,
                )
        return item

"""
Traffic / incident markers for the current map viewport.

Each viewport change replaces the whole incident set; nothing outside the
new bounds survives.
"""
from __future__ import annotations

import hashlib
import logging
import random
from abc import ABC, abstractmethod
from typing import List, Optional

from tripnav.core.exceptions import PROVIDER_ERRORS
from tripnav.models.trip import SEVERITY_COLORS, BoundingBox, GeoPoint, Severity, TrafficIncident

logger = logging.getLogger(__name__)

__all__ = [
    "IncidentFeed",
    "SEVERITY_COLORS",
    "SimulatedIncidentFeed",
    "TrafficOverlay",
    "color_for",
]

INCIDENT_DESCRIPTIONS = {
    Severity.HIGH: "Heavy traffic reported due to construction work",
    Severity.MODERATE: "Slow traffic, expect minor delays",
    Severity.LOW: "Traffic flowing normally",
}


def color_for(severity: Severity) -> str:
    return SEVERITY_COLORS[Severity(severity)]


class IncidentFeed(ABC):
    """Source of traffic incidents for a bounding box."""

    @abstractmethod
    async def fetch(self, bounds: BoundingBox) -> List[TrafficIncident]:
        ...


class SimulatedIncidentFeed(IncidentFeed):
    """
    Deterministic stand-in for a live traffic feed.

    Incidents are seeded by the rounded viewport so panning back to the same
    area shows the same markers.
    """

    def __init__(self, max_incidents: int = 3):
        self.max_incidents = max_incidents

    async def fetch(self, bounds: BoundingBox) -> List[TrafficIncident]:
        sw, ne = bounds.south_west, bounds.north_east
        key = f"{sw.latitude:.2f},{sw.longitude:.2f}:{ne.latitude:.2f},{ne.longitude:.2f}"
        rng = random.Random(hashlib.sha256(key.encode("utf-8")).hexdigest())

        west, east = sw.longitude, ne.longitude
        if bounds.crosses_antimeridian:
            east += 360.0

        incidents = []
        for i in range(rng.randint(0, self.max_incidents)):
            lon = rng.uniform(west, east)
            if lon > 180.0:
                lon -= 360.0
            severity = rng.choice(list(Severity))
            incidents.append(TrafficIncident(
                id=f"inc-{hashlib.sha256(f'{key}:{i}'.encode('utf-8')).hexdigest()[:12]}",
                location=GeoPoint(rng.uniform(sw.latitude, ne.latitude), lon),
                severity=severity,
                description=INCIDENT_DESCRIPTIONS[severity],
            ))
        return incidents


class TrafficOverlay:

    def __init__(self, feed: Optional[IncidentFeed] = None):
        self.feed = feed or SimulatedIncidentFeed()
        self._bounds: Optional[BoundingBox] = None
        self._incidents: tuple[TrafficIncident, ...] = ()

    @property
    def bounds(self) -> Optional[BoundingBox]:
        return self._bounds

    @property
    def incidents(self) -> tuple[TrafficIncident, ...]:
        return self._incidents

    async def update(self, bounds: BoundingBox) -> tuple[TrafficIncident, ...]:
        """
        Replace the incident set with the feed's incidents inside ``bounds``.

        A feed failure keeps the previous set for the old bounds if the
        viewport did not move, otherwise clears it.
        """
        moved = bounds != self._bounds
        self._bounds = bounds
        try:
            fetched = await self.feed.fetch(bounds)
        except PROVIDER_ERRORS as e:
            logger.warning(f"Incident feed failed: {e.message}")
            if self._bounds != bounds:
                return self._incidents
            if moved:
                self._incidents = ()
            return self._incidents

        if self._bounds != bounds:
            # A newer viewport arrived while this fetch was in flight
            return self._incidents

        self._incidents = tuple(i for i in fetched if bounds.contains(i.location))
        logger.debug(f"{len(self._incidents)} incidents in viewport ({len(fetched)} fetched)")
        return self._incidents

    async def tick(self) -> None:
        """Re-poll the current viewport; no-op until the first viewport arrives."""
        if self._bounds is None:
            return
        await self.update(self._bounds)

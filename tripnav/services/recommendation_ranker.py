"""
Recommendation ranking.

Turns raw nearby places into recommendations ordered by effective travel
distance (haversine distance weighted by transport mode). Scores the provider
does not supply come from a pluggable estimator so a real scoring feed can
replace the deterministic default without touching the ranking.
"""
from __future__ import annotations

import hashlib
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

from tripnav.core.geo import effective_distance_km
from tripnav.models.trip import (
    BestTime,
    CrowdLevel,
    GeoPoint,
    Place,
    Recommendation,
    TransportMode,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaceEstimate:
    rating: float
    crowd_level: CrowdLevel
    best_time: BestTime


class RecommendationEstimator(ABC):
    """Supplies rating / crowd level / best time for places the provider did not score."""

    @abstractmethod
    def estimate(self, place: Place) -> PlaceEstimate:
        ...


class RotationEstimator(RecommendationEstimator):
    """
    Deterministic placeholder scores seeded by the place id.

    The same place always gets the same values, so repeated renders of one
    result set are stable.
    """

    CROWD_ROTATION = (CrowdLevel.LOW, CrowdLevel.MODERATE, CrowdLevel.HIGH)
    BEST_TIME_ROTATION = (BestTime.MORNING, BestTime.AFTERNOON, BestTime.EVENING)

    def estimate(self, place: Place) -> PlaceEstimate:
        digest = hashlib.sha256(place.id.encode("utf-8")).digest()
        # 3.0 .. 5.0 in tenths
        rating = 3.0 + (digest[0] % 21) / 10.0
        return PlaceEstimate(
            rating=round(rating, 1),
            crowd_level=self.CROWD_ROTATION[digest[1] % len(self.CROWD_ROTATION)],
            best_time=self.BEST_TIME_ROTATION[digest[2] % len(self.BEST_TIME_ROTATION)],
        )


class RecommendationRanker:

    def __init__(self, estimator: Optional[RecommendationEstimator] = None, limit: Optional[int] = None):
        self.estimator = estimator or RotationEstimator()
        self.limit = limit

    def rank(
        self,
        raw: Sequence[Place],
        origin: Optional[GeoPoint],
        mode: TransportMode,
    ) -> List[Recommendation]:
        """
        Build recommendations for ``raw`` and order them.

        With an origin, each recommendation carries its effective distance and
        the list is sorted ascending on it; ties keep input order. Without an
        origin distances are None and input order is kept.
        """
        recommendations = [self._recommend(place, origin, mode) for place in raw]

        if origin is not None:
            # sorted() is stable, equal distances keep their input order
            recommendations = sorted(recommendations, key=lambda r: r.effective_distance_km)

        if self.limit is not None:
            recommendations = recommendations[: self.limit]
        return recommendations

    def _recommend(self, place: Place, origin: Optional[GeoPoint], mode: TransportMode) -> Recommendation:
        estimate = None
        if place.rating is None or place.crowd_level is None or place.best_time is None:
            estimate = self.estimator.estimate(place)

        distance = effective_distance_km(origin, place.location, mode) if origin is not None else None
        return Recommendation(
            place=place,
            rating=place.rating if place.rating is not None else estimate.rating,
            crowd_level=place.crowd_level or estimate.crowd_level,
            best_time=place.best_time or estimate.best_time,
            effective_distance_km=distance,
        )

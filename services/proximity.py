"""Great-circle proximity search over a snapshot of bins.

The search is a linear scan: every candidate is measured with the haversine
formula and kept when it lies within the radius. A bounding box around the
query point is used to skip candidates that cannot possibly match before the
trigonometry runs. The box is derived from the spherical extent of the search
cap, so it never rejects a point that haversine would accept; it is skipped
near the poles and whenever the cap reaches one.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from app.schemas import Bin
from models.queries import DEFAULT_RADIUS_KM, NearbyQuery, validate_query

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
POLE_THRESHOLD_DEGREES = 89.0

# Absorbs float rounding so a point exactly on the radius survives the box.
_BOX_MARGIN_DEGREES = 1e-9


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres between two latitude/longitude points."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lng2 - lng1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Latitude/longitude window; ``min_longitude > max_longitude`` means it wraps ±180°."""

    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    @property
    def wraps_antimeridian(self) -> bool:
        return self.min_longitude > self.max_longitude

    def contains(self, latitude: float, longitude: float) -> bool:
        if not self.min_latitude <= latitude <= self.max_latitude:
            return False
        if self.wraps_antimeridian:
            return longitude >= self.min_longitude or longitude <= self.max_longitude
        return self.min_longitude <= longitude <= self.max_longitude


def bounding_box(latitude: float, longitude: float, radius_km: float) -> Optional[BoundingBox]:
    """Return a box enclosing the search cap, or ``None`` when no useful box exists."""

    if abs(latitude) > POLE_THRESHOLD_DEGREES:
        return None

    angular = radius_km / EARTH_RADIUS_KM
    lat_delta = math.degrees(angular) + _BOX_MARGIN_DEGREES
    min_latitude = latitude - lat_delta
    max_latitude = latitude + lat_delta
    if min_latitude <= -90 or max_latitude >= 90:
        # The cap touches a pole and so spans every longitude.
        return None

    ratio = math.sin(angular) / math.cos(math.radians(latitude))
    if ratio >= 1:
        return None
    lng_delta = math.degrees(math.asin(ratio)) + _BOX_MARGIN_DEGREES
    if lng_delta >= 180:
        return None

    min_longitude = longitude - lng_delta
    max_longitude = longitude + lng_delta
    if min_longitude < -180:
        min_longitude += 360
    if max_longitude > 180:
        max_longitude -= 360

    return BoundingBox(
        min_latitude=min_latitude,
        max_latitude=max_latitude,
        min_longitude=min_longitude,
        max_longitude=max_longitude,
    )


class ProximitySearch:
    """Stateless radius search; safe to share between threads."""

    def __init__(self, use_bounding_box: bool = True) -> None:
        self.use_bounding_box = use_bounding_box

    def find_nearby(
        self,
        bins: Sequence[Bin],
        latitude: float,
        longitude: float,
        radius_km: float = DEFAULT_RADIUS_KM,
    ) -> List[Bin]:
        """Return bins within ``radius_km`` of the point, most recently added first.

        Raises ``InvalidQueryError`` for out-of-range coordinates or a radius that
        is negative or not finite. A zero radius keeps only co-located bins.
        The input sequence is left untouched.
        """

        validate_query(latitude, longitude, radius_km)

        box = bounding_box(latitude, longitude, radius_km) if self.use_bounding_box else None
        matches = [
            candidate
            for candidate in self._prefilter(bins, box)
            if haversine_km(latitude, longitude, candidate.latitude, candidate.longitude)
            <= radius_km
        ]
        # sorted() is stable, so equal timestamps keep snapshot order.
        matches = sorted(matches, key=lambda candidate: candidate.added_at, reverse=True)

        logger.debug(
            "Nearby search complete",
            extra={
                "latitude": latitude,
                "longitude": longitude,
                "radius_km": radius_km,
                "candidate_count": len(bins),
                "result_count": len(matches),
            },
        )
        return matches

    def search(self, bins: Sequence[Bin], query: NearbyQuery) -> List[Bin]:
        return self.find_nearby(bins, query.latitude, query.longitude, query.radius_km)

    @staticmethod
    def _prefilter(bins: Iterable[Bin], box: Optional[BoundingBox]) -> Iterable[Bin]:
        if box is None:
            return bins
        return (candidate for candidate in bins if box.contains(candidate.latitude, candidate.longitude))


def find_nearby(
    bins: Sequence[Bin],
    latitude: float,
    longitude: float,
    radius_km: float = DEFAULT_RADIUS_KM,
) -> List[Bin]:
    """Module-level shortcut for :meth:`ProximitySearch.find_nearby`."""
    return ProximitySearch().find_nearby(bins, latitude, longitude, radius_km)

"""Value objects describing proximity queries."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from services.errors import InvalidQueryError

DEFAULT_RADIUS_KM = 5.0

MISSING_COORDINATES_MESSAGE = (
    "Please provide latitude (lat) and longitude (lng) query parameters"
)
MALFORMED_QUERY_MESSAGE = "Invalid coordinates or radius"


@dataclass(frozen=True, slots=True)
class NearbyQuery:
    """A validated centre point and search radius in kilometres."""

    latitude: float
    longitude: float
    radius_km: float = DEFAULT_RADIUS_KM

    def __post_init__(self) -> None:
        validate_query(self.latitude, self.longitude, self.radius_km)

    @property
    def radius_label(self) -> str:
        return format_radius(self.radius_km)

    @classmethod
    def from_params(
        cls,
        lat: Optional[str],
        lng: Optional[str],
        radius: Optional[str] = None,
    ) -> "NearbyQuery":
        """Build a query from raw string parameters such as a URL query string."""

        lat_raw = (lat or "").strip()
        lng_raw = (lng or "").strip()
        if not lat_raw or not lng_raw:
            raise InvalidQueryError(MISSING_COORDINATES_MESSAGE)

        radius_raw = (radius or "").strip()
        try:
            latitude = float(lat_raw)
            longitude = float(lng_raw)
            radius_km = float(radius_raw) if radius_raw else DEFAULT_RADIUS_KM
        except ValueError as exc:
            raise InvalidQueryError(MALFORMED_QUERY_MESSAGE) from exc
        return cls(latitude=latitude, longitude=longitude, radius_km=radius_km)


def validate_query(latitude: float, longitude: float, radius_km: float) -> None:
    # NaN fails every comparison, so it is rejected by the range checks too.
    if not -90 <= latitude <= 90:
        raise InvalidQueryError("Latitude must be between -90 and 90")
    if not -180 <= longitude <= 180:
        raise InvalidQueryError("Longitude must be between -180 and 180")
    if not math.isfinite(radius_km) or radius_km < 0:
        raise InvalidQueryError("Radius must be a non-negative number of kilometres")


def format_radius(radius_km: float) -> str:
    if float(radius_km).is_integer():
        return f"{int(radius_km)} km"
    return f"{radius_km} km"

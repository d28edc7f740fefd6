"""Great-circle distance and postal-code coordinate lookup."""

from __future__ import annotations

import math
from typing import Mapping

from homefit.models.property import PropertyRecord

EARTH_RADIUS_MILES = 3958.8

Coordinate = tuple[float, float]


def haversine_miles(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two (lat, lon) points in miles."""
    lat1, lon1 = map(math.radians, a)
    lat2, lon2 = map(math.radians, b)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * math.asin(min(1.0, math.sqrt(h)))


class CoordinateIndex:
    """Postal code to (latitude, longitude) lookup.

    Records carrying their own coordinates win over the index.
    """

    def __init__(self, table: Mapping[str, Coordinate] | None = None):
        self._table = dict(table or {})

    def __len__(self) -> int:
        return len(self._table)

    def lookup(self, zipcode: str | None) -> Coordinate | None:
        if not zipcode:
            return None
        return self._table.get(str(zipcode).strip())

    def resolve(self, record: PropertyRecord) -> Coordinate | None:
        return record.coordinate or self.lookup(record.zipcode)

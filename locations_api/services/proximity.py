# locations_api/services/proximity.py
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from ..schemas.common import Location
from ..utils.geo import BBox, bounding_box, haversine_km, is_valid_coordinate

logger = logging.getLogger(__name__)


@dataclass
class RankedLocation:
    row: Mapping[str, Any]
    distance: float | None = None


def row_coordinate(row: Mapping[str, Any]) -> tuple[float, float]:
    """(lat, lon) of a stored row; ValueError/TypeError/KeyError on bad data."""
    lat = float(row["latitude"])
    lon = float(row["longitude"])
    if not is_valid_coordinate(lat, lon):
        raise ValueError(f"coordinate out of range: ({lat}, {lon})")
    return lat, lon


def prefilter_bbox(origin: Location | None, radius_km: float) -> BBox | None:
    """Bounding box to push into the store query, if one applies."""
    if origin is None:
        return None
    return bounding_box(origin.lat, origin.lon, radius_km)


def rank_by_proximity(
    rows: Iterable[Mapping[str, Any]],
    origin: Location | None,
    radius_km: float,
) -> list[RankedLocation]:
    """
    Keep the rows within radius_km of origin, annotated with their distance
    (rounded to 2 decimals) and sorted nearest first. Equal distances keep
    their input order.

    Without an origin every row is returned as received, without a distance.
    Rows with unusable coordinates are logged and skipped.
    """
    if origin is None:
        return [RankedLocation(row=row) for row in rows]

    within: list[tuple[float, Mapping[str, Any]]] = []
    for row in rows:
        try:
            lat, lon = row_coordinate(row)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping location %s with invalid coordinates: %s", row.get("id"), e)
            continue
        d = haversine_km(origin.lat, origin.lon, lat, lon)
        if d <= radius_km:
            within.append((d, row))

    # sorted() is stable, ties keep input order
    within.sort(key=lambda item: item[0])
    return [RankedLocation(row=row, distance=round(d, 2)) for d, row in within]

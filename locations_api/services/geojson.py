# locations_api/services/geojson.py
import logging
from typing import Any, Iterable, Mapping

from ..schemas.common import Location
from ..schemas.geojson import Feature, FeatureCollection, FeatureProperties, PointGeometry
from ..utils.time import to_iso
from .proximity import RankedLocation, rank_by_proximity, row_coordinate

logger = logging.getLogger(__name__)


def to_feature(row: Mapping[str, Any], distance: float | None = None) -> Feature:
    """
    Project a location row onto a GeoJSON Point feature.

    Coordinates come out as [longitude, latitude], the GeoJSON order.
    """
    lat, lon = row_coordinate(row)
    rating = row.get("rating")
    return Feature(
        geometry=PointGeometry(coordinates=(lon, lat)),
        properties=FeatureProperties(
            id=str(row["id"]),
            name=row["title"],
            description=row.get("description") or "",
            address=row.get("formatted_address") or row.get("address"),
            price=float(row["price"]),
            is_negotiable=bool(row["is_negotiable"]),
            deployable_hardware=list(row.get("deployable_hardware") or []),
            gallery=list(row.get("gallery") or []),
            rating=float(rating) if rating is not None else None,
            distance=distance,
            created_at=to_iso(row.get("created_at")),
        ),
    )


def to_feature_collection(ranked: Iterable[RankedLocation]) -> FeatureCollection:
    features = []
    for item in ranked:
        try:
            features.append(to_feature(item.row, item.distance))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping location %s, cannot project to GeoJSON: %s", item.row.get("id"), e)
    return FeatureCollection(features=features)


def build_feature_collection(
    rows: Iterable[Mapping[str, Any]],
    origin: Location | None,
    radius_km: float,
) -> FeatureCollection:
    return to_feature_collection(rank_by_proximity(rows, origin, radius_km))

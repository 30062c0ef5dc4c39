# locations_api/routers/geojson.py
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.concurrency import run_in_threadpool

from ..core.deps import get_current_user, get_store
from ..schemas.geojson import FeatureCollection
from ..schemas.queries import GeoJSONLocationsQuery, GeoJSONSearchQuery
from ..services.geojson import build_feature_collection
from ..services.proximity import prefilter_bbox
from ..services.store import LocationFilters, LocationStore, LocationStoreError

router = APIRouter(
    prefix="/api/v1/geojson",
    tags=["geojson"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/locations", response_model=FeatureCollection, response_model_exclude_none=True)
async def geojson_locations(
    q: Annotated[GeoJSONLocationsQuery, Query()],
    store: LocationStore = Depends(get_store),
):
    filters = LocationFilters(
        search=q.search,
        hardware=q.hardware,
        min_price=q.min_price,
        max_price=q.max_price,
        negotiable=q.negotiable,
        bbox=prefilter_bbox(q.origin, q.radius_km),
        limit=q.limit,
    )
    rows = await run_in_threadpool(store.find_locations, filters)
    return build_feature_collection(rows, q.origin, q.radius_km)


@router.get("/search", response_model=FeatureCollection, response_model_exclude_none=True)
async def geojson_search(
    q: Annotated[GeoJSONSearchQuery, Query()],
    store: LocationStore = Depends(get_store),
):
    filters = LocationFilters(
        search=q.q,
        bbox=prefilter_bbox(q.origin, q.radius_km),
        limit=q.limit,
    )
    try:
        rows = await run_in_threadpool(store.find_locations, filters)
    except LocationStoreError as e:
        raise HTTPException(status_code=500, detail="Search error occurred") from e
    return build_feature_collection(rows, q.origin, q.radius_km)

# locations_api/routers/locations.py
import logging
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.concurrency import run_in_threadpool

from ..core.deps import get_current_user, get_geocoder, get_store
from ..schemas.common import MessageResponse
from ..schemas.locations import (
    CreateLocationRequest,
    LocationListResponse,
    LocationOut,
    LocationResponse,
    UpdateLocationRequest,
)
from ..schemas.queries import LocationListQuery
from ..services.auth import AuthenticatedUser
from ..services.geocoding import GeocodingError, GeocodingResult, GoogleGeocoder
from ..services.store import LocationFilters, LocationStore
from ..utils.time import to_iso

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/locations", tags=["locations"])


# -------- helpers --------
def _to_location_out(row: dict[str, Any]) -> LocationOut:
    rating = row.get("rating")
    return LocationOut(
        id=str(row["id"]),
        owner_id=str(row["owner_id"]),
        title=row["title"],
        description=row.get("description") or "",
        address=row["address"],
        formatted_address=row.get("formatted_address"),
        latitude=float(row["latitude"]),
        longitude=float(row["longitude"]),
        place_id=row.get("place_id"),
        deployable_hardware=list(row.get("deployable_hardware") or []),
        price=float(row["price"]),
        is_negotiable=bool(row["is_negotiable"]),
        gallery=list(row.get("gallery") or []),
        rating=float(rating) if rating is not None else None,
        created_at=to_iso(row.get("created_at")),
        updated_at=to_iso(row.get("updated_at")),
    )

def _geo_columns(geo: GeocodingResult) -> dict[str, Any]:
    return {
        "latitude": geo.latitude,
        "longitude": geo.longitude,
        "formatted_address": geo.formatted_address,
        "place_id": geo.place_id,
    }

async def _resolve_address(geocoder: GoogleGeocoder, address: str, place_id: str | None = None) -> GeocodingResult:
    try:
        if place_id:
            return await geocoder.place_details(place_id)
        return await geocoder.geocode(address)
    except GeocodingError as e:
        raise HTTPException(status_code=400, detail=str(e) or "Invalid address provided")

async def _owned_location(store: LocationStore, location_id: str, user: AuthenticatedUser, action: str) -> dict[str, Any]:
    row = await run_in_threadpool(store.get_location, location_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Location not found")
    if str(row["owner_id"]) != user.id:
        logger.info("User %s tried to %s location %s owned by %s", user.id, action, location_id, row["owner_id"])
        raise HTTPException(status_code=403, detail=f"Not authorized to {action} this location")
    return row


# =========================
# READ
# =========================
@router.get("", response_model=LocationListResponse)
async def list_locations(
    q: Annotated[LocationListQuery, Query()],
    store: LocationStore = Depends(get_store),
    user: AuthenticatedUser = Depends(get_current_user),
):
    filters = LocationFilters(
        hardware=q.hardware,
        min_price=q.min_price,
        max_price=q.max_price,
        negotiable=q.negotiable,
        limit=q.limit,
        offset=q.offset,
    )
    rows = await run_in_threadpool(store.find_locations, filters)
    total = await run_in_threadpool(store.count_locations, filters)
    data = []
    for r in rows:
        try:
            data.append(_to_location_out(r))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping location %s, cannot serialize: %s", r.get("id"), e)
    return LocationListResponse(data=data, total=total)


@router.get("/{location_id}", response_model=LocationResponse, response_model_exclude_none=True)
async def get_location(
    location_id: UUID,
    store: LocationStore = Depends(get_store),
    user: AuthenticatedUser = Depends(get_current_user),
):
    row = await run_in_threadpool(store.get_location, str(location_id))
    if row is None:
        raise HTTPException(status_code=404, detail="Location not found")
    return LocationResponse(data=_to_location_out(row))


# =========================
# WRITE (owner only)
# =========================
@router.post("", status_code=201, response_model=LocationResponse, response_model_exclude_none=True)
async def create_location(
    body: CreateLocationRequest,
    store: LocationStore = Depends(get_store),
    geocoder: GoogleGeocoder = Depends(get_geocoder),
    user: AuthenticatedUser = Depends(get_current_user),
):
    geo = await _resolve_address(geocoder, body.address, body.place_id)

    values = body.model_dump(mode="json", exclude={"place_id"})
    values.update(_geo_columns(geo))
    values["owner_id"] = user.id

    row = await run_in_threadpool(store.create_location, values)
    return LocationResponse(data=_to_location_out(row), message="Location created successfully")


@router.put("/{location_id}", response_model=LocationResponse, response_model_exclude_none=True)
async def update_location(
    location_id: UUID,
    body: UpdateLocationRequest,
    store: LocationStore = Depends(get_store),
    geocoder: GoogleGeocoder = Depends(get_geocoder),
    user: AuthenticatedUser = Depends(get_current_user),
):
    existing = await _owned_location(store, str(location_id), user, "update")

    values = body.model_dump(mode="json", exclude_unset=True, exclude_none=True, exclude={"expected_updated_at"})
    if body.address is not None and body.address != existing.get("address"):
        geo = await _resolve_address(geocoder, body.address)
        values.update(_geo_columns(geo))

    row = await run_in_threadpool(store.update_location, str(location_id), values, body.expected_updated_at)
    if row is None:
        # owner check passed, so the row was deleted meanwhile or its version moved on
        if body.expected_updated_at is None:
            raise HTTPException(status_code=404, detail="Location not found")
        raise HTTPException(status_code=409, detail="Location was modified by another request, reload and retry")
    return LocationResponse(data=_to_location_out(row), message="Location updated successfully")


@router.delete("/{location_id}", response_model=MessageResponse)
async def delete_location(
    location_id: UUID,
    store: LocationStore = Depends(get_store),
    user: AuthenticatedUser = Depends(get_current_user),
):
    await _owned_location(store, str(location_id), user, "delete")
    deleted = await run_in_threadpool(store.delete_location, str(location_id))
    if not deleted:
        raise HTTPException(status_code=404, detail="Location not found")
    return MessageResponse(message="Location deleted successfully")

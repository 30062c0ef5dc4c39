"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timedelta, timezone
from typing import Any

# Keep the app from picking up a developer's real credentials
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "")

import pytest
from fastapi.testclient import TestClient

from locations_api.core.deps import get_current_user, get_geocoder, get_store
from locations_api.main import app
from locations_api.services.auth import AuthenticatedUser
from locations_api.services.geocoding import GeocodingError, GeocodingResult
from locations_api.services.store import LocationFilters, LocationStore, WRITABLE_COLUMNS

OWNER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"

NYC = (40.7128, -74.0059)
LA = (34.0522, -118.2437)

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_row(
    location_id: str,
    title: str,
    lat: float,
    lon: float,
    minutes: int = 0,
    **overrides: Any,
) -> dict[str, Any]:
    """Build a stored location row; `minutes` offsets created_at from BASE_TIME."""
    row = {
        "id": location_id,
        "owner_id": OWNER_ID,
        "title": title,
        "description": f"{title} rooftop",
        "address": f"1 Main St, {title}",
        "formatted_address": None,
        "latitude": lat,
        "longitude": lon,
        "place_id": None,
        "deployable_hardware": ["helium"],
        "price": 100,
        "is_negotiable": False,
        "gallery": [],
        "rating": None,
        "created_at": BASE_TIME + timedelta(minutes=minutes),
        "updated_at": BASE_TIME + timedelta(minutes=minutes),
    }
    row.update(overrides)
    return row


class FakeLocationStore(LocationStore):
    """In-memory LocationStore with the same filter semantics as the Postgres one."""

    def __init__(self, rows: list[dict[str, Any]] | None = None):
        self.rows: dict[str, dict[str, Any]] = {r["id"]: dict(r) for r in rows or []}
        self.last_filters: LocationFilters | None = None
        self._next_id = 0

    def _matching(self, filters: LocationFilters) -> list[dict[str, Any]]:
        out = []
        for row in self.rows.values():
            if filters.search:
                term = filters.search.lower()
                fields = [row.get("title"), row.get("description"), row.get("address")]
                if not any(term in (f or "").lower() for f in fields):
                    continue
            if filters.hardware and filters.hardware not in (row.get("deployable_hardware") or []):
                continue
            if filters.min_price is not None and row["price"] < filters.min_price:
                continue
            if filters.max_price is not None and row["price"] > filters.max_price:
                continue
            if filters.negotiable is not None and row["is_negotiable"] != filters.negotiable:
                continue
            if filters.bbox is not None:
                b = filters.bbox
                lat, lon = row.get("latitude"), row.get("longitude")
                # NULL coordinates never satisfy BETWEEN
                if lat is None or lon is None:
                    continue
                if not (b.south <= lat <= b.north and b.west <= lon <= b.east):
                    continue
            out.append(row)
        return sorted(out, key=lambda r: r["created_at"], reverse=True)

    def find_locations(self, filters: LocationFilters) -> list[dict[str, Any]]:
        self.last_filters = filters
        matching = self._matching(filters)
        return [dict(r) for r in matching[filters.offset:filters.offset + filters.limit]]

    def count_locations(self, filters: LocationFilters) -> int:
        return len(self._matching(filters))

    def get_location(self, location_id: str) -> dict[str, Any] | None:
        row = self.rows.get(location_id)
        return dict(row) if row else None

    def create_location(self, values: dict[str, Any]) -> dict[str, Any]:
        self._next_id += 1
        location_id = f"00000000-0000-0000-0000-{self._next_id:012d}"
        now = BASE_TIME + timedelta(days=1, minutes=self._next_id)
        row = {c: values.get(c) for c in WRITABLE_COLUMNS}
        row.update(id=location_id, created_at=now, updated_at=now)
        self.rows[location_id] = row
        return dict(row)

    def update_location(self, location_id, values, expected_updated_at=None):
        row = self.rows.get(location_id)
        if row is None:
            return None
        if expected_updated_at is not None and row["updated_at"] != expected_updated_at:
            return None
        row.update({c: values[c] for c in WRITABLE_COLUMNS if c in values})
        row["updated_at"] = row["updated_at"] + timedelta(seconds=1)
        return dict(row)

    def delete_location(self, location_id: str) -> bool:
        return self.rows.pop(location_id, None) is not None


class FakeGeocoder:
    """Geocoder stub: known addresses resolve, anything else fails."""

    def __init__(self, known: dict[str, GeocodingResult] | None = None):
        self.known = known or {}
        self.calls: list[tuple[str, str]] = []

    async def geocode(self, address: str) -> GeocodingResult:
        self.calls.append(("geocode", address))
        if address not in self.known:
            raise GeocodingError("Address not found or invalid")
        return self.known[address]

    async def place_details(self, place_id: str) -> GeocodingResult:
        self.calls.append(("place_details", place_id))
        for result in self.known.values():
            if result.place_id == place_id:
                return result
        raise GeocodingError("Failed to get place details")


@pytest.fixture
def store():
    return FakeLocationStore(
        [
            make_row("a0000000-0000-0000-0000-000000000001", "New York", *NYC, minutes=1),
            make_row("a0000000-0000-0000-0000-000000000002", "Los Angeles", *LA, minutes=2),
        ]
    )


@pytest.fixture
def geocoder():
    return FakeGeocoder(
        {
            "350 5th Ave, New York": GeocodingResult(
                latitude=40.7484,
                longitude=-73.9857,
                formatted_address="350 5th Ave, New York, NY 10118, USA",
                place_id="place-esb",
            ),
        }
    )


@pytest.fixture
def current_user():
    return AuthenticatedUser(id=OWNER_ID, access_token="test-token")


@pytest.fixture
def client(store, geocoder, current_user):
    """TestClient with the store, geocoder and authenticated user replaced by fakes."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    app.dependency_overrides[get_current_user] = lambda: current_user
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()

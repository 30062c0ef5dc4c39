"""Location repository interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..utils.geo import BBox

# Columns a client may write; everything else is managed by the store.
WRITABLE_COLUMNS = (
    "owner_id",
    "title",
    "description",
    "address",
    "formatted_address",
    "latitude",
    "longitude",
    "place_id",
    "deployable_hardware",
    "price",
    "is_negotiable",
    "gallery",
    "rating",
)


class LocationStoreError(Exception):
    """Raised when the backing store fails to answer a query."""


@dataclass
class LocationFilters:
    search: str | None = None
    hardware: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    negotiable: bool | None = None
    bbox: BBox | None = None
    limit: int = 100
    offset: int = 0


class LocationStore(ABC):
    """
    Abstract base class for location storage.

    Rows are returned as plain dicts keyed by column name.
    """

    @abstractmethod
    def find_locations(self, filters: LocationFilters) -> list[dict[str, Any]]:
        """
        Find locations matching the filters, newest first.

        Args:
            filters: Search term, attribute filters, optional bounding box and paging.

        Returns:
            List of location rows, at most filters.limit long.
        """
        pass

    @abstractmethod
    def count_locations(self, filters: LocationFilters) -> int:
        """Count all locations matching the filters, ignoring limit and offset."""
        pass

    @abstractmethod
    def get_location(self, location_id: str) -> dict[str, Any] | None:
        """Get a single location by id, or None if it does not exist."""
        pass

    @abstractmethod
    def create_location(self, values: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a location.

        Args:
            values: Column values; keys outside WRITABLE_COLUMNS are ignored.

        Returns:
            The stored row, including generated id and timestamps.
        """
        pass

    @abstractmethod
    def update_location(
        self,
        location_id: str,
        values: dict[str, Any],
        expected_updated_at: datetime | None = None,
    ) -> dict[str, Any] | None:
        """
        Update columns of a location and bump its updated_at.

        Args:
            location_id: Location to update.
            values: Column values to set.
            expected_updated_at: When given, only update if the stored
                updated_at still equals this value.

        Returns:
            The updated row, or None if no row matched.
        """
        pass

    @abstractmethod
    def delete_location(self, location_id: str) -> bool:
        """Delete a location. Returns True if a row was deleted."""
        pass

    def close(self) -> None:
        """Close any open connections or resources."""
        return None

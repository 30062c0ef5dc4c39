# locations_api/schemas/queries.py
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional

from ..core.config import settings
from .common import Location


class BaseProximityQuery(BaseModel):
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    radius_km: float = Field(settings.default_radius_km, ge=0)
    limit: int = Field(100, ge=1)

    @field_validator("radius_km")
    @classmethod
    def clamp_radius(cls, v: float) -> float:
        return min(v, settings.max_radius_km)

    @field_validator("limit")
    @classmethod
    def clamp_limit(cls, v: int) -> int:
        return min(v, settings.max_limit)

    @model_validator(mode="after")
    def check_origin_pair(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be supplied together")
        return self

    @property
    def origin(self) -> Location | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Location(lat=self.latitude, lon=self.longitude)


class PriceFilterMixin(BaseModel):
    hardware: Optional[str] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    negotiable: Optional[bool] = None

    @model_validator(mode="after")
    def check_price_range(self):
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price must not exceed max_price")
        return self


class GeoJSONLocationsQuery(PriceFilterMixin, BaseProximityQuery):
    search: Optional[str] = None


class GeoJSONSearchQuery(BaseProximityQuery):
    q: str = Field(..., min_length=1)
    limit: int = Field(20, ge=1)


class LocationListQuery(PriceFilterMixin):
    limit: int = Field(20, ge=1, le=100)
    offset: int = Field(0, ge=0)

# locations_api/schemas/locations.py
from datetime import datetime
from pydantic import BaseModel, Field, HttpUrl
from typing import Optional

class LocationOut(BaseModel):
    id: str
    owner_id: str
    title: str
    description: str = ""
    address: str
    formatted_address: Optional[str] = None
    latitude: float
    longitude: float
    place_id: Optional[str] = None
    deployable_hardware: list[str] = []
    price: float
    is_negotiable: bool
    gallery: list[str] = []
    rating: Optional[float] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

class CreateLocationRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    address: str = Field(..., min_length=1, max_length=500)
    # Google place id from the client's autocomplete; skips free-text geocoding
    place_id: Optional[str] = None
    deployable_hardware: list[str] = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    is_negotiable: bool
    gallery: list[HttpUrl]
    rating: Optional[float] = Field(None, ge=0, le=5)

class UpdateLocationRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    deployable_hardware: Optional[list[str]] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    is_negotiable: Optional[bool] = None
    gallery: Optional[list[HttpUrl]] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    # updated_at the client last saw; stale values are rejected with 409
    expected_updated_at: Optional[datetime] = None

class LocationResponse(BaseModel):
    success: bool = True
    data: LocationOut
    message: Optional[str] = None

class LocationListResponse(BaseModel):
    success: bool = True
    data: list[LocationOut]
    total: int

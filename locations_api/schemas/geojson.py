# locations_api/schemas/geojson.py
from pydantic import BaseModel, Field
from typing import Literal

class PointGeometry(BaseModel):
    type: Literal["Point"] = "Point"
    # GeoJSON order: [longitude, latitude]
    coordinates: tuple[float, float]

class FeatureProperties(BaseModel):
    id: str
    name: str
    description: str = ""
    address: str | None = None
    price: float
    is_negotiable: bool
    deployable_hardware: list[str] = []
    gallery: list[str] = []
    rating: float | None = None
    distance: float | None = None
    created_at: str | None = None

class Feature(BaseModel):
    type: Literal["Feature"] = "Feature"
    geometry: PointGeometry
    properties: FeatureProperties

class FeatureCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[Feature] = Field(default_factory=list)

"""Place (restaurant) related schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, validator


class PlaceResult(BaseModel):
    """Canonical place shape returned by nearby/text search."""
    place_id: str = Field(..., description="Places provider identifier")
    name: str = Field("", description="Display name")
    formatted_address: str = Field("", description="Full formatted address")
    city: str = Field("", description="Locality component, empty when absent")
    lat: Optional[float] = Field(None, description="Latitude")
    lng: Optional[float] = Field(None, description="Longitude")
    rating: Optional[float] = Field(None, description="Provider rating")
    photo_url: Optional[str] = Field(None, description="First photo, null when the place has none")


class PlaceSearchResponse(BaseModel):
    """Response schema for nearby and text search."""
    places: List[PlaceResult] = Field(default_factory=list)


class RestaurantCreate(BaseModel):
    """Request schema for materializing a restaurant from a search result."""
    google_place_id: Optional[str] = Field(None, description="Dedup key against the places provider")
    name: str = Field(..., description="Restaurant name")
    address: Optional[str] = Field(None, description="Full address")
    city: Optional[str] = Field(None, description="City")
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="Latitude")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="Longitude")
    photo_url: Optional[str] = Field(None, description="Photo URL")

    @validator("name")
    def validate_name(cls, v):
        """Ensure restaurant name is not empty."""
        if not v or not v.strip():
            raise ValueError("Restaurant name cannot be empty")
        return v.strip()

    @validator("google_place_id")
    def blank_place_id_is_none(cls, v):
        """Treat a blank external id as missing."""
        if v is not None and not v.strip():
            return None
        return v


class RestaurantCreated(BaseModel):
    """Response schema for restaurant creation."""
    id: UUID


class RestaurantResponse(BaseModel):
    """Response schema for restaurant data."""
    id: UUID
    google_place_id: Optional[str]
    name: str
    address: Optional[str]
    city: Optional[str]
    display_location: str
    latitude: Optional[float]
    longitude: Optional[float]
    photo_url: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True

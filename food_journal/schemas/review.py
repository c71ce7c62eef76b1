"""Review, history and rollup schemas."""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, validator

from food_journal.core.clock import as_utc
from food_journal.schemas.menu import MenuItemResponse
from food_journal.schemas.place import RestaurantResponse


class OutcomeFilter(str, Enum):
    """Would-order-again filter chips."""
    ALL = "all"
    YES = "yes"
    SKIP = "skip"


class TimeRange(str, Enum):
    """History time window, in days."""
    LAST_30_DAYS = "30"
    LAST_180_DAYS = "180"
    ALL_TIME = "all"


class ReviewCreate(BaseModel):
    """Review fields supplied with a single dish entry."""
    rating: Optional[int] = Field(None, ge=1, le=5, description="1-5 stars")
    would_order_again: Optional[bool] = Field(None, description="YES again / Skip")
    notes: Optional[str] = Field(None, description="Free-text notes")

    @validator("rating", pre=True)
    def zero_rating_is_unset(cls, v):
        """A rating of 0 means no stars were picked."""
        if v in (0, "0", ""):
            return None
        return v

    @validator("notes")
    def blank_notes_are_unset(cls, v):
        if v is not None and not v.strip():
            return None
        return v


class ReviewResponse(BaseModel):
    """Response schema for a stored review."""
    id: UUID
    menu_item_id: UUID
    user_id: UUID
    rating: Optional[int]
    would_order_again: bool
    notes: Optional[str]
    photo_url: Optional[str]
    visited_at: Optional[date]
    created_at: datetime

    @validator("created_at")
    def created_at_is_utc(cls, v):
        return as_utc(v)

    class Config:
        from_attributes = True


class ReviewRow(BaseModel):
    """A review joined with its menu item and restaurant."""
    id: UUID
    menu_item_id: UUID
    user_id: UUID
    rating: Optional[int] = None
    would_order_again: bool
    notes: Optional[str] = None
    photo_url: Optional[str] = None
    visited_at: Optional[date] = None
    created_at: datetime

    dish_name: str
    category: Optional[str] = None
    restaurant_id: Optional[UUID] = None
    restaurant_name: Optional[str] = None
    city: Optional[str] = None
    restaurant_photo_url: Optional[str] = None

    @validator("created_at")
    def created_at_is_utc(cls, v):
        return as_utc(v)


class RecentRestaurant(BaseModel):
    """Restaurant card with the user's yes/skip rollup."""
    id: UUID
    name: str
    city: Optional[str]
    photo_url: Optional[str]
    review_count: int = 0
    yes_again_count: int = 0


class RecentRestaurantsResponse(BaseModel):
    restaurants: List[RecentRestaurant] = Field(default_factory=list)


class HistoryItem(BaseModel):
    """One line of the personal history view."""
    id: UUID
    dish_name: str
    restaurant_name: str
    restaurant_id: UUID
    would_order_again: bool
    rating: Optional[int]
    notes: Optional[str]
    visited_at: Optional[date]
    created_at: datetime
    city: Optional[str]


class HistoryResponse(BaseModel):
    """Filtered history plus the filters that produced it."""
    items: List[HistoryItem] = Field(default_factory=list)
    total: int = Field(..., description="Number of reviews before filtering")
    query: str = ""
    outcome: OutcomeFilter = OutcomeFilter.ALL
    range: TimeRange = TimeRange.ALL_TIME


class MenuItemWithReview(MenuItemResponse):
    """Menu item and the user's current review of it."""
    latest_review: Optional[ReviewResponse] = None


class RestaurantDetailResponse(BaseModel):
    """Restaurant page: reviewed dishes in display order plus counters."""
    restaurant: RestaurantResponse
    items: List[MenuItemWithReview] = Field(default_factory=list)
    reviewed_count: int = 0
    unreviewed_count: int = 0
    outcome: OutcomeFilter = OutcomeFilter.ALL


class DishEntryResponse(BaseModel):
    """Result of the add-dish form."""
    menu_item: MenuItemResponse
    review: Optional[ReviewResponse] = None

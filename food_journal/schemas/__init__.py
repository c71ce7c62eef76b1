"""Pydantic schemas for API requests and responses."""

from .menu import (
    MenuItemListResponse,
    MenuItemResponse,
    OCRCandidate,
    OCRExtractResponse,
    OCRImportRequest,
    OCRImportResult,
    OCRMenuItem,
)
from .place import (
    PlaceResult,
    PlaceSearchResponse,
    RestaurantCreate,
    RestaurantCreated,
    RestaurantResponse,
)
from .quick_review import (
    DraftReview,
    QuickReviewSaveResult,
    QuickReviewStartRequest,
    QuickReviewState,
    QuickReviewStep,
)
from .review import (
    DishEntryResponse,
    HistoryItem,
    HistoryResponse,
    MenuItemWithReview,
    OutcomeFilter,
    RecentRestaurant,
    RecentRestaurantsResponse,
    RestaurantDetailResponse,
    ReviewCreate,
    ReviewResponse,
    ReviewRow,
    TimeRange,
)
from .user import UserResponse

__all__ = [
    # Menu schemas
    "MenuItemListResponse",
    "MenuItemResponse",
    "OCRCandidate",
    "OCRExtractResponse",
    "OCRImportRequest",
    "OCRImportResult",
    "OCRMenuItem",

    # Place schemas
    "PlaceResult",
    "PlaceSearchResponse",
    "RestaurantCreate",
    "RestaurantCreated",
    "RestaurantResponse",

    # Quick review schemas
    "DraftReview",
    "QuickReviewSaveResult",
    "QuickReviewStartRequest",
    "QuickReviewState",
    "QuickReviewStep",

    # Review schemas
    "DishEntryResponse",
    "HistoryItem",
    "HistoryResponse",
    "MenuItemWithReview",
    "OutcomeFilter",
    "RecentRestaurant",
    "RecentRestaurantsResponse",
    "RestaurantDetailResponse",
    "ReviewCreate",
    "ReviewResponse",
    "ReviewRow",
    "TimeRange",

    # User schemas
    "UserResponse",
]

"""Service layer for business logic."""

from .restaurant_service import RestaurantService
from .menu_service import MenuService
from .review_service import ReviewService
from .export_service import ExportService
from .places_service import PlacesService
from .ocr_service import MenuOCRService, MockMenuOCRService, OCRImportService
from .quick_review import QuickReviewService
from .dish_entry_service import DishEntryService
from .photo_storage import LocalPhotoStorage, PhotoStorage

__all__ = [
    "RestaurantService",
    "MenuService",
    "ReviewService",
    "ExportService",
    "PlacesService",
    "MenuOCRService",
    "MockMenuOCRService",
    "OCRImportService",
    "QuickReviewService",
    "DishEntryService",
    "LocalPhotoStorage",
    "PhotoStorage",
]

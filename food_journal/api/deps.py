"""Provider dependencies, overridable in tests."""

from food_journal.services.ocr_service import MenuOCRService, MockMenuOCRService
from food_journal.services.photo_storage import LocalPhotoStorage, PhotoStorage
from food_journal.services.places_service import PlacesService


def get_places_service() -> PlacesService:
    return PlacesService()


def get_ocr_service() -> MenuOCRService:
    return MockMenuOCRService()


def get_photo_storage() -> PhotoStorage:
    return LocalPhotoStorage()

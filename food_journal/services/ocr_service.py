"""Menu photo OCR and import of extracted dishes."""

import asyncio
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from food_journal.core.config import settings
from food_journal.core.exceptions import FoodJournalError
from food_journal.schemas.menu import OCRCandidate, OCRImportResult, OCRMenuItem
from food_journal.services.menu_service import MenuService


class MenuOCRService:
    """Extracts dish candidates from a menu photo."""

    async def extract_items_from_image(self, image: bytes) -> List[OCRMenuItem]:
        """
        Extract dish names, prices and categories from an image.

        Args:
            image: Raw image bytes

        Returns:
            List of OCRMenuItem, empty when the menu has no readable dishes

        Raises:
            OCRProviderError: if the provider fails
        """
        raise NotImplementedError


class MockMenuOCRService(MenuOCRService):
    """
    Stand-in provider returning a fixed sample menu.

    Replace with a real OCR provider (Google Vision, Textract) later.
    """

    SAMPLE_ITEMS = [
        OCRMenuItem(name="Caesar Salad", price=12.99, category="Appetizer"),
        OCRMenuItem(name="Margherita Pizza", price=16.99, category="Main"),
        OCRMenuItem(name="Grilled Salmon", price=24.99, category="Main"),
        OCRMenuItem(name="Mushroom Risotto", price=18.99, category="Main"),
        OCRMenuItem(name="Tiramisu", price=9.99, category="Dessert"),
        OCRMenuItem(name="Garlic Bread", price=7.99, category="Appetizer"),
        OCRMenuItem(name="Lemonade", price=4.99, category="Drink"),
    ]

    def __init__(self, delay_seconds: Optional[float] = None):
        self.delay_seconds = (
            settings.OCR_SIMULATED_DELAY_SECONDS if delay_seconds is None else delay_seconds
        )

    async def extract_items_from_image(self, image: bytes) -> List[OCRMenuItem]:
        logger.info(f"Mock OCR processing image ({len(image)} bytes)")

        # Simulate processing delay
        await asyncio.sleep(self.delay_seconds)

        return [item.model_copy() for item in self.SAMPLE_ITEMS]


def to_candidates(items: Sequence[OCRMenuItem]) -> List[OCRCandidate]:
    """Present extracted dishes with their import checkbox ticked."""
    return [OCRCandidate(**item.model_dump(), checked=True) for item in items]


class OCRImportService:
    """Imports the rows the user kept checked as menu items."""

    def __init__(self, db: AsyncSession):
        """
        Initialize OCR import service.

        Args:
            db: Database session
        """
        self.db = db
        self.menu_service = MenuService(db)

    async def import_items(
        self,
        restaurant_id: UUID,
        candidates: Sequence[OCRCandidate],
        created_by: Optional[UUID] = None
    ) -> OCRImportResult:
        """
        Upsert checked candidates as menu items.

        A row that fails is logged and left out of the count; the rest of
        the batch still runs.

        Args:
            restaurant_id: Target restaurant
            candidates: Reviewed OCR rows
            created_by: Current user

        Returns:
            OCRImportResult with the number of checked and imported rows
        """
        selected = [candidate for candidate in candidates if candidate.checked]
        logger.info(f"Importing {len(selected)} of {len(candidates)} OCR rows into restaurant {restaurant_id}")

        imported = 0
        for candidate in selected:
            try:
                await self.menu_service.upsert_menu_item(
                    restaurant_id=restaurant_id,
                    name=candidate.name,
                    category=candidate.category,
                    price=candidate.price,
                    created_by=created_by,
                )
                imported += 1
            except FoodJournalError as e:
                logger.warning(f"Skipping OCR row '{candidate.name}': {str(e)}")
                continue

        logger.info(f"Imported {imported} menu items")
        return OCRImportResult(requested=len(selected), imported=imported)

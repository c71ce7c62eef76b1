"""Single dish entry: add or edit a dish and optionally review it."""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from food_journal.core.clock import today
from food_journal.core.exceptions import NotFoundError, ValidationError
from food_journal.models.menu_item import MenuItem
from food_journal.models.review import Review
from food_journal.schemas.review import ReviewCreate
from food_journal.services.menu_service import MenuService
from food_journal.services.photo_storage import PhotoStorage, photo_object_key
from food_journal.services.review_service import ReviewService


@dataclass
class PhotoUpload:
    filename: Optional[str]
    data: bytes


class DishEntryService:
    """Backs the add-dish form."""

    def __init__(self, db: AsyncSession, photo_storage: Optional[PhotoStorage] = None):
        self.db = db
        self.photo_storage = photo_storage
        self.menu_service = MenuService(db)
        self.review_service = ReviewService(db)

    async def save_dish(
        self,
        restaurant_id: UUID,
        user_id: UUID,
        name: str,
        category: Optional[str] = None,
        price: Optional[float] = None,
        menu_item_id: Optional[UUID] = None,
        review: Optional[ReviewCreate] = None,
        photo: Optional[PhotoUpload] = None,
        visited_on: Optional[date] = None
    ) -> Tuple[MenuItem, Optional[Review]]:
        """
        Save a dish and, when an outcome was picked, a review of it.

        A known menu_item_id (picked from autocomplete or opened for edit)
        is used as is; otherwise the dish is upserted by name. The photo is
        only uploaded when a review is written; an upload failure is logged
        and the review is saved without a photo.

        Returns:
            (menu item, review or None)

        Raises:
            ValidationError: for a blank dish name
            NotFoundError: for a menu_item_id outside this restaurant
            PersistenceError: if a write fails
        """
        if menu_item_id is not None:
            menu_item = await self.menu_service.get_menu_item(menu_item_id)
            if menu_item is None or menu_item.restaurant_id != restaurant_id:
                raise NotFoundError(f"Menu item {menu_item_id} not found")
        else:
            if not (name or "").strip():
                raise ValidationError("Dish name cannot be empty")
            menu_item = await self.menu_service.upsert_menu_item(
                restaurant_id=restaurant_id,
                name=name,
                category=category or None,
                price=price,
                created_by=user_id,
            )

        if review is None or review.would_order_again is None:
            logger.info(f"Saved dish '{menu_item.name}' without a review")
            return menu_item, None

        photo_url = await self._upload_photo(user_id, photo)
        saved = await self.review_service.insert_review(
            menu_item_id=menu_item.id,
            user_id=user_id,
            would_order_again=review.would_order_again,
            rating=review.rating,
            notes=review.notes,
            photo_url=photo_url,
            visited_at=visited_on or today(),
        )
        return menu_item, saved

    async def _upload_photo(self, user_id: UUID, photo: Optional[PhotoUpload]) -> Optional[str]:
        if photo is None or not photo.data or self.photo_storage is None:
            return None
        try:
            return await self.photo_storage.upload(photo_object_key(user_id, photo.filename), photo.data)
        except OSError as e:
            logger.warning(f"Photo upload failed, saving review without photo: {str(e)}")
            return None

"""Menu item endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from food_journal.core.auth import get_current_user
from food_journal.db.base import get_db
from food_journal.models.user import User
from food_journal.schemas.menu import MenuItemResponse
from food_journal.schemas.review import MenuItemWithReview, ReviewResponse
from food_journal.services.menu_service import MenuService
from food_journal.services.review_service import ReviewService

router = APIRouter()


@router.get("/{menu_item_id}/latest-review", response_model=MenuItemWithReview)
async def get_latest_review(
    menu_item_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> MenuItemWithReview:
    """The dish and the current user's most recent review of it, if any."""
    try:
        menu_item = await MenuService(db).get_menu_item(menu_item_id)
        if not menu_item:
            raise HTTPException(status_code=404, detail="Menu item not found")

        review = await ReviewService(db).latest_review_for_item(menu_item_id, current_user.id)
        return MenuItemWithReview(
            **MenuItemResponse.model_validate(menu_item).model_dump(),
            latest_review=ReviewResponse.model_validate(review) if review else None,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting latest review for menu item {menu_item_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to get latest review: {str(e)}")

"""Quick review endpoints: pick several dishes, rate them, save with one visit."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from food_journal.core.auth import get_current_user
from food_journal.core.exceptions import PersistenceError, ValidationError
from food_journal.db.base import get_db
from food_journal.models.user import User
from food_journal.schemas.quick_review import (
    QuickReviewSaveResult,
    QuickReviewStartRequest,
    QuickReviewState,
)
from food_journal.services.menu_service import MenuService
from food_journal.services.quick_review import (
    QuickReviewService,
    add_new_dish,
    advance_to_rating,
    toggle_item,
)
from food_journal.services.restaurant_service import RestaurantService

router = APIRouter()


@router.post("/{restaurant_id}/quick-review/start", response_model=QuickReviewState)
async def start_quick_review(
    restaurant_id: UUID,
    request: QuickReviewStartRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> QuickReviewState:
    """
    Turn the step-1 selection into the rating-step state.

    The returned state holds one blank draft per dish; the client fills the
    drafts in and posts the state back to /quick-review.

    Example:
        ```python
        request_data = {
            "selected_ids": ["uuid-1", "uuid-2"],
            "new_dishes": ["Burrata"]
        }
        response = requests.post("/api/v1/restaurants/{id}/quick-review/start", json=request_data)
        ```
    """
    try:
        restaurant = await RestaurantService(db).get_restaurant(restaurant_id)
        if not restaurant:
            raise HTTPException(status_code=404, detail="Restaurant not found")

        state = QuickReviewState()
        for item_id in dict.fromkeys(request.selected_ids):
            state = toggle_item(state, item_id)
        for name in request.new_dishes:
            state = add_new_dish(state, name)

        menu_items = await MenuService(db).list_menu_items(restaurant_id)
        return advance_to_rating(state, menu_items)

    except HTTPException:
        raise
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error starting quick review for restaurant {restaurant_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to start quick review: {str(e)}")


@router.post("/{restaurant_id}/quick-review", response_model=QuickReviewSaveResult)
async def save_quick_review(
    restaurant_id: UUID,
    state: QuickReviewState,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> QuickReviewSaveResult:
    """
    Save every draft as a review and log one visit.

    Writes run one after the other; on a failure the reviews already
    written are kept and the error is returned.
    """
    try:
        restaurant = await RestaurantService(db).get_restaurant(restaurant_id)
        if not restaurant:
            raise HTTPException(status_code=404, detail="Restaurant not found")

        return await QuickReviewService(db).save(restaurant_id, current_user.id, state)

    except HTTPException:
        raise
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Error saving quick review for restaurant {restaurant_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to save quick review: {str(e)}")

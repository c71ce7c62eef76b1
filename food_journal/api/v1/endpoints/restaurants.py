"""Restaurant endpoints: creation, recent places, detail page and dishes."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from food_journal.api.deps import get_photo_storage
from food_journal.core.auth import get_current_user
from food_journal.core.exceptions import NotFoundError, PersistenceError, ValidationError
from food_journal.db.base import get_db
from food_journal.models.user import User
from food_journal.schemas.menu import MenuItemListResponse, MenuItemResponse
from food_journal.schemas.place import RestaurantCreate, RestaurantCreated, RestaurantResponse
from food_journal.schemas.review import (
    DishEntryResponse,
    MenuItemWithReview,
    OutcomeFilter,
    RecentRestaurantsResponse,
    RestaurantDetailResponse,
    ReviewCreate,
    ReviewResponse,
)
from food_journal.services.dish_entry_service import DishEntryService, PhotoUpload
from food_journal.services.menu_service import MenuService
from food_journal.services.photo_storage import PhotoStorage
from food_journal.services.restaurant_service import RestaurantService
from food_journal.services.review_aggregator import build_restaurant_detail, rollup_recent_restaurants
from food_journal.services.review_service import ReviewService

router = APIRouter()


@router.post("", response_model=RestaurantCreated)
async def create_restaurant(
    payload: RestaurantCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> RestaurantCreated:
    """
    Materialize a restaurant picked from search or nearby results.

    A known google_place_id returns the existing restaurant's id instead of
    inserting a duplicate.

    Example:
        ```python
        request_data = {
            "google_place_id": "ChIJ...",
            "name": "Joe's Pizza",
            "address": "7 Carmine St, New York, NY 10014, USA",
            "city": "New York",
            "latitude": 40.7305,
            "longitude": -74.0021
        }
        response = requests.post("/api/v1/restaurants", json=request_data)

        {"id": "uuid-123"}
        ```
    """
    try:
        restaurant_id = await RestaurantService(db).create_or_reuse(payload, created_by=current_user.id)
        return RestaurantCreated(id=restaurant_id)

    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating restaurant: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to create restaurant: {str(e)}")


@router.get("/recent", response_model=RecentRestaurantsResponse)
async def recent_restaurants(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> RecentRestaurantsResponse:
    """Restaurants the user reviewed most recently, with YES-again counts."""
    try:
        rows = await ReviewService(db).list_user_reviews(current_user.id)
        return RecentRestaurantsResponse(restaurants=rollup_recent_restaurants(rows))

    except Exception as e:
        logger.error(f"Error loading recent restaurants: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to load recent restaurants: {str(e)}")


@router.get("/{restaurant_id}", response_model=RestaurantDetailResponse)
async def get_restaurant_detail(
    restaurant_id: UUID,
    outcome: OutcomeFilter = Query(OutcomeFilter.ALL, description="all, yes or skip"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> RestaurantDetailResponse:
    """
    Restaurant page: the user's reviewed dishes, YES again first.

    Dishes the user never reviewed are not listed, only counted in
    unreviewed_count.
    """
    try:
        restaurant = await RestaurantService(db).get_restaurant(restaurant_id)
        if not restaurant:
            raise HTTPException(status_code=404, detail="Restaurant not found")

        menu_items = await MenuService(db).list_menu_items(restaurant_id)
        reviews = await ReviewService(db).list_restaurant_reviews(restaurant_id, current_user.id)
        view = build_restaurant_detail(menu_items, reviews, outcome)

        return RestaurantDetailResponse(
            restaurant=RestaurantResponse.model_validate(restaurant),
            items=[
                MenuItemWithReview(
                    **MenuItemResponse.model_validate(item).model_dump(),
                    latest_review=ReviewResponse.model_validate(review),
                )
                for item, review in view.items
            ],
            reviewed_count=view.reviewed_count,
            unreviewed_count=view.unreviewed_count,
            outcome=outcome,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting restaurant {restaurant_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to get restaurant: {str(e)}")


@router.get("/{restaurant_id}/menu-items", response_model=MenuItemListResponse)
async def list_menu_items(
    restaurant_id: UUID,
    q: Optional[str] = Query(None, description="Autocomplete on dish name"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> MenuItemListResponse:
    """Full menu ordered by name, or up to DISH_SUGGESTION_LIMIT matches for q."""
    try:
        menu_service = MenuService(db)
        if q is not None:
            items = await menu_service.search_menu_items(restaurant_id, q)
        else:
            items = await menu_service.list_menu_items(restaurant_id)
        return MenuItemListResponse(items=[MenuItemResponse.model_validate(item) for item in items])

    except Exception as e:
        logger.error(f"Error listing menu items for restaurant {restaurant_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to list menu items: {str(e)}")


@router.post("/{restaurant_id}/dishes", response_model=DishEntryResponse)
async def add_dish(
    restaurant_id: UUID,
    name: str = Form("", description="Dish name"),
    category: Optional[str] = Form(None, description="Menu section"),
    price: Optional[float] = Form(None, ge=0, description="Price"),
    menu_item_id: Optional[UUID] = Form(None, description="Existing dish picked from suggestions"),
    rating: Optional[int] = Form(None, ge=0, le=5, description="0-5 stars, 0 means unset"),
    would_order_again: Optional[bool] = Form(None, description="YES again / Skip, omit to save the dish only"),
    notes: Optional[str] = Form(None, description="Notes"),
    photo: Optional[UploadFile] = File(None, description="Dish photo"),
    current_user: User = Depends(get_current_user),
    photo_storage: PhotoStorage = Depends(get_photo_storage),
    db: AsyncSession = Depends(get_db)
) -> DishEntryResponse:
    """
    Add a dish (or pick an existing one) and optionally review it.

    Without would_order_again only the dish is saved.
    """
    try:
        restaurant = await RestaurantService(db).get_restaurant(restaurant_id)
        if not restaurant:
            raise HTTPException(status_code=404, detail="Restaurant not found")

        upload = None
        if photo is not None and photo.filename:
            if photo.content_type and not photo.content_type.startswith("image/"):
                raise HTTPException(status_code=400, detail=f"File {photo.filename} is not a valid image")
            upload = PhotoUpload(filename=photo.filename, data=await photo.read())

        menu_item, review = await DishEntryService(db, photo_storage).save_dish(
            restaurant_id=restaurant_id,
            user_id=current_user.id,
            name=name,
            category=category,
            price=price,
            menu_item_id=menu_item_id,
            review=ReviewCreate(rating=rating, would_order_again=would_order_again, notes=notes),
            photo=upload,
        )

        return DishEntryResponse(
            menu_item=MenuItemResponse.model_validate(menu_item),
            review=ReviewResponse.model_validate(review) if review else None,
        )

    except HTTPException:
        raise
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Error saving dish for restaurant {restaurant_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to save dish: {str(e)}")

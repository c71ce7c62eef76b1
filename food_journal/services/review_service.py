"""Review and visit persistence."""

from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from food_journal.core.exceptions import PersistenceError, ValidationError
from food_journal.db.base import commit_or_raise
from food_journal.models.menu_item import MenuItem
from food_journal.models.restaurant import Restaurant
from food_journal.models.review import RestaurantVisit, Review
from food_journal.schemas.review import ReviewRow
from food_journal.services.review_aggregator import resolve_latest_review


class ReviewService:
    """Service for storing and fetching a user's dish reviews."""

    def __init__(self, db: AsyncSession):
        """
        Initialize review service.

        Args:
            db: Database session
        """
        self.db = db

    async def insert_review(
        self,
        menu_item_id: UUID,
        user_id: UUID,
        would_order_again: bool,
        rating: Optional[int] = None,
        notes: Optional[str] = None,
        photo_url: Optional[str] = None,
        visited_at: Optional[date] = None
    ) -> Review:
        """
        Insert one review row.

        Args:
            menu_item_id: Reviewed dish
            user_id: Reviewing user
            would_order_again: YES again (True) or Skip (False)
            rating: 1-5 stars or None
            notes: Optional notes
            photo_url: Optional uploaded photo
            visited_at: Visit date

        Returns:
            Created Review

        Raises:
            ValidationError: for a missing outcome or out-of-range rating
            PersistenceError: if the insert fails
        """
        if would_order_again is None:
            raise ValidationError("would_order_again must be set")
        if rating is not None and not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5")

        review = Review(
            menu_item_id=menu_item_id,
            user_id=user_id,
            rating=rating,
            would_order_again=would_order_again,
            notes=notes,
            photo_url=photo_url,
            visited_at=visited_at,
        )
        self.db.add(review)
        await commit_or_raise(self.db, f"insert review for menu item {menu_item_id}")

        logger.info(f"Saved review {review.id} for menu item {menu_item_id}")
        return review

    async def record_visit(
        self,
        restaurant_id: UUID,
        user_id: UUID,
        overall_notes: Optional[str] = None
    ) -> RestaurantVisit:
        """
        Log that the user was at a restaurant.

        Args:
            restaurant_id: Visited restaurant
            user_id: Visiting user
            overall_notes: Optional notes for the whole visit

        Returns:
            Created RestaurantVisit
        """
        visit = RestaurantVisit(
            restaurant_id=restaurant_id,
            user_id=user_id,
            overall_notes=overall_notes,
        )
        self.db.add(visit)
        await commit_or_raise(self.db, f"record visit to restaurant {restaurant_id}")

        logger.info(f"Recorded visit {visit.id} to restaurant {restaurant_id}")
        return visit

    async def list_user_reviews(self, user_id: UUID) -> List[ReviewRow]:
        """
        All of a user's reviews joined with dish and restaurant, newest first.

        Args:
            user_id: Reviewing user

        Returns:
            List of ReviewRow in created_at descending order
        """
        query = (
            select(Review, MenuItem, Restaurant)
            .join(MenuItem, Review.menu_item_id == MenuItem.id)
            .join(Restaurant, MenuItem.restaurant_id == Restaurant.id)
            .where(Review.user_id == user_id)
            .order_by(Review.created_at.desc())
        )

        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load reviews for user {user_id}: {str(e)}")
            raise PersistenceError(str(e)) from e

        return [
            ReviewRow(
                id=review.id,
                menu_item_id=review.menu_item_id,
                user_id=review.user_id,
                rating=review.rating,
                would_order_again=review.would_order_again,
                notes=review.notes,
                photo_url=review.photo_url,
                visited_at=review.visited_at,
                created_at=review.created_at,
                dish_name=menu_item.name,
                category=menu_item.category,
                restaurant_id=restaurant.id,
                restaurant_name=restaurant.name,
                city=restaurant.city,
                restaurant_photo_url=restaurant.photo_url,
            )
            for review, menu_item, restaurant in result.all()
        ]

    async def list_restaurant_reviews(self, restaurant_id: UUID, user_id: UUID) -> List[Review]:
        """
        The user's reviews of every dish at one restaurant.

        Args:
            restaurant_id: UUID of the restaurant
            user_id: Reviewing user

        Returns:
            List of Review rows (unordered)
        """
        query = (
            select(Review)
            .join(MenuItem, Review.menu_item_id == MenuItem.id)
            .where(MenuItem.restaurant_id == restaurant_id, Review.user_id == user_id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def latest_review_for_item(self, menu_item_id: UUID, user_id: UUID) -> Optional[Review]:
        """
        The user's current review of a dish.

        Args:
            menu_item_id: UUID of the menu item
            user_id: Reviewing user

        Returns:
            Review with the greatest created_at, None if never reviewed
        """
        query = select(Review).where(
            Review.menu_item_id == menu_item_id,
            Review.user_id == user_id,
        )
        result = await self.db.execute(query)
        return resolve_latest_review(result.scalars().all())

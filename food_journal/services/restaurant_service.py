"""Restaurant persistence: lookup and create-or-reuse by place id."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from food_journal.core.exceptions import PersistenceError
from food_journal.models.restaurant import Restaurant
from food_journal.schemas.place import RestaurantCreate


class RestaurantService:
    """Service for managing restaurant records."""

    def __init__(self, db: AsyncSession):
        """
        Initialize restaurant service.

        Args:
            db: Database session
        """
        self.db = db

    async def get_restaurant(self, restaurant_id: UUID) -> Optional[Restaurant]:
        """
        Get a restaurant by its ID.

        Args:
            restaurant_id: UUID of the restaurant

        Returns:
            Restaurant object if found
        """
        query = select(Restaurant).where(Restaurant.id == restaurant_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def create_or_reuse(
        self,
        payload: RestaurantCreate,
        created_by: Optional[UUID] = None
    ) -> UUID:
        """
        Materialize a restaurant, reusing the existing row for a known place id.

        A second request with the same google_place_id returns the first
        row's id; no duplicate is inserted. Restaurants without a place id
        are always inserted.

        Args:
            payload: Restaurant fields, usually copied from a PlaceResult
            created_by: Current user

        Returns:
            ID of the existing or created restaurant

        Raises:
            PersistenceError: if the insert fails for any other reason
        """
        if payload.google_place_id:
            existing_id = await self._find_id_by_place_id(payload.google_place_id)
            if existing_id:
                logger.info(f"Reusing restaurant {existing_id} for place {payload.google_place_id}")
                return existing_id

        restaurant = Restaurant(
            google_place_id=payload.google_place_id,
            name=payload.name,
            address=payload.address,
            city=payload.city,
            latitude=payload.latitude,
            longitude=payload.longitude,
            photo_url=payload.photo_url,
            created_by=created_by,
        )
        self.db.add(restaurant)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            # Lost a race with a concurrent create for the same place
            if payload.google_place_id:
                existing_id = await self._find_id_by_place_id(payload.google_place_id)
                if existing_id:
                    logger.info(f"Restaurant for place {payload.google_place_id} created concurrently, reusing {existing_id}")
                    return existing_id
            logger.error(f"Create restaurant error: {e.orig}")
            raise PersistenceError(str(e.orig)) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Create restaurant error: {str(e)}")
            raise PersistenceError(str(e)) from e

        logger.info(f"Created restaurant: {restaurant.name} (ID: {restaurant.id})")
        return restaurant.id

    async def _find_id_by_place_id(self, google_place_id: str) -> Optional[UUID]:
        query = select(Restaurant.id).where(Restaurant.google_place_id == google_place_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

"""Menu item persistence with upsert on (restaurant, name)."""

import uuid
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from food_journal.core.clock import utcnow
from food_journal.core.config import settings
from food_journal.core.exceptions import PersistenceError, ValidationError
from food_journal.models.menu_item import MenuItem


class MenuService:
    """Service for managing menu items."""

    def __init__(self, db: AsyncSession):
        """
        Initialize menu service.

        Args:
            db: Database session
        """
        self.db = db

    async def upsert_menu_item(
        self,
        restaurant_id: UUID,
        name: str,
        category: Optional[str] = None,
        price: Optional[float] = None,
        description: Optional[str] = None,
        created_by: Optional[UUID] = None
    ) -> MenuItem:
        """
        Insert a dish, or attach to the existing row with the same name.

        (restaurant_id, name) is the conflict target. On conflict the
        provided category/price/description overwrite the stored ones;
        omitted fields are left alone. Calling this twice with the same
        arguments yields one row and the same id.

        Args:
            restaurant_id: UUID of the restaurant
            name: Dish name
            category: Optional menu section
            price: Optional price
            description: Optional description
            created_by: Current user

        Returns:
            The inserted or existing MenuItem

        Raises:
            ValidationError: if the name is blank
            PersistenceError: if the database rejects the upsert
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Dish name cannot be empty")

        updates: Dict[str, Any] = {
            key: value
            for key, value in (("category", category), ("price", price), ("description", description))
            if value is not None
        }
        if not updates:
            # No-op update so the conflicting row is still returned
            updates = {"name": name}

        stmt = self._insert().values(
            id=uuid.uuid4(),
            restaurant_id=restaurant_id,
            name=name,
            category=category,
            price=price,
            description=description,
            created_by=created_by,
            created_at=utcnow(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["restaurant_id", "name"],
            set_=updates,
        ).returning(MenuItem.id)

        try:
            result = await self.db.execute(stmt)
            item_id = result.scalar_one()
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            message = str(getattr(e, "orig", None) or e)
            logger.error(f"Failed to upsert menu item '{name}': {message}")
            raise PersistenceError(message) from e

        logger.debug(f"Upserted menu item '{name}' for restaurant {restaurant_id} (ID: {item_id})")
        return await self.get_menu_item(item_id)

    def _insert(self):
        """Dialect-specific INSERT supporting ON CONFLICT."""
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert(MenuItem)
        return sqlite_insert(MenuItem)

    async def get_menu_item(self, menu_item_id: UUID) -> Optional[MenuItem]:
        """
        Get a menu item by ID, refreshed from the database.

        Args:
            menu_item_id: UUID of the menu item

        Returns:
            MenuItem if found
        """
        query = (
            select(MenuItem)
            .where(MenuItem.id == menu_item_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_menu_items(self, restaurant_id: UUID) -> List[MenuItem]:
        """
        Get all menu items for a restaurant, ordered by name.

        Args:
            restaurant_id: UUID of the restaurant

        Returns:
            List of menu items
        """
        query = (
            select(MenuItem)
            .where(MenuItem.restaurant_id == restaurant_id)
            .order_by(MenuItem.name)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def search_menu_items(
        self,
        restaurant_id: UUID,
        search_term: str,
        limit: Optional[int] = None
    ) -> List[MenuItem]:
        """
        Dish-name autocomplete within one restaurant.

        Args:
            restaurant_id: UUID of the restaurant
            search_term: Case-insensitive substring
            limit: Maximum results, defaults to DISH_SUGGESTION_LIMIT

        Returns:
            List of matching menu items, empty for a blank term
        """
        search_term = (search_term or "").strip()
        if not search_term:
            return []

        query = (
            select(MenuItem)
            .where(
                MenuItem.restaurant_id == restaurant_id,
                MenuItem.name.ilike(f"%{search_term}%"),
            )
            .order_by(MenuItem.name)
            .limit(limit or settings.DISH_SUGGESTION_LIMIT)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

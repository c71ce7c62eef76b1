"""Menu item model."""

import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from food_journal.core.clock import utcnow
from food_journal.db.base import Base


class MenuItem(Base):
    """Menu item/dish model."""

    __tablename__ = "menu_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(Uuid, ForeignKey("restaurants.id"), nullable=False, index=True)

    # Basic dish info
    name = Column(String(255), nullable=False, index=True)
    category = Column(String(100))  # "Appetizer", "Main", "Dessert", etc.
    description = Column(Text)
    price = Column(Float)

    created_by = Column(Uuid, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    restaurant = relationship("Restaurant", back_populates="menu_items")
    reviews = relationship("Review", back_populates="menu_item", cascade="all, delete-orphan")

    # Upsert conflict target
    __table_args__ = (
        UniqueConstraint("restaurant_id", "name", name="uq_menu_item_restaurant_name"),
    )

    def __repr__(self) -> str:
        return f"<MenuItem(name='{self.name}', restaurant_id='{self.restaurant_id}')>"

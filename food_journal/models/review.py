"""Dish review and restaurant visit models."""

import uuid

from sqlalchemy import (
    Boolean, CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer, Text, Uuid,
)
from sqlalchemy.orm import relationship

from food_journal.core.clock import utcnow
from food_journal.db.base import Base


class Review(Base):
    """A user's verdict on one dish. Re-reviews add rows; the newest is current."""

    __tablename__ = "reviews"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    menu_item_id = Column(Uuid, ForeignKey("menu_items.id"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    rating = Column(Integer)  # 1-5 stars, null when unset
    would_order_again = Column(Boolean, nullable=False)
    notes = Column(Text)
    photo_url = Column(Text)

    visited_at = Column(Date)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    menu_item = relationship("MenuItem", back_populates="reviews")

    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_review_rating_range"),
        Index("idx_review_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Review(menu_item_id='{self.menu_item_id}', "
            f"would_order_again={self.would_order_again}, rating={self.rating})>"
        )


class RestaurantVisit(Base):
    """A user was at a restaurant on one occasion, independent of dishes reviewed."""

    __tablename__ = "restaurant_visits"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(Uuid, ForeignKey("restaurants.id"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    visited_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    overall_notes = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    restaurant = relationship("Restaurant", back_populates="visits")

    def __repr__(self) -> str:
        return f"<RestaurantVisit(restaurant_id='{self.restaurant_id}', user_id='{self.user_id}')>"

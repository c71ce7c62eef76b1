"""Restaurant model."""

import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from food_journal.core.clock import utcnow
from food_journal.db.base import Base


class Restaurant(Base):
    """Restaurant the user has picked from search, nearby results or created by hand."""

    __tablename__ = "restaurants"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # External service ID, dedup key against the places provider
    google_place_id = Column(String(255), unique=True, index=True)

    name = Column(String(255), nullable=False, index=True)
    address = Column(Text)
    city = Column(String(100), index=True)
    latitude = Column(Float)
    longitude = Column(Float)
    photo_url = Column(Text)

    created_by = Column(Uuid, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    menu_items = relationship("MenuItem", back_populates="restaurant", cascade="all, delete-orphan")
    visits = relationship("RestaurantVisit", back_populates="restaurant", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Restaurant(name='{self.name}', city='{self.city}')>"

    @property
    def display_location(self) -> str:
        """Get formatted location string."""
        if self.city and self.address:
            return f"{self.address}, {self.city}"
        return self.city or self.address or "Unknown location"

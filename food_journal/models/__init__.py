"""Database models."""

from .user import User, UserSession
from .restaurant import Restaurant
from .menu_item import MenuItem
from .review import Review, RestaurantVisit

__all__ = [
    "User",
    "UserSession",
    "Restaurant",
    "MenuItem",
    "Review",
    "RestaurantVisit",
]

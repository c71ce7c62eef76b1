"""User and session models for the session provider."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from food_journal.core.clock import utcnow
from food_journal.db.base import Base


class User(Base):
    """Journal owner."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, index=True)
    display_name = Column(String(255))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<User(email='{self.email}')>"


class UserSession(Base):
    """Bearer token issued by the auth provider."""

    __tablename__ = "user_sessions"

    token = Column(String(128), primary_key=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    user = relationship("User", back_populates="sessions")

"""Session provider: resolves the bearer token to the current user."""

from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from food_journal.db.base import commit_or_raise, get_db
from food_journal.models.user import User, UserSession

bearer_scheme = HTTPBearer(auto_error=False)


async def optional_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Current user, or None without a valid session."""
    if credentials is None or not credentials.credentials:
        return None

    query = (
        select(User)
        .join(UserSession, UserSession.user_id == User.id)
        .where(UserSession.token == credentials.credentials)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_current_user(user: Optional[User] = Depends(optional_current_user)) -> User:
    """Current user; 401 without a valid session."""
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


async def sign_out(db: AsyncSession, token: str) -> None:
    """Invalidate one session token."""
    await db.execute(delete(UserSession).where(UserSession.token == token))
    await commit_or_raise(db, "sign out")

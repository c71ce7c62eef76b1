"""Account endpoints: current user and sign-out."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from food_journal.core.auth import bearer_scheme, get_current_user, sign_out
from food_journal.core.exceptions import PersistenceError
from food_journal.db.base import get_db
from food_journal.models.user import User
from food_journal.schemas.user import UserResponse

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.post("/auth/sign-out", status_code=204)
async def sign_out_current_session(
    current_user: User = Depends(get_current_user),
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> None:
    """Invalidate the session token used for this request."""
    try:
        await sign_out(db, credentials.credentials)
        logger.info(f"User {current_user.id} signed out")

    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

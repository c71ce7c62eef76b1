"""Personal review history."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from food_journal.core.auth import get_current_user
from food_journal.db.base import get_db
from food_journal.models.user import User
from food_journal.schemas.review import HistoryResponse, OutcomeFilter, TimeRange
from food_journal.services.review_aggregator import build_history_items, filter_history
from food_journal.services.review_service import ReviewService

router = APIRouter()


@router.get("", response_model=HistoryResponse)
async def get_history(
    q: Optional[str] = Query("", description="Search dish or restaurant name"),
    outcome: OutcomeFilter = Query(OutcomeFilter.ALL, description="all, yes or skip"),
    time_range: TimeRange = Query(TimeRange.ALL_TIME, alias="range", description="30, 180 or all"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> HistoryResponse:
    """
    Every review of the user, newest first, narrowed by the filters.

    total is the number of reviews before filtering.

    Example:
        ```python
        response = requests.get("/api/v1/history", params={"q": "pizza", "outcome": "skip", "range": "30"})
        ```
    """
    try:
        rows = await ReviewService(db).list_user_reviews(current_user.id)
        items = build_history_items(rows)
        filtered = filter_history(items, query=q, outcome=outcome, time_range=time_range)

        return HistoryResponse(
            items=filtered,
            total=len(items),
            query=(q or "").strip(),
            outcome=outcome,
            range=time_range,
        )

    except Exception as e:
        logger.error(f"Error loading history: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to load history: {str(e)}")

"""CSV export of the user's reviews."""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from food_journal.core.auth import get_current_user
from food_journal.core.config import settings
from food_journal.core.exceptions import NoReviewsToExportError, PersistenceError
from food_journal.db.base import get_db
from food_journal.models.user import User
from food_journal.services.export_service import ExportService

router = APIRouter()


@router.get("")
async def export_reviews(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Response:
    """
    Download every review as CSV, newest first.

    Returns 404 when the user has nothing to export.
    """
    try:
        content = await ExportService(db).export_for_user(current_user.id)
        return Response(
            content=content,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{settings.EXPORT_FILENAME}"'},
        )

    except NoReviewsToExportError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Export failed for user {current_user.id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Export failed")

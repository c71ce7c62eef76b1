"""CSV export of a user's full review history."""

import csv
import io
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from food_journal.core.exceptions import NoReviewsToExportError
from food_journal.schemas.review import ReviewRow
from food_journal.services.review_service import ReviewService

CSV_HEADERS = [
    "Restaurant",
    "City",
    "Dish",
    "Category",
    "Would Order Again",
    "Rating",
    "Notes",
    "Visited At",
    "Created At",
]


def _csv_row(row: ReviewRow) -> list:
    # None renders as an empty quoted field
    return [
        row.restaurant_name,
        row.city,
        row.dish_name,
        row.category,
        "YES" if row.would_order_again else "NO",
        row.rating or None,
        row.notes,
        row.visited_at.isoformat() if row.visited_at else None,
        row.created_at.isoformat() if row.created_at else None,
    ]


def render_reviews_csv(rows: Sequence[ReviewRow]) -> str:
    """
    Serialize reviews to CSV.

    The header line is plain; every data value is double-quoted and
    embedded quotes are doubled (`"` becomes `""`). Rows are written in
    the given order.

    Args:
        rows: Joined review rows, newest first

    Returns:
        CSV text

    Raises:
        NoReviewsToExportError: if there are no rows
    """
    if not rows:
        raise NoReviewsToExportError("No reviews found")

    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(CSV_HEADERS)

    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for row in rows:
        writer.writerow(_csv_row(row))

    return buffer.getvalue()


class ExportService:
    """Builds the data export for the settings page."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def export_for_user(self, user_id: UUID) -> str:
        """
        Export every review of a user, unfiltered, newest first.

        Raises:
            NoReviewsToExportError: if the user has no reviews
        """
        rows = await ReviewService(self.db).list_user_reviews(user_id)
        logger.info(f"Exporting {len(rows)} reviews for user {user_id}")
        return render_reviews_csv(rows)

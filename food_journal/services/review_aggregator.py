"""Review aggregation: per-user rollups and history projections.

Everything here is pure: inputs are review rows already fetched by the
gateway (ORM ``Review`` objects or ``ReviewRow`` models, anything with the
same attributes) and outputs are transient view models rebuilt on every
request. Nothing in this module touches the database.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
from uuid import UUID

from food_journal.core.clock import as_utc, utcnow
from food_journal.core.config import settings
from food_journal.schemas.review import (
    HistoryItem,
    OutcomeFilter,
    RecentRestaurant,
    ReviewRow,
    TimeRange,
)


def _created(review: Any) -> datetime:
    return as_utc(review.created_at)


def _newest_first(rows: Iterable[Any]) -> List[Any]:
    # Stable, so rows sharing a timestamp keep the gateway's order
    return sorted(rows, key=_created, reverse=True)


def _matches_outcome(would_order_again: bool, outcome: OutcomeFilter) -> bool:
    if outcome == OutcomeFilter.YES:
        return would_order_again is True
    if outcome == OutcomeFilter.SKIP:
        return would_order_again is False
    return True


def resolve_latest_review(reviews: Iterable[Any]) -> Optional[Any]:
    """
    Pick the user's current review of a dish.

    Compares created_at explicitly instead of trusting query order. On a
    timestamp tie the first review encountered wins.

    Args:
        reviews: Reviews of one menu item by one user, in any order

    Returns:
        Review with the greatest created_at, or None for no reviews
    """
    latest = None
    for review in reviews:
        if latest is None or _created(review) > _created(latest):
            latest = review
    return latest


def latest_reviews_by_item(reviews: Iterable[Any]) -> Dict[UUID, Any]:
    """Map each menu_item_id to its latest review."""
    latest: Dict[UUID, Any] = {}
    for review in reviews:
        current = latest.get(review.menu_item_id)
        if current is None or _created(review) > _created(current):
            latest[review.menu_item_id] = review
    return latest


def rollup_recent_restaurants(
    rows: Iterable[ReviewRow],
    limit: Optional[int] = None
) -> List[RecentRestaurant]:
    """
    Group a user's reviews by restaurant for the "recent places" cards.

    Every review counts toward review_count (re-reviews of the same dish
    included); yes_again_count counts reviews marked would-order-again.
    Restaurants appear in the order they are first met while scanning
    newest-first, so the one touched most recently leads.

    Args:
        rows: The user's joined review rows
        limit: Maximum restaurants, defaults to RECENT_RESTAURANTS_LIMIT

    Returns:
        List of RecentRestaurant, at most ``limit`` long
    """
    if limit is None:
        limit = settings.RECENT_RESTAURANTS_LIMIT

    rollups: Dict[UUID, RecentRestaurant] = {}
    for row in _newest_first(rows):
        if row.restaurant_id is None:
            continue

        entry = rollups.get(row.restaurant_id)
        if entry is None:
            entry = RecentRestaurant(
                id=row.restaurant_id,
                name=row.restaurant_name or "",
                city=row.city,
                photo_url=row.restaurant_photo_url,
            )
            rollups[row.restaurant_id] = entry

        entry.review_count += 1
        if row.would_order_again:
            entry.yes_again_count += 1

    return list(rollups.values())[:limit]


@dataclass
class RestaurantItemsView:
    """Reviewed dishes of one restaurant in display order."""
    items: List[Tuple[Any, Any]] = field(default_factory=list)  # (menu item, latest review)
    reviewed_count: int = 0
    unreviewed_count: int = 0


def build_restaurant_detail(
    menu_items: Sequence[Any],
    reviews: Iterable[Any],
    outcome: Union[OutcomeFilter, str] = OutcomeFilter.ALL
) -> RestaurantItemsView:
    """
    Order a restaurant's dishes for the detail page.

    Dishes with a latest review sort YES-again first, then Skip; inside each
    group the most recently reviewed comes first. Dishes never reviewed by
    the user are left out of the list and only counted.

    Args:
        menu_items: All menu items of the restaurant
        reviews: The user's reviews of those items
        outcome: Optional all/yes/skip filter on the sorted list

    Returns:
        RestaurantItemsView
    """
    outcome = OutcomeFilter(outcome)
    latest = latest_reviews_by_item(reviews)

    reviewed = [(item, latest[item.id]) for item in menu_items if item.id in latest]
    reviewed.sort(key=lambda pair: (not pair[1].would_order_again, -_created(pair[1]).timestamp()))

    return RestaurantItemsView(
        items=[pair for pair in reviewed if _matches_outcome(pair[1].would_order_again, outcome)],
        reviewed_count=len(reviewed),
        unreviewed_count=len(menu_items) - len(reviewed),
    )


def build_history_items(rows: Iterable[ReviewRow]) -> List[HistoryItem]:
    """Flatten joined review rows into history lines, keeping their order."""
    items = []
    for row in rows:
        if row.restaurant_id is None:
            continue
        items.append(HistoryItem(
            id=row.id,
            dish_name=row.dish_name,
            restaurant_name=row.restaurant_name or "",
            restaurant_id=row.restaurant_id,
            would_order_again=row.would_order_again,
            rating=row.rating,
            notes=row.notes,
            visited_at=row.visited_at,
            created_at=row.created_at,
            city=row.city,
        ))
    return items


def filter_history(
    items: Sequence[HistoryItem],
    query: Optional[str] = "",
    outcome: Union[OutcomeFilter, str] = OutcomeFilter.ALL,
    time_range: Union[TimeRange, str] = TimeRange.ALL_TIME,
    now: Optional[datetime] = None
) -> List[HistoryItem]:
    """
    Apply the history search box and filter chips.

    The three filters are independent and all must pass:

    * text: case-insensitive substring of the dish or restaurant name,
      skipped for an empty query
    * outcome: all, yes (would order again) or skip
    * time range: created within the last 30 or 180 days, or all time

    The input order is preserved; nothing is re-sorted.

    Args:
        items: History lines, newest first
        query: Search text
        outcome: OutcomeFilter value
        time_range: TimeRange value
        now: Reference time, defaults to the current UTC time

    Returns:
        Filtered list of HistoryItem
    """
    needle = (query or "").strip().lower()
    outcome = OutcomeFilter(outcome)
    time_range = TimeRange(time_range)

    cutoff = None
    if time_range != TimeRange.ALL_TIME:
        cutoff = as_utc(now or utcnow()) - timedelta(days=int(time_range.value))

    filtered = []
    for item in items:
        if needle and needle not in item.dish_name.lower() and needle not in item.restaurant_name.lower():
            continue
        if not _matches_outcome(item.would_order_again, outcome):
            continue
        if cutoff is not None and _created(item) < cutoff:
            continue
        filtered.append(item)

    return filtered

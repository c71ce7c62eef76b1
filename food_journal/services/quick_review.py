"""Quick review: pick several dishes, rate them, save them with one visit.

The workflow state is a plain ``QuickReviewState`` snapshot. Transition
functions never mutate their input; they return a new state whose drafts
are independent copies.
"""

from datetime import date
from typing import Any, List, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from food_journal.core.clock import today
from food_journal.core.exceptions import (
    EmptySelectionError,
    IncompleteDraftError,
    PersistenceError,
    QuickReviewError,
    ValidationError,
)
from food_journal.schemas.quick_review import (
    DraftReview,
    QuickReviewSaveResult,
    QuickReviewState,
    QuickReviewStep,
)
from food_journal.services.menu_service import MenuService
from food_journal.services.review_service import ReviewService

EDITABLE_DRAFT_FIELDS = {"rating", "would_order_again", "notes"}


def _require_step(state: QuickReviewState, step: QuickReviewStep) -> None:
    if state.step != step:
        raise QuickReviewError(f"Not allowed while {state.step.value}")


def toggle_item(state: QuickReviewState, item_id: UUID) -> QuickReviewState:
    """Add an existing dish to the selection, or remove it if already selected."""
    _require_step(state, QuickReviewStep.SELECTING)

    if item_id in state.selected_ids:
        selected = [selected_id for selected_id in state.selected_ids if selected_id != item_id]
    else:
        selected = [*state.selected_ids, item_id]
    return state.model_copy(update={"selected_ids": selected}, deep=True)


def add_new_dish(state: QuickReviewState, name: str) -> QuickReviewState:
    """
    Queue a dish that is not on the menu yet.

    Blank names are ignored. Names already pending are not added twice
    (case-sensitive); existing menu items are not checked here, the save
    upsert attaches to them.
    """
    _require_step(state, QuickReviewStep.SELECTING)

    name = (name or "").strip()
    if not name or name in state.pending_names:
        return state.model_copy(deep=True)
    return state.model_copy(update={"pending_names": [*state.pending_names, name]}, deep=True)


def advance_to_rating(state: QuickReviewState, existing_items: Sequence[Any]) -> QuickReviewState:
    """
    Freeze the selection into one draft per dish and move to step 2.

    Drafts list the selected existing items in menu order, followed by the
    pending new dishes.

    Args:
        state: Current selecting-step state
        existing_items: The restaurant's menu items (anything with id and name)

    Returns:
        Rating-step state

    Raises:
        EmptySelectionError: if nothing is selected or pending; the caller's
            state is left as it was
    """
    _require_step(state, QuickReviewStep.SELECTING)

    selected = set(state.selected_ids)
    drafts = [
        DraftReview(menu_item_id=item.id, name=item.name, is_new=False)
        for item in existing_items
        if item.id in selected
    ]
    drafts.extend(DraftReview(name=name, is_new=True) for name in state.pending_names)

    if not drafts:
        raise EmptySelectionError()

    return state.model_copy(update={"step": QuickReviewStep.RATING, "drafts": drafts}, deep=True)


def update_draft(state: QuickReviewState, index: int, **changes: Any) -> QuickReviewState:
    """
    Edit rating, outcome or notes of one draft; the others are untouched.

    Raises:
        QuickReviewError: for an unknown index or a non-editable field
    """
    _require_step(state, QuickReviewStep.RATING)

    if not 0 <= index < len(state.drafts):
        raise QuickReviewError(f"No dish at position {index}")
    unknown = set(changes) - EDITABLE_DRAFT_FIELDS
    if unknown:
        raise QuickReviewError(f"Cannot edit {', '.join(sorted(unknown))}")

    drafts = [draft.model_copy() for draft in state.drafts]
    drafts[index] = DraftReview.model_validate({**drafts[index].model_dump(), **changes})
    return state.model_copy(update={"drafts": drafts}, deep=True)


def back_to_selecting(state: QuickReviewState) -> QuickReviewState:
    """Return to step 1, keeping the selection and dropping the drafts."""
    return state.model_copy(update={"step": QuickReviewStep.SELECTING, "drafts": []}, deep=True)


def can_save(state: QuickReviewState) -> bool:
    """True once every draft has a YES-again or Skip answer."""
    return (
        state.step == QuickReviewStep.RATING
        and bool(state.drafts)
        and all(draft.would_order_again is not None for draft in state.drafts)
    )


class QuickReviewService:
    """Persists a completed quick-review session."""

    def __init__(self, db: AsyncSession):
        """
        Initialize quick review service.

        Args:
            db: Database session
        """
        self.db = db
        self.menu_service = MenuService(db)
        self.review_service = ReviewService(db)

    async def save(
        self,
        restaurant_id: UUID,
        user_id: UUID,
        state: QuickReviewState,
        visited_on: Optional[date] = None
    ) -> QuickReviewSaveResult:
        """
        Save every draft as a review, then log one visit.

        Steps run strictly in order: for each draft resolve (or upsert) the
        menu item and insert its review; finally insert a single
        RestaurantVisit. The first failing step stops the run and its error
        is raised. Rows written before the failure stay written.

        Args:
            restaurant_id: Restaurant being reviewed
            user_id: Current user
            state: Rating-step state
            visited_on: Visit date for the reviews, defaults to today

        Returns:
            QuickReviewSaveResult

        Raises:
            QuickReviewError: if the state is not at the rating step
            EmptySelectionError: if there are no drafts
            IncompleteDraftError: if any draft lacks an outcome
            ValidationError: if a draft points at another restaurant's dish
            PersistenceError: if a write fails
        """
        _require_step(state, QuickReviewStep.RATING)
        if not state.drafts:
            raise EmptySelectionError()
        if not can_save(state):
            raise IncompleteDraftError()
        await self._check_existing_items(restaurant_id, state.drafts)

        visited_on = visited_on or today()
        total = len(state.drafts)
        review_ids: List[UUID] = []

        for position, draft in enumerate(state.drafts, start=1):
            try:
                menu_item_id = draft.menu_item_id
                if draft.is_new or menu_item_id is None:
                    menu_item = await self.menu_service.upsert_menu_item(
                        restaurant_id=restaurant_id,
                        name=draft.name,
                        created_by=user_id,
                    )
                    menu_item_id = menu_item.id

                review = await self.review_service.insert_review(
                    menu_item_id=menu_item_id,
                    user_id=user_id,
                    would_order_again=draft.would_order_again,
                    rating=draft.rating or None,
                    notes=draft.notes.strip() or None,
                    visited_at=visited_on,
                )
                review_ids.append(review.id)
            except PersistenceError as e:
                logger.error(
                    f"Quick review aborted at dish {position}/{total} ('{draft.name}'), "
                    f"{len(review_ids)} reviews already saved: {str(e)}"
                )
                raise

        try:
            visit = await self.review_service.record_visit(restaurant_id, user_id)
        except PersistenceError as e:
            logger.error(f"Quick review saved {len(review_ids)} reviews but the visit failed: {str(e)}")
            raise

        logger.info(f"Quick review saved {len(review_ids)} reviews and visit {visit.id}")
        return QuickReviewSaveResult(review_ids=review_ids, visit_id=visit.id, saved=len(review_ids))

    async def _check_existing_items(self, restaurant_id: UUID, drafts: Sequence[DraftReview]) -> None:
        for draft in drafts:
            if draft.is_new or draft.menu_item_id is None:
                continue
            item = await self.menu_service.get_menu_item(draft.menu_item_id)
            if item is None or item.restaurant_id != restaurant_id:
                raise ValidationError(f"'{draft.name}' is not on this restaurant's menu")

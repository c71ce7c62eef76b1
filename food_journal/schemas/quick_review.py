"""Quick-review workflow state and request schemas."""

from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class QuickReviewStep(str, Enum):
    """Step 1 picks dishes, step 2 rates them."""
    SELECTING = "selecting"
    RATING = "rating"


class DraftReview(BaseModel):
    """Per-dish review being filled in during the rating step."""
    menu_item_id: Optional[UUID] = Field(None, description="Existing menu item, null for new dishes")
    name: str
    is_new: bool = False
    rating: int = Field(0, ge=0, le=5, description="0 means unset")
    would_order_again: Optional[bool] = None
    notes: str = ""


class QuickReviewState(BaseModel):
    """Serializable view state of one quick-review session."""
    step: QuickReviewStep = QuickReviewStep.SELECTING
    selected_ids: List[UUID] = Field(default_factory=list)
    pending_names: List[str] = Field(default_factory=list)
    drafts: List[DraftReview] = Field(default_factory=list)


class QuickReviewStartRequest(BaseModel):
    """Selection submitted at the end of step 1."""
    selected_ids: List[UUID] = Field(default_factory=list)
    new_dishes: List[str] = Field(default_factory=list)


class QuickReviewSaveResult(BaseModel):
    """Rows written by a completed session."""
    review_ids: List[UUID] = Field(default_factory=list)
    visit_id: UUID
    saved: int

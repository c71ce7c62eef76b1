"""Menu item and OCR-related schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, validator


class MenuItemResponse(BaseModel):
    """Response schema for menu items."""
    id: UUID
    restaurant_id: UUID
    name: str
    category: Optional[str]
    description: Optional[str]
    price: Optional[float]
    created_at: datetime

    class Config:
        from_attributes = True


class OCRMenuItem(BaseModel):
    """Dish candidate extracted from a menu photo."""
    name: str = Field(..., description="Dish name extracted from menu")
    price: Optional[float] = Field(None, ge=0, description="Parsed numeric price")
    category: Optional[str] = Field(None, description="Menu section (e.g., 'Appetizer')")

    @validator("name")
    def validate_name(cls, v):
        """Ensure dish name is not empty."""
        if not v or not v.strip():
            raise ValueError("Dish name cannot be empty")
        return v.strip()


class OCRCandidate(OCRMenuItem):
    """Extracted dish with its import checkbox."""
    checked: bool = Field(True, description="Import this row")


class OCRExtractResponse(BaseModel):
    """Response schema for menu photo extraction."""
    items: List[OCRCandidate] = Field(default_factory=list)


class OCRImportRequest(BaseModel):
    """Rows reviewed by the user, only checked rows are imported."""
    items: List[OCRCandidate] = Field(..., description="Candidate rows")


class OCRImportResult(BaseModel):
    """Outcome of an OCR import batch."""
    requested: int = Field(..., description="Number of checked rows")
    imported: int = Field(..., description="Rows created or updated")


class MenuItemListResponse(BaseModel):
    items: List[MenuItemResponse] = Field(default_factory=list)

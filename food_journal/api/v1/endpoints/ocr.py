"""Menu photo OCR endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from food_journal.api.deps import get_ocr_service
from food_journal.core.auth import get_current_user
from food_journal.core.exceptions import OCRProviderError
from food_journal.db.base import get_db
from food_journal.models.user import User
from food_journal.schemas.menu import OCRExtractResponse, OCRImportRequest, OCRImportResult
from food_journal.services.ocr_service import MenuOCRService, OCRImportService, to_candidates
from food_journal.services.restaurant_service import RestaurantService

router = APIRouter()


@router.post("/{restaurant_id}/ocr/extract", response_model=OCRExtractResponse)
async def extract_menu_items(
    restaurant_id: UUID,
    file: UploadFile = File(..., description="Menu photo"),
    current_user: User = Depends(get_current_user),
    ocr_service: MenuOCRService = Depends(get_ocr_service)
) -> OCRExtractResponse:
    """
    Extract candidate dishes from a menu photo.

    Nothing is stored; every candidate comes back checked for import.
    """
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail=f"File {file.filename} is not a valid image")

    try:
        image_data = await file.read()
        logger.info(f"Extracting menu items from {file.filename} ({len(image_data)} bytes)")

        items = await ocr_service.extract_items_from_image(image_data)
        return OCRExtractResponse(items=to_candidates(items))

    except OCRProviderError as e:
        logger.error(f"OCR failed for restaurant {restaurant_id}: {str(e)}")
        raise HTTPException(status_code=502, detail="Failed to extract menu items")
    except Exception as e:
        logger.error(f"OCR error for restaurant {restaurant_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to extract menu items: {str(e)}")


@router.post("/{restaurant_id}/ocr/import", response_model=OCRImportResult)
async def import_menu_items(
    restaurant_id: UUID,
    request: OCRImportRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> OCRImportResult:
    """Upsert the checked candidates as menu items of the restaurant."""
    try:
        restaurant = await RestaurantService(db).get_restaurant(restaurant_id)
        if not restaurant:
            raise HTTPException(status_code=404, detail="Restaurant not found")

        return await OCRImportService(db).import_items(
            restaurant_id, request.items, created_by=current_user.id
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error importing OCR items for restaurant {restaurant_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to import menu items: {str(e)}")

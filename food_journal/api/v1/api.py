"""API v1 router that includes all endpoint modules."""

from fastapi import APIRouter

from food_journal.api.v1.endpoints import (
    account,
    export,
    history,
    menu_items,
    ocr,
    places,
    quick_review,
    restaurants,
)

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(places.router, prefix="/places", tags=["Places"])
api_router.include_router(restaurants.router, prefix="/restaurants", tags=["Restaurants"])
api_router.include_router(quick_review.router, prefix="/restaurants", tags=["Quick Review"])
api_router.include_router(ocr.router, prefix="/restaurants", tags=["OCR"])
api_router.include_router(menu_items.router, prefix="/menu-items", tags=["Menu Items"])
api_router.include_router(history.router, prefix="/history", tags=["History"])
api_router.include_router(export.router, prefix="/export", tags=["Export"])
api_router.include_router(account.router, tags=["Account"])

"""Places search endpoints (nearby and text search)."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger

from food_journal.api.deps import get_places_service
from food_journal.core.exceptions import PlacesNotConfiguredError, PlacesProviderError
from food_journal.schemas.place import PlaceSearchResponse
from food_journal.services.places_service import PlacesService

router = APIRouter()


@router.get("/nearby", response_model=PlaceSearchResponse)
async def search_nearby_places(
    lat: Optional[float] = Query(None, description="Latitude"),
    lng: Optional[float] = Query(None, description="Longitude"),
    places_service: PlacesService = Depends(get_places_service)
) -> PlaceSearchResponse:
    """
    Restaurants around the user's current location.

    Returns 400 without both coordinates, 500 when the provider key is not
    configured and 502 when the provider call fails.

    Example:
        ```python
        response = requests.get("/api/v1/places/nearby", params={"lat": 40.73, "lng": -73.99})

        {
            "places": [
                {
                    "place_id": "ChIJ...",
                    "name": "Joe's Pizza",
                    "formatted_address": "7 Carmine St, New York, NY 10014, USA",
                    "city": "New York",
                    "lat": 40.7305,
                    "lng": -74.0021,
                    "rating": 4.5,
                    "photo_url": "https://places.googleapis.com/v1/places/.../media?..."
                }
            ]
        }
        ```
    """
    if lat is None or lng is None:
        raise HTTPException(status_code=400, detail="lat and lng are required")

    try:
        places = await places_service.search_nearby(lat, lng)
        return PlaceSearchResponse(places=places)

    except PlacesNotConfiguredError as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail=str(e))
    except PlacesProviderError as e:
        logger.error(f"Nearby search failed: {str(e)}")
        raise HTTPException(status_code=502, detail="Failed to search nearby places")
    except Exception as e:
        logger.error(f"Nearby search error: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/search", response_model=PlaceSearchResponse)
async def search_places(
    query: Optional[str] = Query(None, description="Restaurant name or cuisine"),
    lat: Optional[float] = Query(None, description="Latitude for location bias"),
    lng: Optional[float] = Query(None, description="Longitude for location bias"),
    places_service: PlacesService = Depends(get_places_service)
) -> PlaceSearchResponse:
    """
    Text search for restaurants.

    lat/lng only bias the ranking toward the user's location.
    """
    if not query or not query.strip():
        raise HTTPException(status_code=400, detail="query is required")

    try:
        places = await places_service.search_text(query.strip(), lat=lat, lng=lng)
        return PlaceSearchResponse(places=places)

    except PlacesNotConfiguredError as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail=str(e))
    except PlacesProviderError as e:
        logger.error(f"Places search failed: {str(e)}")
        raise HTTPException(status_code=502, detail="Failed to search places")
    except Exception as e:
        logger.error(f"Places search error: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")

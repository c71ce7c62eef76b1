"""Places provider adapter for nearby and text restaurant search."""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
from loguru import logger

from food_journal.core.config import settings
from food_journal.core.exceptions import PlacesNotConfiguredError, PlacesProviderError
from food_journal.schemas.place import PlaceResult

FIELD_MASK = ",".join([
    "places.id",
    "places.displayName",
    "places.formattedAddress",
    "places.location",
    "places.rating",
    "places.photos",
    "places.addressComponents",
])


def extract_city(address_components: Optional[List[Dict[str, Any]]]) -> str:
    """
    City from the first address component typed "locality".

    Args:
        address_components: Structured address breakdown from the provider

    Returns:
        The component's long text, or "" when there is none
    """
    for component in address_components or []:
        if "locality" in (component.get("types") or []):
            return component.get("longText") or ""
    return ""


def build_photo_url(photos: Optional[List[Dict[str, Any]]], api_key: str) -> Optional[str]:
    """Media URL for the first photo reference, None when there are no photos."""
    if not photos:
        return None

    photo_name = photos[0].get("name")
    if not photo_name:
        return None

    size = settings.PLACES_PHOTO_MAX_PX
    return (
        f"{settings.PLACES_BASE_URL}/{photo_name}/media"
        f"?maxHeightPx={size}&maxWidthPx={size}&key={api_key}"
    )


def normalize_place(place: Dict[str, Any], api_key: str) -> PlaceResult:
    """
    Convert a raw provider place into a PlaceResult.

    Missing display name and address default to empty strings, missing
    location/rating to None.
    """
    location = place.get("location") or {}
    display_name = place.get("displayName") or {}

    return PlaceResult(
        place_id=place.get("id", ""),
        name=display_name.get("text") or "",
        formatted_address=place.get("formattedAddress") or "",
        city=extract_city(place.get("addressComponents")),
        lat=location.get("latitude"),
        lng=location.get("longitude"),
        rating=place.get("rating"),
        photo_url=build_photo_url(place.get("photos"), api_key),
    )


class PlacesService:
    """Client for the Google Places (v1) search endpoints."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize places service.

        Args:
            api_key: Provider key, defaults to GOOGLE_MAPS_API_KEY
            session: Optional shared aiohttp session
        """
        self.api_key = api_key if api_key is not None else settings.GOOGLE_MAPS_API_KEY
        self._session = session

    async def search_nearby(self, lat: float, lng: float) -> List[PlaceResult]:
        """
        Restaurants within NEARBY_RADIUS_METERS of a point.

        Args:
            lat: Latitude
            lng: Longitude

        Returns:
            List of PlaceResult

        Raises:
            PlacesNotConfiguredError: if no API key is set
            PlacesProviderError: if the provider call fails
        """
        logger.info(f"Searching nearby restaurants at ({lat}, {lng})")

        body = {
            "includedTypes": ["restaurant"],
            "maxResultCount": settings.PLACES_MAX_RESULTS,
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": lat, "longitude": lng},
                    "radius": settings.NEARBY_RADIUS_METERS,
                },
            },
        }
        payload = await self._post("places:searchNearby", body)
        return self._normalize(payload)

    async def search_text(
        self,
        query: str,
        lat: Optional[float] = None,
        lng: Optional[float] = None
    ) -> List[PlaceResult]:
        """
        Restaurants matching a free-text query.

        Coordinates, when both are given, bias the ranking toward that
        point; they do not restrict results.

        Args:
            query: Search text
            lat: Optional latitude for location bias
            lng: Optional longitude for location bias

        Returns:
            List of PlaceResult
        """
        logger.info(f"Searching restaurants for query: {query}")

        body: Dict[str, Any] = {
            "textQuery": f"{query} restaurant",
            "includedType": "restaurant",
            "maxResultCount": settings.PLACES_MAX_RESULTS,
        }
        if lat is not None and lng is not None:
            body["locationBias"] = {
                "circle": {
                    "center": {"latitude": lat, "longitude": lng},
                    "radius": settings.TEXT_SEARCH_BIAS_RADIUS_METERS,
                },
            }

        payload = await self._post("places:searchText", body)
        return self._normalize(payload)

    def _normalize(self, payload: Dict[str, Any]) -> List[PlaceResult]:
        places = [normalize_place(place, self.api_key) for place in payload.get("places") or []]
        logger.info(f"Places provider returned {len(places)} results")
        return places

    async def _post(self, endpoint: str, body: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise PlacesNotConfiguredError("Google Maps API key not configured")

        url = f"{settings.PLACES_BASE_URL}/{endpoint}"
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": FIELD_MASK,
        }

        try:
            if self._session is not None:
                return await self._request(self._session, url, body, headers)

            timeout = aiohttp.ClientTimeout(total=settings.PLACES_TIMEOUT_SECONDS)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                return await self._request(session, url, body, headers)

        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Places API request failed: {str(e)}")
            raise PlacesProviderError(f"Places request failed: {str(e)}") from e

    async def _request(
        self,
        session: aiohttp.ClientSession,
        url: str,
        body: Dict[str, Any],
        headers: Dict[str, str]
    ) -> Dict[str, Any]:
        async with session.post(url, json=body, headers=headers) as response:
            if not 200 <= response.status < 300:
                error_text = await response.text()
                logger.error(f"Places API error {response.status}: {error_text}")
                raise PlacesProviderError(f"Places API returned status {response.status}")
            return await response.json()

import pytest

from food_journal.api.deps import get_ocr_service, get_places_service
from food_journal.api.v1.endpoints import export as export_endpoint
from food_journal.core.exceptions import (
    OCRProviderError,
    PersistenceError,
    PlacesNotConfiguredError,
    PlacesProviderError,
)
from food_journal.main import app
from food_journal.schemas.place import PlaceResult


class DummyPlacesService:
    def __init__(self, places=None, error=None):
        self.places = places or []
        self.error = error
        self.calls = []

    async def search_nearby(self, lat, lng):
        self.calls.append(("nearby", lat, lng))
        if self.error:
            raise self.error
        return self.places

    async def search_text(self, query, lat=None, lng=None):
        self.calls.append(("text", query, lat, lng))
        if self.error:
            raise self.error
        return self.places


@pytest.fixture
def places(client):
    service = DummyPlacesService(places=[PlaceResult(place_id="ChIJ-joes", name="Joe's Pizza", city="New York")])
    app.dependency_overrides[get_places_service] = lambda: service
    return service


async def create_restaurant(client, auth_headers, place_id="ChIJ-joes", name="Joe's Pizza"):
    response = await client.post(
        "/api/v1/restaurants",
        json={"google_place_id": place_id, "name": name, "city": "New York"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    return response.json()["id"]


async def add_dish(client, auth_headers, restaurant_id, **form):
    response = await client.post(
        f"/api/v1/restaurants/{restaurant_id}/dishes", data=form, headers=auth_headers
    )
    assert response.status_code == 200, response.text
    return response.json()


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Process-Time" in response.headers


@pytest.mark.parametrize("path", [
    "/api/v1/export",
    "/api/v1/history",
    "/api/v1/restaurants/recent",
    "/api/v1/me",
])
async def test_user_scoped_routes_require_session(client, path):
    response = await client.get(path)

    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized"


async def test_unknown_token_is_rejected(client, token):
    response = await client.get("/api/v1/me", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401


async def test_me_and_sign_out(client, auth_headers):
    me = await client.get("/api/v1/me", headers=auth_headers)
    signed_out = await client.post("/api/v1/auth/sign-out", headers=auth_headers)
    after = await client.get("/api/v1/me", headers=auth_headers)

    assert me.json()["email"] == "diner@example.com"
    assert signed_out.status_code == 204
    assert after.status_code == 401


async def test_nearby_requires_coordinates(client, places):
    response = await client.get("/api/v1/places/nearby", params={"lat": 40.7})

    assert response.status_code == 400
    assert places.calls == []


async def test_nearby_returns_places(client, places):
    response = await client.get("/api/v1/places/nearby", params={"lat": 40.7, "lng": -74.0})

    assert response.status_code == 200
    assert response.json()["places"][0]["name"] == "Joe's Pizza"
    assert response.json()["places"][0]["photo_url"] is None


async def test_search_requires_query(client, places):
    response = await client.get("/api/v1/places/search", params={"query": "  "})

    assert response.status_code == 400


@pytest.mark.parametrize("error, status", [
    (PlacesProviderError("boom"), 502),
    (PlacesNotConfiguredError("Google Maps API key not configured"), 500),
])
async def test_search_provider_errors(client, places, error, status):
    places.error = error

    response = await client.get("/api/v1/places/search", params={"query": "pizza"})

    assert response.status_code == status


async def test_create_restaurant_reuses_place(client, auth_headers):
    first = await create_restaurant(client, auth_headers)
    second = await create_restaurant(client, auth_headers)

    assert first == second


async def test_create_restaurant_requires_session(client):
    response = await client.post("/api/v1/restaurants", json={"name": "Joe's Pizza"})

    assert response.status_code == 401


async def test_dish_entry_detail_and_history(client, auth_headers):
    restaurant_id = await create_restaurant(client, auth_headers)
    await add_dish(client, auth_headers, restaurant_id, name="Pepperoni Pizza", would_order_again="false")
    await add_dish(client, auth_headers, restaurant_id, name="Margherita Pizza", would_order_again="true", rating="5")
    await add_dish(client, auth_headers, restaurant_id, name="Garlic Knots")

    detail = (await client.get(f"/api/v1/restaurants/{restaurant_id}", headers=auth_headers)).json()
    skip_only = (await client.get(
        f"/api/v1/restaurants/{restaurant_id}", params={"outcome": "skip"}, headers=auth_headers
    )).json()
    history = (await client.get(
        "/api/v1/history", params={"q": "pizza", "outcome": "skip", "range": "30"}, headers=auth_headers
    )).json()

    assert [item["name"] for item in detail["items"]] == ["Margherita Pizza", "Pepperoni Pizza"]
    assert detail["reviewed_count"] == 2
    assert detail["unreviewed_count"] == 1
    assert [item["name"] for item in skip_only["items"]] == ["Pepperoni Pizza"]
    assert history["total"] == 2
    assert [item["dish_name"] for item in history["items"]] == ["Pepperoni Pizza"]


async def test_menu_item_autocomplete_and_latest_review(client, auth_headers):
    restaurant_id = await create_restaurant(client, auth_headers)
    entry = await add_dish(client, auth_headers, restaurant_id, name="Cacio e Pepe", would_order_again="true")
    await add_dish(client, auth_headers, restaurant_id, name="Carbonara")

    suggestions = (await client.get(
        f"/api/v1/restaurants/{restaurant_id}/menu-items", params={"q": "cacio"}, headers=auth_headers
    )).json()
    latest = (await client.get(
        f"/api/v1/menu-items/{entry['menu_item']['id']}/latest-review", headers=auth_headers
    )).json()

    assert [item["name"] for item in suggestions["items"]] == ["Cacio e Pepe"]
    assert latest["latest_review"]["would_order_again"] is True


async def test_dish_entry_rejects_blank_name(client, auth_headers):
    restaurant_id = await create_restaurant(client, auth_headers)

    response = await client.post(
        f"/api/v1/restaurants/{restaurant_id}/dishes",
        data={"name": "  ", "would_order_again": "true"},
        headers=auth_headers,
    )

    assert response.status_code == 400


async def test_recent_restaurants(client, auth_headers):
    joes = await create_restaurant(client, auth_headers)
    lucali = await create_restaurant(client, auth_headers, place_id="ChIJ-lucali", name="Lucali")
    await add_dish(client, auth_headers, joes, name="Slice", would_order_again="true")
    await add_dish(client, auth_headers, lucali, name="Calzone", would_order_again="false")

    recent = (await client.get("/api/v1/restaurants/recent", headers=auth_headers)).json()

    assert [entry["name"] for entry in recent["restaurants"]] == ["Lucali", "Joe's Pizza"]
    assert recent["restaurants"][1]["yes_again_count"] == 1


async def test_quick_review_flow(client, auth_headers):
    restaurant_id = await create_restaurant(client, auth_headers)
    entry = await add_dish(client, auth_headers, restaurant_id, name="Margherita")

    started = await client.post(
        f"/api/v1/restaurants/{restaurant_id}/quick-review/start",
        json={"selected_ids": [entry["menu_item"]["id"]], "new_dishes": ["Burrata"]},
        headers=auth_headers,
    )
    state = started.json()
    for draft in state["drafts"]:
        draft["would_order_again"] = True
    saved = await client.post(f"/api/v1/restaurants/{restaurant_id}/quick-review", json=state, headers=auth_headers)

    assert started.status_code == 200
    assert [draft["name"] for draft in state["drafts"]] == ["Margherita", "Burrata"]
    assert saved.status_code == 200
    assert saved.json()["saved"] == 2


async def test_quick_review_requires_selection_and_outcomes(client, auth_headers):
    restaurant_id = await create_restaurant(client, auth_headers)

    empty = await client.post(
        f"/api/v1/restaurants/{restaurant_id}/quick-review/start",
        json={"selected_ids": [], "new_dishes": ["  "]},
        headers=auth_headers,
    )
    started = await client.post(
        f"/api/v1/restaurants/{restaurant_id}/quick-review/start",
        json={"new_dishes": ["Burrata"]},
        headers=auth_headers,
    )
    incomplete = await client.post(
        f"/api/v1/restaurants/{restaurant_id}/quick-review", json=started.json(), headers=auth_headers
    )

    assert empty.status_code == 400
    assert empty.json()["detail"] == "Select at least one dish"
    assert incomplete.status_code == 400
    assert incomplete.json()["detail"] == "Choose YES again or Skip for every dish"


async def test_ocr_extract_and_import(client, auth_headers):
    restaurant_id = await create_restaurant(client, auth_headers)

    extracted = await client.post(
        f"/api/v1/restaurants/{restaurant_id}/ocr/extract",
        files={"file": ("menu.jpg", b"jpeg-bytes", "image/jpeg")},
        headers=auth_headers,
    )
    items = extracted.json()["items"]
    items[-1]["checked"] = False
    imported = await client.post(
        f"/api/v1/restaurants/{restaurant_id}/ocr/import", json={"items": items}, headers=auth_headers
    )
    menu = (await client.get(f"/api/v1/restaurants/{restaurant_id}/menu-items", headers=auth_headers)).json()

    assert len(items) == 7
    assert imported.json() == {"requested": 6, "imported": 6}
    assert len(menu["items"]) == 6


async def test_ocr_extract_rejects_non_images(client, auth_headers):
    restaurant_id = await create_restaurant(client, auth_headers)

    response = await client.post(
        f"/api/v1/restaurants/{restaurant_id}/ocr/extract",
        files={"file": ("menu.txt", b"text", "text/plain")},
        headers=auth_headers,
    )

    assert response.status_code == 400


async def test_export_without_reviews_is_not_found(client, auth_headers):
    response = await client.get("/api/v1/export", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "No reviews found"


async def test_export_csv(client, auth_headers):
    restaurant_id = await create_restaurant(client, auth_headers)
    await add_dish(client, auth_headers, restaurant_id, name="Slice", would_order_again="true", notes='He said "wow"')

    response = await client.get("/api/v1/export", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == 'attachment; filename="menu-reviews-export.csv"'
    assert '"He said ""wow"""' in response.text
    assert response.text.splitlines()[0].startswith("Restaurant,City,Dish")


async def test_unknown_restaurant_is_not_found(client, auth_headers):
    response = await client.get(
        "/api/v1/restaurants/00000000-0000-0000-0000-000000000000", headers=auth_headers
    )

    assert response.status_code == 404


class DummyOCRService:
    def __init__(self, items=None, error=None):
        self.items = items or []
        self.error = error

    async def extract_items_from_image(self, image):
        if self.error:
            raise self.error
        return self.items


async def extract_with(client, auth_headers, ocr):
    restaurant_id = await create_restaurant(client, auth_headers)
    app.dependency_overrides[get_ocr_service] = lambda: ocr
    return await client.post(
        f"/api/v1/restaurants/{restaurant_id}/ocr/extract",
        files={"file": ("menu.jpg", b"jpeg-bytes", "image/jpeg")},
        headers=auth_headers,
    )


async def test_ocr_provider_failure_is_bad_gateway(client, auth_headers):
    response = await extract_with(client, auth_headers, DummyOCRService(error=OCRProviderError("vision down")))

    assert response.status_code == 502


async def test_ocr_empty_menu_is_not_an_error(client, auth_headers):
    response = await extract_with(client, auth_headers, DummyOCRService(items=[]))

    assert response.status_code == 200
    assert response.json() == {"items": []}


async def test_export_surfaces_persistence_message(client, auth_headers, monkeypatch):
    async def failing_export(self, user_id):
        raise PersistenceError("database is locked")

    monkeypatch.setattr(export_endpoint.ExportService, "export_for_user", failing_export)

    response = await client.get("/api/v1/export", headers=auth_headers)

    assert response.status_code == 500
    assert response.json()["detail"] == "database is locked"

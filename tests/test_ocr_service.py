import pytest
from sqlalchemy import select

from food_journal.core.exceptions import PersistenceError
from food_journal.models import MenuItem, Restaurant
from food_journal.schemas.menu import OCRCandidate
from food_journal.services import ocr_service
from food_journal.services.menu_service import MenuService
from food_journal.services.ocr_service import MockMenuOCRService, OCRImportService, to_candidates


@pytest.fixture
async def restaurant(db):
    restaurant = Restaurant(name="Trattoria", city="Boston")
    db.add(restaurant)
    await db.commit()
    return restaurant


async def test_mock_provider_returns_sample_menu():
    items = await MockMenuOCRService(delay_seconds=0).extract_items_from_image(b"jpeg")

    assert len(items) == 7
    assert items[0].name == "Caesar Salad"
    assert items[0].price == 12.99
    assert items[-1].category == "Drink"


async def test_candidates_start_checked():
    items = await MockMenuOCRService(delay_seconds=0).extract_items_from_image(b"jpeg")

    assert all(candidate.checked for candidate in to_candidates(items))


async def test_import_only_checked_rows(db, user, restaurant):
    candidates = [
        OCRCandidate(name="Tiramisu", price=9.99, category="Dessert"),
        OCRCandidate(name="Lemonade", price=4.99, category="Drink", checked=False),
    ]

    result = await OCRImportService(db).import_items(restaurant.id, candidates, created_by=user.id)

    names = (await db.execute(select(MenuItem.name))).scalars().all()
    assert (result.requested, result.imported) == (1, 1)
    assert names == ["Tiramisu"]


async def test_import_continues_past_failing_row(db, restaurant, monkeypatch):
    original_upsert = MenuService.upsert_menu_item

    async def flaky_upsert(self, **kwargs):
        if kwargs["name"] == "Grilled Salmon":
            raise PersistenceError("constraint failed")
        return await original_upsert(self, **kwargs)

    monkeypatch.setattr(ocr_service.MenuService, "upsert_menu_item", flaky_upsert)
    items = await MockMenuOCRService(delay_seconds=0).extract_items_from_image(b"jpeg")

    result = await OCRImportService(db).import_items(restaurant.id, to_candidates(items))

    assert result.requested == 7
    assert result.imported == 6


async def test_reimport_attaches_to_existing_items(db, restaurant):
    candidates = [OCRCandidate(name="Garlic Bread", price=7.99)]
    service = OCRImportService(db)

    await service.import_items(restaurant.id, candidates)
    await service.import_items(restaurant.id, [OCRCandidate(name="Garlic Bread", price=8.49)])

    items = (await db.execute(select(MenuItem))).scalars().all()
    assert len(items) == 1

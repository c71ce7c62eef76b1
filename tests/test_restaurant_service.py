from sqlalchemy import func, select

from food_journal.models import Restaurant
from food_journal.schemas.place import RestaurantCreate
from food_journal.services.restaurant_service import RestaurantService


async def count_restaurants(db):
    result = await db.execute(select(func.count()).select_from(Restaurant))
    return result.scalar_one()


async def test_same_place_id_is_reused(db, user):
    service = RestaurantService(db)
    payload = RestaurantCreate(google_place_id="ChIJ-joes", name="Joe's Pizza", city="New York")

    first = await service.create_or_reuse(payload, created_by=user.id)
    second = await service.create_or_reuse(payload, created_by=user.id)

    assert first == second
    assert await count_restaurants(db) == 1


async def test_restaurants_without_place_id_are_always_inserted(db):
    service = RestaurantService(db)
    payload = RestaurantCreate(google_place_id="  ", name="Home Kitchen")

    first = await service.create_or_reuse(payload)
    second = await service.create_or_reuse(payload)

    assert first != second
    assert await count_restaurants(db) == 2


async def test_get_restaurant(db):
    service = RestaurantService(db)
    restaurant_id = await service.create_or_reuse(
        RestaurantCreate(google_place_id="ChIJ-lucali", name="Lucali", city="Brooklyn")
    )

    restaurant = await service.get_restaurant(restaurant_id)

    assert restaurant.name == "Lucali"
    assert restaurant.google_place_id == "ChIJ-lucali"

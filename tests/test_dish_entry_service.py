import uuid

import pytest
from sqlalchemy import func, select

from conftest import MemoryPhotoStorage
from food_journal.core.exceptions import NotFoundError, ValidationError
from food_journal.models import Restaurant, Review
from food_journal.schemas.review import ReviewCreate
from food_journal.services.dish_entry_service import DishEntryService, PhotoUpload
from food_journal.services.photo_storage import photo_object_key


@pytest.fixture
async def restaurant(db):
    restaurant = Restaurant(name="Joe's Pizza", city="New York")
    db.add(restaurant)
    await db.commit()
    return restaurant


async def count_reviews(db):
    result = await db.execute(select(func.count()).select_from(Review))
    return result.scalar_one()


def test_zero_rating_means_unset():
    assert ReviewCreate(rating=0, would_order_again=True).rating is None
    assert ReviewCreate(rating=4, would_order_again=True).rating == 4
    assert ReviewCreate(notes="   ").notes is None


def test_photo_object_key():
    user_id = uuid.uuid4()

    key = photo_object_key(user_id, "Dinner.JPEG")

    assert key.startswith(f"reviews/{user_id}/")
    assert key.endswith(".jpeg")
    assert photo_object_key(user_id, None).endswith(".jpg")


async def test_dish_without_outcome_saves_no_review(db, user, restaurant):
    menu_item, review = await DishEntryService(db).save_dish(
        restaurant.id, user.id, "Margherita", review=ReviewCreate(rating=4)
    )

    assert menu_item.name == "Margherita"
    assert review is None
    assert await count_reviews(db) == 0


async def test_dish_with_review_and_photo(db, user, restaurant):
    storage = MemoryPhotoStorage()

    _, review = await DishEntryService(db, storage).save_dish(
        restaurant.id,
        user.id,
        "Margherita",
        review=ReviewCreate(rating=5, would_order_again=True, notes="Perfect crust"),
        photo=PhotoUpload(filename="pizza.png", data=b"png"),
    )

    assert review.rating == 5
    assert review.would_order_again is True
    assert review.photo_url.startswith("https://photos.test/reviews/")
    assert review.visited_at is not None
    assert list(storage.uploads.values()) == [b"png"]


async def test_failed_photo_upload_still_saves_review(db, user, restaurant):
    _, review = await DishEntryService(db, MemoryPhotoStorage(fail=True)).save_dish(
        restaurant.id,
        user.id,
        "Slice",
        review=ReviewCreate(would_order_again=False),
        photo=PhotoUpload(filename="slice.jpg", data=b"jpg"),
    )

    assert review.photo_url is None
    assert await count_reviews(db) == 1


async def test_blank_name_is_rejected_before_writing(db, user, restaurant):
    with pytest.raises(ValidationError):
        await DishEntryService(db).save_dish(
            restaurant.id, user.id, "  ", review=ReviewCreate(would_order_again=True)
        )

    assert await count_reviews(db) == 0


async def test_unknown_menu_item_id(db, user, restaurant):
    with pytest.raises(NotFoundError):
        await DishEntryService(db).save_dish(
            restaurant.id, user.id, "", menu_item_id=uuid.uuid4()
        )

"""Categories: slug normalisation and get-or-create idempotence.

Invariants:
    - Names that normalise to one slug share one category row
    - Concurrent get-or-create calls for a new name create a single row
    - Category listing reports restaurant counts and pagination
"""

import asyncio

import pytest

from eats.models.restaurant import Category, Restaurant
from eats.services.category_service import CategoryService, slugify
from eats.services.restaurant_service import RestaurantService
from eats.schemas.restaurant import CreateRestaurantInput


@pytest.mark.parametrize("name, slug", [
    ("Korean BBQ", "korean-bbq"),
    ("Korean BBQ ", "korean-bbq"),
    ("  korean   bbq", "korean-bbq"),
    ("Fish & Chips", "fish-chips"),
    ("Pizza", "pizza"),
])
def test_slugify(name, slug):
    assert slugify(name) == slug


async def test_get_or_create_returns_same_category(db):
    first = await CategoryService.get_or_create("Korean BBQ")
    second = await CategoryService.get_or_create("Korean BBQ")

    assert first.id == second.id
    assert first.slug == "korean-bbq"
    assert await Category.all().count() == 1


async def test_get_or_create_normalises_name(db):
    first = await CategoryService.get_or_create("Korean BBQ")
    second = await CategoryService.get_or_create("Korean BBQ ")

    assert first.id == second.id
    assert await Category.filter(slug="korean-bbq").count() == 1


async def test_concurrent_get_or_create_creates_one_row(db):
    categories = await asyncio.gather(
        *(CategoryService.get_or_create("Tacos") for _ in range(5))
    )

    assert len({category.id for category in categories}) == 1
    assert await Category.all().count() == 1


async def test_locks_are_released_after_use(db):
    await asyncio.gather(*(CategoryService.get_or_create(f"Cuisine {i}") for i in range(10)))

    assert len(CategoryService._locks) == 0


async def test_restaurants_with_same_category_reuse_it(owner):
    first = await RestaurantService.create_restaurant(
        owner,
        CreateRestaurantInput(name="Seoul Garden", address="1 Main St", category_name="Korean BBQ")
    )
    second = await RestaurantService.create_restaurant(
        owner,
        CreateRestaurantInput(name="Busan Grill", address="2 Main St", category_name="Korean BBQ ")
    )

    assert first.ok and second.ok
    one = await Restaurant.get(id=first.restaurant_id)
    two = await Restaurant.get(id=second.restaurant_id)
    assert one.category_id == two.category_id
    assert await Category.all().count() == 1


async def test_all_categories_counts_restaurants(owner):
    bbq = await CategoryService.get_or_create("Korean BBQ")
    await CategoryService.get_or_create("Vegan")
    await Restaurant.create(name="Seoul Garden", address="1 Main St", owner=owner, category=bbq)
    await Restaurant.create(name="Busan Grill", address="2 Main St", owner=owner, category=bbq)

    result = await CategoryService.all_categories()

    assert result.ok
    counts = {category.slug: category.restaurant_count for category in result.categories}
    assert counts == {"korean-bbq": 2, "vegan": 0}


async def test_find_category_by_slug_paginates(owner):
    category = await CategoryService.get_or_create("Pizza")
    await Restaurant.bulk_create([
        Restaurant(name=f"Pizza place {i}", address="Somewhere", owner=owner, category=category)
        for i in range(26)
    ])

    first_page = await CategoryService.find_category_by_slug("pizza", 1)
    second_page = await CategoryService.find_category_by_slug("pizza", 2)

    assert first_page.ok
    assert first_page.category.slug == "pizza"
    assert first_page.total_results == 26
    assert first_page.total_pages == 2
    assert len(first_page.restaurants) == 25
    assert len(second_page.restaurants) == 1


async def test_find_category_by_slug_not_found(db):
    result = await CategoryService.find_category_by_slug("nope")

    assert result.ok is False
    assert result.error == "Category not found"

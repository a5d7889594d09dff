"""Restaurants: ownership checks, partial edits, listing and search.

Invariants:
    - Edit and delete by someone other than the owner return a denial and
      leave the restaurant unchanged
    - total_pages == ceil(total_results / 25)
    - Search is a case-insensitive substring match on the name
    - Unexpected faults come back as the fixed failure message
"""

from decimal import Decimal
from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from eats.models.restaurant import Category, Dish, Restaurant
from eats.schemas.common import count_pages
from eats.schemas.restaurant import CreateRestaurantInput, EditRestaurantInput
from eats.services.restaurant_service import RestaurantService


@pytest.mark.parametrize("total, pages", [(0, 0), (1, 1), (25, 1), (26, 2), (50, 2)])
def test_count_pages(total, pages):
    assert count_pages(total) == pages


async def test_create_restaurant(owner):
    result = await RestaurantService.create_restaurant(
        owner,
        CreateRestaurantInput(name="Seoul Garden", address="1 Main St", category_name="Korean BBQ")
    )

    assert result.ok is True
    assert result.error is None
    restaurant = await Restaurant.get(id=result.restaurant_id).prefetch_related("category")
    assert restaurant.owner_id == owner.id
    assert restaurant.category.slug == "korean-bbq"


async def test_edit_restaurant_by_other_owner_is_denied(restaurant, other_owner):
    result = await RestaurantService.edit_restaurant(
        other_owner,
        EditRestaurantInput(restaurant_id=restaurant.id, name="Stolen Name")
    )

    assert result.ok is False
    assert result.error == "You can't edit a restaurant that you don't own"
    await restaurant.refresh_from_db()
    assert restaurant.name == "Seoul Garden"


async def test_edit_restaurant_merges_given_fields(restaurant, owner):
    result = await RestaurantService.edit_restaurant(
        owner,
        EditRestaurantInput(restaurant_id=restaurant.id, address="9 Side St", category_name="Korean BBQ")
    )

    assert result.ok is True
    edited = await Restaurant.get(id=restaurant.id).prefetch_related("category")
    assert edited.name == "Seoul Garden"
    assert edited.address == "9 Side St"
    assert edited.category.slug == "korean-bbq"


def test_edit_rejects_symbol_only_category_name():
    with pytest.raises(ValidationError):
        EditRestaurantInput(restaurant_id=1, category_name="---")


async def test_edit_without_category_keeps_it(restaurant, owner):
    await RestaurantService.edit_restaurant(
        owner,
        EditRestaurantInput(restaurant_id=restaurant.id, category_name="Korean BBQ")
    )

    result = await RestaurantService.edit_restaurant(
        owner,
        EditRestaurantInput(restaurant_id=restaurant.id, name="Seoul Garden II")
    )

    assert result.ok is True
    edited = await Restaurant.get(id=restaurant.id).prefetch_related("category")
    assert edited.category.slug == "korean-bbq"
    assert await Category.all().count() == 1


async def test_edit_missing_restaurant(owner):
    result = await RestaurantService.edit_restaurant(owner, EditRestaurantInput(restaurant_id=999))

    assert result.ok is False
    assert result.error == "Restaurant not found"


async def test_delete_restaurant_by_other_owner_is_denied(restaurant, other_owner):
    result = await RestaurantService.delete_restaurant(other_owner, restaurant.id)

    assert result.ok is False
    assert result.error == "You can't delete a restaurant that you don't own"
    assert await Restaurant.exists(id=restaurant.id)


async def test_delete_restaurant(restaurant, owner):
    result = await RestaurantService.delete_restaurant(owner, restaurant.id)

    assert result.ok is True
    assert not await Restaurant.exists(id=restaurant.id)


@pytest.mark.parametrize("total, pages", [(0, 0), (1, 1), (25, 1), (26, 2), (50, 2)])
async def test_all_restaurants_pagination(owner, total, pages):
    if total:
        await Restaurant.bulk_create([
            Restaurant(name=f"Restaurant {i}", address="Somewhere", owner=owner)
            for i in range(total)
        ])

    result = await RestaurantService.all_restaurants(1)

    assert result.ok is True
    assert result.total_results == total
    assert result.total_pages == pages
    assert len(result.results) == min(total, 25)


async def test_find_restaurant_by_id_includes_menu(restaurant):
    await Dish.create(restaurant=restaurant, name="Bulgogi", price=Decimal("12.50"), description="Marinated beef")

    result = await RestaurantService.find_restaurant_by_id(restaurant.id)

    assert result.ok is True
    assert [dish.name for dish in result.restaurant.menu] == ["Bulgogi"]


async def test_find_missing_restaurant(db):
    result = await RestaurantService.find_restaurant_by_id(404)

    assert result.ok is False
    assert result.error == "Restaurant not found"


async def test_search_is_case_insensitive_substring(owner):
    for name in ("Pizza Hut", "PIZZERIA Roma", "Spizzico", "Burger Joint"):
        await Restaurant.create(name=name, address="Somewhere", owner=owner)

    result = await RestaurantService.search_restaurant_by_name("piz", 1)

    assert result.ok is True
    assert sorted(r.name for r in result.restaurants) == ["PIZZERIA Roma", "Pizza Hut", "Spizzico"]
    assert result.total_results == 3
    assert result.total_pages == 1


async def test_search_returns_at_most_one_page(owner):
    await Restaurant.bulk_create([
        Restaurant(name=f"Pizza {i}", address="Somewhere", owner=owner)
        for i in range(30)
    ])

    result = await RestaurantService.search_restaurant_by_name("piz", 1)

    assert len(result.restaurants) == 25
    assert result.total_results == 30
    assert result.total_pages == 2


async def test_my_restaurants_lists_only_own(restaurant, owner, other_owner):
    await Restaurant.create(name="Rival Diner", address="Elsewhere", owner=other_owner)

    result = await RestaurantService.my_restaurants(owner)

    assert result.ok is True
    assert [r.id for r in result.restaurants] == [restaurant.id]


async def test_unexpected_fault_returns_generic_message(db, monkeypatch):
    monkeypatch.setattr(Restaurant, "all", Mock(side_effect=RuntimeError("connection lost")))

    result = await RestaurantService.all_restaurants(1)

    assert result.ok is False
    assert result.error == "Could not load restaurants"

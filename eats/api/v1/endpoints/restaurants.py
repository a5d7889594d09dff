# eats/api/v1/endpoints/restaurants.py
from fastapi import APIRouter, Depends, Query

from eats.api.v1.dependencies.auth import guard
from eats.models.user import User
from eats.schemas.restaurant import (
    CreateRestaurantInput,
    CreateRestaurantOutput,
    DeleteRestaurantOutput,
    EditRestaurantInput,
    EditRestaurantOutput,
    MyRestaurantsOutput,
    RestaurantOutput,
    RestaurantsOutput,
    SearchRestaurantOutput
)
from eats.services.restaurant_service import RestaurantService

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@router.post("", response_model=CreateRestaurantOutput, operation_id="create_restaurant")
async def create_restaurant(
        data: CreateRestaurantInput,
        current_user: User = Depends(guard("create_restaurant"))
) -> CreateRestaurantOutput:
    """
    Create a restaurant owned by the current user.

    Args:
        data: Restaurant data, category given by name
        current_user: Restaurant owner

    Returns:
        Envelope carrying the new restaurant id
    """
    return await RestaurantService.create_restaurant(current_user, data)


@router.patch("", response_model=EditRestaurantOutput, operation_id="edit_restaurant")
async def edit_restaurant(
        data: EditRestaurantInput,
        current_user: User = Depends(guard("edit_restaurant"))
) -> EditRestaurantOutput:
    return await RestaurantService.edit_restaurant(current_user, data)


@router.get("", response_model=RestaurantsOutput, operation_id="all_restaurants")
async def all_restaurants(
        page: int = Query(1, ge=1),
        _: None = Depends(guard("all_restaurants"))
) -> RestaurantsOutput:
    return await RestaurantService.all_restaurants(page)


@router.get("/mine", response_model=MyRestaurantsOutput, operation_id="my_restaurants")
async def my_restaurants(
        current_user: User = Depends(guard("my_restaurants"))
) -> MyRestaurantsOutput:
    return await RestaurantService.my_restaurants(current_user)


@router.get("/search", response_model=SearchRestaurantOutput, operation_id="search_restaurant")
async def search_restaurant(
        query: str = Query(..., min_length=1),
        page: int = Query(1, ge=1),
        _: None = Depends(guard("search_restaurant"))
) -> SearchRestaurantOutput:
    """Case-insensitive search by restaurant name, 25 per page."""
    return await RestaurantService.search_restaurant_by_name(query, page)


@router.get("/{restaurant_id}", response_model=RestaurantOutput, operation_id="restaurant")
async def restaurant(
        restaurant_id: int,
        _: None = Depends(guard("restaurant"))
) -> RestaurantOutput:
    """Get a restaurant with its menu."""
    return await RestaurantService.find_restaurant_by_id(restaurant_id)


@router.delete("/{restaurant_id}", response_model=DeleteRestaurantOutput, operation_id="delete_restaurant")
async def delete_restaurant(
        restaurant_id: int,
        current_user: User = Depends(guard("delete_restaurant"))
) -> DeleteRestaurantOutput:
    return await RestaurantService.delete_restaurant(current_user, restaurant_id)

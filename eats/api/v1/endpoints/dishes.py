# eats/api/v1/endpoints/dishes.py
from fastapi import APIRouter, Depends

from eats.api.v1.dependencies.auth import guard
from eats.models.user import User
from eats.schemas.restaurant import (
    CreateDishInput,
    CreateDishOutput,
    DeleteDishOutput,
    EditDishInput,
    EditDishOutput
)
from eats.services.dish_service import DishService

router = APIRouter(prefix="/dishes", tags=["dishes"])


@router.post("", response_model=CreateDishOutput, operation_id="create_dish")
async def create_dish(
        data: CreateDishInput,
        current_user: User = Depends(guard("create_dish"))
) -> CreateDishOutput:
    """
    Add a dish to one of the current user's restaurants.

    Args:
        data: Dish data with its options
        current_user: Restaurant owner

    Returns:
        Envelope carrying the new dish id
    """
    return await DishService.create_dish(current_user, data)


@router.patch("", response_model=EditDishOutput, operation_id="edit_dish")
async def edit_dish(
        data: EditDishInput,
        current_user: User = Depends(guard("edit_dish"))
) -> EditDishOutput:
    return await DishService.edit_dish(current_user, data)


@router.delete("/{dish_id}", response_model=DeleteDishOutput, operation_id="delete_dish")
async def delete_dish(
        dish_id: int,
        current_user: User = Depends(guard("delete_dish"))
) -> DeleteDishOutput:
    return await DishService.delete_dish(current_user, dish_id)

# eats/services/dish_service.py
import logging

from eats.exceptions.dish_exceptions import DishNotFoundError
from eats.exceptions.restaurant_exceptions import RestaurantAccessDeniedError
from eats.models.restaurant import Dish
from eats.models.user import User
from eats.schemas.restaurant import (
    CreateDishInput,
    CreateDishOutput,
    DeleteDishOutput,
    EditDishInput,
    EditDishOutput
)
from eats.services.envelope import returns_envelope
from eats.services.restaurant_service import RestaurantService

logger = logging.getLogger(__name__)


class DishService:
    """Service for managing restaurant menus."""

    @staticmethod
    async def get_owned_dish(dish_id: int, owner: User) -> Dish:
        """
        Get a dish whose restaurant the user owns.

        Args:
            dish_id: Dish ID
            owner: User making the request

        Returns:
            Dish instance with its restaurant fetched

        Raises:
            DishNotFoundError: If dish doesn't exist
            RestaurantAccessDeniedError: If user doesn't own the restaurant
        """
        dish = await Dish.get_or_none(id=dish_id).prefetch_related("restaurant")

        if not dish:
            raise DishNotFoundError(dish_id)

        if dish.restaurant.owner_id != owner.id:
            raise RestaurantAccessDeniedError()

        return dish

    @staticmethod
    @returns_envelope(CreateDishOutput, "Could not create dish")
    async def create_dish(owner: User, data: CreateDishInput) -> CreateDishOutput:
        """
        Add a dish to a restaurant's menu.

        Args:
            owner: User making the request
            data: Dish data

        Returns:
            Envelope carrying the new dish id

        Raises:
            RestaurantNotFoundError: If restaurant doesn't exist
            RestaurantAccessDeniedError: If user doesn't own the restaurant
        """
        restaurant = await RestaurantService.get_owned_restaurant(
            data.restaurant_id,
            owner,
            "You can't do that."
        )

        dish = await Dish.create(
            restaurant=restaurant,
            name=data.name,
            price=data.price,
            description=data.description,
            photo=data.photo,
            options=[option.model_dump(mode="json", exclude_none=True) for option in data.options]
        )

        logger.info(f"Dish created: {dish.id} in restaurant {restaurant.id}")

        return CreateDishOutput(ok=True, dish_id=dish.id)

    @staticmethod
    @returns_envelope(EditDishOutput, "Could not edit dish")
    async def edit_dish(owner: User, data: EditDishInput) -> EditDishOutput:
        """
        Update a dish. Only the fields that are set change.

        Raises:
            DishNotFoundError: If dish doesn't exist
            RestaurantAccessDeniedError: If user doesn't own the restaurant
        """
        dish = await DishService.get_owned_dish(data.dish_id, owner)

        update_data = data.model_dump(exclude_unset=True, exclude={"dish_id", "options"})
        update_data = {key: value for key, value in update_data.items() if value is not None}

        if data.options is not None:
            update_data['options'] = [
                option.model_dump(mode="json", exclude_none=True) for option in data.options
            ]

        if update_data:
            await dish.update_from_dict(update_data).save()

        return EditDishOutput(ok=True)

    @staticmethod
    @returns_envelope(DeleteDishOutput, "Could not delete dish")
    async def delete_dish(owner: User, dish_id: int) -> DeleteDishOutput:
        dish = await DishService.get_owned_dish(dish_id, owner)
        await dish.delete()

        logger.info(f"Dish deleted: {dish_id}")

        return DeleteDishOutput(ok=True)

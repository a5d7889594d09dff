# eats/services/restaurant_service.py
import logging

from eats.exceptions.restaurant_exceptions import (
    RestaurantAccessDeniedError,
    RestaurantNotFoundError
)
from eats.models.restaurant import Restaurant
from eats.models.user import User
from eats.schemas.common import count_pages, page_offset, PAGE_SIZE
from eats.schemas.restaurant import (
    CreateRestaurantInput,
    CreateRestaurantOutput,
    DeleteRestaurantOutput,
    EditRestaurantInput,
    EditRestaurantOutput,
    MyRestaurantsOutput,
    RestaurantOutput,
    RestaurantSchema,
    RestaurantsOutput,
    SearchRestaurantOutput
)
from eats.services.category_service import CategoryService
from eats.services.envelope import returns_envelope

logger = logging.getLogger(__name__)


class RestaurantService:
    """Service for managing restaurants."""

    @staticmethod
    async def get_restaurant_by_id(restaurant_id: int) -> Restaurant:
        """
        Get restaurant by ID.

        Args:
            restaurant_id: Restaurant ID

        Returns:
            Restaurant instance

        Raises:
            RestaurantNotFoundError: If restaurant doesn't exist
        """
        restaurant = await Restaurant.get_or_none(id=restaurant_id)

        if not restaurant:
            raise RestaurantNotFoundError(restaurant_id)

        return restaurant

    @staticmethod
    async def get_owned_restaurant(restaurant_id: int, owner: User, denied_message: str) -> Restaurant:
        """
        Get a restaurant the user must own.

        Raises:
            RestaurantNotFoundError: If restaurant doesn't exist
            RestaurantAccessDeniedError: If user doesn't own the restaurant
        """
        restaurant = await RestaurantService.get_restaurant_by_id(restaurant_id)

        if restaurant.owner_id != owner.id:
            raise RestaurantAccessDeniedError(denied_message)

        return restaurant

    @staticmethod
    @returns_envelope(CreateRestaurantOutput, "Could not create restaurant")
    async def create_restaurant(owner: User, data: CreateRestaurantInput) -> CreateRestaurantOutput:
        """
        Create a restaurant owned by the caller.

        The category is looked up by its normalised name and created when
        missing.

        Args:
            owner: Restaurant owner
            data: Restaurant data

        Returns:
            Envelope carrying the new restaurant id
        """
        category = await CategoryService.get_or_create(data.category_name)

        restaurant = await Restaurant.create(
            owner=owner,
            name=data.name,
            address=data.address,
            cover_image=data.cover_image,
            category=category
        )

        logger.info(f"Restaurant created: {restaurant.id} - {restaurant.name}")

        return CreateRestaurantOutput(ok=True, restaurant_id=restaurant.id)

    @staticmethod
    @returns_envelope(EditRestaurantOutput, "Could not edit Restaurant")
    async def edit_restaurant(owner: User, data: EditRestaurantInput) -> EditRestaurantOutput:
        """
        Update a restaurant. Only the fields that are set change.

        Args:
            owner: User making the request
            data: Restaurant id and new values

        Returns:
            Envelope with ok=True on success

        Raises:
            RestaurantNotFoundError: If restaurant doesn't exist
            RestaurantAccessDeniedError: If user doesn't own the restaurant
        """
        restaurant = await RestaurantService.get_owned_restaurant(
            data.restaurant_id,
            owner,
            "You can't edit a restaurant that you don't own"
        )

        update_fields = {}

        if data.name is not None:
            update_fields['name'] = data.name

        if data.address is not None:
            update_fields['address'] = data.address

        if data.cover_image is not None:
            update_fields['cover_image'] = data.cover_image

        if data.category_name is not None:
            category = await CategoryService.get_or_create(data.category_name)
            update_fields['category_id'] = category.id

        if update_fields:
            await restaurant.update_from_dict(update_fields).save()

        return EditRestaurantOutput(ok=True)

    @staticmethod
    @returns_envelope(DeleteRestaurantOutput, "Could not delete restaurant.")
    async def delete_restaurant(owner: User, restaurant_id: int) -> DeleteRestaurantOutput:
        """
        Delete a restaurant together with its menu.

        Raises:
            RestaurantNotFoundError: If restaurant doesn't exist
            RestaurantAccessDeniedError: If user doesn't own the restaurant
        """
        restaurant = await RestaurantService.get_owned_restaurant(
            restaurant_id,
            owner,
            "You can't delete a restaurant that you don't own"
        )

        await restaurant.delete()
        logger.info(f"Restaurant deleted: {restaurant_id}")

        return DeleteRestaurantOutput(ok=True)

    @staticmethod
    @returns_envelope(RestaurantsOutput, "Could not load restaurants")
    async def all_restaurants(page: int = 1) -> RestaurantsOutput:
        total_results = await Restaurant.all().count()
        restaurants = await Restaurant.all().offset(page_offset(page)).limit(PAGE_SIZE).prefetch_related("category")

        return RestaurantsOutput(
            ok=True,
            results=[RestaurantSchema.from_orm_restaurant(r) for r in restaurants],
            total_pages=count_pages(total_results),
            total_results=total_results
        )

    @staticmethod
    @returns_envelope(RestaurantOutput, "Could not find restaurant")
    async def find_restaurant_by_id(restaurant_id: int) -> RestaurantOutput:
        """
        Get a restaurant with its menu.

        Raises:
            RestaurantNotFoundError: If restaurant doesn't exist
        """
        restaurant = await Restaurant.get_or_none(id=restaurant_id).prefetch_related("category", "menu")

        if not restaurant:
            raise RestaurantNotFoundError(restaurant_id)

        return RestaurantOutput(
            ok=True,
            restaurant=RestaurantSchema.from_orm_restaurant(restaurant, include_menu=True)
        )

    @staticmethod
    @returns_envelope(SearchRestaurantOutput, "Could not search for restaurants")
    async def search_restaurant_by_name(query: str, page: int = 1) -> SearchRestaurantOutput:
        """
        Case-insensitive substring search on restaurant names.

        Args:
            query: Part of the name
            page: 1-based page number

        Returns:
            Envelope with one page of matches and page counts
        """
        matches = Restaurant.filter(name__icontains=query.strip())
        total_results = await matches.count()
        restaurants = await matches.offset(page_offset(page)).limit(PAGE_SIZE).prefetch_related("category")

        return SearchRestaurantOutput(
            ok=True,
            restaurants=[RestaurantSchema.from_orm_restaurant(r) for r in restaurants],
            total_pages=count_pages(total_results),
            total_results=total_results
        )

    @staticmethod
    @returns_envelope(MyRestaurantsOutput, "Could not find restaurants.")
    async def my_restaurants(owner: User) -> MyRestaurantsOutput:
        restaurants = await Restaurant.filter(owner_id=owner.id).prefetch_related("category")

        return MyRestaurantsOutput(
            ok=True,
            restaurants=[RestaurantSchema.from_orm_restaurant(r) for r in restaurants]
        )

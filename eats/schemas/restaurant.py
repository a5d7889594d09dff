# eats/schemas/restaurant.py
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from eats.models.restaurant import Category, Dish, Restaurant
from eats.schemas.common import CamelModel, CoreOutput, PaginationOutput


# ----- Dishes -----

class DishChoice(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    extra: Optional[Decimal] = Field(None, ge=0)


class DishOption(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    choices: Optional[List[DishChoice]] = None
    extra: Optional[Decimal] = Field(None, ge=0)


class DishSchema(CamelModel):
    """Schema for dish responses."""

    id: int
    restaurant_id: int
    name: str
    price: Decimal
    description: str
    photo: Optional[str] = None
    options: List[DishOption] = Field(default_factory=list)

    @classmethod
    def from_orm_dish(cls, dish: Dish) -> "DishSchema":
        """
        Create response schema from ORM model.

        Args:
            dish: Dish ORM model

        Returns:
            DishSchema instance
        """
        return cls(
            id=dish.id,
            restaurant_id=dish.restaurant_id,
            name=dish.name,
            price=dish.price,
            description=dish.description,
            photo=dish.photo,
            options=[DishOption.model_validate(option) for option in dish.options or []]
        )


class CreateDishInput(CamelModel):
    """Schema for creating a new dish."""

    restaurant_id: int
    name: str = Field(..., min_length=3, max_length=100)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    description: str = Field(..., min_length=5, max_length=500)
    photo: Optional[str] = Field(None, max_length=500)
    options: List[DishOption] = Field(default_factory=list)


class CreateDishOutput(CoreOutput):
    dish_id: Optional[int] = None


class EditDishInput(CamelModel):
    """Schema for updating a dish. Unset fields are kept."""

    dish_id: int
    name: Optional[str] = Field(None, min_length=3, max_length=100)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    description: Optional[str] = Field(None, min_length=5, max_length=500)
    photo: Optional[str] = Field(None, max_length=500)
    options: Optional[List[DishOption]] = None


class EditDishOutput(CoreOutput):
    pass


class DeleteDishOutput(CoreOutput):
    pass


# ----- Categories -----

class CategorySchema(CamelModel):
    """Schema for category responses."""

    id: int
    name: str
    slug: str
    cover_image: Optional[str] = None
    restaurant_count: Optional[int] = None

    @classmethod
    def from_orm_category(
            cls,
            category: Category,
            restaurant_count: Optional[int] = None
    ) -> "CategorySchema":
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            cover_image=category.cover_image,
            restaurant_count=restaurant_count
        )


class AllCategoriesOutput(CoreOutput):
    categories: Optional[List[CategorySchema]] = None


class CategoryOutput(PaginationOutput):
    category: Optional[CategorySchema] = None
    restaurants: Optional[List["RestaurantSchema"]] = None


# ----- Restaurants -----

def check_category_name(value: str) -> str:
    """Category names must contain at least one letter or digit."""
    if not any(char.isalnum() for char in value):
        raise ValueError("Category name must contain letters or digits")
    return value


class RestaurantSchema(CamelModel):
    """Schema for restaurant responses."""

    id: int
    name: str
    address: str
    cover_image: Optional[str] = None
    owner_id: int
    category: Optional[CategorySchema] = None
    menu: Optional[List[DishSchema]] = None

    @classmethod
    def from_orm_restaurant(
            cls,
            restaurant: Restaurant,
            include_menu: bool = False
    ) -> "RestaurantSchema":
        """
        Create response schema from ORM model.

        The ``category`` relation (and ``menu`` when include_menu is set)
        must already be fetched.

        Args:
            restaurant: Restaurant ORM model
            include_menu: Whether to serialize the menu

        Returns:
            RestaurantSchema instance
        """
        category = restaurant.category
        return cls(
            id=restaurant.id,
            name=restaurant.name,
            address=restaurant.address,
            cover_image=restaurant.cover_image,
            owner_id=restaurant.owner_id,
            category=CategorySchema.from_orm_category(category) if category else None,
            menu=[DishSchema.from_orm_dish(dish) for dish in restaurant.menu] if include_menu else None
        )


class CreateRestaurantInput(CamelModel):
    """Schema for creating a new restaurant."""

    name: str = Field(..., min_length=5, max_length=255)
    address: str = Field(..., min_length=1, max_length=255)
    cover_image: Optional[str] = Field(None, max_length=500)
    category_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("category_name")
    @classmethod
    def validate_category_name(cls, value: str) -> str:
        return check_category_name(value)


class CreateRestaurantOutput(CoreOutput):
    restaurant_id: Optional[int] = None


class EditRestaurantInput(CamelModel):
    """Schema for updating a restaurant. Unset fields are kept."""

    restaurant_id: int
    name: Optional[str] = Field(None, min_length=5, max_length=255)
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    cover_image: Optional[str] = Field(None, max_length=500)
    category_name: Optional[str] = Field(None, min_length=1, max_length=100)

    @field_validator("category_name")
    @classmethod
    def validate_category_name(cls, value: Optional[str]) -> Optional[str]:
        return check_category_name(value) if value is not None else value


class EditRestaurantOutput(CoreOutput):
    pass


class DeleteRestaurantOutput(CoreOutput):
    pass


class RestaurantsOutput(PaginationOutput):
    results: Optional[List[RestaurantSchema]] = None


class RestaurantOutput(CoreOutput):
    restaurant: Optional[RestaurantSchema] = None


class MyRestaurantsOutput(CoreOutput):
    restaurants: Optional[List[RestaurantSchema]] = None


class SearchRestaurantOutput(PaginationOutput):
    restaurants: Optional[List[RestaurantSchema]] = None


CategoryOutput.model_rebuild()

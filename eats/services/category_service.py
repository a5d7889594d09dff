# eats/services/category_service.py
import asyncio
import logging
import re
from weakref import WeakValueDictionary

from eats.exceptions.restaurant_exceptions import CategoryNotFoundError
from eats.models.restaurant import Category, Restaurant
from eats.schemas.common import count_pages, page_offset, PAGE_SIZE
from eats.schemas.restaurant import (
    AllCategoriesOutput,
    CategoryOutput,
    CategorySchema,
    RestaurantSchema
)
from eats.services.envelope import returns_envelope

logger = logging.getLogger(__name__)


def slugify(name: str) -> str:
    """Lower-case, non-alphanumeric runs -> '-', no leading/trailing '-'."""
    slug = name.strip().lower()
    slug = re.sub(r"[^a-z0-9]+", "-", slug).strip("-")
    return slug[:100]


class CategoryService:
    """Service for restaurant categories."""

    # One lock per slug so concurrent creations of a new category collapse
    # into a single row. The unique slug column covers other workers.
    # Entries vanish once no caller holds the lock.
    _locks: "WeakValueDictionary[str, asyncio.Lock]" = WeakValueDictionary()

    @staticmethod
    def _lock_for(slug: str) -> asyncio.Lock:
        lock = CategoryService._locks.get(slug)
        if lock is None:
            lock = asyncio.Lock()
            CategoryService._locks[slug] = lock
        return lock

    @staticmethod
    async def get_or_create(name: str) -> Category:
        """
        Return the category for a name, creating it on first use.

        Names that normalise to the same slug share one category.

        Args:
            name: Category name as typed by the owner

        Returns:
            Category instance
        """
        category_name = name.strip().lower()
        slug = slugify(category_name)

        async with CategoryService._lock_for(slug):
            category, created = await Category.get_or_create(
                slug=slug,
                defaults={"name": category_name}
            )

        if created:
            logger.info(f"Category created: {category.slug}")

        return category

    @staticmethod
    async def count_restaurants(category: Category) -> int:
        return await Restaurant.filter(category_id=category.id).count()

    @staticmethod
    @returns_envelope(AllCategoriesOutput, "Could not load categories")
    async def all_categories() -> AllCategoriesOutput:
        categories = await Category.all()
        results = []

        for category in categories:
            restaurant_count = await CategoryService.count_restaurants(category)
            results.append(CategorySchema.from_orm_category(category, restaurant_count))

        return AllCategoriesOutput(ok=True, categories=results)

    @staticmethod
    @returns_envelope(CategoryOutput, "Could not load category")
    async def find_category_by_slug(slug: str, page: int = 1) -> CategoryOutput:
        """
        Get a category with one page of its restaurants.

        Args:
            slug: Category slug
            page: 1-based page number

        Returns:
            Envelope with the category, restaurants and page counts

        Raises:
            CategoryNotFoundError: If no category has that slug
        """
        category = await Category.get_or_none(slug=slug)

        if not category:
            raise CategoryNotFoundError(slug)

        query = Restaurant.filter(category_id=category.id)
        total_results = await query.count()
        restaurants = await query.offset(page_offset(page)).limit(PAGE_SIZE).prefetch_related("category")

        return CategoryOutput(
            ok=True,
            category=CategorySchema.from_orm_category(category, total_results),
            restaurants=[RestaurantSchema.from_orm_restaurant(r) for r in restaurants],
            total_pages=count_pages(total_results),
            total_results=total_results
        )

# eats/api/v1/endpoints/categories.py
from fastapi import APIRouter, Depends, Query

from eats.api.v1.dependencies.auth import guard
from eats.schemas.restaurant import AllCategoriesOutput, CategoryOutput
from eats.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=AllCategoriesOutput, operation_id="all_categories")
async def all_categories(
        _: None = Depends(guard("all_categories"))
) -> AllCategoriesOutput:
    """List categories with the number of restaurants in each."""
    return await CategoryService.all_categories()


@router.get("/{slug}", response_model=CategoryOutput, operation_id="category")
async def category(
        slug: str,
        page: int = Query(1, ge=1),
        _: None = Depends(guard("category"))
) -> CategoryOutput:
    """
    Get a category and one page of its restaurants.

    Args:
        slug: Category slug, e.g. ``korean-bbq``
        page: 1-based page number

    Returns:
        Envelope with category, restaurants and page counts
    """
    return await CategoryService.find_category_by_slug(slug, page)

"""
Menu category routes.
Reads are public; writes require a signed-in user.
"""
from typing import List

from fastapi import APIRouter, Depends, File, UploadFile, status

from chef_site.deps import get_category_service, require_login
from chef_site.schemas import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    MessageResponse,
    SessionUser,
)
from chef_site.services.categories import CategoryService

router = APIRouter()


@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(categories: CategoryService = Depends(get_category_service)):
    """All categories ordered by display_order, then creation time."""
    return await categories.list()


@router.get("/categories/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: str, categories: CategoryService = Depends(get_category_service)):
    return await categories.get(category_id)


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryCreate,
    categories: CategoryService = Depends(get_category_service),
    user: SessionUser = Depends(require_login),
):
    """
    Create a category.

    Returns:
        CategoryResponse: The created category

    Raises:
        Unauthenticated: 401 without a session
        RequestValidationError: 400 if name is missing or blank
    """
    return await categories.create(payload)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    payload: CategoryUpdate,
    categories: CategoryService = Depends(get_category_service),
    user: SessionUser = Depends(require_login),
):
    return await categories.update(category_id, payload)


@router.put("/categories/{category_id}/image", response_model=CategoryResponse)
async def upload_category_image(
    category_id: str,
    image: UploadFile = File(..., description="Category image (resized to 400x300)"),
    categories: CategoryService = Depends(get_category_service),
    user: SessionUser = Depends(require_login),
):
    """Attach or replace the category image."""
    return await categories.set_image(category_id, image)


@router.delete("/categories/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: str,
    categories: CategoryService = Depends(get_category_service),
    user: SessionUser = Depends(require_login),
):
    """
    Delete a category.

    Raises:
        NotFound: 404 for an unknown id
        Conflict: 409 while menu items still use the category
    """
    await categories.delete(category_id)
    return MessageResponse(message="Category deleted successfully")

"""
Menu item routes.
Create and update take multipart form data so a dish photo can be attached.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from chef_site.deps import get_menu_item_service, require_login
from chef_site.schemas import (
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
    MessageResponse,
    SessionUser,
)
from chef_site.services.menu_items import MenuItemService

router = APIRouter()


def _attached(image: Optional[UploadFile]) -> Optional[UploadFile]:
    # Browsers send an empty file part when no file was chosen
    if image is None or not image.filename:
        return None
    return image


@router.get("/menu-items", response_model=List[MenuItemResponse])
async def list_menu_items(
    category_id: Optional[str] = None,
    available: Optional[bool] = None,
    featured: Optional[bool] = None,
    menu_items: MenuItemService = Depends(get_menu_item_service),
):
    """
    List menu items, newest first.

    Args:
        category_id: Only items in this category
        available: Filter on availability
        featured: Filter on the featured flag

    Returns:
        list[MenuItemResponse]: Items with their category name and colour
    """
    return await menu_items.list(category_id=category_id, available=available, featured=featured)


@router.get("/menu-items/{item_id}", response_model=MenuItemResponse)
async def get_menu_item(item_id: str, menu_items: MenuItemService = Depends(get_menu_item_service)):
    return await menu_items.get(item_id)


@router.post("/menu-items", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
async def create_menu_item(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None),
    available: Optional[str] = Form(None),
    featured: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    menu_items: MenuItemService = Depends(get_menu_item_service),
    user: SessionUser = Depends(require_login),
):
    """
    Create a menu item from multipart form data.

    `available` is true unless sent as "false"; `featured` is true only when
    sent as "true".

    Raises:
        ValidationError: 400 if name or price is missing/invalid, or the category does not exist
        UploadError: 400 if the image is not a valid image
    """
    payload = MenuItemCreate.model_validate({
        "name": name,
        "description": description,
        "price": price,
        "category_id": category_id or None,
        "available": available != "false",
        "featured": featured == "true",
    })
    return await menu_items.create(payload, _attached(image))


@router.put("/menu-items/{item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    item_id: str,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None),
    available: Optional[str] = Form(None),
    featured: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    menu_items: MenuItemService = Depends(get_menu_item_service),
    user: SessionUser = Depends(require_login),
):
    """Partially update a menu item. Only the fields sent are changed; a new image replaces the old one."""
    fields = {}
    if name is not None:
        fields["name"] = name
    if description is not None:
        fields["description"] = description
    if price is not None:
        fields["price"] = price
    if category_id is not None:
        fields["category_id"] = category_id or None
    if available is not None:
        fields["available"] = available != "false"
    if featured is not None:
        fields["featured"] = featured == "true"

    payload = MenuItemUpdate.model_validate(fields)
    return await menu_items.update(item_id, payload, _attached(image))


@router.delete("/menu-items/{item_id}", response_model=MessageResponse)
async def delete_menu_item(
    item_id: str,
    menu_items: MenuItemService = Depends(get_menu_item_service),
    user: SessionUser = Depends(require_login),
):
    await menu_items.delete(item_id)
    return MessageResponse(message="Menu item deleted successfully")

"""
Menu item management, including the processed dish photo.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from fastapi import UploadFile
from sqlalchemy import select

from chef_site.database import Database
from chef_site.errors import NotFound, ValidationError
from chef_site.models import Category, MenuItem, columns_dict
from chef_site.schemas import MenuItemCreate, MenuItemUpdate
from chef_site.utils.image_processor import remove_image, save_upload

logger = logging.getLogger(__name__)


def _with_category(item: MenuItem, name: Optional[str], color: Optional[str]) -> Dict[str, Any]:
    row = columns_dict(item)
    row["category_name"] = name
    row["category_color"] = color
    return row


class MenuItemService:
    def __init__(self, database: Database, upload_root: Path, max_upload_bytes: int):
        self.database = database
        self.upload_root = upload_root
        self.max_upload_bytes = max_upload_bytes

    def _joined_query(self):
        return (
            select(MenuItem, Category.name, Category.color)
            .outerjoin(Category, MenuItem.category_id == Category.id)
        )

    async def list(
        self,
        category_id: Optional[str] = None,
        available: Optional[bool] = None,
        featured: Optional[bool] = None,
    ) -> List[Dict[str, Any]]:
        """
        List menu items, newest first, each with its category's name and colour.

        Args:
            category_id: Only items in this category
            available: Filter on availability
            featured: Filter on the featured flag

        Returns:
            list[dict]: Menu item columns plus category_name/category_color
        """
        query = self._joined_query().order_by(MenuItem.created_at.desc())
        if category_id is not None:
            query = query.where(MenuItem.category_id == category_id)
        if available is not None:
            query = query.where(MenuItem.available == available)
        if featured is not None:
            query = query.where(MenuItem.featured == featured)

        async with self.database.session() as session:
            result = await session.execute(query)
            return [_with_category(item, name, color) for item, name, color in result.all()]

    async def get(self, item_id: str) -> Dict[str, Any]:
        async with self.database.session() as session:
            result = await session.execute(self._joined_query().where(MenuItem.id == item_id))
            row = result.first()
        if row is None:
            raise NotFound("Menu item not found")
        return _with_category(*row)

    async def _check_category(self, session, category_id: Optional[str]) -> None:
        if category_id and await session.get(Category, category_id) is None:
            raise ValidationError("Category does not exist")

    async def create(self, payload: MenuItemCreate, image: Optional[UploadFile] = None) -> Dict[str, Any]:
        """
        Create a menu item. The image, when given, is processed before the row
        is inserted and removed again if the insert fails.
        """
        async with self.database.session() as session:
            await self._check_category(session, payload.category_id)

        processed = None
        if image is not None:
            processed = await save_upload(image, "menu", self.upload_root, self.max_upload_bytes)

        try:
            async with self.database.session() as session:
                item = MenuItem(
                    **payload.model_dump(),
                    image_path=processed.url_path if processed else None,
                )
                session.add(item)
                await session.flush()
                item_id = item.id
        except Exception:
            if processed:
                remove_image(processed.url_path, self.upload_root)
            raise

        logger.info(f"Created menu item {item_id} ({payload.name})")
        return await self.get(item_id)

    async def update(
        self,
        item_id: str,
        payload: MenuItemUpdate,
        image: Optional[UploadFile] = None,
    ) -> Dict[str, Any]:
        """Apply a partial update. A new image replaces the stored one, whose file is then deleted."""
        changes = payload.model_dump(exclude_unset=True)
        async with self.database.session() as session:
            if await session.get(MenuItem, item_id) is None:
                raise NotFound("Menu item not found")
            if changes.get("category_id"):
                await self._check_category(session, changes["category_id"])

        processed = None
        if image is not None:
            processed = await save_upload(image, "menu", self.upload_root, self.max_upload_bytes)

        previous_image = None
        try:
            async with self.database.session() as session:
                item = await session.get(MenuItem, item_id)
                if item is None:
                    raise NotFound("Menu item not found")
                for field, value in changes.items():
                    if value is None and field in ("name", "price", "available", "featured"):
                        continue
                    setattr(item, field, value)
                if processed:
                    previous_image = item.image_path
                    item.image_path = processed.url_path
        except Exception:
            if processed:
                remove_image(processed.url_path, self.upload_root)
            raise

        if previous_image:
            remove_image(previous_image, self.upload_root)
        logger.info(f"Updated menu item {item_id}: {sorted(changes)}{' + image' if processed else ''}")
        return await self.get(item_id)

    async def delete(self, item_id: str) -> None:
        async with self.database.session() as session:
            item = await session.get(MenuItem, item_id)
            if item is None:
                raise NotFound("Menu item not found")
            image_path = item.image_path
            await session.delete(item)

        # The row is gone either way; a missing file is only logged
        if image_path:
            remove_image(image_path, self.upload_root)
        logger.info(f"Deleted menu item {item_id}")

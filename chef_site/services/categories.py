"""
Menu category management.
"""
from pathlib import Path
from typing import List
import logging

from fastapi import UploadFile
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from chef_site.database import Database
from chef_site.errors import Conflict, NotFound, ValidationError
from chef_site.models import Category, MenuItem
from chef_site.schemas import CategoryCreate, CategoryUpdate
from chef_site.utils.image_processor import remove_image, save_upload

logger = logging.getLogger(__name__)


class CategoryService:
    """CRUD for menu categories, plus the optional category image."""

    def __init__(self, database: Database, upload_root: Path, max_upload_bytes: int):
        self.database = database
        self.upload_root = upload_root
        self.max_upload_bytes = max_upload_bytes

    async def list(self) -> List[Category]:
        async with self.database.session() as session:
            result = await session.execute(
                select(Category).order_by(Category.display_order.asc(), Category.created_at.asc())
            )
            return list(result.scalars())

    async def get(self, category_id: str) -> Category:
        async with self.database.session() as session:
            category = await session.get(Category, category_id)
        if category is None:
            raise NotFound("Category not found")
        return category

    async def create(self, payload: CategoryCreate) -> Category:
        """
        Create a category.

        Colour and icon fall back to the column defaults. Without an explicit
        display_order the category is appended after the current last one.
        """
        values = payload.model_dump(exclude_none=True)
        async with self.database.session() as session:
            if "display_order" not in values:
                highest = await session.scalar(select(func.max(Category.display_order)))
                values["display_order"] = (highest or 0) + 1
            category = Category(**values)
            session.add(category)
            await session.flush()
            await session.refresh(category)

        logger.info(f"Created category {category.id} ({category.name})")
        return category

    async def update(self, category_id: str, payload: CategoryUpdate) -> Category:
        changes = payload.model_dump(exclude_unset=True)
        if "name" in changes and changes["name"] is None:
            raise ValidationError("Category name is required")
        async with self.database.session() as session:
            category = await session.get(Category, category_id)
            if category is None:
                raise NotFound("Category not found")
            for field, value in changes.items():
                if value is None and field in ("color", "icon", "display_order"):
                    continue
                setattr(category, field, value)
            await session.flush()
            await session.refresh(category)

        logger.info(f"Updated category {category_id}: {sorted(changes)}")
        return category

    async def delete(self, category_id: str) -> None:
        """
        Delete a category that no menu item references.

        Raises:
            NotFound: Unknown category id
            Conflict: Menu items still use the category (message carries the count)
        """
        try:
            async with self.database.session() as session:
                category = await session.get(Category, category_id)
                if category is None:
                    raise NotFound("Category not found")

                in_use = await session.scalar(
                    select(func.count(MenuItem.id)).where(MenuItem.category_id == category_id)
                )
                if in_use:
                    raise Conflict(
                        f"Cannot delete category. {in_use} menu item(s) are using this category."
                    )

                image_path = category.image_path
                await session.delete(category)
        except IntegrityError as e:
            # A menu item was attached between the count and the delete
            logger.warning(f"Category {category_id} delete blocked by foreign key: {str(e)}")
            raise Conflict("Cannot delete category while menu items are using it.") from e

        if image_path:
            remove_image(image_path, self.upload_root)
        logger.info(f"Deleted category {category_id}")

    async def set_image(self, category_id: str, upload: UploadFile) -> Category:
        """Process an uploaded image at the category profile and attach it, replacing any previous one."""
        await self.get(category_id)
        processed = await save_upload(upload, "categories", self.upload_root, self.max_upload_bytes)

        try:
            async with self.database.session() as session:
                category = await session.get(Category, category_id)
                if category is None:
                    raise NotFound("Category not found")
                previous = category.image_path
                category.image_path = processed.url_path
                await session.flush()
                await session.refresh(category)
        except Exception:
            remove_image(processed.url_path, self.upload_root)
            raise

        if previous:
            remove_image(previous, self.upload_root)
        return category

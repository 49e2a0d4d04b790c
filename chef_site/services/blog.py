"""
Blog posts and blog categories.

Slugs are derived from titles/names, reading time from the word count of the
content. `published_at` is stamped on the first transition into "published"
and kept from then on, even if the post is unpublished and republished.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
import logging
import math

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.exc import IntegrityError

from chef_site.database import Database
from chef_site.errors import Conflict, NotFound, ValidationError
from chef_site.models import BlogCategory, BlogPost, User, columns_dict
from chef_site.schemas import (
    BlogCategoryCreate,
    BlogCategoryUpdate,
    BlogPostCreate,
    BlogPostUpdate,
    PaginationMetadata,
)
from chef_site.utils.text import reading_time, slugify

logger = logging.getLogger(__name__)

PUBLISHED = "published"


def paginate(page: int, limit: int, total: int) -> PaginationMetadata:
    total_pages = math.ceil(total / limit) if total else 0
    return PaginationMetadata(
        current_page=page,
        total_pages=total_pages,
        total_posts=total,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )


def _require_slug(text: str) -> str:
    slug = slugify(text)
    if not slug:
        raise ValidationError("Title must contain at least one letter or digit")
    return slug


class BlogService:
    def __init__(self, database: Database):
        self.database = database

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    def _post_query(self):
        return (
            select(
                BlogPost,
                BlogCategory.name,
                BlogCategory.slug,
                BlogCategory.color,
                User.first_name,
                User.last_name,
            )
            .outerjoin(BlogCategory, BlogPost.category_id == BlogCategory.id)
            .outerjoin(User, BlogPost.author_id == User.id)
        )

    @staticmethod
    def _post_row(post, category_name, category_slug, category_color, first_name, last_name) -> Dict[str, Any]:
        row = columns_dict(post)
        row.update(
            category_name=category_name,
            category_slug=category_slug,
            category_color=category_color,
            author_name=" ".join(part for part in (first_name, last_name) if part) or None,
        )
        return row

    @staticmethod
    def _search_clause(search: str):
        pattern = f"%{search}%"
        return or_(
            BlogPost.title.ilike(pattern),
            BlogPost.content.ilike(pattern),
            BlogPost.excerpt.ilike(pattern),
        )

    async def _page(self, query, count_query, page: int, limit: int) -> Tuple[List[Dict[str, Any]], PaginationMetadata]:
        async with self.database.session() as session:
            total = await session.scalar(count_query)
            result = await session.execute(query.limit(limit).offset((page - 1) * limit))
            posts = [self._post_row(*row) for row in result.all()]
        return posts, paginate(page, limit, total or 0)

    async def list_published(
        self,
        page: int = 1,
        limit: int = 6,
        category_slug: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Dict[str, Any]], PaginationMetadata]:
        """
        Published posts for the public blog, newest publication first.

        Args:
            page: 1-based page number
            limit: Posts per page
            category_slug: Restrict to one blog category
            search: Case-insensitive match on title, content or excerpt

        Returns:
            tuple: (posts, pagination metadata)
        """
        conditions = [BlogPost.status == PUBLISHED]
        if category_slug:
            conditions.append(BlogCategory.slug == category_slug)
        if search:
            conditions.append(self._search_clause(search))

        query = (
            self._post_query()
            .where(*conditions)
            .order_by(BlogPost.published_at.desc(), BlogPost.created_at.desc())
        )
        count_query = (
            select(func.count(BlogPost.id))
            .select_from(BlogPost)
            .outerjoin(BlogCategory, BlogPost.category_id == BlogCategory.id)
            .where(*conditions)
        )
        return await self._page(query, count_query, page, limit)

    async def list_all(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        category_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Dict[str, Any]], PaginationMetadata]:
        """Posts in any status for the admin dashboard, newest first."""
        conditions = []
        if status:
            conditions.append(BlogPost.status == status)
        if category_id:
            conditions.append(BlogPost.category_id == category_id)
        if search:
            conditions.append(self._search_clause(search))

        query = self._post_query().where(*conditions).order_by(BlogPost.created_at.desc())
        count_query = select(func.count(BlogPost.id)).where(*conditions)
        return await self._page(query, count_query, page, limit)

    async def read_published(self, slug: str) -> Dict[str, Any]:
        """
        Fetch a published post by slug and count the view.

        Every call increments view_count by one; the returned body carries
        the count as it was before this read.

        Raises:
            NotFound: No published post with this slug
        """
        async with self.database.session() as session:
            result = await session.execute(
                self._post_query().where(BlogPost.slug == slug, BlogPost.status == PUBLISHED)
            )
            row = result.first()
            if row is None:
                raise NotFound("Blog post not found")
            post = self._post_row(*row)

            # updated_at is pinned so views do not count as edits
            await session.execute(
                update(BlogPost)
                .where(BlogPost.id == post["id"])
                .values(view_count=BlogPost.view_count + 1, updated_at=BlogPost.updated_at)
            )
        return post

    async def recent(self, limit: int = 5) -> List[Dict[str, Any]]:
        async with self.database.session() as session:
            result = await session.execute(
                self._post_query()
                .where(BlogPost.status == PUBLISHED)
                .order_by(BlogPost.published_at.desc())
                .limit(limit)
            )
            return [self._post_row(*row) for row in result.all()]

    async def published_for_sitemap(self) -> List[Tuple[str, Optional[datetime]]]:
        async with self.database.session() as session:
            result = await session.execute(
                select(BlogPost.slug, BlogPost.updated_at)
                .where(BlogPost.status == PUBLISHED)
                .order_by(BlogPost.published_at.desc())
            )
            return [(slug, updated_at) for slug, updated_at in result.all()]

    async def _existing_category_id(self, category_id: Optional[str]) -> Optional[str]:
        if not category_id:
            return None
        async with self.database.session() as session:
            if await session.get(BlogCategory, category_id) is None:
                raise ValidationError("Blog category does not exist")
        return category_id

    async def get_post(self, post_id: str) -> Dict[str, Any]:
        async with self.database.session() as session:
            result = await session.execute(self._post_query().where(BlogPost.id == post_id))
            row = result.first()
        if row is None:
            raise NotFound("Blog post not found")
        return self._post_row(*row)

    async def create_post(self, payload: BlogPostCreate, author_id: Optional[str]) -> Dict[str, Any]:
        """
        Raises:
            ValidationError: Title yields an empty slug
            Conflict: Another post already has the same slug
        """
        values = payload.model_dump()
        values["category_id"] = await self._existing_category_id(values["category_id"])
        values["slug"] = _require_slug(payload.title)
        values["reading_time"] = reading_time(payload.content)
        if payload.status == PUBLISHED:
            values["published_at"] = datetime.now(timezone.utc)

        try:
            async with self.database.session() as session:
                post = BlogPost(author_id=author_id, **values)
                session.add(post)
                await session.flush()
                post_id = post.id
        except IntegrityError as e:
            raise Conflict("A blog post with this title already exists") from e

        logger.info(f"Created blog post {post_id} ({values['slug']}, {payload.status})")
        return await self.get_post(post_id)

    async def update_post(self, post_id: str, payload: BlogPostUpdate) -> Dict[str, Any]:
        changes = payload.model_dump(exclude_unset=True)
        for field in ("title", "content", "status"):
            if changes.get(field) is None:
                changes.pop(field, None)
        if "title" in changes:
            changes["slug"] = _require_slug(changes["title"])
        if "category_id" in changes:
            changes["category_id"] = await self._existing_category_id(changes["category_id"])

        try:
            async with self.database.session() as session:
                post = await session.get(BlogPost, post_id)
                if post is None:
                    raise NotFound("Blog post not found")
                for field, value in changes.items():
                    setattr(post, field, value)
                post.reading_time = reading_time(post.content)
                # First publish wins: never overwrite an existing timestamp
                if post.status == PUBLISHED and post.published_at is None:
                    post.published_at = datetime.now(timezone.utc)
                await session.flush()
        except IntegrityError as e:
            raise Conflict("A blog post with this title already exists") from e

        logger.info(f"Updated blog post {post_id}: {sorted(changes)}")
        return await self.get_post(post_id)

    async def delete_post(self, post_id: str) -> None:
        async with self.database.session() as session:
            post = await session.get(BlogPost, post_id)
            if post is None:
                raise NotFound("Blog post not found")
            await session.delete(post)
        logger.info(f"Deleted blog post {post_id}")

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def list_categories(self, published_only: bool = True) -> List[Dict[str, Any]]:
        """Blog categories with the number of posts in each (published posts only by default)."""
        join_on = BlogPost.category_id == BlogCategory.id
        if published_only:
            join_on = and_(join_on, BlogPost.status == PUBLISHED)

        async with self.database.session() as session:
            result = await session.execute(
                select(BlogCategory, func.count(BlogPost.id))
                .outerjoin(BlogPost, join_on)
                .group_by(BlogCategory.id)
                .order_by(BlogCategory.display_order.asc(), BlogCategory.name.asc())
            )
            categories = []
            for category, post_count in result.all():
                row = columns_dict(category)
                row["post_count"] = post_count
                categories.append(row)
            return categories

    async def create_category(self, payload: BlogCategoryCreate) -> BlogCategory:
        values = payload.model_dump(exclude_none=True)
        values["slug"] = _require_slug(payload.name)
        try:
            async with self.database.session() as session:
                category = BlogCategory(**values)
                session.add(category)
                await session.flush()
                await session.refresh(category)
        except IntegrityError as e:
            raise Conflict("A blog category with this name already exists") from e

        logger.info(f"Created blog category {category.id} ({category.slug})")
        return category

    async def update_category(self, category_id: str, payload: BlogCategoryUpdate) -> BlogCategory:
        changes = payload.model_dump(exclude_unset=True)
        for field in ("name", "color", "display_order"):
            if changes.get(field) is None:
                changes.pop(field, None)
        if "name" in changes:
            changes["slug"] = _require_slug(changes["name"])

        try:
            async with self.database.session() as session:
                category = await session.get(BlogCategory, category_id)
                if category is None:
                    raise NotFound("Blog category not found")
                for field, value in changes.items():
                    setattr(category, field, value)
                await session.flush()
                await session.refresh(category)
        except IntegrityError as e:
            raise Conflict("A blog category with this name already exists") from e

        logger.info(f"Updated blog category {category_id}: {sorted(changes)}")
        return category

    async def delete_category(self, category_id: str) -> None:
        """Delete a blog category. Its posts stay, uncategorised."""
        async with self.database.session() as session:
            category = await session.get(BlogCategory, category_id)
            if category is None:
                raise NotFound("Blog category not found")
            await session.delete(category)
        logger.info(f"Deleted blog category {category_id}")

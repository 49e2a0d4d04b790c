"""
Blog administration routes for the dashboard.
All routes require a signed-in user.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from chef_site.deps import get_blog_service, require_login
from chef_site.schemas import (
    BlogCategoryCreate,
    BlogCategoryResponse,
    BlogCategoryUpdate,
    BlogPostCreate,
    BlogPostResponse,
    BlogPostsPageResponse,
    BlogPostUpdate,
    MessageResponse,
    PostStatus,
    SessionUser,
)
from chef_site.services.blog import BlogService

router = APIRouter(prefix="/admin/blog", dependencies=[Depends(require_login)])


@router.get("/posts", response_model=BlogPostsPageResponse)
async def list_all_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[PostStatus] = None,
    category: Optional[str] = Query(None, description="Blog category id"),
    search: Optional[str] = None,
    blog: BlogService = Depends(get_blog_service),
):
    """Posts in any status, newest first."""
    posts, pagination = await blog.list_all(
        page=page, limit=limit, status=status, category_id=category, search=search
    )
    return BlogPostsPageResponse(posts=posts, pagination=pagination)


@router.get("/posts/{post_id}", response_model=BlogPostResponse)
async def get_post(post_id: str, blog: BlogService = Depends(get_blog_service)):
    return await blog.get_post(post_id)


@router.post("/posts", response_model=BlogPostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: BlogPostCreate,
    blog: BlogService = Depends(get_blog_service),
    user: SessionUser = Depends(require_login),
):
    """
    Create a post authored by the signed-in user.

    The slug comes from the title and the reading time from the content.
    Creating a post as "published" stamps published_at.

    Raises:
        Conflict: 409 if another post already has the same slug
    """
    return await blog.create_post(payload, author_id=user.id)


@router.put("/posts/{post_id}", response_model=BlogPostResponse)
async def update_post(post_id: str, payload: BlogPostUpdate, blog: BlogService = Depends(get_blog_service)):
    """
    Update a post. A new title regenerates the slug; reading time is always
    recomputed. published_at is only set on the first publish.
    """
    return await blog.update_post(post_id, payload)


@router.delete("/posts/{post_id}", response_model=MessageResponse)
async def delete_post(post_id: str, blog: BlogService = Depends(get_blog_service)):
    await blog.delete_post(post_id)
    return MessageResponse(message="Blog post deleted successfully")


@router.get("/categories", response_model=List[BlogCategoryResponse])
async def list_categories(blog: BlogService = Depends(get_blog_service)):
    """Blog categories with post counts across all statuses."""
    return await blog.list_categories(published_only=False)


@router.post("/categories", response_model=BlogCategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(payload: BlogCategoryCreate, blog: BlogService = Depends(get_blog_service)):
    return await blog.create_category(payload)


@router.put("/categories/{category_id}", response_model=BlogCategoryResponse)
async def update_category(
    category_id: str,
    payload: BlogCategoryUpdate,
    blog: BlogService = Depends(get_blog_service),
):
    return await blog.update_category(category_id, payload)


@router.delete("/categories/{category_id}", response_model=MessageResponse)
async def delete_category(category_id: str, blog: BlogService = Depends(get_blog_service)):
    """Delete a blog category; its posts become uncategorised."""
    await blog.delete_category(category_id)
    return MessageResponse(message="Blog category deleted successfully")

"""
Public blog routes.
Only published posts are visible here.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from chef_site.deps import get_blog_service
from chef_site.schemas import (
    BlogCategoryResponse,
    BlogPostResponse,
    BlogPostsPageResponse,
    RecentPostResponse,
)
from chef_site.services.blog import BlogService

router = APIRouter()


@router.get("/blog/posts", response_model=BlogPostsPageResponse)
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(6, ge=1, le=100),
    category: Optional[str] = Query(None, description="Blog category slug"),
    search: Optional[str] = None,
    blog: BlogService = Depends(get_blog_service),
):
    """
    Get a page of published posts, most recently published first.

    Args:
        page: 1-based page number
        limit: Posts per page (1-100)
        category: Only posts in the blog category with this slug
        search: Case-insensitive text to find in title, content or excerpt

    Returns:
        BlogPostsPageResponse: Posts and page-number pagination metadata
    """
    posts, pagination = await blog.list_published(page=page, limit=limit, category_slug=category, search=search)
    return BlogPostsPageResponse(posts=posts, pagination=pagination)


@router.get("/blog/posts/{slug}", response_model=BlogPostResponse)
async def read_post(slug: str, blog: BlogService = Depends(get_blog_service)):
    """
    Get one published post by slug.

    Not idempotent: each call adds one to the post's view_count. The body
    shows the count from before this view.

    Raises:
        NotFound: 404 if no published post has this slug
    """
    return await blog.read_published(slug)


@router.get("/blog/categories", response_model=List[BlogCategoryResponse])
async def list_blog_categories(blog: BlogService = Depends(get_blog_service)):
    """Blog categories with their number of published posts."""
    return await blog.list_categories(published_only=True)


@router.get("/blog/recent", response_model=List[RecentPostResponse])
async def recent_posts(
    limit: int = Query(5, ge=1, le=50),
    blog: BlogService = Depends(get_blog_service),
):
    return await blog.recent(limit)

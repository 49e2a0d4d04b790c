"""
FastAPI dependencies: the database handle, service construction and the
session-based access guard.
"""
from datetime import timedelta
from typing import Optional
import logging

from fastapi import Depends, Request

from chef_site.config import settings
from chef_site.database import Database
from chef_site.errors import Forbidden
from chef_site.schemas import SessionUser
from chef_site.services.auth import AuthService
from chef_site.services.blog import BlogService
from chef_site.services.bookings import BookingService
from chef_site.services.categories import CategoryService
from chef_site.services.gallery import GalleryService
from chef_site.services.menu_items import MenuItemService
from chef_site.services.notifications import NotificationService
from chef_site.services.sitemap import SitemapService
from chef_site.services.stats import StatsService
from chef_site.services.users import UserService
from chef_site.utils.sessions import SessionStore, unsign_session_id

logger = logging.getLogger(__name__)


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_auth_service(database: Database = Depends(get_database)) -> AuthService:
    return AuthService(
        database,
        SessionStore(database),
        max_age=timedelta(days=settings.SESSION_MAX_AGE_DAYS),
    )


def get_category_service(request: Request, database: Database = Depends(get_database)) -> CategoryService:
    return CategoryService(database, request.app.state.upload_root, settings.MAX_UPLOAD_BYTES)


def get_menu_item_service(request: Request, database: Database = Depends(get_database)) -> MenuItemService:
    return MenuItemService(database, request.app.state.upload_root, settings.MAX_UPLOAD_BYTES)


def get_gallery_service(request: Request, database: Database = Depends(get_database)) -> GalleryService:
    return GalleryService(
        database,
        request.app.state.upload_root,
        settings.MAX_UPLOAD_BYTES,
        settings.MAX_GALLERY_FILES,
    )


def get_user_service(database: Database = Depends(get_database)) -> UserService:
    return UserService(database)


def get_booking_service(database: Database = Depends(get_database)) -> BookingService:
    return BookingService(database)


def get_blog_service(database: Database = Depends(get_database)) -> BlogService:
    return BlogService(database)


def get_stats_service(database: Database = Depends(get_database)) -> StatsService:
    return StatsService(database)


def get_sitemap_service(blog: BlogService = Depends(get_blog_service)) -> SitemapService:
    return SitemapService(blog, settings.SITE_URL)


def get_notification_service(
    request: Request,
    database: Database = Depends(get_database),
) -> NotificationService:
    return NotificationService(
        mailer=request.app.state.mailer,
        renderer=request.app.state.renderer,
        database=database,
        bookings=BookingService(database),
        notify_email=settings.NOTIFY_EMAIL,
        site_name=settings.SITE_NAME,
    )


def get_session_id(request: Request) -> Optional[str]:
    """Session id from the signed cookie, or None when absent or tampered with."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    sid = unsign_session_id(token, settings.SESSION_SECRET)
    if sid is None:
        logger.warning(f"Rejected session cookie with invalid signature from {request.client.host if request.client else 'unknown'}")
    return sid


class RequireRole:
    """
    Access guard for routes that need a signed-in user.

    With no role any authenticated user passes; with a role the user must
    also hold it. Used as a dependency, it resolves to the SessionUser.

    Usage:
        @router.post("/categories")
        async def create_category(user: SessionUser = Depends(require_login)):
            ...
    """

    def __init__(self, role: Optional[str] = None):
        self.role = role

    async def __call__(
        self,
        sid: Optional[str] = Depends(get_session_id),
        auth: AuthService = Depends(get_auth_service),
    ) -> SessionUser:
        user = await auth.current_user(sid)
        if self.role and user.role != self.role:
            logger.warning(f"User {user.id} with role {user.role!r} denied {self.role!r} access")
            raise Forbidden()
        return user


require_login = RequireRole()
require_admin = RequireRole("admin")

"""
Site-level routes: API root, health check and sitemap.xml.
"""
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, Response

from chef_site.config import settings
from chef_site.database import Database
from chef_site.deps import get_database, get_sitemap_service
from chef_site.errors import AppError
from chef_site.services.sitemap import SitemapService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def root():
    """Root endpoint - API identification."""
    return {
        "message": settings.API_TITLE,
        "status": "healthy",
        "version": settings.API_VERSION
    }


@router.get("/health")
async def health_check(database: Database = Depends(get_database)):
    """
    Health check endpoint.
    Always answers 200; the `database` field reports whether a trivial query succeeds.
    """
    if not database.configured:
        db_status = "not configured"
    else:
        try:
            await database.execute("SELECT 1")
            db_status = "connected"
        except AppError as e:
            logger.error(f"Database health check failed: {e.message}")
            db_status = "error"

    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": db_status,
    }


@router.get("/sitemap.xml")
async def sitemap(sitemaps: SitemapService = Depends(get_sitemap_service)):
    """Dynamic sitemap: static pages plus every published blog post."""
    return Response(content=await sitemaps.render(), media_type="application/xml")

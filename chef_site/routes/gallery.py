"""
Gallery routes.
Public listing of gallery images plus authenticated bulk upload, metadata
edits and deletion.
"""
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from chef_site.deps import get_gallery_service, require_login
from chef_site.schemas import GalleryImageResponse, GalleryImageUpdate, MessageResponse, SessionUser
from chef_site.services.gallery import GalleryService

logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


@router.get("/gallery", response_model=List[GalleryImageResponse])
async def list_gallery_images(
    type: Optional[str] = None,
    featured: Optional[bool] = None,
    gallery: GalleryService = Depends(get_gallery_service),
):
    """
    Get gallery images, newest first.

    Args:
        type: Only images of this gallery type (e.g. "food")
        featured: Filter on the featured flag
        gallery: Gallery service (injected by FastAPI dependency)

    Returns:
        list[GalleryImageResponse]: Gallery images with metadata
    """
    return await gallery.list(image_type=type, featured=featured)


@router.get("/gallery/{image_id}", response_model=GalleryImageResponse)
async def get_gallery_image(image_id: str, gallery: GalleryService = Depends(get_gallery_service)):
    return await gallery.get(image_id)


@router.post("/gallery", response_model=List[GalleryImageResponse], status_code=status.HTTP_201_CREATED)
async def upload_gallery_images(
    images: List[UploadFile] = File(..., description="Image files (up to 10)"),
    titles: List[str] = Form(default=[]),
    type: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    gallery: GalleryService = Depends(get_gallery_service),
    user: SessionUser = Depends(require_login),
):
    """
    Upload one or more gallery images.

    Each file is resized to 800x600 and re-encoded as JPEG. `titles` is read
    in the same order as `images`; a missing title becomes "Gallery Image N".
    The batch is all-or-nothing.

    Args:
        images: Uploaded image files
        titles: Optional titles, parallel to `images`
        type: Gallery type applied to every image (default "food")
        description: Optional description applied to every image

    Returns:
        list[GalleryImageResponse]: Created images in upload order

    Raises:
        UploadError: 400 for too many files or an invalid image
    """
    logger.info(f"Gallery upload of {len(images)} file(s) by user {user.id}")
    return await gallery.create_batch(images, titles, image_type=type, description=description)


@router.put("/gallery/{image_id}", response_model=GalleryImageResponse)
async def update_gallery_image(
    image_id: str,
    payload: GalleryImageUpdate,
    gallery: GalleryService = Depends(get_gallery_service),
    user: SessionUser = Depends(require_login),
):
    """
    Update gallery image metadata (title, description, type, featured).

    Raises:
        NotFound: 404 if the image does not exist
    """
    return await gallery.update(image_id, payload)


@router.delete("/gallery/{image_id}", response_model=MessageResponse)
async def delete_gallery_image(
    image_id: str,
    gallery: GalleryService = Depends(get_gallery_service),
    user: SessionUser = Depends(require_login),
):
    """Delete a gallery image row; its file is removed best-effort."""
    await gallery.delete(image_id)
    return MessageResponse(message="Gallery image deleted successfully")

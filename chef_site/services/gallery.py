"""
Gallery image management.
Handles bulk uploads, metadata edits and deletion of processed gallery images.
"""
from pathlib import Path
from typing import List, Optional, Sequence
import logging

from fastapi import UploadFile
from sqlalchemy import select

from chef_site.database import Database
from chef_site.errors import NotFound, UploadError
from chef_site.models import GalleryImage
from chef_site.schemas import GalleryImageUpdate
from chef_site.utils.image_processor import ProcessedImage, remove_image, save_upload

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_TYPE = "food"


class GalleryService:
    def __init__(self, database: Database, upload_root: Path, max_upload_bytes: int, max_files: int):
        self.database = database
        self.upload_root = upload_root
        self.max_upload_bytes = max_upload_bytes
        self.max_files = max_files

    async def list(self, image_type: Optional[str] = None, featured: Optional[bool] = None) -> List[GalleryImage]:
        query = select(GalleryImage).order_by(GalleryImage.created_at.desc())
        if image_type:
            query = query.where(GalleryImage.type == image_type)
        if featured is not None:
            query = query.where(GalleryImage.featured == featured)

        async with self.database.session() as session:
            result = await session.execute(query)
            images = list(result.scalars())
        logger.info(f"Retrieved {len(images)} gallery images (type: {image_type}, featured: {featured})")
        return images

    async def get(self, image_id: str) -> GalleryImage:
        async with self.database.session() as session:
            image = await session.get(GalleryImage, image_id)
        if image is None:
            raise NotFound("Gallery image not found")
        return image

    async def create_batch(
        self,
        files: Sequence[UploadFile],
        titles: Sequence[str] = (),
        image_type: Optional[str] = None,
        description: Optional[str] = None,
    ) -> List[GalleryImage]:
        """
        Process and store a batch of gallery uploads as one unit.

        Every file is processed before anything is written to the database,
        and all rows are inserted in a single transaction. If any file or the
        insert fails, every processed file from this batch is removed and no
        row is kept.

        Args:
            files: Uploaded images (1 to max_files)
            titles: Titles parallel to `files`; missing entries become "Gallery Image N"
            image_type: Gallery category, defaults to "food"
            description: Shared description for every image in the batch

        Returns:
            list[GalleryImage]: Created rows in upload order

        Raises:
            UploadError: No files, too many files, or an invalid image
        """
        if not files:
            raise UploadError("No images uploaded")
        if len(files) > self.max_files:
            raise UploadError(f"A maximum of {self.max_files} images can be uploaded at once")

        processed: List[ProcessedImage] = []
        try:
            for upload in files:
                processed.append(
                    await save_upload(upload, "gallery", self.upload_root, self.max_upload_bytes)
                )

            async with self.database.session() as session:
                images = []
                for index, result in enumerate(processed):
                    title = titles[index].strip() if index < len(titles) and titles[index] else ""
                    image = GalleryImage(
                        title=title or f"Gallery Image {index + 1}",
                        description=description,
                        image_path=result.url_path,
                        type=image_type or DEFAULT_IMAGE_TYPE,
                        file_size=result.file_size,
                    )
                    session.add(image)
                    images.append(image)
                await session.flush()
                for image in images:
                    await session.refresh(image)
        except Exception:
            logger.error(
                f"Gallery upload failed after processing {len(processed)}/{len(files)} file(s), "
                f"removing processed files"
            )
            for result in processed:
                remove_image(result.url_path, self.upload_root)
            raise

        logger.info(f"Uploaded {len(images)} gallery image(s)")
        return images

    async def update(self, image_id: str, payload: GalleryImageUpdate) -> GalleryImage:
        """
        Update gallery image metadata. Only fields present in the request change.

        Raises:
            NotFound: Unknown image id
        """
        changes = payload.model_dump(exclude_unset=True)
        async with self.database.session() as session:
            image = await session.get(GalleryImage, image_id)
            if image is None:
                raise NotFound("Gallery image not found")
            for field, value in changes.items():
                if value is None and field in ("type", "featured"):
                    continue
                setattr(image, field, value)
            await session.flush()
            await session.refresh(image)

        logger.info(f"Updated gallery image {image_id}: {sorted(changes)}")
        return image

    async def delete(self, image_id: str) -> None:
        async with self.database.session() as session:
            image = await session.get(GalleryImage, image_id)
            if image is None:
                raise NotFound("Gallery image not found")
            image_path = image.image_path
            await session.delete(image)

        remove_image(image_path, self.upload_root)
        logger.info(f"Deleted gallery image {image_id}")

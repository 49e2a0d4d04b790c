"""
Image upload processing.
Stores an uploaded image, resizes it to the destination's profile with
crop-to-fill semantics, re-encodes it as JPEG and removes the original.
"""
import asyncio
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from fastapi import UploadFile
from PIL import Image, ImageOps, UnidentifiedImageError

from chef_site.errors import UploadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class ImageProfile:
    width: int
    height: int
    quality: int
    format: str = "JPEG"
    extension: str = ".jpg"


# Output size and quality per upload destination
PROFILES: Dict[str, ImageProfile] = {
    "categories": ImageProfile(width=400, height=300, quality=80),
    "menu": ImageProfile(width=600, height=400, quality=85),
    "gallery": ImageProfile(width=800, height=600, quality=90),
}


@dataclass(frozen=True)
class ProcessedImage:
    path: Path
    url_path: str
    file_size: int


def ensure_upload_dirs(upload_root: Path) -> None:
    for destination in PROFILES:
        (upload_root / destination).mkdir(parents=True, exist_ok=True)


def process_image(source: Path, target: Path, profile: ImageProfile) -> None:
    """
    Resize `source` to exactly the profile's dimensions and write it to `target`.

    The aspect ratio is forced by cropping around the centre, never by
    letterboxing.

    Raises:
        UploadError: If the source cannot be decoded as an image
    """
    try:
        with Image.open(source) as image:
            image = ImageOps.exif_transpose(image)
            if image.mode != "RGB":
                # JPEG has no alpha channel; flatten onto white
                if image.mode in ("RGBA", "LA", "P"):
                    rgba = image.convert("RGBA")
                    background = Image.new("RGB", rgba.size, (255, 255, 255))
                    background.paste(rgba, mask=rgba.split()[-1])
                    image = background
                else:
                    image = image.convert("RGB")

            fitted = ImageOps.fit(
                image,
                (profile.width, profile.height),
                method=Image.Resampling.LANCZOS,
            )
            fitted.save(target, format=profile.format, quality=profile.quality, optimize=True)
    except (UnidentifiedImageError, Image.DecompressionBombError) as e:
        logger.warning(f"Cannot decode uploaded image {source.name}: {str(e)}")
        raise UploadError("Uploaded file is not a valid image") from e


async def save_upload(
    upload: UploadFile,
    destination: str,
    upload_root: Path,
    max_bytes: int,
) -> ProcessedImage:
    """
    Persist and process a single uploaded image.

    Args:
        upload: Uploaded file from a multipart request
        destination: Profile name ("categories", "menu" or "gallery")
        upload_root: Root uploads directory
        max_bytes: Maximum accepted upload size

    Returns:
        ProcessedImage: Location and size of the processed file

    Raises:
        UploadError: Non-image MIME type, oversized or undecodable upload
    """
    profile = PROFILES[destination]
    filename = upload.filename or "upload"
    if not upload.content_type or not upload.content_type.startswith("image/"):
        raise UploadError(f"File '{filename}' is not a valid image file")

    directory = upload_root / destination
    directory.mkdir(parents=True, exist_ok=True)
    token = uuid.uuid4().hex
    original = directory / f"{token}{Path(filename).suffix.lower()}"
    target = directory / f"processed_{token}{profile.extension}"

    try:
        size = 0
        with open(original, "wb") as out:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise UploadError(f"File '{filename}' exceeds the {max_bytes // (1024 * 1024)}MB upload limit")
                out.write(chunk)

        await asyncio.to_thread(process_image, original, target, profile)
    except Exception:
        _unlink_quietly(target)
        raise
    finally:
        _unlink_quietly(original)

    file_size = target.stat().st_size
    logger.info(
        f"Processed upload {filename} -> {target.name} "
        f"({profile.width}x{profile.height}, q{profile.quality}, {file_size:,} bytes)"
    )
    return ProcessedImage(
        path=target,
        url_path=f"/uploads/{destination}/{target.name}",
        file_size=file_size,
    )


def resolve_upload_path(url_path: str, upload_root: Path) -> Path:
    """
    Map a stored `/uploads/...` path back to a file under `upload_root`.

    Raises:
        ValueError: If the path does not point inside the upload root
    """
    if not url_path.startswith("/uploads/"):
        raise ValueError(f"Not an upload path: {url_path}")
    root = upload_root.resolve()
    candidate = (root / url_path[len("/uploads/"):]).resolve()
    if root not in candidate.parents:
        raise ValueError(f"Upload path escapes upload directory: {url_path}")
    return candidate


def remove_image(url_path: str, upload_root: Path) -> bool:
    """
    Delete a stored image. Best-effort: failures are logged, never raised.

    Returns:
        True if a file was removed
    """
    try:
        path = resolve_upload_path(url_path, upload_root)
        os.remove(path)
        logger.info(f"Removed image file {url_path}")
        return True
    except FileNotFoundError:
        logger.warning(f"Image file already gone: {url_path}")
    except (OSError, ValueError) as e:
        logger.error(f"Failed to remove image file {url_path}: {str(e)}")
    return False


def _unlink_quietly(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove temporary file {path}: {str(e)}")

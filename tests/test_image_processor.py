import asyncio
import io

import pytest
from PIL import Image
from starlette.datastructures import Headers, UploadFile

from chef_site.errors import UploadError
from chef_site.utils.image_processor import (
    PROFILES,
    process_image,
    remove_image,
    resolve_upload_path,
    save_upload,
)
from conftest import files_in, image_bytes


def make_upload(data, filename="photo.png", content_type="image/png"):
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.parametrize("destination, size", [
    ("categories", (400, 300)),
    ("menu", (600, 400)),
    ("gallery", (800, 600)),
])
def test_process_image_crops_to_profile_size(tmp_path, destination, size):
    source = tmp_path / "source.png"
    source.write_bytes(image_bytes(size=(1000, 1000)))
    target = tmp_path / "out.jpg"

    process_image(source, target, PROFILES[destination])

    with Image.open(target) as result:
        assert result.size == size
        assert result.format == "JPEG"


def test_process_image_flattens_transparency(tmp_path):
    source = tmp_path / "logo.png"
    Image.new("RGBA", (500, 500), (0, 0, 0, 0)).save(source)
    target = tmp_path / "logo.jpg"

    process_image(source, target, PROFILES["categories"])

    with Image.open(target) as result:
        assert result.mode == "RGB"
        assert result.getpixel((200, 150))[0] > 240  # transparent became white


def test_save_upload_keeps_only_processed_file(tmp_path):
    processed = asyncio.run(save_upload(make_upload(image_bytes()), "menu", tmp_path, 10 * 1024 * 1024))

    assert processed.url_path == f"/uploads/menu/{processed.path.name}"
    assert processed.path.name.startswith("processed_")
    assert processed.file_size == processed.path.stat().st_size > 0
    assert files_in(tmp_path / "menu") == [processed.path.name]


def test_save_upload_rejects_non_image_mime_type(tmp_path):
    upload = make_upload(b"just text", filename="notes.txt", content_type="text/plain")

    with pytest.raises(UploadError):
        asyncio.run(save_upload(upload, "gallery", tmp_path, 1024))

    assert files_in(tmp_path / "gallery") == []


def test_save_upload_rejects_undecodable_image_and_cleans_up(tmp_path):
    upload = make_upload(b"\x89PNG not really", filename="broken.png")

    with pytest.raises(UploadError, match="not a valid image"):
        asyncio.run(save_upload(upload, "gallery", tmp_path, 1024 * 1024))

    assert files_in(tmp_path / "gallery") == []


def test_save_upload_enforces_size_limit(tmp_path):
    upload = make_upload(image_bytes(size=(600, 600)))

    with pytest.raises(UploadError, match="upload limit"):
        asyncio.run(save_upload(upload, "menu", tmp_path, 100))

    assert files_in(tmp_path / "menu") == []


def test_resolve_upload_path_refuses_escapes(tmp_path):
    assert resolve_upload_path("/uploads/menu/a.jpg", tmp_path) == (tmp_path / "menu" / "a.jpg").resolve()
    with pytest.raises(ValueError):
        resolve_upload_path("/uploads/../secrets.txt", tmp_path)
    with pytest.raises(ValueError):
        resolve_upload_path("/etc/passwd", tmp_path)


def test_remove_image_is_best_effort(tmp_path):
    (tmp_path / "gallery").mkdir()
    stored = tmp_path / "gallery" / "processed_x.jpg"
    stored.write_bytes(b"jpeg")

    assert remove_image("/uploads/gallery/processed_x.jpg", tmp_path) is True
    assert not stored.exists()
    assert remove_image("/uploads/gallery/processed_x.jpg", tmp_path) is False
    assert remove_image("/uploads/../../etc/passwd", tmp_path) is False

import asyncio

import pytest
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession

from chef_site.database import Database
from chef_site.errors import Conflict
from chef_site.services.categories import CategoryService
from conftest import image_bytes


def create_category(client, **fields):
    response = client.post("/api/categories", json={"name": "Mains", **fields})
    assert response.status_code == 201, response.text
    return response.json()


def test_create_category_requires_session(client):
    response = client.post("/api/categories", json={"name": "Starters"})

    assert response.status_code == 401
    assert client.get("/api/categories").json() == []


def test_create_category_applies_defaults_and_appends(admin_client):
    first = create_category(admin_client, name="Starters")
    second = create_category(admin_client, name="Mains", color="#e74c3c", icon="fas fa-drumstick-bite")

    assert first["color"] == "#3498db"
    assert first["icon"] == "fas fa-utensils"
    assert second["display_order"] == first["display_order"] + 1
    assert second["color"] == "#e74c3c"

    listed = admin_client.get("/api/categories").json()
    assert [category["name"] for category in listed] == ["Starters", "Mains"]


def test_blank_name_is_rejected(admin_client):
    response = admin_client.post("/api/categories", json={"name": "   "})

    assert response.status_code == 400
    assert "name" in response.json()["error"]


def test_update_category_keeps_unsent_fields(admin_client):
    category = create_category(admin_client, description="Hearty plates")

    response = admin_client.put(f"/api/categories/{category['id']}", json={"name": "Main Courses"})

    assert response.status_code == 200
    assert response.json()["name"] == "Main Courses"
    assert response.json()["description"] == "Hearty plates"


def test_delete_category_in_use_conflicts(admin_client):
    category = create_category(admin_client)
    for name in ("Lamb Shank", "Line Fish"):
        created = admin_client.post(
            "/api/menu-items",
            data={"name": name, "price": "150.00", "category_id": category["id"]},
        )
        assert created.status_code == 201

    response = admin_client.delete(f"/api/categories/{category['id']}")

    assert response.status_code == 409
    assert response.json() == {
        "error": "Cannot delete category. 2 menu item(s) are using this category."
    }
    assert admin_client.get(f"/api/categories/{category['id']}").status_code == 200
    assert len(admin_client.get("/api/menu-items").json()) == 2


def test_delete_unused_category(admin_client):
    category = create_category(admin_client)

    response = admin_client.delete(f"/api/categories/{category['id']}")

    assert response.status_code == 200
    assert admin_client.get(f"/api/categories/{category['id']}").status_code == 404
    assert admin_client.delete(f"/api/categories/{category['id']}").status_code == 404


def test_category_image_is_resized(admin_client, upload_root):
    category = create_category(admin_client)

    response = admin_client.put(
        f"/api/categories/{category['id']}/image",
        files={"image": ("mains.png", image_bytes(), "image/png")},
    )

    assert response.status_code == 200
    image_path = response.json()["image_path"]
    assert image_path.startswith("/uploads/categories/")
    with Image.open(upload_root / "categories" / image_path.rsplit("/", 1)[-1]) as stored:
        assert stored.size == (400, 300)

    served = admin_client.get(image_path)
    assert served.status_code == 200
    assert served.headers["content-type"] == "image/jpeg"


def test_update_with_null_name_is_rejected(admin_client):
    category = create_category(admin_client, name="Desserts")

    response = admin_client.put(f"/api/categories/{category['id']}", json={"name": None})

    assert response.status_code == 400
    assert response.json() == {"error": "Category name is required"}
    assert admin_client.get(f"/api/categories/{category['id']}").json()["name"] == "Desserts"


def test_foreign_key_blocks_delete_when_count_misses_new_item(admin_client, database_url, upload_root, monkeypatch):
    category = create_category(admin_client)
    item = admin_client.post(
        "/api/menu-items",
        data={"name": "Lamb Shank", "price": "150.00", "category_id": category["id"]},
    ).json()

    async def no_items(self, statement, *args, **kwargs):
        return 0

    async def scenario():
        database = Database(database_url)
        await database.connect()
        try:
            with pytest.raises(Conflict) as error:
                await CategoryService(database, upload_root, 1024 * 1024).delete(category["id"])
            return error.value
        finally:
            await database.dispose()

    monkeypatch.setattr(AsyncSession, "scalar", no_items)
    error = asyncio.run(scenario())
    monkeypatch.undo()

    assert error.message == "Cannot delete category while menu items are using it."
    assert admin_client.get(f"/api/categories/{category['id']}").status_code == 200
    assert admin_client.get(f"/api/menu-items/{item['id']}").json()["category_id"] == category["id"]

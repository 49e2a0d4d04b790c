from decimal import Decimal

from PIL import Image

from conftest import files_in, image_bytes


def photo(name="dish.png", **kwargs):
    return {"image": (name, image_bytes(**kwargs), "image/png")}


def make_category(client):
    response = client.post("/api/categories", json={"name": "Mains", "color": "#e74c3c"})
    assert response.status_code == 201
    return response.json()


def test_create_menu_item_with_image(admin_client, upload_root):
    category = make_category(admin_client)

    response = admin_client.post(
        "/api/menu-items",
        data={"name": "Springbok Loin", "price": "245.50", "category_id": category["id"], "featured": "true"},
        files=photo(),
    )

    assert response.status_code == 201, response.text
    item = response.json()
    assert Decimal(item["price"]) == Decimal("245.50")
    assert item["category_name"] == "Mains"
    assert item["category_color"] == "#e74c3c"
    assert item["available"] is True
    assert item["featured"] is True

    stored_name = item["image_path"].rsplit("/", 1)[-1]
    assert item["image_path"] == f"/uploads/menu/{stored_name}"
    # Only the processed file remains, no temporary original
    assert files_in(upload_root / "menu") == [stored_name]
    stored = upload_root / "menu" / stored_name
    assert stored.stat().st_size > 0
    with Image.open(stored) as image:
        assert image.size == (600, 400)


def test_create_menu_item_without_image(admin_client):
    response = admin_client.post("/api/menu-items", data={"name": "Bread Basket", "price": "35", "available": "false"})

    assert response.status_code == 201
    assert response.json()["image_path"] is None
    assert response.json()["available"] is False
    assert response.json()["category_name"] is None


def test_invalid_price_is_rejected(admin_client, upload_root):
    response = admin_client.post("/api/menu-items", data={"name": "Soup", "price": "cheap"}, files=photo())

    assert response.status_code == 400
    assert "price" in response.json()["error"]
    assert admin_client.get("/api/menu-items").json() == []
    assert files_in(upload_root / "menu") == []


def test_missing_name_is_rejected(admin_client):
    response = admin_client.post("/api/menu-items", data={"price": "10"})

    assert response.status_code == 400
    assert "name" in response.json()["error"]


def test_unknown_category_is_rejected(admin_client, upload_root):
    response = admin_client.post(
        "/api/menu-items",
        data={"name": "Soup", "price": "60", "category_id": "missing"},
        files=photo(),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Category does not exist"}
    assert files_in(upload_root / "menu") == []


def test_non_image_upload_is_rejected(admin_client, upload_root):
    response = admin_client.post(
        "/api/menu-items",
        data={"name": "Soup", "price": "60"},
        files={"image": ("menu.pdf", b"%PDF-1.4", "application/pdf")},
    )

    assert response.status_code == 400
    assert admin_client.get("/api/menu-items").json() == []
    assert files_in(upload_root / "menu") == []


def test_update_replaces_image_and_removes_old_file(admin_client, upload_root):
    created = admin_client.post("/api/menu-items", data={"name": "Tart", "price": "80"}, files=photo()).json()
    old_name = created["image_path"].rsplit("/", 1)[-1]

    response = admin_client.put(
        f"/api/menu-items/{created['id']}",
        data={"price": "95.00"},
        files=photo("tart.png", color=(20, 120, 20)),
    )

    assert response.status_code == 200
    updated = response.json()
    new_name = updated["image_path"].rsplit("/", 1)[-1]
    assert new_name != old_name
    assert files_in(upload_root / "menu") == [new_name]
    assert Decimal(updated["price"]) == Decimal("95.00")
    assert updated["name"] == "Tart"


def test_update_without_image_keeps_existing_one(admin_client):
    created = admin_client.post("/api/menu-items", data={"name": "Tart", "price": "80"}, files=photo()).json()

    response = admin_client.put(f"/api/menu-items/{created['id']}", data={"featured": "true"})

    assert response.status_code == 200
    assert response.json()["image_path"] == created["image_path"]
    assert response.json()["featured"] is True


def test_delete_menu_item_removes_file(admin_client, upload_root):
    created = admin_client.post("/api/menu-items", data={"name": "Tart", "price": "80"}, files=photo()).json()

    response = admin_client.delete(f"/api/menu-items/{created['id']}")

    assert response.status_code == 200
    assert files_in(upload_root / "menu") == []
    assert admin_client.get(f"/api/menu-items/{created['id']}").status_code == 404


def test_list_filters(admin_client):
    category = make_category(admin_client)
    admin_client.post("/api/menu-items", data={"name": "Lamb", "price": "200", "category_id": category["id"]})
    admin_client.post("/api/menu-items", data={"name": "Water", "price": "20", "available": "false"})

    in_category = admin_client.get("/api/menu-items", params={"category_id": category["id"]}).json()
    available = admin_client.get("/api/menu-items", params={"available": "true"}).json()

    assert [item["name"] for item in in_category] == ["Lamb"]
    assert [item["name"] for item in available] == ["Lamb"]


def test_menu_writes_require_session(client):
    assert client.post("/api/menu-items", data={"name": "Soup", "price": "60"}).status_code == 401
    assert client.delete("/api/menu-items/anything").status_code == 401

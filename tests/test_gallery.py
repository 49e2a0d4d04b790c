from PIL import Image

from conftest import files_in, image_bytes


def png(name, **kwargs):
    return ("images", (name, image_bytes(**kwargs), "image/png"))


def test_upload_batch_creates_one_row_per_file(admin_client, upload_root):
    response = admin_client.post(
        "/api/gallery",
        files=[png("a.png"), png("b.png", size=(640, 480)), png("c.png", size=(300, 900))],
        data={"titles": ["Plated starter", "Dessert", "Kitchen"], "type": "events"},
    )

    assert response.status_code == 201, response.text
    created = response.json()
    assert [image["title"] for image in created] == ["Plated starter", "Dessert", "Kitchen"]
    assert len({image["id"] for image in created}) == 3
    assert len({image["image_path"] for image in created}) == 3
    assert all(image["type"] == "events" for image in created)

    assert len(files_in(upload_root / "gallery")) == 3
    for image in created:
        with Image.open(upload_root / "gallery" / image["image_path"].rsplit("/", 1)[-1]) as stored:
            assert stored.size == (800, 600)
        assert image["file_size"] > 0


def test_missing_titles_and_type_get_defaults(admin_client):
    response = admin_client.post("/api/gallery", files=[png("a.png"), png("b.png")])

    assert response.status_code == 201
    created = response.json()
    assert [image["title"] for image in created] == ["Gallery Image 1", "Gallery Image 2"]
    assert {image["type"] for image in created} == {"food"}


def test_invalid_file_fails_whole_batch(admin_client, upload_root):
    response = admin_client.post(
        "/api/gallery",
        files=[png("a.png"), ("images", ("notes.txt", b"hello", "text/plain")), png("c.png")],
    )

    assert response.status_code == 400
    assert "notes.txt" in response.json()["error"]
    assert admin_client.get("/api/gallery").json() == []
    assert files_in(upload_root / "gallery") == []


def test_too_many_files_are_rejected(admin_client, upload_root):
    response = admin_client.post("/api/gallery", files=[png(f"{i}.png", size=(50, 50)) for i in range(11)])

    assert response.status_code == 400
    assert response.json() == {"error": "A maximum of 10 images can be uploaded at once"}
    assert files_in(upload_root / "gallery") == []


def test_update_metadata_and_filter(admin_client):
    created = admin_client.post("/api/gallery", files=[png("a.png"), png("b.png")]).json()

    response = admin_client.put(f"/api/gallery/{created[0]['id']}", json={"featured": True, "title": "Signature dish"})

    assert response.status_code == 200
    assert response.json()["featured"] is True
    assert response.json()["title"] == "Signature dish"
    assert response.json()["type"] == "food"

    featured = admin_client.get("/api/gallery", params={"featured": "true"}).json()
    assert [image["id"] for image in featured] == [created[0]["id"]]
    assert len(admin_client.get("/api/gallery", params={"type": "food"}).json()) == 2
    assert admin_client.get("/api/gallery", params={"type": "events"}).json() == []


def test_delete_removes_row_and_file(admin_client, upload_root):
    created = admin_client.post("/api/gallery", files=[png("a.png")]).json()[0]

    response = admin_client.delete(f"/api/gallery/{created['id']}")

    assert response.status_code == 200
    assert files_in(upload_root / "gallery") == []
    assert admin_client.get(f"/api/gallery/{created['id']}").status_code == 404


def test_upload_requires_session(client, upload_root):
    response = client.post("/api/gallery", files=[png("a.png")])

    assert response.status_code == 401
    assert files_in(upload_root / "gallery") == []

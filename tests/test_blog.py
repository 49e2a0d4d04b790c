def words(count):
    return " ".join(["simmer"] * count)


def create_post(client, title, status="published", content=None, **fields):
    response = client.post("/api/admin/blog/posts", json={
        "title": title,
        "content": content or words(120),
        "status": status,
        **fields,
    })
    assert response.status_code == 201, response.text
    return response.json()


def test_slug_and_author_come_from_the_request(admin_client):
    post = create_post(admin_client, "Fresh Basil Pesto!")

    assert post["slug"] == "fresh-basil-pesto"
    assert post["author_name"] == "Test User"
    assert post["published_at"] is not None


def test_duplicate_title_conflicts(admin_client):
    create_post(admin_client, "Fresh Basil Pesto")

    response = admin_client.post("/api/admin/blog/posts", json={"title": "Fresh basil pesto", "content": "Again"})

    assert response.status_code == 409
    assert admin_client.get("/api/admin/blog/posts").json()["pagination"]["totalPosts"] == 1


def test_reading_time_follows_word_count(admin_client):
    long_post = create_post(admin_client, "Long Read", content=words(400))
    short_post = create_post(admin_client, "Short Read", content=words(150))

    assert long_post["reading_time"] == 2
    assert short_post["reading_time"] == 1

    updated = admin_client.put(f"/api/admin/blog/posts/{short_post['id']}", json={"content": words(401)})
    assert updated.json()["reading_time"] == 3


def test_each_public_read_counts_a_view(admin_client):
    create_post(admin_client, "Braai Basics")

    first = admin_client.get("/api/blog/posts/braai-basics")
    second = admin_client.get("/api/blog/posts/braai-basics")

    assert first.status_code == second.status_code == 200
    assert first.json()["view_count"] == 0
    assert second.json()["view_count"] == 1
    assert admin_client.get("/api/blog/posts/braai-basics").json()["view_count"] == 2


def test_drafts_are_hidden_from_public(admin_client):
    draft = create_post(admin_client, "Secret Recipe", status="draft")

    assert draft["published_at"] is None
    assert admin_client.get("/api/blog/posts/secret-recipe").status_code == 404
    assert admin_client.get("/api/blog/posts").json()["posts"] == []


def test_first_publish_timestamp_is_kept(admin_client):
    draft = create_post(admin_client, "Slow Cooked Oxtail", status="draft")
    path = f"/api/admin/blog/posts/{draft['id']}"

    published = admin_client.put(path, json={"status": "published"}).json()
    admin_client.put(path, json={"status": "draft"})
    republished = admin_client.put(path, json={"status": "published"}).json()

    assert published["published_at"] is not None
    assert republished["published_at"] == published["published_at"]


def test_title_change_regenerates_slug(admin_client):
    post = create_post(admin_client, "Cape Malay Curry")

    updated = admin_client.put(f"/api/admin/blog/posts/{post['id']}", json={"title": "Cape Malay Chicken Curry"})

    assert updated.json()["slug"] == "cape-malay-chicken-curry"
    assert admin_client.get("/api/blog/posts/cape-malay-curry").status_code == 404


def test_public_listing_paginates_published_posts(admin_client):
    for index in range(7):
        create_post(admin_client, f"Recipe {index}")
    create_post(admin_client, "Unfinished", status="draft")

    first_page = admin_client.get("/api/blog/posts").json()
    second_page = admin_client.get("/api/blog/posts", params={"page": 2}).json()

    assert len(first_page["posts"]) == 6
    assert first_page["posts"][0]["title"] == "Recipe 6"
    assert first_page["pagination"] == {
        "currentPage": 1,
        "totalPages": 2,
        "totalPosts": 7,
        "hasNextPage": True,
        "hasPrevPage": False,
    }
    assert [post["title"] for post in second_page["posts"]] == ["Recipe 0"]
    assert second_page["pagination"]["hasPrevPage"] is True


def test_search_and_category_filters(admin_client):
    category = admin_client.post("/api/admin/blog/categories", json={"name": "Seasonal Menus"}).json()
    create_post(admin_client, "Winter Soups", category_id=category["id"])
    create_post(admin_client, "Summer Salads", content="Crisp greens and a lemon dressing")

    by_category = admin_client.get("/api/blog/posts", params={"category": "seasonal-menus"}).json()
    by_search = admin_client.get("/api/blog/posts", params={"search": "LEMON"}).json()

    assert [post["title"] for post in by_category["posts"]] == ["Winter Soups"]
    assert by_category["posts"][0]["category_name"] == "Seasonal Menus"
    assert [post["title"] for post in by_search["posts"]] == ["Summer Salads"]


def test_category_post_counts(admin_client):
    category = admin_client.post("/api/admin/blog/categories", json={"name": "Techniques"}).json()
    assert category["slug"] == "techniques"
    create_post(admin_client, "Knife Skills", category_id=category["id"])
    create_post(admin_client, "Sous Vide", status="draft", category_id=category["id"])

    public = admin_client.get("/api/blog/categories").json()
    admin = admin_client.get("/api/admin/blog/categories").json()

    assert public[0]["post_count"] == 1
    assert admin[0]["post_count"] == 2


def test_unknown_blog_category_is_rejected(admin_client):
    response = admin_client.post("/api/admin/blog/posts", json={
        "title": "Orphan",
        "content": "Text",
        "category_id": "missing",
    })

    assert response.status_code == 400
    assert response.json() == {"error": "Blog category does not exist"}


def test_deleting_category_keeps_posts(admin_client):
    category = admin_client.post("/api/admin/blog/categories", json={"name": "Events"}).json()
    post = create_post(admin_client, "Wine Pairing Night", category_id=category["id"])

    assert admin_client.delete(f"/api/admin/blog/categories/{category['id']}").status_code == 200

    kept = admin_client.get(f"/api/admin/blog/posts/{post['id']}").json()
    assert kept["category_id"] is None
    assert kept["category_name"] is None


def test_recent_posts(admin_client):
    for title in ("First", "Second", "Third"):
        create_post(admin_client, title)
    create_post(admin_client, "Hidden", status="draft")

    recent = admin_client.get("/api/blog/recent", params={"limit": 2}).json()

    assert [post["title"] for post in recent] == ["Third", "Second"]
    assert "content" not in recent[0]


def test_admin_blog_requires_session(client):
    assert client.get("/api/admin/blog/posts").status_code == 401
    assert client.post("/api/admin/blog/categories", json={"name": "X"}).status_code == 401

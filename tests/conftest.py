import asyncio
import io
import os
from pathlib import Path

# Settings are read at import time, so the environment must be prepared first
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DEFAULT_DATA"] = "false"
os.environ["SESSION_SECRET"] = "test-session-secret"

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from chef_site.database import Database
from chef_site.errors import DispatchError
from chef_site.main import create_app
from chef_site.models import User
from chef_site.schemas import UserCreate
from chef_site.services.users import UserService

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"


class FakeMailer:
    """Records outgoing mail instead of talking to SMTP; can be told to fail."""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, email):
        if self.fail:
            raise DispatchError("SMTP connection refused")
        self.sent.append(email)


def image_bytes(size=(1200, 900), color=(200, 40, 40), fmt="PNG"):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


async def _insert_user(url, email, password, role, is_active):
    database = Database(url)
    await database.connect()
    try:
        await database.init_schema()
        users = UserService(database)
        user = await users.create(UserCreate(
            first_name="Test",
            last_name="User",
            email=email,
            password=password,
            role=role,
        ))
        if not is_active:
            async with database.session() as session:
                stored = await session.get(User, user.id)
                stored.is_active = False
        return user
    finally:
        await database.dispose()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def upload_root(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def app(database_url, upload_root, mailer):
    return create_app(mailer=mailer, database=Database(database_url), upload_root=upload_root)


@pytest.fixture
def client(app):
    # The context manager runs the lifespan (schema creation)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(database_url):
    """Create a user directly in the test database."""

    def _make_user(email=ADMIN_EMAIL, password=ADMIN_PASSWORD, role="admin", is_active=True):
        return asyncio.run(_insert_user(database_url, email, password, role, is_active))

    return _make_user


def login(client, email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response


@pytest.fixture
def admin_client(client, make_user):
    """A client with a signed-in admin session."""
    make_user()
    login(client)
    return client


def files_in(directory: Path):
    return sorted(p.name for p in directory.iterdir()) if directory.exists() else []

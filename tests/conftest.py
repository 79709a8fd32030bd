import os
import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("SECRET_KEY", "test-secret-key-min-32-characters-long")
os.environ.setdefault("PLATFORM_ADMIN_EMAIL", "admin@rewear.com")


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory MongoDB bound to the Beanie models."""
    from mongomock_motor import AsyncMongoMockClient

    from rewear.db.init import init_db
    client = AsyncMongoMockClient()
    database = client[f"rewear_test_{uuid.uuid4().hex}"]
    await init_db(database)
    yield database


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    from rewear.core.config import get_settings
    path = tmp_path / "uploads"
    monkeypatch.setattr(get_settings(), "storage_local_path", str(path))
    return path


@pytest_asyncio.fixture
async def client(db) -> AsyncGenerator[AsyncClient, None]:
    from rewear.main import app
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def admin(db):
    from rewear.services.users import ensure_platform_admin
    user, _ = await ensure_platform_admin()
    return user


@pytest.fixture(scope="session")
def password_hash():
    from rewear.core.security import hash_password
    return hash_password("secret123")


@pytest_asyncio.fixture
async def make_user(db, password_hash):
    from rewear.models.user import Role, User

    async def _make(name: str = "user", points: int = 100, role: Role = Role.USER) -> User:
        user = User(
            email=f"{name}-{uuid.uuid4().hex[:8]}@example.com",
            password_hash=password_hash,
            name=name,
            points=points,
            role=role,
        )
        await user.insert()
        return user

    return _make


@pytest_asyncio.fixture
async def make_item(db):
    from rewear.models.item import Item

    async def _make(owner, status: str = "approved", available: bool = True) -> Item:
        item = Item(
            owner_id=owner.id,
            title="Denim jacket",
            description="Lightly worn",
            category="outerwear",
            type="jacket",
            size="M",
            condition="good",
            status=status,
            available=available,
        )
        await item.insert()
        return item

    return _make


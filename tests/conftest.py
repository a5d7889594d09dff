"""Shared fixtures: in-memory database, API client, users and a mail outbox.

Invariants:
    - Every test that asks for ``db`` gets a fresh in-memory SQLite database
    - The event channel is the in-process backend and is rebuilt per test
    - No e-mail leaves the process; sends are recorded on an AsyncMock
"""

from unittest.mock import AsyncMock
from weakref import WeakValueDictionary

import pytest
from httpx import ASGITransport, AsyncClient

from eats.core.config import settings
from eats.core.database import close_db, init_db
from eats.core.security import create_access_token
from eats.main import app
from eats.models.restaurant import Restaurant
from eats.models.user import User, UserRole
from eats.services.category_service import CategoryService
from eats.services.events import reset_pubsub
from eats.services.mail_service import MailService


@pytest.fixture
async def db():
    await init_db("sqlite://:memory:")
    yield
    await close_db()


@pytest.fixture(autouse=True)
def pubsub(monkeypatch):
    """Fresh in-process event channel for each test."""
    monkeypatch.setattr(settings, "PUBSUB_BACKEND", "memory")
    reset_pubsub()
    yield
    reset_pubsub()


@pytest.fixture(autouse=True)
def category_locks(monkeypatch):
    # Locks bind to the loop that first waits on them; each test has its own loop.
    monkeypatch.setattr(CategoryService, "_locks", WeakValueDictionary())


@pytest.fixture(autouse=True)
def mail_outbox(monkeypatch):
    """Record verification e-mails instead of calling Mailgun."""
    send = AsyncMock(return_value=True)
    monkeypatch.setattr(MailService, "send_verification_email", send)
    return send


@pytest.fixture
async def client(db):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


async def make_user(email: str, role: UserRole, password: str = "secret") -> User:
    user = User(email=email, role=role)
    user.set_password(password)
    await user.save()
    return user


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
async def owner(db):
    return await make_user("owner@eats.io", UserRole.OWNER)


@pytest.fixture
async def other_owner(db):
    return await make_user("rival@eats.io", UserRole.OWNER)


@pytest.fixture
async def customer(db):
    return await make_user("client@eats.io", UserRole.CLIENT)


@pytest.fixture
async def driver(db):
    return await make_user("driver@eats.io", UserRole.DELIVERY)


@pytest.fixture
async def restaurant(owner):
    return await Restaurant.create(name="Seoul Garden", address="1 Main St", owner=owner)


@pytest.fixture
def headers_for():
    """Authorization headers for a user."""
    return auth_headers

"""
Pytest fixtures for the Fintech Index API tests.

The app runs in-process against a temp-file SQLite database; the
notification dispatcher is replaced by a recorder.
"""

import os
import tempfile
from typing import AsyncGenerator, List, Optional, Tuple

# Use file-based SQLite so all connections share the same DB (in-memory is per-connection)
_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
TEST_DB_PATH = _tmp.name
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SMTP_HOST"] = ""
os.environ["SMS_API_KEY"] = ""
os.environ["CHECK_EMAIL_DELIVERABILITY"] = "false"

# Force config reload so app uses test DB
from fintech_index.config import get_settings  # noqa: E402

get_settings.cache_clear()

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from fintech_index.database import async_session_maker, engine  # noqa: E402
from fintech_index.kernel.identity.jwt import get_token_manager  # noqa: E402
from fintech_index.kernel.identity.password import hash_password  # noqa: E402
from fintech_index.kernel.models import Base, User  # noqa: E402
from fintech_index.kernel.notifications.dispatcher import get_dispatcher  # noqa: E402
from fintech_index.kernel.notifications.messages import Notice  # noqa: E402
from fintech_index.main import app  # noqa: E402


class RecordingDispatcher:
    """Stands in for NotificationDispatcher; keeps every notice it is given."""

    def __init__(self):
        self.admin: List[Notice] = []
        self.users: List[Tuple[str, Notice, Optional[str]]] = []

    async def notify_admin(self, notice: Notice) -> None:
        self.admin.append(notice)

    async def notify_user(self, email: str, notice: Notice, phone: Optional[str] = None) -> None:
        self.users.append((email, notice, phone))

    @property
    def admin_subjects(self) -> List[str]:
        return [n.subject for n in self.admin]


@pytest.fixture
def notifications() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest_asyncio.fixture
async def client(notifications: RecordingDispatcher) -> AsyncGenerator[AsyncClient, None]:
    """Async client over a fresh schema."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    app.dependency_overrides[get_dispatcher] = lambda: notifications
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_dispatcher, None)


async def create_user(
    email: str,
    role: str = "viewer",
    password: str = "secret123",
    verified: bool = True,
    name: str = "Test User",
) -> User:
    """Insert a user directly, bypassing the API."""
    async with async_session_maker() as session:
        user = User(
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=role,
            is_verified=verified,
        )
        session.add(user)
        await session.commit()
        return user


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {get_token_manager().issue_for(user)}"}


@pytest_asyncio.fixture
async def admin_user(client) -> User:
    return await create_user("admin@example.com", role="admin", name="Test Admin")


@pytest_asyncio.fixture
async def editor_user(client) -> User:
    return await create_user("editor@example.com", role="editor", name="Test Editor")


@pytest_asyncio.fixture
async def viewer_user(client) -> User:
    return await create_user("viewer@example.com", role="viewer", name="Test Viewer")


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return bearer(admin_user)


@pytest.fixture
def editor_headers(editor_user: User) -> dict:
    return bearer(editor_user)


@pytest.fixture
def viewer_headers(viewer_user: User) -> dict:
    return bearer(viewer_user)


def country_row(country_id: str = "NGA", year: int = 2024, **overrides) -> dict:
    """Wire-format country-data record."""
    row = {
        "countryId": country_id,
        "name": {"NGA": "Nigeria", "KEN": "Kenya", "GHA": "Ghana", "ZAF": "South Africa"}.get(country_id, country_id),
        "year": year,
        "finalScore": 70.5,
        "literacyRate": 62.0,
        "digitalInfrastructure": 55.0,
        "investment": 80.0,
    }
    row.update(overrides)
    return row

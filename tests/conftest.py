"""
Pytest Configuration and Fixtures

Shared fixtures: in-memory SQLite storage, a recording summarizer,
bearer tokens for two users and an ASGI-backed HTTP client.
"""

import os

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Test environment defaults: MUST be set before any quillnote imports.
#
# Settings() is built at import time and JWT_SECRET_KEY has no default.
# ---------------------------------------------------------------------------
load_dotenv()  # .env → os.environ (no-op if file is missing)

_test_env = {
    "JWT_SECRET_KEY": "test-secret-key",
    "DATABASE_URL": "sqlite+aiosqlite://",
    "OPENAI_API_KEY": "mock",
}
for _key, _value in _test_env.items():
    os.environ.setdefault(_key, _value)

# ---------------------------------------------------------------------------
# Imports (safe now that env vars are set)
# ---------------------------------------------------------------------------
from collections.abc import AsyncGenerator, Callable  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from quillnote.core.database import get_db  # noqa: E402
from quillnote.core.dependencies import get_summarizer  # noqa: E402
from quillnote.core.exceptions import SummarizationFailed  # noqa: E402
from quillnote.core.security import create_access_token  # noqa: E402
from quillnote.main import app  # noqa: E402
from quillnote.models import Base  # noqa: E402
from quillnote.schemas.notes import SummaryFormat  # noqa: E402

ALICE = "user-alice"
BOB = "user-bob"


class RecordingSummarizer:
    """Summarization port double: records calls, can be told to fail."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, SummaryFormat]] = []
        self.fail = False

    async def __call__(self, text: str, format_kind: SummaryFormat) -> str:
        self.calls.append((text, format_kind))
        if self.fail:
            raise SummarizationFailed(detail="provider down")
        return f"{SummaryFormat(format_kind).value}: {text[:30]}"


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """
    Fresh in-memory database per test.

    StaticPool keeps the single SQLite connection alive across sessions,
    otherwise every session would see an empty database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def summarizer() -> RecordingSummarizer:
    return RecordingSummarizer()


@pytest.fixture
def alice_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(ALICE)}"}


@pytest.fixture
def bob_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(BOB)}"}


@pytest_asyncio.fixture
async def client_factory(
    session_factory: async_sessionmaker[AsyncSession],
    summarizer: RecordingSummarizer,
) -> AsyncGenerator[Callable[..., httpx.AsyncClient], None]:
    """
    Build HTTP clients wired straight to the ASGI app (no server, no lifespan).

    Database and summarizer dependencies point at the test doubles.
    Clients are closed at teardown.
    """

    async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_summarizer] = lambda: summarizer

    clients: list[httpx.AsyncClient] = []

    def _make(headers: dict[str, str] | None = None) -> httpx.AsyncClient:
        client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://test",
            headers=headers,
        )
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(client_factory) -> httpx.AsyncClient:
    """Anonymous client; pass headers per request."""
    return client_factory()

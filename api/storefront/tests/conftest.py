"""Shared pytest fixtures: stub backend, isolated favorites database and API client."""

from __future__ import annotations

import pytest
import pytest_asyncio
from fastapi import Request
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from storefront.api.deps import get_backend_client, get_db
from storefront.backend.client import BackendClient
from storefront.core.config import settings
from storefront.db.base import Base
from storefront.forms.session import form_registry
from storefront.main import app
from storefront.tests.utils import BACKEND_BASE, StubBackend


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "api_base_url", BACKEND_BASE)
    monkeypatch.setattr(settings, "backend_read_attempts", 1)
    monkeypatch.setattr(settings, "environment", "test")
    form_registry.clear()
    yield
    form_registry.clear()


@pytest.fixture()
def backend() -> StubBackend:
    return StubBackend()


@pytest.fixture()
def backend_client(backend: StubBackend) -> BackendClient:
    return BackendClient(transport=backend.transport)


@pytest_asyncio.fixture()
async def session(tmp_path) -> AsyncSession:
    database_url = settings.test_database_url or f"sqlite+aiosqlite:///{tmp_path / 'favorites.db'}"
    engine = create_async_engine(database_url, future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    TestingSession = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    try:
        async with TestingSession() as session:
            yield session
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()


@pytest_asyncio.fixture()
async def client(session: AsyncSession, backend: StubBackend) -> AsyncClient:
    async def _get_test_db():
        yield session

    def _get_test_backend(request: Request) -> BackendClient:
        return BackendClient(cookies=dict(request.cookies), transport=backend.transport)

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_backend_client] = _get_test_backend
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_backend_client, None)

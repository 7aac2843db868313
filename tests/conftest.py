from __future__ import annotations

from collections.abc import AsyncIterator, Generator
from pathlib import Path
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mindmate.app.core import config
from mindmate.db import create_engine, create_session_factory, init_db


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def test_client(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[TestClient, None, None]:
    monkeypatch.setenv("VERSION", "0.1.0-test")
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "logs" / "mindmate.log"))
    db_path = tmp_path / f"api_{uuid4().hex}.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    config.get_settings.cache_clear()

    from mindmate.app.main import app

    with TestClient(app) as client:
        client.headers.update({"X-MindMate-User": "user-123"})
        yield client
    config.get_settings.cache_clear()


@pytest.fixture()
async def temp_session_factory(
    tmp_path: Path, anyio_backend: str
) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    db_path = tmp_path / f"unit_{uuid4().hex}.db"
    engine = create_engine(f"sqlite+aiosqlite:///{db_path}")
    session_factory = create_session_factory(engine)
    await init_db(engine, session_factory, "test")
    try:
        yield session_factory
    finally:
        await engine.dispose()

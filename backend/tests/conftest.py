import tempfile
from contextlib import suppress
from pathlib import Path
from typing import AsyncIterator, Iterator

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlmodel import Session, SQLModel, create_engine

from handlog.core import database as core_database
from handlog.core.database import get_session
from handlog.main import create_app


@pytest.fixture(scope="function")
def engine():
    # Use a fresh SQLite DB file in a temp dir per test for isolation
    tmp = tempfile.TemporaryDirectory()
    db_path = Path(tmp.name) / "test.db"
    test_engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})

    from handlog import models  # noqa: F401
    SQLModel.metadata.create_all(test_engine)

    try:
        yield test_engine
    finally:
        with suppress(Exception):
            test_engine.dispose()
        tmp.cleanup()


@pytest.fixture(scope="function")
def test_app(monkeypatch, engine) -> Iterator[FastAPI]:
    def _override_get_session():
        with Session(engine) as session:
            yield session

    # patch global engine/init_db so startup hooks and health checks use the test database
    monkeypatch.setattr(core_database, "engine", engine, raising=False)

    def _init_db():
        SQLModel.metadata.create_all(engine)

    monkeypatch.setattr(core_database, "init_db", _init_db, raising=False)

    app = create_app()
    app.dependency_overrides[get_session] = _override_get_session

    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def db_session(engine):
    with Session(engine) as session:
        yield session

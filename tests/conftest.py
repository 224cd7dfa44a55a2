"""
Shared fixtures: a fresh SQLite database per test and a TestClient whose
lifespan creates the schema and disposes the engine.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select, update
from sqlalchemy.exc import OperationalError

from keychat.config import Config, DBConfig, LogConfig, ServerConfig
from keychat.core.database import ApiKey, Message
from keychat.core.db_manager import DatabaseManager
from keychat.main import create_app


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(
        server=ServerConfig(host="127.0.0.1", port=8000),
        db=DBConfig(path=str(tmp_path / "keychat.db")),
        log=LogConfig(level="DEBUG"),
    )


@pytest.fixture
def client(config: Config) -> Generator[TestClient, None, None]:
    app = asyncio.run(create_app(config))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
async def db_manager(config: Config):
    manager = DatabaseManager(config)
    await manager.initialize()
    await manager.create_tables()
    yield manager
    await manager.close()


def register(client: TestClient, username: str, email: str | None = None) -> tuple[int, str]:
    response = client.post(
        "/register",
        json={"username": username, "email": email or f"{username}@example.com"},
    )
    assert response.status_code == 200, response.text
    data = response.json()["data"]
    return data["id"], data["key"]


def bearer(key: str) -> dict:
    return {"Authorization": f"Bearer {key}"}


def set_key_active(config: Config, key: str, active: bool) -> None:
    """Flip an api key's active flag through a separate engine."""
    async def _update():
        manager = DatabaseManager(config)
        async with manager.session() as session:
            await session.execute(
                update(ApiKey).where(ApiKey.key == key).values(active=active)
            )
        await manager.close()

    asyncio.run(_update())


def count_messages(config: Config) -> int:
    async def _count():
        manager = DatabaseManager(config)
        async with manager.session() as session:
            result = await session.execute(select(func.count()).select_from(Message))
            count = result.scalar_one()
        await manager.close()
        return count

    return asyncio.run(_count())


class UnreachableDatabaseManager:
    """Stands in for the database manager when the store is down."""

    @asynccontextmanager
    async def session(self):
        raise OperationalError("SELECT 1", {}, Exception("unable to open database file"))
        yield


def break_store(monkeypatch, gateway_cls) -> None:
    """Make every new ``gateway_cls`` talk to an unreachable database."""
    original_init = gateway_cls.__init__

    def init(self, db_manager, logger=None):
        original_init(self, UnreachableDatabaseManager(), logger)

    monkeypatch.setattr(gateway_cls, "__init__", init)

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator
import logging

from keychat.config import Config
from .database import Base


class BaseDatabaseManager:
    def __init__(self, config: Config):
        self.config = config
        self.engine = None
        self.session_factory = None
        self._logger = logging.getLogger(__name__)

    async def initialize(self):
        raise NotImplementedError()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        if not self.engine:
            await self.initialize()

        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def create_tables(self):
        if not self.engine:
            await self.initialize()

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self):
        """
        Dispose of the engine and every pooled connection
        """
        if self.engine:
            await self.engine.dispose()
            self._logger.info("Database engine disposed")
        self.engine = None
        self.session_factory = None


class DatabaseManager(BaseDatabaseManager):
    async def initialize(self):
        if self.config.db.is_sqlite:
            Path(self.config.db.path).parent.mkdir(parents=True, exist_ok=True)
            self.engine = create_async_engine(
                url=self.config.db.url,
                echo=False,
            )
        else:
            self.engine = create_async_engine(
                url=self.config.db.url,
                pool_size=30,
                max_overflow=20,
                pool_pre_ping=True,
                pool_timeout=60,
                pool_recycle=-1,
                echo=False,
            )

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._logger.info(
            "Database engine initialized (%s)",
            "sqlite" if self.config.db.is_sqlite else "postgresql"
        )

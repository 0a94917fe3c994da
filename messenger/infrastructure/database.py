# messenger/infrastructure/database.py
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    pass


def create_engine_for(database_url: str, echo: bool = False) -> AsyncEngine:
    if database_url.split("?", 1)[0].endswith(":memory:"):
        # every session must see the same in-memory database
        return create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(database_url, echo=echo)


class Database:
    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ):
        self.engine = engine
        self.SessionLocal = session_factory or async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def connect(self) -> None:
        """Create any missing tables."""
        async with self.engine.begin() as conn:
            import messenger.infrastructure.models  # noqa: F401

            await conn.run_sync(Base.metadata.create_all)

    async def disconnect(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self.SessionLocal() as session:
            yield session

    async def seed_demo_data(self) -> bool:
        from messenger.infrastructure.demo_data import init_demo_data

        return await init_demo_data(self.SessionLocal)


def create_database(
    engine: AsyncEngine | str,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> Database:
    if isinstance(engine, str):
        engine = create_engine_for(engine)
    return Database(engine, session_factory)

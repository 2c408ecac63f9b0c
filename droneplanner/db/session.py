#!/usr/bin/env python3
import logging
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker


logger = logging.getLogger(__name__)


class Database:
    """Store handle: one async engine plus its session factory.

    Built once per application and closed at shutdown. Connections are
    opened lazily, so constructing a handle never touches the network.
    """

    def __init__(self, url: str, echo: bool = False, timeout: float = 10.0):
        self.url = url
        self.engine = create_async_engine(
            url,
            echo=echo,
            future=True,
            # per-call bound at the driver boundary
            connect_args={"timeout": timeout},
        )
        self.session_factory = sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        yield session

#!/usr/bin/env python3
import asyncio
import logging

from droneplanner.core.config import get_settings
from droneplanner.core.logging_config import setup_logging
from droneplanner.db.models import Base   # imports all models so they're registered
from droneplanner.db.session import Database


logger = logging.getLogger(__name__)


async def create_tables(database: Database, drop: bool = False) -> None:
    async with database.engine.begin() as conn:
        if drop:
            # Drop everything (only dev!)
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    logger.info("All tables created%s", " (dev reset)" if drop else "")


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    database = Database(settings.DATABASE_URL, echo=settings.DEBUG, timeout=settings.DB_TIMEOUT_S)
    try:
        await create_tables(database, drop=True)
    finally:
        await database.close()


if __name__ == "__main__":
    asyncio.run(main())

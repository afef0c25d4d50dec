"""
Пул соединений PostgreSQL
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import asyncpg

from classpass.config import config


# Глобальный пул соединений
_pool: Optional[asyncpg.Pool] = None


async def get_pool() -> asyncpg.Pool:
    """Получить пул соединений (создаёт при первом вызове)"""
    global _pool

    if _pool is None:
        _pool = await asyncpg.create_pool(
            config.DATABASE_URL,
            min_size=config.DB_POOL_MIN_SIZE,
            max_size=config.DB_POOL_MAX_SIZE
        )

    return _pool


async def close_pool():
    """Закрыть пул соединений"""
    global _pool

    if _pool:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def transaction() -> AsyncIterator[asyncpg.Connection]:
    """
    Соединение из пула с открытой транзакцией.

    COMMIT при нормальном выходе из блока, ROLLBACK при любом исключении
    (включая asyncio.CancelledError).
    """
    pool = await get_pool()
    async with pool.acquire() as conn:
        async with conn.transaction():
            yield conn

"""
Автоматические миграции базы данных

Каждый .sql файл из migrations/ применяется ровно один раз: имя файла
записывается в schema_migrations в той же транзакции, что и сама миграция.
"""

import logging
from pathlib import Path
from typing import List

from classpass.database.connection import get_pool

logger = logging.getLogger(__name__)

# Путь к папке с миграциями
MIGRATIONS_DIR = Path(__file__).resolve().parent.parent.parent / "migrations"


async def run_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> List[str]:
    """Выполнить новые SQL-миграции, вернуть имена применённых файлов"""
    pool = await get_pool()

    if not migrations_dir.exists():
        logger.warning(f"Папка миграций не найдена: {migrations_dir}")
        return []

    sql_files = sorted(migrations_dir.glob("*.sql"))
    if not sql_files:
        logger.info("Миграции не найдены")
        return []

    applied = []

    async with pool.acquire() as conn:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
            """
        )
        done = {
            row["name"]
            for row in await conn.fetch("SELECT name FROM schema_migrations")
        }

        for sql_file in sql_files:
            if sql_file.name in done:
                continue

            logger.info(f"Выполняю миграцию: {sql_file.name}")
            try:
                async with conn.transaction():
                    await conn.execute(sql_file.read_text(encoding="utf-8"))
                    await conn.execute(
                        "INSERT INTO schema_migrations (name) VALUES ($1) "
                        "ON CONFLICT (name) DO NOTHING",
                        sql_file.name
                    )
            except Exception as e:
                logger.error(f"✗ Ошибка в {sql_file.name}: {e}")
                raise

            applied.append(sql_file.name)
            logger.info(f"✓ Миграция {sql_file.name} выполнена")

    return applied

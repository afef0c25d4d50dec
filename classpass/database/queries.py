"""
SQL-запросы к базе данных

Функции, которые участвуют в транзакции погашения кода, принимают
необязательный conn (asyncpg.Connection). Без него запрос идёт через пул.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List, Union

import asyncpg

from classpass.database.connection import get_pool
from classpass.database.models import (
    ClassInfo, AccessCode, AccessCodeInfo, Enrollment, EnrolledClass
)

Executor = Union[asyncpg.Pool, asyncpg.Connection]


async def _executor(conn: Optional[asyncpg.Connection]) -> Executor:
    if conn is not None:
        return conn
    return await get_pool()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================
# Classes (read-model)
# ============================================

async def get_class(class_id: int) -> Optional[ClassInfo]:
    """Получить класс по ID"""
    pool = await get_pool()
    row = await pool.fetchrow(
        "SELECT id, title, video_url, price, is_free, created_at FROM classes WHERE id = $1",
        class_id
    )
    if row:
        return ClassInfo(**dict(row))
    return None


# ============================================
# Access Codes
# ============================================

def generate_code() -> str:
    """Новый токен: первые 8 символов UUID4 в верхнем регистре"""
    return uuid.uuid4().hex[:8].upper()


async def get_access_code(
    code: str,
    conn: Optional[asyncpg.Connection] = None
) -> Optional[AccessCode]:
    """Получить код доступа (сравнение с учётом регистра)"""
    executor = await _executor(conn)
    row = await executor.fetchrow(
        "SELECT * FROM access_codes WHERE code = $1",
        code
    )
    if row:
        return AccessCode(**dict(row))
    return None


async def mark_code_used(
    code: str,
    user_id: int,
    now: Optional[datetime] = None,
    conn: Optional[asyncpg.Connection] = None
) -> Optional[AccessCode]:
    """
    Пометить код использованным (compare-and-set).

    Обновляет строку только если код ещё не использован. None — код уже
    занят (кем угодно, в том числе этим же пользователем).
    """
    executor = await _executor(conn)
    row = await executor.fetchrow(
        """
        UPDATE access_codes
        SET is_used = TRUE, used_by = $2, used_at = $3
        WHERE code = $1 AND is_used = FALSE
        RETURNING *
        """,
        code, user_id, now or utcnow()
    )
    if row:
        return AccessCode(**dict(row))
    return None


async def create_access_code(
    class_id: int,
    price: Decimal,
    code: Optional[str] = None
) -> Optional[AccessCode]:
    """Создать новый код доступа. None — такой код уже существует"""
    pool = await get_pool()
    row = await pool.fetchrow(
        """
        INSERT INTO access_codes (code, class_id, price)
        VALUES ($1, $2, $3)
        ON CONFLICT (code) DO NOTHING
        RETURNING *
        """,
        code or generate_code(), class_id, price
    )
    if row:
        return AccessCode(**dict(row))
    return None


async def get_access_codes(only_unused: bool = False, limit: Optional[int] = None) -> List[AccessCodeInfo]:
    """Коды доступа с названием класса, новые первыми"""
    pool = await get_pool()
    rows = await pool.fetch(
        """
        SELECT
            ac.code,
            ac.class_id,
            c.title as class_title,
            ac.price,
            ac.is_used,
            ac.used_by,
            ac.used_at,
            ac.created_at
        FROM access_codes ac
        INNER JOIN classes c ON c.id = ac.class_id
        WHERE NOT $1 OR ac.is_used = FALSE
        ORDER BY ac.created_at DESC, ac.id DESC
        LIMIT $2
        """,
        only_unused, limit
    )
    return [AccessCodeInfo(**dict(row)) for row in rows]


# ============================================
# Enrollments
# ============================================

async def enrollment_exists(
    user_id: int,
    class_id: int,
    conn: Optional[asyncpg.Connection] = None
) -> bool:
    """
    Есть ли зачисление пользователя на класс.

    Тот же подзапрос входит в check_class_access вместе с проверкой
    бесплатного класса, чтобы доступ читался одним запросом.
    """
    executor = await _executor(conn)
    result = await executor.fetchval(
        """
        SELECT EXISTS(
            SELECT 1 FROM enrollments
            WHERE user_id = $1 AND class_id = $2
        )
        """,
        user_id, class_id
    )
    return result or False


async def create_enrollment(
    user_id: int,
    class_id: int,
    now: Optional[datetime] = None,
    conn: Optional[asyncpg.Connection] = None
) -> Optional[Enrollment]:
    """
    Создать зачисление.

    None — пользователь уже зачислен (уникальность user_id, class_id).
    Прочие ошибки БД пробрасываются как есть.
    """
    executor = await _executor(conn)
    row = await executor.fetchrow(
        """
        INSERT INTO enrollments (user_id, class_id, enrolled_at)
        VALUES ($1, $2, $3)
        ON CONFLICT (user_id, class_id) DO NOTHING
        RETURNING *
        """,
        user_id, class_id, now or utcnow()
    )
    if row:
        return Enrollment(**dict(row))
    return None


async def get_user_classes(user_id: int) -> List[EnrolledClass]:
    """Классы, на которые зачислен пользователь"""
    pool = await get_pool()
    rows = await pool.fetch(
        """
        SELECT c.id, c.title, c.video_url, c.is_free, e.enrolled_at
        FROM enrollments e
        INNER JOIN classes c ON c.id = e.class_id
        WHERE e.user_id = $1
        ORDER BY e.enrolled_at DESC, e.id DESC
        """,
        user_id
    )
    return [EnrolledClass(**dict(row)) for row in rows]


# ============================================
# Access
# ============================================

async def check_class_access(user_id: int, class_id: int) -> bool:
    """Класс бесплатный или пользователь зачислен (см. enrollment_exists)"""
    pool = await get_pool()
    has_access = await pool.fetchval(
        """
        SELECT EXISTS(
            SELECT 1 FROM classes
            WHERE id = $2 AND is_free = TRUE
        ) OR EXISTS(
            SELECT 1 FROM enrollments
            WHERE user_id = $1 AND class_id = $2
        )
        """,
        user_id, class_id
    )
    return has_access or False

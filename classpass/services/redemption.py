"""
Погашение кодов доступа

Переход кода UNUSED -> USED и создание зачисления выполняются в одной
транзакции. Повторный запрос того же пользователя с тем же кодом — успех,
а не ошибка.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import asyncpg

from classpass.database import queries as db
from classpass.database.connection import transaction
from classpass.database.models import AccessCode

logger = logging.getLogger(__name__)


class RedeemStatus(str, Enum):
    """Результат погашения кода"""

    # Успех
    REDEEMED = "REDEEMED"                                  # Код погашен сейчас
    ALREADY_REDEEMED_BY_SELF = "ALREADY_REDEEMED_BY_SELF"  # Повтор того же пользователя

    # Ошибки пользователя
    CODE_ALREADY_USED = "CODE_ALREADY_USED"                # Код занят другим
    INVALID_CODE = "INVALID_CODE"                          # Код не найден


@dataclass
class RedeemResult:
    status: RedeemStatus
    class_id: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.status in (RedeemStatus.REDEEMED, RedeemStatus.ALREADY_REDEEMED_BY_SELF)


async def redeem(user_id: int, code: str) -> RedeemResult:
    """Погасить код доступа от имени пользователя"""
    async with transaction() as conn:
        access_code = await db.get_access_code(code, conn=conn)
        if not access_code:
            logger.info(f"Код не найден: {user_id} -> {code}")
            return RedeemResult(RedeemStatus.INVALID_CODE)

        return await _redeem_existing(conn, user_id, access_code, retry=True)


async def _redeem_existing(
    conn: asyncpg.Connection,
    user_id: int,
    access_code: AccessCode,
    retry: bool
) -> RedeemResult:
    class_id = access_code.class_id

    if access_code.is_used:
        if access_code.used_by != user_id:
            logger.info(f"Код уже использован: {user_id} -> {access_code.code} (владелец {access_code.used_by})")
            return RedeemResult(RedeemStatus.CODE_ALREADY_USED, class_id)

        # Повторный запрос: код наш, досоздаём зачисление если его нет
        enrollment = await db.create_enrollment(user_id, class_id, conn=conn)
        if enrollment:
            logger.warning(f"Восстановлено зачисление по погашенному коду: {user_id} -> {class_id}")
        return RedeemResult(RedeemStatus.ALREADY_REDEEMED_BY_SELF, class_id)

    marked = await db.mark_code_used(access_code.code, user_id, conn=conn)
    if not marked:
        # Проиграли гонку: перечитываем код и разбираем ещё раз, один раз
        if not retry:
            logger.warning(f"Повторный конфликт при погашении: {user_id} -> {access_code.code}")
            return RedeemResult(RedeemStatus.CODE_ALREADY_USED, class_id)

        fresh = await db.get_access_code(access_code.code, conn=conn)
        if not fresh:
            return RedeemResult(RedeemStatus.INVALID_CODE)
        return await _redeem_existing(conn, user_id, fresh, retry=False)

    try:
        enrollment = await db.create_enrollment(user_id, class_id, now=marked.used_at, conn=conn)
    except Exception as e:
        # Транзакция откатится, код останется неиспользованным
        logger.error(f"Не удалось создать зачисление по коду {access_code.code} для {user_id}: {e}")
        raise

    if not enrollment:
        logger.info(f"Пользователь уже был зачислен: {user_id} -> {class_id}, код всё равно погашен")

    logger.info(f"Активация кода: {user_id} -> {access_code.code} (класс {class_id})")
    return RedeemResult(RedeemStatus.REDEEMED, class_id)

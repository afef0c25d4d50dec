"""
Зачисление на бесплатные классы
"""

import logging
from dataclasses import dataclass
from enum import Enum

from classpass.database import queries as db

logger = logging.getLogger(__name__)


class EnrollStatus(str, Enum):
    """Результат зачисления"""
    ENROLLED = "ENROLLED"
    ALREADY_ENROLLED = "ALREADY_ENROLLED"


@dataclass
class EnrollResult:
    status: EnrollStatus
    class_id: int


async def enroll_free(user_id: int, class_id: int) -> EnrollResult:
    """
    Зачислить пользователя на класс (идемпотентно).

    Цену класса здесь не проверяем — это делает вызывающий код через get_class.
    """
    enrollment = await db.create_enrollment(user_id, class_id)

    if enrollment is None:
        logger.info(f"Повторное зачисление: {user_id} -> {class_id}")
        return EnrollResult(EnrollStatus.ALREADY_ENROLLED, class_id)

    logger.info(f"Зачисление на бесплатный класс: {user_id} -> {class_id}")
    return EnrollResult(EnrollStatus.ENROLLED, class_id)

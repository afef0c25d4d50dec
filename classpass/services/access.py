"""
Проверка доступа к классу
"""

from classpass.database import queries as db


async def has_access(user_id: int, class_id: int, is_admin: bool = False) -> bool:
    """
    Может ли пользователь смотреть класс.

    Доступ есть у администратора, у всех для бесплатного класса и у
    зачисленных на платный. Только чтение.
    """
    if is_admin:
        return True

    return await db.check_class_access(user_id, class_id)

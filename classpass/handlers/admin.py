"""
Админ-команды
"""

import functools
import logging
from decimal import Decimal, InvalidOperation

from telegram import Update
from telegram.ext import ContextTypes

from classpass.config import config
from classpass.database import queries as db
from classpass.database.models import AccessCodeInfo

logger = logging.getLogger(__name__)

CODES_LIMIT = 20


def admin_only(func):
    """Декоратор: только для админов"""
    @functools.wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE):
        user_id = update.effective_user.id
        if not config.is_admin(user_id):
            await update.message.reply_text("Нет доступа")
            return
        return await func(update, context)
    return wrapper


@admin_only
async def add_code_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Добавить код доступа: /add_code <id класса> <цена> [код]"""
    if len(context.args) < 2:
        await update.message.reply_text("Использование: /add_code <id класса> <цена> [код]")
        return

    try:
        class_id = int(context.args[0])
        price = Decimal(context.args[1])
    except (ValueError, InvalidOperation):
        await update.message.reply_text("Неверные параметры")
        return

    # NaN и Infinity парсятся, но в цену не годятся
    if not price.is_finite():
        await update.message.reply_text("Неверные параметры")
        return

    if price < 0:
        await update.message.reply_text("Цена не может быть отрицательной")
        return

    code = context.args[2] if len(context.args) > 2 else None

    try:
        cls = await db.get_class(class_id)
        if not cls:
            await update.message.reply_text("Класс не найден")
            return

        access_code = await db.create_access_code(class_id, price, code)
    except Exception as e:
        logger.error(f"Ошибка добавления кода для класса {class_id}: {e}")
        await update.message.reply_text("Не удалось добавить код. Попробуйте позже.")
        return

    if not access_code:
        await update.message.reply_text(f"Код уже существует: {code}")
        return

    logger.info(f"Добавлен код доступа: {access_code.code} (класс {class_id})")

    await update.message.reply_text(
        f"Код добавлен: {access_code.code}\nКласс: {cls.title}\nЦена: {access_code.price}"
    )


def format_code(c: AccessCodeInfo) -> str:
    line = f"{c.code} — {c.class_title} ({c.price})"
    if c.is_used:
        used_at = c.used_at.strftime("%d.%m.%Y %H:%M") if c.used_at else "?"
        line += f" — использован {c.used_by}, {used_at}"
    return line


@admin_only
async def codes_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """
    Список кодов: /codes — свободные, /codes all — все, с владельцами
    """
    show_all = bool(context.args) and context.args[0].lower() == "all"

    try:
        codes = await db.get_access_codes(only_unused=not show_all, limit=CODES_LIMIT)
    except Exception as e:
        logger.error(f"Ошибка получения списка кодов: {e}")
        await update.message.reply_text("Не удалось загрузить коды. Попробуйте позже.")
        return

    if not codes:
        await update.message.reply_text("Кодов нет" if show_all else "Нет свободных кодов")
        return

    title = "Все коды:" if show_all else "Свободные коды:"
    text = title + "\n" + "\n".join(format_code(c) for c in codes)

    await update.message.reply_text(text)

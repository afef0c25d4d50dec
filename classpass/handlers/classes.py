"""
Обработчики записи на классы и просмотра
"""

import logging
from typing import Optional

from telegram import LinkPreviewOptions, Update
from telegram.ext import ContextTypes

from classpass.config import config
from classpass.keyboards import watch_keyboard, my_classes_keyboard
from classpass.database import queries as db
from classpass.services.access import has_access
from classpass.services.enrollment import enroll_free, EnrollStatus

logger = logging.getLogger(__name__)

NO_PREVIEW = LinkPreviewOptions(is_disabled=True)


def parse_class_id(args) -> Optional[int]:
    """ID класса из аргументов команды"""
    if not args:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


async def enroll_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка /enroll <id класса>"""
    class_id = parse_class_id(context.args)
    if class_id is None:
        await update.message.reply_text("Использование: /enroll <id класса>")
        return

    tg_id = update.effective_user.id

    try:
        cls = await db.get_class(class_id)
        if not cls:
            await update.message.reply_text("Класс не найден.")
            return

        if not cls.is_free:
            await update.message.reply_text(
                "Это платный класс. Для доступа активируйте код: /redeem <код>"
            )
            return

        result = await enroll_free(tg_id, class_id)
    except Exception as e:
        logger.error(f"Ошибка записи на класс {tg_id} -> {class_id}: {e}")
        await update.message.reply_text("Не удалось записаться. Попробуйте позже.")
        return

    if result.status == EnrollStatus.ENROLLED:
        text = f"Вы записаны на класс «{cls.title}»!"
    else:
        text = f"Вы уже записаны на класс «{cls.title}»."

    await update.message.reply_text(text, reply_markup=watch_keyboard(class_id))


async def watch_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка /watch <id класса>"""
    class_id = parse_class_id(context.args)
    if class_id is None:
        await update.message.reply_text("Использование: /watch <id класса>")
        return

    text = await watch_text(update.effective_user.id, class_id)
    await update.message.reply_text(text, link_preview_options=NO_PREVIEW)


async def watch_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Callback: кнопка «Смотреть»"""
    query = update.callback_query
    await query.answer()

    data = query.data  # watch:42
    class_id = int(data.split(":")[1])

    text = await watch_text(query.from_user.id, class_id)
    await query.edit_message_text(text, link_preview_options=NO_PREVIEW)


async def watch_text(tg_id: int, class_id: int) -> str:
    """Текст ответа на запрос просмотра класса"""
    try:
        cls = await db.get_class(class_id)
        if not cls:
            return "Класс не найден."

        allowed = await has_access(tg_id, class_id, is_admin=config.is_admin(tg_id))
    except Exception as e:
        logger.error(f"Ошибка проверки доступа {tg_id} -> {class_id}: {e}")
        return "Не удалось проверить доступ. Попробуйте позже."

    if not allowed:
        return (
            f"Нет доступа к классу «{cls.title}».\n\n"
            "Активируйте код доступа: /redeem <код>"
        )

    if not cls.video_url:
        return f"«{cls.title}»: видео пока не загружено."

    return f"«{cls.title}»\n\nВидео: {cls.video_url}"


async def my_classes_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка /my_classes"""
    tg_id = update.effective_user.id

    try:
        classes = await db.get_user_classes(tg_id)
    except Exception as e:
        logger.error(f"Ошибка получения классов {tg_id}: {e}")
        await update.message.reply_text("Не удалось загрузить классы. Попробуйте позже.")
        return

    if not classes:
        await update.message.reply_text(
            "У вас пока нет классов.\n\n"
            "/enroll <id класса> — бесплатный класс\n"
            "/redeem <код> — платный класс по коду"
        )
        return

    await update.message.reply_text(
        f"Ваши классы ({len(classes)}):",
        reply_markup=my_classes_keyboard(classes)
    )

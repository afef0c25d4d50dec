"""
Главная точка входа бота
"""

import logging

from telegram.ext import (
    Application,
    CommandHandler,
    CallbackQueryHandler,
)

from classpass.config import config
from classpass.database.connection import get_pool, close_pool
from classpass.database.migrations import run_migrations

# Хендлеры
from classpass.handlers.start import start_handler, redeem_handler
from classpass.handlers.classes import (
    enroll_handler,
    watch_handler,
    watch_callback,
    my_classes_handler
)
from classpass.handlers.admin import add_code_handler, codes_handler


# Настройка логирования
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO
)
logger = logging.getLogger(__name__)


def register_handlers(app: Application):
    """Регистрация всех хендлеров"""

    # Команды пользователей
    app.add_handler(CommandHandler("start", start_handler))
    app.add_handler(CommandHandler("redeem", redeem_handler))
    app.add_handler(CommandHandler("enroll", enroll_handler))
    app.add_handler(CommandHandler("watch", watch_handler))
    app.add_handler(CommandHandler("my_classes", my_classes_handler))

    # Админ-команды
    app.add_handler(CommandHandler("add_code", add_code_handler))
    app.add_handler(CommandHandler("codes", codes_handler))

    # Callbacks
    app.add_handler(CallbackQueryHandler(watch_callback, pattern=r"^watch:\d+$"))


async def post_init(app: Application):
    """Инициализация после запуска"""
    await get_pool()
    applied = await run_migrations()
    logger.info(f"База данных подключена, применено миграций: {len(applied)}")


async def post_shutdown(app: Application):
    """Очистка при завершении"""
    await close_pool()
    logger.info("Соединение с БД закрыто")


def main():
    """Запуск бота"""

    # Проверка конфигурации
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Ошибка конфигурации: {error}")
        return

    app = (
        Application.builder()
        .token(config.BOT_TOKEN)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )

    register_handlers(app)

    logger.info("Бот запущен!")

    app.run_polling(allowed_updates=["message", "callback_query"])


if __name__ == "__main__":
    main()

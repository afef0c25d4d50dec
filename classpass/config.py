"""
Конфигурация — загрузка переменных окружения
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Загружаем .env из корня проекта
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")


class Config:
    """Конфигурация приложения"""

    # --- Telegram ---
    BOT_TOKEN: str = os.getenv("BOT_TOKEN", "")
    ADMIN_IDS: list[int] = [
        int(id_.strip())
        for id_ in os.getenv("ADMIN_IDS", "").split(",")
        if id_.strip()
    ]

    # --- Database ---
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    DB_POOL_MIN_SIZE: int = int(os.getenv("DB_POOL_MIN_SIZE", "2"))
    DB_POOL_MAX_SIZE: int = int(os.getenv("DB_POOL_MAX_SIZE", "10"))

    @classmethod
    def validate(cls) -> list[str]:
        """Проверка обязательных переменных"""
        errors = []

        if not cls.BOT_TOKEN:
            errors.append("BOT_TOKEN не задан")
        if not cls.DATABASE_URL:
            errors.append("DATABASE_URL не задан")
        if cls.DB_POOL_MIN_SIZE > cls.DB_POOL_MAX_SIZE:
            errors.append("DB_POOL_MIN_SIZE больше DB_POOL_MAX_SIZE")

        return errors

    @classmethod
    def is_admin(cls, user_id: int) -> bool:
        """Есть ли у пользователя права администратора"""
        return user_id in cls.ADMIN_IDS


# Синглтон конфигурации
config = Config()

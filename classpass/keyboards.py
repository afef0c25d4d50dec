"""
Клавиатуры бота
"""

from typing import List

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from classpass.database.models import EnrolledClass


# ============================================
# Класс
# ============================================

def watch_keyboard(class_id: int) -> InlineKeyboardMarkup:
    """Кнопка просмотра класса"""
    return InlineKeyboardMarkup([
        [InlineKeyboardButton("▶️ Смотреть", callback_data=f"watch:{class_id}")]
    ])


def my_classes_keyboard(classes: List[EnrolledClass]) -> InlineKeyboardMarkup:
    """По кнопке на каждый класс пользователя"""
    return InlineKeyboardMarkup([
        [InlineKeyboardButton(f"▶️ {cls.title}", callback_data=f"watch:{cls.id}")]
        for cls in classes
    ])

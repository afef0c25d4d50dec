"""
Обработчик /start и активации по коду доступа
"""

import logging
from telegram import Update
from telegram.ext import ContextTypes

from classpass.keyboards import watch_keyboard
from classpass.services.redemption import redeem, RedeemStatus

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Команды:\n"
    "/redeem <код> — активировать код доступа к платному классу\n"
    "/enroll <id класса> — записаться на бесплатный класс\n"
    "/watch <id класса> — смотреть класс\n"
    "/my_classes — мои классы"
)

REDEEM_MESSAGES = {
    RedeemStatus.REDEEMED: "Код активирован! Класс добавлен в ваши классы.",
    RedeemStatus.ALREADY_REDEEMED_BY_SELF: "Вы уже активировали этот код. Класс доступен в ваших классах.",
    RedeemStatus.CODE_ALREADY_USED: "Этот код уже использован.",
    RedeemStatus.INVALID_CODE: "Код не найден. Проверьте правильность ввода.",
}


async def start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка команды /start"""
    full_name = update.effective_user.full_name or ""

    await update.message.reply_text(
        f"Добро пожаловать, {full_name}!\n\n{HELP_TEXT}"
    )


async def redeem_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка /redeem <код>"""
    if not context.args:
        await update.message.reply_text("Использование: /redeem <код>")
        return

    tg_id = update.effective_user.id
    # PTB уже разбил аргументы по пробелам; регистр не трогаем
    code = context.args[0]

    try:
        result = await redeem(tg_id, code)
    except Exception as e:
        logger.error(f"Ошибка активации кода {tg_id} -> {code}: {e}")
        await update.message.reply_text("Не удалось активировать код. Попробуйте позже.")
        return

    text = REDEEM_MESSAGES[result.status]
    if result.success:
        await update.message.reply_text(text, reply_markup=watch_keyboard(result.class_id))
    else:
        await update.message.reply_text(text)

"""
Модели данных (dataclasses)
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class CodeState(str, Enum):
    """Состояние кода доступа"""
    UNUSED = "UNUSED"
    USED = "USED"


@dataclass
class ClassInfo:
    """Класс (видеоурок) — только чтение"""
    id: int
    title: str
    video_url: Optional[str]
    price: Decimal
    is_free: bool
    created_at: datetime


@dataclass
class AccessCode:
    """Код доступа к платному классу"""
    id: int
    code: str
    class_id: int
    price: Decimal
    is_used: bool
    used_by: Optional[int]
    used_at: Optional[datetime]
    created_at: datetime

    @property
    def state(self) -> CodeState:
        return CodeState.USED if self.is_used else CodeState.UNUSED


@dataclass
class AccessCodeInfo:
    """Код доступа с названием класса (для админа)"""
    code: str
    class_id: int
    class_title: str
    price: Decimal
    is_used: bool
    used_by: Optional[int]
    used_at: Optional[datetime]
    created_at: datetime


@dataclass
class Enrollment:
    """Зачисление на класс"""
    id: int
    user_id: int
    class_id: int
    enrolled_at: datetime


@dataclass
class EnrolledClass:
    """Класс из списка «Мои классы»"""
    id: int
    title: str
    video_url: Optional[str]
    is_free: bool
    enrolled_at: datetime

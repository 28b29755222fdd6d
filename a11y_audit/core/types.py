"""Общие перечисления для аудита доступности."""

from enum import Enum


class DisplayMode(str, Enum):
    """Режим отображения проверки Lighthouse (scoreDisplayMode)."""

    BINARY = "binary"
    NUMERIC = "numeric"
    MANUAL = "manual"
    NOT_APPLICABLE = "notApplicable"
    INFORMATIVE = "informative"
    ERROR = "error"


class FailurePolicy(str, Enum):
    """Что делать с пакетом URL, если один из аудитов упал."""

    ABORT = "abort"      # всё или ничего (поведение по умолчанию)
    PARTIAL = "partial"  # вернуть то, что успели, плюс список ошибок

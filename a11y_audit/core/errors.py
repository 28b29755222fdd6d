"""Исключения аудита."""


class AuditError(Exception):
    """Базовая ошибка обработки одного URL."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url
        self.message = message


class AuditRunnerError(AuditError):
    """Lighthouse не смог проверить страницу (навигация, таймаут, падение браузера)."""
    pass


class ReportStorageError(AuditError):
    """Не удалось сохранить HTML отчёт на диск."""
    pass

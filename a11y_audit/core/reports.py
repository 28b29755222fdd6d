"""
Хранилище HTML отчётов Lighthouse.

Один файл на URL, имя выводится из URL детерминированно:
все не [a-z0-9] символы заменяются на "_", результат в нижнем регистре.
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Optional, Union

from a11y_audit.core.errors import ReportStorageError

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def report_filename(url: str, extension: str = "html") -> str:
    """https://a.test/x -> https___a_test_x.html"""
    return f"{_NON_ALNUM.sub('_', url).lower()}.{extension}"


class ReportStore:
    """Каталог отчётов, который раздаётся по /reports."""

    def __init__(self, reports_dir: Union[str, Path], url_prefix: str = "/reports"):
        self.reports_dir = Path(reports_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def ensure_dir(self) -> None:
        """Создать каталог, если его нет."""
        self.reports_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, url: str, filename: Optional[str] = None) -> Path:
        return self.reports_dir / (filename or report_filename(url))

    def public_path(self, url: str, filename: Optional[str] = None) -> str:
        return f"{self.url_prefix}/{filename or report_filename(url)}"

    def _write(self, url: str, html: str, filename: Optional[str] = None) -> Path:
        self.ensure_dir()
        path = self.path_for(url, filename)
        path.write_text(html, encoding="utf-8")
        return path

    async def save(self, url: str, html: str, filename: Optional[str] = None) -> str:
        """
        Записать отчёт и вернуть его публичный путь.

        filename переопределяет имя файла, выведенное из URL (CLI пишет в --output).

        Raises:
            ReportStorageError: каталог не создаётся или файл не пишется
        """
        try:
            path = await asyncio.to_thread(self._write, url, html, filename)
        except OSError as e:
            logger.error(f"Failed to save report for {url}: {e}")
            raise ReportStorageError(url, f"Failed to save report: {e}") from e

        logger.info(f"Report saved: {path}")
        return self.public_path(url, filename)

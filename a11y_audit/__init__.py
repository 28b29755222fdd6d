"""
A11y Audit - Lighthouse accessibility audits over HTTP.

Основные компоненты:
- Classifier: Категории дефектов по заголовку проверки
- summarize: Сводка результата Lighthouse (AuditSummary)
- LighthouseRunner: Запуск Lighthouse CLI против браузера из пула
- BrowserPool: Headless Chromium, которым владеет сервис
- ReportStore: HTML отчёты на диске
- BatchAuditor: Пакетный аудит с политикой ошибок
"""

from a11y_audit.core.classifier import Classifier, CategoryRule, title_contains
from a11y_audit.core.summarizer import summarize, aggregate_defects
from a11y_audit.core.runner import LighthouseRunner, RunnerOutput
from a11y_audit.core.reports import ReportStore, report_filename
from a11y_audit.core.batch import BatchAuditor, dedupe_urls
from a11y_audit.core.errors import AuditError, AuditRunnerError, ReportStorageError
from a11y_audit.core.results import (
    AuditOutcome,
    AuditSummary,
    BatchFailure,
    BatchResult,
    Defect,
    DefectCategory,
    RawAuditResult,
    RawCheckResult,
    UrlReport,
)
from a11y_audit.core.types import DisplayMode, FailurePolicy
from a11y_audit.infrastructure.browser import BrowserPool

__version__ = "1.0.0"

__all__ = [
    # Основные классы
    "Classifier",
    "CategoryRule",
    "LighthouseRunner",
    "BrowserPool",
    "ReportStore",
    "BatchAuditor",

    # Функции
    "summarize",
    "aggregate_defects",
    "title_contains",
    "report_filename",
    "dedupe_urls",

    # Модели данных
    "RawAuditResult",
    "RawCheckResult",
    "RunnerOutput",
    "Defect",
    "DefectCategory",
    "AuditSummary",
    "AuditOutcome",
    "UrlReport",
    "BatchResult",
    "BatchFailure",
    "DisplayMode",
    "FailurePolicy",

    # Ошибки
    "AuditError",
    "AuditRunnerError",
    "ReportStorageError",

    # Версия
    "__version__",
]

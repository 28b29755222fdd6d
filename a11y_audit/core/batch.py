"""
Пакетный аудит списка URL.

URL дедуплицируются (порядок первого появления сохраняется), затем для
каждого: Lighthouse -> сводка -> сохранение HTML отчёта.

Политики ошибок:
- ABORT: первая ошибка прерывает пакет, клиенту уходит только она
- PARTIAL: ошибки собираются, успешные отчёты возвращаются

При max_concurrency > 1 упавший URL не отменяет остальные аудиты в полёте.
"""

import asyncio
import logging
from typing import Iterable, List, Optional, Tuple, Union

from a11y_audit.core.classifier import Classifier
from a11y_audit.core.errors import AuditError
from a11y_audit.core.reports import ReportStore
from a11y_audit.core.results import (
    AuditOutcome,
    BatchFailure,
    BatchResult,
    UrlReport,
)
from a11y_audit.core.runner import LighthouseRunner
from a11y_audit.core.summarizer import summarize
from a11y_audit.core.types import FailurePolicy
from a11y_audit.infrastructure import metrics

logger = logging.getLogger(__name__)


def dedupe_urls(urls: Iterable[str]) -> List[str]:
    """Убрать повторы, сохранив порядок."""
    return list(dict.fromkeys(urls))


class BatchAuditor:
    """Прогоняет пакет URL через Lighthouse, сводку и хранилище отчётов."""

    def __init__(
        self,
        runner: LighthouseRunner,
        store: ReportStore,
        policy: Union[FailurePolicy, str] = FailurePolicy.ABORT,
        max_concurrency: int = 1,
        classifier: Optional[Classifier] = None,
    ):
        self.runner = runner
        self.store = store
        self.policy = FailurePolicy(policy)
        self.max_concurrency = max(1, max_concurrency)
        self.classifier = classifier

    async def evaluate(self, url: str) -> AuditOutcome:
        """Lighthouse + сводка, без сохранения."""
        output = await self.runner.run(url)
        summary = summarize(output.raw, self.classifier)
        for category in summary.issues:
            metrics.issues_found.labels(category=category.type).inc(category.count)
        return AuditOutcome(url=url, summary=summary, report_html=output.report_html)

    async def audit_url(self, url: str) -> UrlReport:
        outcome = await self.evaluate(url)
        report = await self.store.save(url, outcome.report_html)
        return UrlReport(url=url, report=report, summary=outcome.summary)

    async def run(self, urls: Iterable[str]) -> BatchResult:
        urls = dedupe_urls(urls)
        logger.info(f"Auditing {len(urls)} url(s), policy={self.policy.value}")

        if self.max_concurrency == 1:
            result = await self._run_sequential(urls)
        else:
            result = await self._run_concurrent(urls)

        metrics.batches_total.labels(result="ok" if result.ok else "failed").inc()
        return result

    async def _run_sequential(self, urls: List[str]) -> BatchResult:
        result = BatchResult()
        for url in urls:
            try:
                result.reports.append(await self.audit_url(url))
            except AuditError as e:
                logger.error(f"Error running Lighthouse for {url}: {e.message}")
                result.failures.append(BatchFailure(url=url, message=e.message))
                if self.policy == FailurePolicy.ABORT:
                    break
        return result

    async def _run_concurrent(self, urls: List[str]) -> BatchResult:
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def guarded(url: str) -> Tuple[Optional[UrlReport], Optional[BatchFailure]]:
            async with semaphore:
                try:
                    return await self.audit_url(url), None
                except AuditError as e:
                    logger.error(f"Error running Lighthouse for {url}: {e.message}")
                    return None, BatchFailure(url=url, message=e.message)

        outcomes = await asyncio.gather(*(guarded(url) for url in urls), return_exceptions=True)

        result = BatchResult()
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
            report, failure = outcome
            if report is not None:
                result.reports.append(report)
            if failure is not None:
                result.failures.append(failure)
        return result

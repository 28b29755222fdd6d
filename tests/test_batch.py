"""Тесты пакетного аудита."""

import asyncio
from typing import Dict, List, Optional

import pytest
from prometheus_client import REGISTRY

from a11y_audit.core.batch import BatchAuditor, dedupe_urls
from a11y_audit.core.errors import AuditRunnerError
from a11y_audit.core.reports import ReportStore
from a11y_audit.core.results import RawAuditResult
from a11y_audit.core.runner import RunnerOutput
from a11y_audit.core.types import FailurePolicy
from conftest import make_check, make_lhr


class DummyRunner:
    """Подмена LighthouseRunner: без браузера, считает вызовы."""

    def __init__(self, fail_on: Optional[List[str]] = None, delays: Optional[Dict[str, float]] = None):
        self.fail_on = set(fail_on or [])
        self.delays = delays or {}
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def run(self, url: str) -> RunnerOutput:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(url, 0))
            if url in self.fail_on:
                raise AuditRunnerError(url, "net::ERR_NAME_NOT_RESOLVED")
            lhr = make_lhr([
                make_check("aria-label", "aria-label missing", score=0),
                make_check("title", "Document has a title", score=1),
            ], score=0.9)
            return RunnerOutput(raw=RawAuditResult.from_lhr(lhr), report_html=f"<html>{url}</html>")
        finally:
            self.in_flight -= 1


@pytest.fixture
def store(tmp_path):
    return ReportStore(tmp_path / "reports")


def test_dedupe_keeps_first_seen_order():
    assert dedupe_urls(["http://b.test", "http://a.test", "http://b.test"]) == ["http://b.test", "http://a.test"]


@pytest.mark.asyncio
async def test_duplicate_urls_audited_once(store):
    runner = DummyRunner()
    auditor = BatchAuditor(runner, store)

    result = await auditor.run(["http://a.test", "http://a.test"])

    assert runner.calls == ["http://a.test"]
    assert result.ok
    assert len(result.reports) == 1


@pytest.mark.asyncio
async def test_successful_batch_builds_reports(store):
    auditor = BatchAuditor(DummyRunner(), store)

    result = await auditor.run(["http://a.test", "http://b.test"])

    assert [r.url for r in result.reports] == ["http://a.test", "http://b.test"]
    entry = result.reports[0].to_dict()
    assert entry["report"] == "/reports/http___a_test.html"
    assert entry["accessibilityScore"] == 0.9
    assert entry["passedAudits"] == 1
    assert entry["issues"][0]["type"] == "ARIA"
    assert store.path_for("http://b.test").read_text(encoding="utf-8") == "<html>http://b.test</html>"


@pytest.mark.asyncio
async def test_abort_policy_stops_at_first_failure(store):
    runner = DummyRunner(fail_on=["http://b.test"])
    auditor = BatchAuditor(runner, store, policy=FailurePolicy.ABORT)

    result = await auditor.run(["http://a.test", "http://b.test", "http://c.test"])

    assert not result.ok
    assert result.failure.url == "http://b.test"
    assert runner.calls == ["http://a.test", "http://b.test"]
    assert [r.url for r in result.reports] == ["http://a.test"]


@pytest.mark.asyncio
async def test_partial_policy_continues_after_failure(store):
    runner = DummyRunner(fail_on=["http://b.test"])
    auditor = BatchAuditor(runner, store, policy="partial")

    result = await auditor.run(["http://a.test", "http://b.test", "http://c.test"])

    assert runner.calls == ["http://a.test", "http://b.test", "http://c.test"]
    assert [r.url for r in result.reports] == ["http://a.test", "http://c.test"]
    assert [f.to_dict() for f in result.failures] == [
        {"url": "http://b.test", "message": "net::ERR_NAME_NOT_RESOLVED"},
    ]


@pytest.mark.asyncio
async def test_concurrency_is_bounded(store):
    urls = [f"http://{i}.test" for i in range(6)]
    runner = DummyRunner(delays={u: 0.01 for u in urls})
    auditor = BatchAuditor(runner, store, max_concurrency=2)

    result = await auditor.run(urls)

    assert result.ok
    assert runner.max_in_flight == 2
    assert [r.url for r in result.reports] == urls


@pytest.mark.asyncio
async def test_concurrent_failure_does_not_cancel_other_audits(store):
    runner = DummyRunner(
        fail_on=["http://b.test"],
        delays={"http://a.test": 0.05, "http://b.test": 0, "http://c.test": 0.05},
    )
    auditor = BatchAuditor(runner, store, max_concurrency=3)

    result = await auditor.run(["http://a.test", "http://b.test", "http://c.test"])

    assert not result.ok
    assert result.failure.url == "http://b.test"
    # остальные аудиты доведены до конца и сохранены
    assert [r.url for r in result.reports] == ["http://a.test", "http://c.test"]
    assert store.path_for("http://c.test").exists()


@pytest.mark.asyncio
async def test_storage_failure_is_reported_for_url(tmp_path):
    blocker = tmp_path / "reports"
    blocker.write_text("not a directory")
    auditor = BatchAuditor(DummyRunner(), ReportStore(blocker))

    result = await auditor.run(["http://a.test"])

    assert result.failure.url == "http://a.test"
    assert result.reports == []


@pytest.mark.asyncio
async def test_evaluate_does_not_persist(store):
    auditor = BatchAuditor(DummyRunner(), store)

    outcome = await auditor.evaluate("http://a.test")

    assert outcome.report_html == "<html>http://a.test</html>"
    assert outcome.summary.passed_audits == 1
    assert not store.path_for("http://a.test").exists()


def sample(name, **labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.mark.asyncio
async def test_batch_updates_metrics(store):
    batches_ok = sample("a11y_batches_total", result="ok")
    batches_failed = sample("a11y_batches_total", result="failed")
    aria_issues = sample("a11y_issues_total", category="ARIA")

    auditor = BatchAuditor(DummyRunner(fail_on=["http://b.test"]), store)
    await auditor.run(["http://a.test"])
    await auditor.run(["http://a.test", "http://b.test"])

    assert sample("a11y_batches_total", result="ok") == batches_ok + 1
    assert sample("a11y_batches_total", result="failed") == batches_failed + 1
    assert sample("a11y_issues_total", category="ARIA") == aria_issues + 2

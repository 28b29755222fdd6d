"""
CLI интерфейс для A11y Audit.

Использует Rich для красивого вывода.
"""

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
import typer

from a11y_audit.core.batch import BatchAuditor
from a11y_audit.core.errors import AuditError
from a11y_audit.core.reports import ReportStore
from a11y_audit.core.results import AuditSummary, RawAuditResult
from a11y_audit.core.runner import LighthouseRunner
from a11y_audit.core.summarizer import summarize as summarize_result
from a11y_audit.infrastructure.browser import BrowserPool
from backend.config import get_settings

app = typer.Typer(
    name="a11y",
    help="A11y Audit CLI: аудит доступности страниц через Lighthouse"
)
console = Console()

BACKEND_URL = "http://localhost:3000"


def check_backend() -> bool:
    """Проверить доступность backend."""
    try:
        r = httpx.get(f"{BACKEND_URL}/health", timeout=5)
        return r.status_code == 200
    except httpx.HTTPError:
        return False


def print_summary(url: str, summary: dict, report: Optional[str] = None) -> None:
    """Вывести сводку одного URL (формат как в ответе API)."""
    score = summary.get("accessibilityScore")
    score_text = f"{score * 100:.0f}" if score is not None else "N/A"

    lines = [
        f"♿ Score: [bold]{score_text}[/]",
        f"✅ Passed: {summary.get('passedAudits', 0)}",
        f"✋ Manual: {summary.get('manualChecks', 0)}",
        f"➖ Not applicable: {summary.get('notApplicable', 0)}",
    ]
    if report:
        lines.append(f"📄 Report: {report}")
    console.print(Panel("\n".join(lines), title=url, border_style="blue"))

    issues = summary.get("issues", [])
    if not issues:
        return

    table = Table(title="Проблемы")
    table.add_column("Категория", style="cyan")
    table.add_column("Проверка", style="white")
    table.add_column("Score", style="red")
    for category in issues:
        for defect in category.get("defects", []):
            table.add_row(category["type"], defect.get("title") or defect["id"], str(defect.get("score")))
    console.print(table)


@app.command()
def audit(urls: List[str]):
    """🔍 Аудит через запущенный backend."""

    if not check_backend():
        console.print("[red]❌ Backend недоступен. Запустите: uvicorn backend.main:app --port 3000[/]")
        raise typer.Exit(1)

    with console.status(f"[bold blue]Lighthouse проверяет {len(urls)} URL...[/]"):
        response = httpx.post(
            f"{BACKEND_URL}/accessibility",
            json={"url": urls},
            timeout=None,
        )

    data = response.json()
    if response.status_code != 200:
        console.print(f"[red]Ошибка: {data.get('message')} ({data.get('url', '')})[/]")
        raise typer.Exit(1)

    for entry in data["reports"]:
        print_summary(entry["url"], entry, f"{BACKEND_URL}{entry['report']}")
    for failure in data.get("failures", []):
        console.print(f"[red]❌ {failure['url']}: {failure['message']}[/]")


async def _run_local(url: str, output: Path) -> AuditSummary:
    settings = get_settings()
    pool = BrowserPool(size=1, chrome_flags=settings.chrome_flags, channel=settings.browser_channel)
    await pool.start()
    try:
        runner = LighthouseRunner(
            pool,
            command=settings.lighthouse_command,
            category=settings.audit_category,
            log_level=settings.lighthouse_log_level,
            timeout=settings.audit_timeout_seconds,
        )
        store = ReportStore(output.parent)
        auditor = BatchAuditor(runner, store)
        outcome = await auditor.evaluate(url)
        await store.save(url, outcome.report_html, filename=output.name)
        return outcome.summary
    finally:
        await pool.close()


@app.command()
def run(url: str, output: Path = typer.Option(Path("lhreport.html"), help="Куда сохранить HTML отчёт")):
    """🚀 Одиночный аудит без backend: свой браузер, отчёт в файл."""

    try:
        with console.status("[bold]Lighthouse...[/]"):
            summary = asyncio.run(_run_local(url, output))
    except AuditError as e:
        console.print(f"[red]Ошибка: {e.message}[/]")
        raise typer.Exit(1)

    print_summary(url, summary.to_dict(), str(output))


@app.command()
def summarize(lhr_json: Path, category: str = "accessibility"):
    """📊 Сводка по сохранённому JSON результату Lighthouse."""

    try:
        lhr = json.loads(lhr_json.read_text(encoding="utf-8"))
        raw = RawAuditResult.from_lhr(lhr, category)
    except (OSError, ValueError) as e:
        console.print(f"[red]Ошибка: {e}[/]")
        raise typer.Exit(1)

    print_summary(raw.final_url or str(lhr_json), summarize_result(raw).to_dict())


@app.command()
def health():
    """🏥 Проверить статус системы."""

    try:
        response = httpx.get(f"{BACKEND_URL}/health", timeout=5)
        data = response.json()

        status = "🟢" if data.get("status") == "ok" else "🔴"
        console.print(f"{status} Backend: {data.get('status')}")
        console.print(f"   Browsers: {data.get('browsers', 0)}")
        console.print(f"   Reports: {data.get('reports_dir', 'N/A')}")

    except httpx.HTTPError as e:
        console.print(f"🔴 Backend недоступен: {e}")


if __name__ == "__main__":
    app()

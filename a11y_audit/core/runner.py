"""
Запуск Lighthouse CLI для одного URL.

Lighthouse подключается к браузеру из пула (--port) и пишет два файла:
JSON результат и HTML отчёт. JSON разбирается в RawAuditResult,
HTML отдаётся дальше без изменений.
"""

import asyncio
import json
import logging
import os
import signal
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from a11y_audit.core.errors import AuditRunnerError
from a11y_audit.core.results import RawAuditResult
from a11y_audit.infrastructure import metrics
from a11y_audit.infrastructure.browser import BrowserPool

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = ("npx", "lighthouse")


@dataclass
class RunnerOutput:
    raw: RawAuditResult
    report_html: str


class LighthouseRunner:
    """Audit Runner поверх Lighthouse CLI."""

    def __init__(
        self,
        pool: BrowserPool,
        command: Sequence[str] = DEFAULT_COMMAND,
        category: str = "accessibility",
        log_level: str = "info",
        timeout: Optional[float] = None,
    ):
        self.pool = pool
        self.command = list(command)
        self.category = category
        self.log_level = log_level
        self.timeout = timeout

    def build_command(self, url: str, port: int, output_base: Path) -> List[str]:
        cmd = [
            *self.command,
            url,
            f"--port={port}",
            f"--only-categories={self.category}",
            "--output=json",
            "--output=html",
            f"--output-path={output_base}",
        ]
        if self.log_level == "verbose":
            cmd.append("--verbose")
        elif self.log_level in ("silent", "error"):
            cmd.append("--quiet")
        return cmd

    async def _execute(self, url: str, cmd: List[str]) -> None:
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            # отдельная группа процессов: npx запускает node дочерним процессом
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            raise AuditRunnerError(url, f"Cannot start Lighthouse: {e}") from e

        try:
            _, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            await self._kill(proc)
            raise AuditRunnerError(url, f"Lighthouse timed out after {self.timeout}s")
        except asyncio.CancelledError:
            await self._kill(proc)
            raise

        if proc.returncode != 0:
            tail = stderr.decode("utf-8", errors="replace").strip()[-500:]
            raise AuditRunnerError(url, f"Lighthouse exited with code {proc.returncode}: {tail}")

    async def _kill(self, proc) -> None:
        """Убить всю группу процессов Lighthouse, чтобы браузер вернулся в пул свободным."""
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        await proc.wait()

    def _read_outputs(self, url: str, output_base: Path) -> RunnerOutput:
        json_path = output_base.with_name(f"{output_base.name}.report.json")
        html_path = output_base.with_name(f"{output_base.name}.report.html")
        try:
            lhr = json.loads(json_path.read_text(encoding="utf-8"))
            report_html = html_path.read_text(encoding="utf-8")
            raw = RawAuditResult.from_lhr(lhr, self.category)
        except (OSError, ValueError) as e:
            raise AuditRunnerError(url, f"Unreadable Lighthouse output: {e}") from e
        return RunnerOutput(raw=raw, report_html=report_html)

    async def run(self, url: str) -> RunnerOutput:
        """
        Проверить одну страницу.

        Raises:
            AuditRunnerError: Lighthouse не запустился, упал, вышел по таймауту
                или вернул нечитаемый результат
        """
        start_time = time.time()
        try:
            async with self.pool.acquire() as handle:
                with tempfile.TemporaryDirectory(prefix="lighthouse-") as tmp:
                    output_base = Path(tmp) / "lighthouse"
                    await self._execute(url, self.build_command(url, handle.port, output_base))
                    output = self._read_outputs(url, output_base)
        except AuditRunnerError:
            metrics.audits_total.labels(outcome="error").inc()
            raise

        elapsed = time.time() - start_time
        metrics.audits_total.labels(outcome="ok").inc()
        metrics.audit_duration.observe(elapsed)
        logger.info(
            f"Report is done for {output.raw.final_url or url} "
            f"({self.category} score: {output.raw.category_score}, {elapsed:.1f}s)"
        )
        return output

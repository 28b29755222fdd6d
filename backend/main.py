"""
FastAPI backend для аудита доступности.

Браузеры запускаются один раз при старте и закрываются при остановке,
все аудиты идут через них.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from prometheus_client import make_asgi_app

from a11y_audit.core.batch import BatchAuditor
from a11y_audit.core.reports import ReportStore
from a11y_audit.core.runner import LighthouseRunner
from a11y_audit.infrastructure.browser import BrowserPool
from backend.config import Settings, get_settings
from backend.routers import accessibility, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle: startup и shutdown."""
    settings: Settings = app.state.settings
    store: ReportStore = app.state.report_store

    # === STARTUP ===
    pool = BrowserPool(
        size=settings.max_concurrency,
        chrome_flags=settings.chrome_flags,
        channel=settings.browser_channel,
    )
    await pool.start()

    runner = LighthouseRunner(
        pool,
        command=settings.lighthouse_command,
        category=settings.audit_category,
        log_level=settings.lighthouse_log_level,
        timeout=settings.audit_timeout_seconds,
    )
    app.state.browser_pool = pool
    app.state.auditor = BatchAuditor(
        runner,
        store,
        policy=settings.failure_policy,
        max_concurrency=settings.max_concurrency,
    )

    logger.info(f"🚀 Browser pool started: {pool.size} browser(s)")
    logger.info(f"📦 Reports dir: {store.reports_dir.resolve()}")

    try:
        yield
    finally:
        # === SHUTDOWN ===
        app.state.auditor = None
        await pool.close()
        logger.info("Browser pool stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    app = FastAPI(
        title="A11y Audit API",
        version="1.0.0",
        description="Lighthouse accessibility audits over HTTP",
        lifespan=lifespan,
    )
    app.state.settings = settings

    store = ReportStore(settings.reports_dir)
    store.ensure_dir()
    app.state.report_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ==================== Подключение роутеров ====================

    app.include_router(health.router)
    app.include_router(accessibility.router)

    app.mount("/reports", StaticFiles(directory=store.reports_dir), name="reports")
    app.mount("/metrics", make_asgi_app())

    return app


app = create_app()


# ==================== Run ====================

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)

"""Health router."""

from fastapi import APIRouter, Request

from a11y_audit.infrastructure.health import full_health_check
from backend.models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    """Health check."""
    state = request.app.state
    components = {}
    if getattr(state, "browser_pool", None) is not None:
        components["browser"] = state.browser_pool
    if getattr(state, "report_store", None) is not None:
        components["reports"] = state.report_store

    result = await full_health_check(components)
    browser = result["components"].get("browser", {})
    reports = result["components"].get("reports", {})
    return {
        "status": "ok" if result["status"] == "healthy" and "browser" in components else "degraded",
        "browsers": browser.get("connected", 0),
        "reports_dir": reports.get("path"),
        "components": result["components"],
    }

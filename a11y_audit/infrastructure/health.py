"""
Health checks для компонентов сервиса.
"""

from typing import Dict
import os
import time
import logging

logger = logging.getLogger(__name__)


async def check_browser_pool(pool) -> Dict:
    """Проверка пула браузеров"""
    try:
        state = pool.get_state()
        healthy = state["started"] and state["connected"] == state["size"]
        return {
            "status": "healthy" if healthy else "unhealthy",
            **state,
        }
    except Exception as e:
        logger.error(f"Browser pool health check failed: {e}")
        return {
            "status": "unhealthy",
            "error": str(e)
        }


async def check_reports_dir(store) -> Dict:
    """Проверка каталога отчётов (существует и доступен на запись)"""
    path = store.reports_dir
    if path.is_dir() and os.access(path, os.W_OK):
        return {
            "status": "healthy",
            "path": str(path),
        }
    return {
        "status": "unhealthy",
        "path": str(path),
        "error": "reports directory is missing or not writable",
    }


async def full_health_check(components: Dict) -> Dict:
    """Полная проверка всех компонентов"""
    results = {}

    if "browser" in components:
        results["browser"] = await check_browser_pool(components["browser"])

    if "reports" in components:
        results["reports"] = await check_reports_dir(components["reports"])

    # Общий статус
    all_healthy = all(
        r.get("status") == "healthy"
        for r in results.values()
    )

    return {
        "status": "healthy" if all_healthy else "unhealthy",
        "components": results,
        "timestamp": time.time()
    }

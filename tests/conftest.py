"""
Pytest configuration and fixtures.

Использование:
    pytest tests/ -v
"""

import os
import sys
from typing import Dict, List, Optional

import pytest


def pytest_sessionstart(session):  # type: ignore[override]
    """Добавить корень проекта в sys.path перед запуском тестов."""
    tests_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.dirname(tests_dir)

    if project_root not in sys.path:
        sys.path.insert(0, project_root)


# ═══════════════════════════════════════════════════════
# LIGHTHOUSE RESULT FIXTURES
# ═══════════════════════════════════════════════════════

def make_check(
    check_id: str,
    title: Optional[str] = None,
    score: Optional[float] = 0,
    mode: str = "binary",
    description: str = "",
) -> Dict:
    """Одна проверка в формате lhr.audits."""
    return {
        "id": check_id,
        "title": title if title is not None else check_id,
        "description": description or f"{check_id} description",
        "score": score,
        "scoreDisplayMode": mode,
    }


def make_lhr(checks: List[Dict], score: Optional[float] = 0.8, category: str = "accessibility") -> Dict:
    """Минимальный Lighthouse result с одной категорией."""
    return {
        "finalDisplayedUrl": "http://a.test/",
        "categories": {category: {"id": category, "score": score}},
        "audits": {c["id"]: c for c in checks},
    }


@pytest.fixture
def sample_lhr():
    """Типичный результат: ARIA, contrast, пройденные, manual, N/A."""
    return make_lhr([
        make_check("aria-allowed-attr", "`[aria-*]` attributes match their roles", score=0),
        make_check("button-name", "Buttons have an accessible name", score=1),
        make_check("color-contrast", "Background and foreground colors do not have sufficient contrast ratio", score=0),
        make_check("aria-hidden-focus", "`[aria-hidden]` elements contain focusable descendents", score=0),
        make_check("focus-traps", "User focus is not accidentally trapped", score=None, mode="manual"),
        make_check("video-caption", "`<video>` elements contain a captions track", score=None, mode="notApplicable"),
        make_check("document-title", "Document has a `<title>` element", score=1),
    ], score=0.72)


# ═══════════════════════════════════════════════════════
# MARKERS
# ═══════════════════════════════════════════════════════

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (needs Chromium and Lighthouse)"
    )

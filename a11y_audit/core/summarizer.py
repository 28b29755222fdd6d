"""
Сводка результата Lighthouse.

- passedAudits: score == 1
- manualChecks / notApplicable: по scoreDisplayMode
- issues: проваленные проверки (score есть и != 1), сгруппированные
  по категориям в порядке первого появления
"""

import logging
from typing import Dict, Iterable, List, Optional

from a11y_audit.core.classifier import Classifier, default_classifier
from a11y_audit.core.results import (
    AuditSummary,
    Defect,
    DefectCategory,
    RawAuditResult,
    RawCheckResult,
)
from a11y_audit.core.types import DisplayMode

logger = logging.getLogger(__name__)


def aggregate_defects(
    failing: Iterable[RawCheckResult],
    classifier: Optional[Classifier] = None,
) -> List[DefectCategory]:
    """
    Разложить проваленные проверки по категориям.

    Категории идут в порядке первого появления, не по имени и не по count.
    """
    classifier = classifier or default_classifier
    buckets: Dict[str, DefectCategory] = {}

    for check in failing:
        label = classifier.classify(check)
        bucket = buckets.get(label)
        if bucket is None:
            bucket = buckets[label] = DefectCategory(type=label)
        bucket.add(Defect.from_check(check))

    return list(buckets.values())


def summarize(raw: RawAuditResult, classifier: Optional[Classifier] = None) -> AuditSummary:
    """Собрать AuditSummary из сырого результата. Чистая функция."""
    checks = list(raw.checks.values())

    passed = sum(1 for c in checks if c.passed)
    manual = sum(1 for c in checks if c.display_mode == DisplayMode.MANUAL)
    not_applicable = sum(1 for c in checks if c.display_mode == DisplayMode.NOT_APPLICABLE)
    failing = [c for c in checks if c.failing]

    summary = AuditSummary(
        accessibility_score=raw.category_score,
        passed_audits=passed,
        manual_checks=manual,
        not_applicable=not_applicable,
        issues=aggregate_defects(failing, classifier),
    )
    logger.debug(
        f"Summarized {len(checks)} checks: {passed} passed, "
        f"{len(failing)} failing in {len(summary.issues)} categories"
    )
    return summary

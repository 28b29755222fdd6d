"""
Prometheus метрики для мониторинга.
"""

from prometheus_client import Counter, Histogram

# Запуски Lighthouse
audits_total = Counter(
    "a11y_audits_total",
    "Lighthouse runs by outcome",
    ["outcome"]
)

audit_duration = Histogram(
    "a11y_audit_duration_seconds",
    "Lighthouse run duration",
    buckets=[1, 5, 10, 20, 30, 60, 120]
)

# Дефекты
issues_found = Counter(
    "a11y_issues_total",
    "Failing checks by defect category",
    ["category"]
)

# Пакеты
batches_total = Counter(
    "a11y_batches_total",
    "Batch requests by result",
    ["result"]
)

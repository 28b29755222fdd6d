"""
Core data models for accessibility audits.

RawAuditResult mirrors the part of a Lighthouse result (LHR) the service reads.
AuditSummary is what the HTTP API returns per URL.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from a11y_audit.core.types import DisplayMode


@dataclass(frozen=True)
class RawCheckResult:
    """Одна проверка Lighthouse (элемент lhr.audits)."""

    id: str
    title: Optional[str]
    description: Optional[str]
    score: Optional[float]
    display_mode: str

    @classmethod
    def from_dict(cls, check_id: str, data: Dict[str, Any]) -> "RawCheckResult":
        return cls(
            id=data.get("id", check_id),
            title=data.get("title"),
            description=data.get("description"),
            score=data.get("score"),
            display_mode=data.get("scoreDisplayMode", DisplayMode.INFORMATIVE.value),
        )

    @property
    def passed(self) -> bool:
        return self.score == 1

    @property
    def failing(self) -> bool:
        """Оценка есть и не равна 1."""
        return self.score is not None and self.score != 1


@dataclass(frozen=True)
class RawAuditResult:
    """Результат одного запуска Lighthouse для одной категории."""

    category_score: Optional[float]
    checks: Dict[str, RawCheckResult]
    final_url: Optional[str] = None

    @classmethod
    def from_lhr(cls, lhr: Dict[str, Any], category: str = "accessibility") -> "RawAuditResult":
        """
        Собрать результат из JSON отчёта Lighthouse.

        Raises:
            ValueError: в отчёте нет нужной категории или секции audits
        """
        if not isinstance(lhr, dict):
            raise ValueError("Lighthouse result is not a JSON object")

        categories = lhr.get("categories") or {}
        if not isinstance(categories, dict) or not isinstance(categories.get(category), dict):
            raise ValueError(f"Lighthouse result has no '{category}' category")

        audits = lhr.get("audits")
        if not isinstance(audits, dict):
            raise ValueError("Lighthouse result has no audits")

        checks = {}
        for check_id, data in audits.items():
            if not isinstance(data, dict):
                raise ValueError(f"Lighthouse audit '{check_id}' is not an object")
            checks[check_id] = RawCheckResult.from_dict(check_id, data)

        return cls(
            category_score=categories[category].get("score"),
            checks=checks,
            final_url=lhr.get("finalDisplayedUrl") or lhr.get("finalUrl"),
        )


@dataclass(frozen=True)
class Defect:
    """Проваленная проверка в том виде, в котором она уходит клиенту."""

    id: str
    title: Optional[str]
    description: Optional[str]
    score: Optional[float]

    @classmethod
    def from_check(cls, check: RawCheckResult) -> "Defect":
        return cls(
            id=check.id,
            title=check.title,
            description=check.description,
            score=check.score,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "score": self.score,
        }


@dataclass
class DefectCategory:
    """Группа дефектов одного типа (ARIA, Best Practices, Other)."""

    type: str
    count: int = 0
    defects: List[Defect] = field(default_factory=list)

    def add(self, defect: Defect) -> None:
        self.defects.append(defect)
        self.count += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "count": self.count,
            "defects": [d.to_dict() for d in self.defects],
        }


@dataclass
class AuditSummary:
    """Итог аудита одной страницы."""

    accessibility_score: Optional[float]
    passed_audits: int
    manual_checks: int
    not_applicable: int
    issues: List[DefectCategory] = field(default_factory=list)

    @property
    def failing_count(self) -> int:
        return sum(c.count for c in self.issues)

    def to_dict(self) -> Dict[str, Any]:
        """Преобразовать в словарь для JSON (ключи как в API)."""
        return {
            "accessibilityScore": self.accessibility_score,
            "issues": [c.to_dict() for c in self.issues],
            "passedAudits": self.passed_audits,
            "manualChecks": self.manual_checks,
            "notApplicable": self.not_applicable,
        }


@dataclass
class AuditOutcome:
    """Сводка плюс HTML отчёт Lighthouse без изменений."""

    url: str
    summary: AuditSummary
    report_html: str


@dataclass
class UrlReport:
    """Элемент списка reports в ответе POST /accessibility."""

    url: str
    report: str  # публичный путь вида /reports/<file>.html
    summary: AuditSummary

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "report": self.report, **self.summary.to_dict()}


@dataclass
class BatchFailure:
    """Упавший URL внутри пакета."""

    url: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "message": self.message}


@dataclass
class BatchResult:
    """
    Результат пакетного аудита.

    Либо полностью успешен (failures пуст), либо несёт ошибки и то,
    что успели собрать до них.
    """

    reports: List[UrlReport] = field(default_factory=list)
    failures: List[BatchFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failure(self) -> Optional[BatchFailure]:
        """Первая ошибка в порядке URL из запроса."""
        return self.failures[0] if self.failures else None

"""
Классификация проваленных проверок по типу дефекта.

Правила: упорядоченный список (predicate, label), побеждает первое совпадение.
Если ни одно правило не подошло, проверка попадает в fallback категорию,
поэтому ни одна проваленная проверка не теряется.

Использование:
    classifier = Classifier()
    classifier.classify(check)          # -> "ARIA"

    custom = Classifier(rules=[CategoryRule("Contrast", title_contains("contrast")), *DEFAULT_RULES])
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from a11y_audit.core.results import RawCheckResult

ARIA = "ARIA"
BEST_PRACTICES = "Best Practices"
OTHER = "Other"

TitlePredicate = Callable[[str], bool]


def title_contains(substring: str) -> TitlePredicate:
    """Предикат: заголовок содержит подстроку (с учётом регистра)."""

    def predicate(title: str) -> bool:
        return substring in title

    return predicate


@dataclass(frozen=True)
class CategoryRule:
    label: str
    matches: TitlePredicate


DEFAULT_RULES: Tuple[CategoryRule, ...] = (
    CategoryRule(ARIA, title_contains("aria")),
    CategoryRule(BEST_PRACTICES, title_contains("best practice")),
)


class Classifier:
    """Сопоставляет проверке ровно одну категорию."""

    def __init__(self, rules: Sequence[CategoryRule] = DEFAULT_RULES, fallback: str = OTHER):
        self.rules = tuple(rules)
        self.fallback = fallback

    def classify_title(self, title: Optional[str]) -> str:
        title = title or ""
        for rule in self.rules:
            if rule.matches(title):
                return rule.label
        return self.fallback

    def classify(self, check: RawCheckResult) -> str:
        return self.classify_title(check.title)


default_classifier = Classifier()

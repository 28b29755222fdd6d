"""Pydantic models for API requests and responses."""

from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator


# ═══════════════════════════════════════════════════════
# Accessibility Models
# ═══════════════════════════════════════════════════════

class AccessibilityRequest(BaseModel):
    """Audit request: one URL or a list of URLs."""
    url: Union[str, List[str]] = Field(..., description="URL or list of URLs to audit")

    @field_validator("url")
    @classmethod
    def url_not_empty(cls, value):
        urls = [value] if isinstance(value, str) else value
        if not urls or any(not u.strip() for u in urls):
            raise ValueError("url must be a non-empty string or a non-empty list of strings")
        return value

    @property
    def urls(self) -> List[str]:
        return [self.url] if isinstance(self.url, str) else list(self.url)


class DefectItem(BaseModel):
    """Single failing check."""
    id: str = Field(..., description="Lighthouse audit id")
    title: Optional[str] = Field(None, description="Check title")
    description: Optional[str] = Field(None, description="Check description")
    score: Optional[float] = Field(None, description="Check score (0-1)")


class DefectCategoryItem(BaseModel):
    """Failing checks grouped by defect type."""
    type: str = Field(..., description="Defect category (ARIA, Best Practices, Other)")
    count: int = Field(..., description="Number of failing checks in the category")
    defects: List[DefectItem] = Field(default_factory=list, description="Failing checks in input order")


class ReportItem(BaseModel):
    """Per-URL audit summary."""
    url: str = Field(..., description="Audited URL")
    report: str = Field(..., description="Path to the persisted HTML report")
    accessibilityScore: Optional[float] = Field(None, description="Category score (0-1)")
    issues: List[DefectCategoryItem] = Field(default_factory=list, description="Categorized failing checks")
    passedAudits: int = Field(..., description="Checks with score == 1")
    manualChecks: int = Field(..., description="Checks with display mode 'manual'")
    notApplicable: int = Field(..., description="Checks with display mode 'notApplicable'")


class FailureItem(BaseModel):
    """URL that failed inside a partial-success batch."""
    url: str = Field(..., description="Failed URL")
    message: str = Field(..., description="Failure reason")


class AccessibilityResponse(BaseModel):
    """Batch audit response."""
    message: str = Field(..., description="Human-readable message")
    reports: List[ReportItem] = Field(..., description="Per-URL reports")
    failures: Optional[List[FailureItem]] = Field(None, description="Failed URLs (partial policy only)")


class AuditErrorResponse(BaseModel):
    """Batch aborted on a failing URL."""
    message: str = Field(..., description="Error message")
    url: str = Field(..., description="URL that failed")


# ═══════════════════════════════════════════════════════
# Health Models
# ═══════════════════════════════════════════════════════

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    browsers: int = Field(0, description="Connected browsers in the pool")
    reports_dir: Optional[str] = Field(None, description="Reports directory")
    components: dict = Field(default_factory=dict, description="Per-component health")

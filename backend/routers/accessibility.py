"""Accessibility router."""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from a11y_audit.core.batch import BatchAuditor
from a11y_audit.core.types import FailurePolicy
from backend.models import AccessibilityRequest, AccessibilityResponse, AuditErrorResponse

router = APIRouter(tags=["accessibility"])


def get_auditor(request: Request) -> BatchAuditor:
    """Получить BatchAuditor из состояния приложения."""
    auditor = getattr(request.app.state, "auditor", None)
    if auditor is None:
        raise HTTPException(503, "Auditor not initialized")
    return auditor


@router.post(
    "/accessibility",
    response_model=AccessibilityResponse,
    response_model_exclude_unset=True,
    responses={500: {"model": AuditErrorResponse}},
)
async def accessibility(
    request: AccessibilityRequest,
    auditor: BatchAuditor = Depends(get_auditor),
):
    """
    Запустить аудит доступности для одного или нескольких URL.

    Повторяющиеся URL проверяются один раз. При политике abort первая
    ошибка даёт 500 с упавшим URL, частичный список не возвращается.
    """
    result = await auditor.run(request.urls)

    if not result.ok and auditor.policy == FailurePolicy.ABORT:
        return JSONResponse(
            status_code=500,
            content={"message": "Error running Lighthouse", "url": result.failure.url},
        )

    body = {
        "message": "Reports generated successfully" if result.ok else "Reports generated with errors",
        "reports": [report.to_dict() for report in result.reports],
    }
    if result.failures:
        body["failures"] = [failure.to_dict() for failure in result.failures]
    return body

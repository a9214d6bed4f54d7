from fastapi import APIRouter, Depends, Request

from ...models import (
    AnalyzeEmailRequest,
    AnalyzeEmailResponse,
    EmailDraftSet,
    GenerateEmailRequest,
)
from ...services.email_service import EmailService

router = APIRouter(prefix="/api")


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


@router.post(
    "/generate-email",
    response_model=EmailDraftSet,
    response_model_exclude_none=True,
)
async def generate_email(
    payload: GenerateEmailRequest,
    service: EmailService = Depends(get_email_service),
) -> EmailDraftSet:
    return await service.generate(payload)


@router.post("/analyze-email", response_model=AnalyzeEmailResponse)
async def analyze_email(
    payload: AnalyzeEmailRequest,
    service: EmailService = Depends(get_email_service),
) -> AnalyzeEmailResponse:
    metrics = await service.analyze(payload.email_content)
    return AnalyzeEmailResponse(metrics=metrics)

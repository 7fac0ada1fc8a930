from fastapi import APIRouter, Depends

from kaiheila_webhook.config import Settings
from kaiheila_webhook.dependencies import get_pipeline, get_settings
from kaiheila_webhook.models.schemas import HealthResponse
from kaiheila_webhook.services.pipeline import WebhookPipeline

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(
    settings: Settings = Depends(get_settings),
    pipeline: WebhookPipeline = Depends(get_pipeline),
):
    return HealthResponse(
        status="ok",
        service="kaiheila-webhook",
        source_type=pipeline.type,
        encrypted=pipeline.config.key is not None,
        verify_token=pipeline.config.verify_token is not None,
        webhook_path=settings.webhook_path or "*",
        tracked_sequence_numbers=len(pipeline.suppressor),
    )

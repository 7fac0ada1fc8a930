from fastapi import Request

from kaiheila_webhook.config import Settings
from kaiheila_webhook.services.pipeline import WebhookPipeline


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_pipeline(request: Request) -> WebhookPipeline:
    return request.app.state.pipeline

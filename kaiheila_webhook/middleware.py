"""Starlette middleware that runs the webhook pipeline in front of the app.

Requests the pipeline does not claim fall through to ``call_next``, so the
webhook can share a FastAPI app (and port) with unrelated routes.
"""

import json
import logging
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from kaiheila_webhook.services.pipeline import WebhookPipeline

logger = logging.getLogger(__name__)


class KaiheilaWebhookMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, pipeline: WebhookPipeline | None = None, path: str | None = None):
        super().__init__(app)
        # Either may be left out and resolved from app.state per request
        self.pipeline = pipeline
        self.path = path

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        pipeline = self.pipeline
        if pipeline is None:
            pipeline = getattr(request.app.state, "pipeline", None)
        if pipeline is None or request.method != "POST" or not self._matches(request):
            return await call_next(request)

        try:
            body = json.loads(await request.body() or b"{}")
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
            return await call_next(request)

        outcome = await pipeline.handle(body)
        if not outcome.handled:
            return await call_next(request)
        return JSONResponse(content=outcome.body, status_code=outcome.status)

    def _matches(self, request: Request) -> bool:
        path = self.path
        if path is None:
            settings = getattr(request.app.state, "settings", None)
            path = settings.webhook_path if settings is not None else ""
        return not path or request.url.path.rstrip("/") == path.rstrip("/")

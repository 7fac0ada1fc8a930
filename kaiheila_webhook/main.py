import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from kaiheila_webhook.config import Settings
from kaiheila_webhook.middleware import KaiheilaWebhookMiddleware
from kaiheila_webhook.services.event_hub import LoggingSubscriber
from kaiheila_webhook.services.pipeline import WebhookPipeline

logger = logging.getLogger(__name__)

SHUTDOWN_DRAIN_SECONDS = 5


def build_pipeline(settings: Settings) -> WebhookPipeline:
    return WebhookPipeline(settings.pipeline_config())


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = getattr(app.state, "settings", None) or Settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # An embedding app may have built the pipeline and subscribed already
    pipeline = getattr(app.state, "pipeline", None)
    if pipeline is None:
        pipeline = build_pipeline(settings)
    app.state.settings = settings
    app.state.pipeline = pipeline

    unsubscribe = pipeline.hub.subscribe(LoggingSubscriber())

    logger.info(
        "Kaiheila webhook started (path=%s, port=%s, encrypted=%s, verify_token=%s)",
        settings.webhook_path or "*",
        settings.port,
        pipeline.config.key is not None,
        pipeline.config.verify_token is not None,
    )
    yield

    # Shutdown
    try:
        await asyncio.wait_for(pipeline.hub.drain(), timeout=SHUTDOWN_DRAIN_SECONDS)
    except asyncio.TimeoutError:
        logger.warning(
            "Dropped %d undelivered webhook events on shutdown", pipeline.hub.pending_deliveries
        )
    unsubscribe()
    logger.info("Kaiheila webhook shut down")


app = FastAPI(title="Kaiheila Webhook", version="1.0.0", lifespan=lifespan)
app.add_middleware(KaiheilaWebhookMiddleware)

from kaiheila_webhook.api.router import api_router  # noqa: E402

app.include_router(api_router)


def run():
    """Start listening on ``settings.host:settings.port``."""
    settings = Settings()
    app.state.settings = settings
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()

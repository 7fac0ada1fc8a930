from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from kaiheila_webhook.config import Settings
from kaiheila_webhook.services.event_hub import EventHub
from kaiheila_webhook.services.pipeline import WebhookPipeline
from kaiheila_webhook.utils.padding import zero_padding

ENCRYPT_KEY = "s3cr3tKey"
VERIFY_TOKEN = "vt-Test-123"


@pytest.fixture
def settings():
    """Test settings with encryption and a verify token."""
    return Settings(
        webhook_key=ENCRYPT_KEY,
        verify_token=VERIFY_TOKEN,
        ignore_decrypt_error=True,
        port=8600,
        webhook_path="/webhook",
        sn_window_seconds=600,
        log_level="DEBUG",
    )


@pytest.fixture
def key():
    return zero_padding(ENCRYPT_KEY)


@pytest.fixture
def mock_subscriber():
    subscriber = AsyncMock()
    return subscriber


@pytest.fixture
def hub(mock_subscriber):
    hub = EventHub()
    hub.subscribe(mock_subscriber)
    return hub


@pytest.fixture
def pipeline(settings, hub):
    return WebhookPipeline(settings.pipeline_config(), hub=hub)


def _packet(sn=1, verify_token=VERIFY_TOKEN, **payload):
    d = {
        "channel_type": "GROUP",
        "type": 1,
        "target_id": "7480000000000000",
        "author_id": "1000000",
        "content": "hello",
        "msg_id": "67b7ab8f-0000-0000-0000-000000000000",
        "msg_timestamp": 1700000000000,
        "verify_token": verify_token,
    }
    d.update(payload)
    return {"s": 0, "d": d, "sn": sn}


def _challenge(challenge="abc", verify_token=VERIFY_TOKEN):
    return {
        "s": 0,
        "d": {
            "type": 255,
            "channel_type": "WEBHOOK_CHALLENGE",
            "challenge": challenge,
            "verify_token": verify_token,
        },
    }


@pytest.fixture
def make_packet():
    return _packet


@pytest.fixture
def make_challenge():
    return _challenge


@pytest_asyncio.fixture
async def test_app(settings, pipeline):
    """The FastAPI app with state set directly instead of via the lifespan."""
    from kaiheila_webhook.main import app

    app.state.settings = settings
    app.state.pipeline = pipeline
    yield app

    del app.state.pipeline
    del app.state.settings


@pytest_asyncio.fixture
async def client(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

from kaiheila_webhook.services.challenge import is_challenge, try_handle


def test_detects_challenge(make_challenge):
    assert is_challenge(make_challenge()) is True


def test_returns_challenge_body(make_challenge):
    response = try_handle(make_challenge("bkqd4abc"))
    assert response is not None
    assert response.model_dump() == {"challenge": "bkqd4abc"}


def test_ignores_regular_message(make_packet):
    assert try_handle(make_packet()) is None


def test_requires_both_type_and_channel_type():
    assert try_handle({"s": 0, "d": {"type": 255, "channel_type": "GROUP"}}) is None
    assert try_handle({"s": 0, "d": {"type": 1, "channel_type": "WEBHOOK_CHALLENGE"}}) is None
    assert try_handle({"s": 0, "d": {"type": "255", "channel_type": "WEBHOOK_CHALLENGE"}}) is None

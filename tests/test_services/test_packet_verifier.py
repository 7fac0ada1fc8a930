import pytest

from kaiheila_webhook.services.packet_verifier import PacketVerifier


def test_accepts_valid_packet_without_token(make_packet):
    assert PacketVerifier().is_structurally_valid(make_packet()) is True


def test_accepts_matching_token(make_packet):
    verifier = PacketVerifier("vt-Test-123")
    assert verifier.is_structurally_valid(make_packet(verify_token="vt-Test-123")) is True


@pytest.mark.parametrize("token", ["vt-test-123", "wrong", "", None])
def test_rejects_token_mismatch(make_packet, token):
    verifier = PacketVerifier("vt-Test-123")
    assert verifier.is_structurally_valid(make_packet(verify_token=token)) is False


def test_rejects_missing_token_field():
    verifier = PacketVerifier("vt-Test-123")
    assert verifier.is_structurally_valid({"s": 0, "d": {"type": 1}}) is False


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"s": "x", "d": None},
        {"s": 0},
        {"s": 0, "d": None},
        {"s": 0, "d": []},
        {"s": "0", "d": {}},
        {"s": True, "d": {}},
        {"d": {}},
        [],
        "packet",
        None,
        1,
    ],
)
def test_rejects_structurally_invalid(body):
    assert PacketVerifier().is_structurally_valid(body) is False


def test_float_signal_is_numeric():
    assert PacketVerifier().is_structurally_valid({"s": 0.0, "d": {}}) is True

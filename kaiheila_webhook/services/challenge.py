"""Webhook ownership handshake.

When the callback URL is saved in the developer console, KOOK posts a
``{"s": 0, "d": {"type": 255, "channel_type": "WEBHOOK_CHALLENGE", ...}}``
packet and expects the ``challenge`` value echoed back before it starts live
delivery.
"""

from kaiheila_webhook.models.schemas import ChallengeResponse

CHALLENGE_TYPE = 255
CHALLENGE_CHANNEL_TYPE = "WEBHOOK_CHALLENGE"


def is_challenge(packet: dict) -> bool:
    payload = packet.get("d") or {}
    return (
        payload.get("type") == CHALLENGE_TYPE
        and payload.get("channel_type") == CHALLENGE_CHANNEL_TYPE
    )


def try_handle(packet: dict) -> ChallengeResponse | None:
    if not is_challenge(packet):
        return None
    return ChallengeResponse(challenge=packet["d"].get("challenge"))

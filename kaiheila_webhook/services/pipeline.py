"""Request validation pipeline for KOOK webhook callbacks.

decrypt -> verify -> challenge -> dedup -> emit. Every stage can end the
request early; see :class:`RoutingOutcome` for what the ingress does with the
result.
"""

from __future__ import annotations

import logging
from typing import Any

from kaiheila_webhook.errors import UnencryptedRequest, WebhookDecryptError
from kaiheila_webhook.models.pipeline import (
    ACK_BODY,
    ERROR_MESSAGE,
    PipelineConfig,
    RoutingOutcome,
)
from kaiheila_webhook.services import challenge, decryptor
from kaiheila_webhook.services.duplicate_suppressor import DuplicateSuppressor
from kaiheila_webhook.services.event_hub import EventHub
from kaiheila_webhook.services.packet_verifier import PacketVerifier

logger = logging.getLogger(__name__)


class WebhookPipeline:
    type = "webhook"

    def __init__(
        self,
        config: PipelineConfig,
        hub: EventHub | None = None,
        suppressor: DuplicateSuppressor | None = None,
    ):
        self.config = config
        self.hub = hub if hub is not None else EventHub()
        self.verifier = PacketVerifier(config.verify_token)
        self.suppressor = (
            suppressor if suppressor is not None else DuplicateSuppressor(config.sn_window_ms)
        )

    async def handle(self, raw_body: Any, now: int | None = None) -> RoutingOutcome:
        if self.config.key is not None or decryptor.is_envelope(raw_body):
            try:
                packet = decryptor.decrypt(
                    raw_body,
                    self.config.key,
                    ignore_on_plain=self.config.ignore_decrypt_error,
                )
            except UnencryptedRequest:
                logger.debug("Ignoring unencrypted request")
                return RoutingOutcome.pass_through()
            except WebhookDecryptError as exc:
                if self.config.ignore_decrypt_error:
                    logger.debug("Ignoring request that failed to decrypt: %s", exc)
                    return RoutingOutcome.pass_through()
                logger.warning("Rejecting webhook request: %s", exc)
                self.hub.dispatch_error(exc)
                return RoutingOutcome.respond({"detail": ERROR_MESSAGE}, status=500)
        else:
            packet = raw_body

        if not self.verifier.is_structurally_valid(packet):
            logger.debug("Ignoring request that is not a valid packet")
            return RoutingOutcome.pass_through()

        response = challenge.try_handle(packet)
        if response is not None:
            logger.info("Answered webhook challenge")
            return RoutingOutcome.respond(response.model_dump(), status=200)

        sn = packet.get("sn")
        if isinstance(sn, int) and not isinstance(sn, bool):
            if not self.suppressor.admit(sn, now):
                logger.debug("Dropping duplicate delivery sn=%s", sn)
                return RoutingOutcome.respond(ACK_BODY, status=200)

        self.hub.dispatch_message(packet)
        return RoutingOutcome.emit_and_acknowledge(packet)

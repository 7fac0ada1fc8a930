import enum
from dataclasses import dataclass
from typing import Any

from kaiheila_webhook.utils.padding import KEY_LENGTH

DEFAULT_PORT = 8600
DEFAULT_SN_WINDOW_MS = 1000 * 600


@dataclass(frozen=True)
class PipelineConfig:
    key: bytes | None = None
    verify_token: str | None = None
    ignore_decrypt_error: bool = True
    port: int = DEFAULT_PORT
    sn_window_ms: int = DEFAULT_SN_WINDOW_MS

    def __post_init__(self):
        if self.key is not None and len(self.key) != KEY_LENGTH:
            raise ValueError(
                f"key must be exactly {KEY_LENGTH} bytes after padding, got {len(self.key)}"
            )
        if self.port <= 0:
            raise ValueError(f"port must be positive, got {self.port}")
        if self.sn_window_ms <= 0:
            raise ValueError(f"sn_window_ms must be positive, got {self.sn_window_ms}")


class OutcomeKind(str, enum.Enum):
    CONTINUE = "continue"
    RESPOND = "respond"
    EMIT_AND_ACKNOWLEDGE = "emit_and_acknowledge"


ACK_BODY = 1
ERROR_MESSAGE = "Not Kaiheila Request or bad encryption or unencrypted request"


@dataclass(frozen=True)
class RoutingOutcome:
    """What the ingress should do with a request after the pipeline ran.

    CONTINUE: not ours, hand the request to the next handler.
    RESPOND: write ``body``/``status`` and stop.
    EMIT_AND_ACKNOWLEDGE: the packet was published to subscribers; write the
    ``1``/200 acknowledgment.
    """

    kind: OutcomeKind
    body: Any = None
    status: int | None = None
    packet: dict | None = None

    @classmethod
    def pass_through(cls) -> "RoutingOutcome":
        return cls(kind=OutcomeKind.CONTINUE)

    @classmethod
    def respond(cls, body: Any, status: int = 200) -> "RoutingOutcome":
        return cls(kind=OutcomeKind.RESPOND, body=body, status=status)

    @classmethod
    def emit_and_acknowledge(cls, packet: dict) -> "RoutingOutcome":
        return cls(
            kind=OutcomeKind.EMIT_AND_ACKNOWLEDGE,
            body=ACK_BODY,
            status=200,
            packet=packet,
        )

    @property
    def handled(self) -> bool:
        return self.kind is not OutcomeKind.CONTINUE

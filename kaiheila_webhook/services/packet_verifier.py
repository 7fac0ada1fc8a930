from typing import Any


class PacketVerifier:
    def __init__(self, verify_token: str | None = None):
        self.verify_token = verify_token

    def is_structurally_valid(self, packet: Any) -> bool:
        if not isinstance(packet, dict):
            return False

        signal = packet.get("s")
        # bool is an int subclass but JSON true/false is not a signal type
        if isinstance(signal, bool) or not isinstance(signal, (int, float)):
            return False

        payload = packet.get("d")
        if not isinstance(payload, dict):
            return False

        if self.verify_token is not None and payload.get("verify_token") != self.verify_token:
            return False
        return True

import threading
import time

from kaiheila_webhook.models.pipeline import DEFAULT_SN_WINDOW_MS


def now_ms() -> int:
    return int(time.time() * 1000)


class DuplicateSuppressor:
    """Drops redeliveries of the same ``sn`` seen within the window.

    The ledger keeps one timestamp per sequence number and never evicts;
    entries older than the window are simply treated as stale.
    """

    def __init__(self, window_ms: int = DEFAULT_SN_WINDOW_MS):
        self.window_ms = window_ms
        self._ledger: dict[int, int] = {}
        self._lock = threading.Lock()

    def admit(self, sequence_number: int, now: int | None = None) -> bool:
        if now is None:
            now = now_ms()
        with self._lock:
            prior = self._ledger.get(sequence_number)
            if prior is not None and now - prior < self.window_ms:
                return False
            self._ledger[sequence_number] = now
            return True

    def last_seen(self, sequence_number: int) -> int | None:
        return self._ledger.get(sequence_number)

    def __len__(self) -> int:
        return len(self._ledger)

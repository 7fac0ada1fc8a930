"""Decrypt-path errors raised by :mod:`kaiheila_webhook.services.decryptor`.

Structural validation and duplicate suppression report plain booleans; only
these exceptions can reach subscribers as ``on_error`` notifications.
"""


class WebhookDecryptError(Exception):
    """Base class for everything that can go wrong turning a body into a packet."""


class NoKeyConfigured(WebhookDecryptError):
    def __init__(self, message: str = "No Key"):
        super().__init__(message)


class UnencryptedRequest(WebhookDecryptError):
    def __init__(self, message: str = "Unencrypted Request"):
        super().__init__(message)


class DecryptionFailed(WebhookDecryptError):
    """Malformed base64, wrong key, corrupt ciphertext or non-JSON plaintext."""

"""Encrypted envelope codec for KOOK webhook bodies.

Wire format of ``{"encrypt": "<base64>"}``:

    base64( iv[16] + base64( AES-256-CBC(iv, key, PKCS7(json)) ) )

The ciphertext region is base64 text *inside* the outer base64. Both layers
have to be kept for the platform to accept/produce the same bytes.
"""

import base64
import binascii
import json
import os
from typing import Any

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from kaiheila_webhook.errors import DecryptionFailed, NoKeyConfigured, UnencryptedRequest

IV_LENGTH = 16
BLOCK_SIZE_BITS = 128


def is_envelope(raw_body: Any) -> bool:
    return isinstance(raw_body, dict) and isinstance(raw_body.get("encrypt"), str)


def decrypt(raw_body: Any, key: bytes | None, ignore_on_plain: bool) -> Any:
    """Turn a request body into a protocol packet.

    Plain bodies raise :class:`UnencryptedRequest` when ``ignore_on_plain`` is
    set, otherwise they are returned unchanged.
    """
    if not is_envelope(raw_body):
        if ignore_on_plain:
            raise UnencryptedRequest()
        return raw_body

    if not key:
        raise NoKeyConfigured()

    try:
        encrypted = base64.b64decode(raw_body["encrypt"])
        iv = encrypted[:IV_LENGTH]
        ciphertext = base64.b64decode(encrypted[IV_LENGTH:])

        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
        plaintext = unpadder.update(padded) + unpadder.finalize()

        return json.loads(plaintext.decode("utf-8"))
    except (binascii.Error, ValueError, UnicodeDecodeError) as exc:
        # json.JSONDecodeError is a ValueError; so are bad IV lengths and padding
        raise DecryptionFailed(str(exc)) from exc


def encrypt(packet: Any, key: bytes, iv: bytes | None = None) -> dict:
    """Build the envelope the platform would send for ``packet``."""
    if iv is None:
        iv = os.urandom(IV_LENGTH)
    if len(iv) != IV_LENGTH:
        raise ValueError(f"iv must be {IV_LENGTH} bytes, got {len(iv)}")

    plaintext = json.dumps(packet, ensure_ascii=False).encode("utf-8")
    padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
    padded = padder.update(plaintext) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    inner = base64.b64encode(ciphertext)
    return {"encrypt": base64.b64encode(iv + inner).decode("ascii")}

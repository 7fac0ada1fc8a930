KEY_LENGTH = 32


def zero_padding(secret: str, length: int = KEY_LENGTH) -> bytes:
    """Right-pad ``secret`` with NUL bytes (or truncate it) to ``length`` bytes.

    KOOK hands out encrypt keys shorter than the 32 bytes AES-256 needs; the
    platform pads them with zeros on its side, so we do the same.
    """
    raw = secret.encode("utf-8")
    return raw[:length].ljust(length, b"\0")

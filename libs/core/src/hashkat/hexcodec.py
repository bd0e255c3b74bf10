from __future__ import annotations
import binascii
import re

from .errors import FormatError

HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


def decode(text: str) -> bytes:
    """Hex text to bytes, case-insensitive.

    Odd-length input or any character outside [0-9a-fA-F] raises FormatError.
    The empty string decodes to b"".
    """
    if len(text) % 2 != 0:
        raise FormatError(f"invalid hex length {len(text)} (must be even)")
    if not HEX_RE.fullmatch(text):
        bad = next(i for i, ch in enumerate(text) if ch not in "0123456789abcdefABCDEF")
        raise FormatError(f"invalid hex at position {bad}: {text[bad:bad + 2]!r}")
    return binascii.unhexlify(text)


def encode(data: bytes) -> str:
    return binascii.hexlify(bytes(data)).decode("ascii")
